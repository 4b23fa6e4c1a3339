import csv
import io
import json
import logging
import os
from typing import Optional

import pandas as pd

from grid_schema import GridSchema
from record_store import RecordStore, as_text

logger = logging.getLogger(__name__)


class ImportFailed(Exception):
    """Raised when an import file cannot be parsed; the store is left untouched."""


class RecordCodec:
    SUPPORTED_IMPORTS = {".csv", ".json"}

    def __init__(self, schema: GridSchema):
        self.schema = schema

    # ---------- export ----------
    def export_frame(self, store: RecordStore) -> pd.DataFrame:
        out = store.df.copy()
        out.columns = self.schema.headers()
        return out

    def to_csv(self, store: RecordStore) -> str:
        """Canonical order, fixed header, RFC-4180 minimal quoting for every field."""
        return self.export_frame(store).to_csv(
            index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n"
        )

    def write_csv(self, store: RecordStore, path: str) -> int:
        self.export_frame(store).to_csv(
            path, index=False, quoting=csv.QUOTE_MINIMAL, lineterminator="\n"
        )
        return len(store)

    # ---------- import ----------
    @staticmethod
    def extension(path: str) -> str:
        _, ext = os.path.splitext(path or "")
        return ext.lower()

    def supports(self, path: str) -> bool:
        return self.extension(path) in self.SUPPORTED_IMPORTS

    def parse(self, name: str, content: str) -> Optional[list[dict]]:
        """Records parsed from ``content``; ``None`` when the extension is not handled."""
        ext = self.extension(name)
        if ext == ".json":
            return self.parse_json(content)
        if ext == ".csv":
            return self.parse_csv(content)
        logger.debug("Ignoring import of unsupported file %s", name)
        return None

    def parse_json(self, content: str) -> list[dict]:
        try:
            data = json.loads(content)
        except (json.JSONDecodeError, TypeError) as exc:
            raise ImportFailed(f"Invalid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise ImportFailed("JSON import must be an array of records")
        return [item if isinstance(item, dict) else {} for item in data]

    @staticmethod
    def _max_width(content: str) -> int:
        try:
            return max((len(row) for row in csv.reader(io.StringIO(content))), default=0)
        except csv.Error as exc:
            raise ImportFailed(f"Invalid CSV: {exc}") from exc

    def parse_csv(self, content: str) -> list[dict]:
        fields = self.schema.fields
        # wide enough for every row; extra trailing fields are dropped below
        width = max(self._max_width(content), len(fields))
        try:
            df = pd.read_csv(
                io.StringIO(content),
                header=None,
                names=list(range(width)),
                index_col=False,
                skiprows=1,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, ValueError) as exc:
            raise ImportFailed(f"Invalid CSV: {exc}") from exc

        df = df.reindex(columns=range(len(fields)), fill_value="")
        df.columns = list(fields)

        key = self._required_field()
        records = []
        for row in df.to_dict(orient="records"):
            record = {f: as_text(row[f]) for f in fields}
            if key is not None and not record[key]:
                continue
            if self.schema.id_field is not None:
                record[self.schema.id_field] = str(len(records) + 1)
            records.append(record)
        return records

    def _required_field(self) -> Optional[str]:
        # record grids drop rows whose first data field is empty
        if self.schema.id_field is None:
            return None
        for f in self.schema.fields:
            if f != self.schema.id_field:
                return f
        return None

    def read(self, path: str) -> str:
        with open(path, "r", encoding="utf-8-sig") as f:
            return f.read()

    def load(self, path: str) -> Optional[list[dict]]:
        if not self.supports(path):
            logger.debug("Ignoring import of unsupported file %s", path)
            return None
        try:
            content = self.read(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ImportFailed(f"Cannot read {path}: {exc}") from exc
        return self.parse(path, content)
