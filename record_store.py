import logging

import pandas as pd

from grid_schema import GridSchema

logger = logging.getLogger(__name__)


def as_text(value) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


class RecordStore:
    """Canonical, insertion-ordered rows of text cells.

    Row positions in the frame are canonical positions; rows are only ever
    appended or replaced wholesale, so the index stays 0..n-1.
    """

    def __init__(self, schema: GridSchema, records=None):
        self.schema = schema
        rows = schema.seed_rows if records is None else records
        self._df = self._frame(rows)

    # ---------- construction ----------
    def build_default_row(self) -> dict:
        return {f: "" for f in self.schema.fields}

    def _normalize(self, record) -> dict:
        row = self.build_default_row()
        if not isinstance(record, dict):
            return row
        for key, value in record.items():
            name = self.schema.resolve_field(key)
            if name is not None:
                row[name] = as_text(value)
        return row

    def _frame(self, records) -> pd.DataFrame:
        rows = [self._normalize(r) for r in records]
        return pd.DataFrame(rows, columns=list(self.schema.fields), dtype=object)

    # ---------- reads ----------
    @property
    def df(self) -> pd.DataFrame:
        return self._df

    def __len__(self):
        return len(self._df)

    def value_at(self, row: int, field: str) -> str:
        if row < 0 or row >= len(self._df):
            return ""
        return as_text(self._df.iat[row, self._col(field)])

    def record(self, row: int) -> dict:
        return {f: as_text(v) for f, v in self._df.iloc[row].items()}

    def records(self) -> list[dict]:
        return [self.record(i) for i in range(len(self._df))]

    def _col(self, field: str) -> int:
        try:
            return self.schema.fields.index(field)
        except ValueError:
            raise KeyError(f"Unknown field '{field}'") from None

    # ---------- writes ----------
    def append(self, partial=None) -> int:
        """Append a record; the id field becomes ``len + 1``. Returns its position."""
        row = self._normalize(partial or {})
        pos = len(self._df)
        if self.schema.id_field is not None:
            row[self.schema.id_field] = str(pos + 1)
        self._df.loc[pos] = [row[f] for f in self.schema.fields]
        logger.debug("Appended record at %d", pos)
        return pos

    def update_field(self, row: int, field: str, value) -> int:
        """Write one cell by canonical position; past the end materializes a row.

        Returns the canonical position that received the value.
        """
        col = self._col(field)
        text = as_text(value)
        if 0 <= row < len(self._df):
            self._df.iat[row, col] = text
            return row

        if self.schema.appends_on_virtual_edit:
            return self.append({field: text})

        while len(self._df) < row:
            self._df.loc[len(self._df)] = ["" for _ in self.schema.fields]
        pos = len(self._df)
        self._df.loc[pos] = ["" for _ in self.schema.fields]
        self._df.iat[pos, col] = text
        return pos

    def replace(self, records) -> None:
        self._df = self._frame(records)
        logger.info("Store replaced with %d records", len(self._df))

    def snapshot(self) -> pd.DataFrame:
        return self._df.copy(deep=True)
