import logging
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Optional

import pandas as pd

from cell_address import cell_address
from clipboard import ClipboardUnavailable, copy_text
from config_paths import EXPORT_FILENAME_DEFAULT
from edit_state import CellRef, EditStateMachine
from grid_commands import (
    CellView,
    ClearFilter,
    Export,
    Filter,
    HideField,
    Import,
    NewAction,
    Share,
    Sort,
    parse_action,
)
from grid_schema import GridSchema
from record_codec import ImportFailed, RecordCodec
from record_store import RecordStore
from view_pipeline import (
    FilterDirective,
    SortDirective,
    derive_view,
    visible_fields,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedRow:
    view_row: int
    canonical: Optional[int]
    values: dict

    @property
    def is_virtual(self) -> bool:
        return self.canonical is None


@dataclass(frozen=True)
class GridView:
    """Everything the presentation layer needs for one render pass."""

    fields: list
    labels: list
    kinds: list
    rows: list
    selection: Optional[CellRef] = None
    editing: Optional[CellRef] = None
    draft: Optional[str] = None
    address: str = ""
    selected_value: str = ""
    record_count: int = 0
    matched_count: int = 0
    sort: Optional[SortDirective] = None
    filter: Optional[FilterDirective] = None
    hidden: frozenset = field(default_factory=frozenset)

    def is_selected(self, row: int, field_name: str) -> bool:
        return self.selection == (row, field_name)

    def is_editing(self, row: int, field_name: str) -> bool:
        return self.editing == (row, field_name)


class GridEngine:
    """Owns the record store, the view directives and the edit state machine.

    Cells are addressed by view row: rows ``[0, len(view))`` are real
    records in sort/filter order, the rest up to ``total_rows`` are
    virtual. Writes are mapped back onto canonical positions.
    """

    def __init__(
        self,
        schema: GridSchema,
        records=None,
        set_status: Optional[Callable] = None,
        config: Optional[dict] = None,
        import_runner: Optional[Callable[[str], None]] = None,
    ):
        self.config = config or {}
        budget = self.config.get("EMPTY_ROW_BUDGET")
        if budget is not None and schema.appends_on_virtual_edit:
            schema = schema.with_budget(budget)
        self.schema = schema
        self.store = RecordStore(schema, records)
        self.codec = RecordCodec(schema)
        self._set_status = set_status or (lambda *_args, **_kwargs: None)
        self.import_runner = import_runner

        self.sort: Optional[SortDirective] = None
        self.filter: Optional[FilterDirective] = None
        self.hidden_fields: set[str] = set()

        self.machine = EditStateMachine(self.cell_value, self._write_cell)

        self._handlers = {
            Sort: self._sort,
            Filter: self._filter,
            ClearFilter: self._clear_filter,
            HideField: self._hide_field,
            Export: self._export,
            Import: self._import,
            Share: self._share,
            NewAction: self._new_action,
            CellView: self._cell_view,
        }

    # ---------- derived view ----------
    def view_frame(self) -> pd.DataFrame:
        return derive_view(self.store.df, self.sort, self.filter)

    def fields(self) -> list[str]:
        return visible_fields(self.schema.fields, self.hidden_fields)

    @property
    def total_rows(self) -> int:
        if self.schema.fixed_rows is not None:
            return max(self.schema.fixed_rows, len(self.store))
        return len(self.store) + self.schema.empty_row_budget

    def canonical_row(self, view_row: int, frame: Optional[pd.DataFrame] = None) -> int:
        frame = self.view_frame() if frame is None else frame
        if 0 <= view_row < len(frame):
            return int(frame.index[view_row])
        if self.schema.appends_on_virtual_edit:
            return len(self.store)
        return len(self.store) + max(0, view_row - len(frame))

    def cell_value(self, cell: CellRef) -> str:
        frame = self.view_frame()
        if 0 <= cell.row < len(frame):
            return self.store.value_at(int(frame.index[cell.row]), cell.field)
        return ""

    def _write_cell(self, cell: CellRef, text: str) -> None:
        target = self.canonical_row(cell.row)
        pos = self.store.update_field(target, cell.field, text)
        logger.debug("Wrote %s row %d -> record %d", cell.field, cell.row, pos)

    def build_view(self) -> GridView:
        frame = self.view_frame()
        fields = self.fields()
        rows = []
        for view_row in range(self.total_rows):
            if view_row < len(frame):
                canonical = int(frame.index[view_row])
                values = {f: self.store.value_at(canonical, f) for f in fields}
                rows.append(RenderedRow(view_row, canonical, values))
            else:
                rows.append(RenderedRow(view_row, None, {f: "" for f in fields}))

        selection = self.machine.selection
        return GridView(
            fields=fields,
            labels=[self.schema.label_for(f) for f in fields],
            kinds=[self.schema.kind_for(f) for f in fields],
            rows=rows,
            selection=selection,
            editing=self.machine.editing,
            draft=self.machine.draft,
            address=self.selected_address(),
            selected_value=self.cell_value(selection) if selection else "",
            record_count=len(self.store),
            matched_count=len(frame),
            sort=self.sort,
            filter=self.filter,
            hidden=frozenset(self.hidden_fields),
        )

    def selected_address(self) -> str:
        cell = self.machine.selection
        if cell is None:
            return ""
        return cell_address(cell.row, self.schema.fields.index(cell.field))

    # ---------- selection / editing ----------
    @property
    def selection(self) -> Optional[CellRef]:
        return self.machine.selection

    @property
    def editing(self) -> Optional[CellRef]:
        return self.machine.editing

    @property
    def draft(self) -> Optional[str]:
        return self.machine.draft

    @property
    def is_editing(self) -> bool:
        return self.machine.is_editing

    def select(self, row: int, field_name: Optional[str] = None) -> bool:
        fields = self.fields()
        if not fields or self.total_rows == 0:
            return False
        if field_name not in fields:
            field_name = fields[0]
        row = max(0, min(row, self.total_rows - 1))
        self.machine.select(CellRef(row, field_name))
        return True

    def start_edit(self) -> bool:
        return self.machine.start_edit()

    def update_draft(self, text: str) -> bool:
        return self.machine.update_draft(text)

    def commit_edit(self, value: Optional[str] = None) -> bool:
        return self.machine.commit_edit(value)

    def cancel_edit(self) -> bool:
        return self.machine.cancel_edit()

    def blur(self) -> bool:
        return self.machine.blur()

    def clear_selected(self) -> bool:
        if self.machine.clear_selected():
            self._set_status("Cell cleared", 2)
            return True
        return False

    def copy(self) -> bool:
        if self.machine.copy():
            self._set_status(f"Copied {self.selected_address()}", 2)
            return True
        return False

    def paste(self) -> bool:
        if self.machine.clipboard is None:
            self._set_status("Nothing to paste", 2)
            return False
        if self.machine.paste():
            self._set_status(f"Pasted into {self.selected_address()}", 2)
            return True
        return False

    def _clamp_selection(self) -> None:
        cell = self.machine.selection
        if cell is None:
            return
        if self.total_rows == 0:
            self.machine.deselect()
            return
        if cell.row >= self.total_rows:
            self.select(self.total_rows - 1, cell.field)

    # ---------- commands ----------
    def dispatch(self, command) -> bool:
        handler = self._handlers.get(type(command))
        if handler is None:
            logger.info("Ignoring unrecognized command %r", command)
            return False
        handler(command)
        return True

    def dispatch_action(self, name, payload=None) -> bool:
        command = parse_action(name, payload)
        if command is None:
            return False
        return self.dispatch(command)

    def _resolve(self, name) -> Optional[str]:
        resolved = self.schema.resolve_field(name)
        if resolved is None:
            logger.info("Ignoring unknown field %r", name)
            self._set_status(f"Unknown field '{name}'", 3)
        return resolved

    def _sort(self, cmd: Sort) -> None:
        field_name = self._resolve(cmd.field)
        if field_name is None:
            return
        self.sort = SortDirective(field_name, cmd.direction)
        arrow = "A → Z" if self.sort.ascending else "Z → A"
        self._set_status(f"Sorted by {self.schema.label_for(field_name)} ({arrow})", 2)

    def _filter(self, cmd: Filter) -> None:
        field_name = self._resolve(cmd.field)
        if field_name is None:
            return
        self.filter = FilterDirective(field_name, cmd.value)
        matched = len(self.view_frame())
        self._set_status(
            f"Filter {self.schema.label_for(field_name)} contains '{cmd.value}' "
            f"({matched} match{'es' if matched != 1 else ''})",
            3,
        )

    def _clear_filter(self, _cmd: ClearFilter) -> None:
        self.filter = None
        self._set_status("Filter cleared", 2)

    def _hide_field(self, cmd: HideField) -> None:
        field_name = self._resolve(cmd.field)
        if field_name is None:
            return
        label = self.schema.label_for(field_name)
        if field_name in self.hidden_fields:
            self.hidden_fields.remove(field_name)
            self._set_status(f"Showing {label}", 2)
        else:
            self.hidden_fields.add(field_name)
            self._set_status(f"Hidden {label}", 2)
            self._move_off_hidden()

    def _move_off_hidden(self) -> None:
        cell = self.machine.selection
        if cell is None or cell.field not in self.hidden_fields:
            return
        visible = self.fields()
        if not visible:
            self.machine.deselect()
            return
        # nearest visible field, looking right first
        order = self.schema.fields
        idx = order.index(cell.field)
        after = [f for f in order[idx + 1 :] if f in visible]
        before = [f for f in order[:idx] if f in visible]
        self.select(cell.row, after[0] if after else before[-1])

    def _export(self, cmd: Export) -> None:
        path = cmd.path or self.config.get("EXPORT_FILENAME") or EXPORT_FILENAME_DEFAULT
        try:
            count = self.codec.write_csv(self.store, path)
        except OSError as exc:
            logger.warning("Export to %s failed: %s", path, exc)
            self._set_status(f"Export failed: {exc}", 4)
            return
        logger.info("Exported %d records to %s", count, path)
        self._set_status(f"Exported {count} record{'s' if count != 1 else ''} to {path}", 3)

    def _import(self, cmd: Import) -> None:
        if not self.codec.supports(cmd.path):
            logger.debug("Ignoring import of %s", cmd.path)
            return
        if self.import_runner is not None:
            self.import_runner(cmd.path)
            return
        try:
            content = self.codec.read(cmd.path)
        except (OSError, UnicodeDecodeError) as exc:
            self.complete_import(cmd.path, error=exc)
            return
        self.complete_import(cmd.path, content)

    def import_file(self, path: str) -> bool:
        return self.dispatch(Import(path))

    def complete_import(
        self, path: str, content: Optional[str] = None, error: Optional[Exception] = None
    ) -> bool:
        """Finish an import once the file text is available; replaces the store on success."""
        if error is not None:
            return self._import_failed(path, error)
        try:
            records = self.codec.parse(path, content or "")
        except ImportFailed as exc:
            return self._import_failed(path, exc)
        if records is None:
            return False
        if self.machine.is_editing:
            logger.info("Dropping draft for %s before import", self.machine.editing)
            self.machine.cancel_edit()
        self.store.replace(records)
        self._clamp_selection()
        self._set_status(f"Imported {len(self.store)} records from {path}", 3)
        return True

    def _import_failed(self, path: str, exc: Exception) -> bool:
        logger.warning("Import of %s failed: %s", path, exc)
        self._set_status("Import failed. Please check the file format.", 4)
        return False

    def _share(self, _cmd: Share) -> None:
        text = self.codec.to_csv(self.store)
        try:
            copy_text(self.config.get("CLIPBOARD_INTERFACE_COMMAND"), text)
        except ClipboardUnavailable:
            self._set_status("Share unavailable: no clipboard command configured", 3)
            return
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.warning("Share failed: %s", exc)
            self._set_status("Share failed", 3)
            return
        self._set_status(f"Copied {len(self.store)} records to clipboard", 3)

    def _new_action(self, _cmd: NewAction) -> None:
        pos = self.store.append(self.schema.default_record())
        self._set_status(f"Added row {pos + 1}", 2)

    def _cell_view(self, _cmd: CellView) -> None:
        logger.info("Cell view requested")
        self._set_status("Cell view: switching cell display modes is not available", 3)
