import logging
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Union

logger = logging.getLogger(__name__)


class CellRef(NamedTuple):
    row: int
    field: str


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Selected:
    cell: CellRef


@dataclass(frozen=True)
class Editing:
    cell: CellRef
    draft: str


EditState = Union[Idle, Selected, Editing]


@dataclass(frozen=True)
class ClipboardSlot:
    cell: CellRef
    value: str


class EditStateMachine:
    """Single-cell selection and editing.

    ``read_cell`` and ``write_cell`` address cells by view row; the owner
    maps them onto the store. Only commit, clear and paste call
    ``write_cell``.
    """

    def __init__(
        self,
        read_cell: Callable[[CellRef], str],
        write_cell: Callable[[CellRef, str], None],
    ):
        self._read = read_cell
        self._write = write_cell
        self.state: EditState = Idle()
        self.clipboard: Optional[ClipboardSlot] = None

    # ---------- queries ----------
    @property
    def selection(self) -> Optional[CellRef]:
        if isinstance(self.state, (Selected, Editing)):
            return self.state.cell
        return None

    @property
    def editing(self) -> Optional[CellRef]:
        if isinstance(self.state, Editing):
            return self.state.cell
        return None

    @property
    def draft(self) -> Optional[str]:
        if isinstance(self.state, Editing):
            return self.state.draft
        return None

    @property
    def is_editing(self) -> bool:
        return isinstance(self.state, Editing)

    # ---------- transitions ----------
    def select(self, cell: CellRef) -> None:
        if isinstance(self.state, Editing) and self.state.cell != cell:
            logger.debug("Discarding draft for %s", self.state.cell)
        self.state = Selected(CellRef(*cell))

    def deselect(self) -> None:
        self.state = Idle()

    def start_edit(self) -> bool:
        if not isinstance(self.state, Selected):
            return False
        cell = self.state.cell
        self.state = Editing(cell, self._read(cell))
        return True

    def update_draft(self, text: str) -> bool:
        if not isinstance(self.state, Editing):
            return False
        self.state = Editing(self.state.cell, text)
        return True

    def commit_edit(self, value: Optional[str] = None) -> bool:
        if not isinstance(self.state, Editing):
            return False
        cell = self.state.cell
        text = self.state.draft if value is None else value
        self._write(cell, text)
        self.state = Selected(cell)
        return True

    def cancel_edit(self) -> bool:
        if not isinstance(self.state, Editing):
            return False
        self.state = Selected(self.state.cell)
        return True

    def blur(self) -> bool:
        # focus loss keeps the draft
        return self.commit_edit()

    def clear_selected(self) -> bool:
        if not isinstance(self.state, Selected):
            return False
        self._write(self.state.cell, "")
        return True

    # ---------- clipboard ----------
    def copy(self) -> bool:
        if not isinstance(self.state, Selected):
            return False
        cell = self.state.cell
        self.clipboard = ClipboardSlot(cell, self._read(cell))
        return True

    def paste(self) -> bool:
        if not isinstance(self.state, Selected) or self.clipboard is None:
            return False
        self._write(self.state.cell, self.clipboard.value)
        return True
