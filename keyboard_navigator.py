import curses


KEY_ENTER_CODES = (10, 13, curses.KEY_ENTER)


class KeyboardNavigator:
    """Grid-level keys; inactive without a selection or during an edit."""

    def __init__(self, engine):
        self.engine = engine

    @property
    def active(self) -> bool:
        return self.engine.selection is not None and not self.engine.is_editing

    def handle_key(self, ch) -> bool:
        if not self.active:
            return False

        if ch in (curses.KEY_UP, ord("k")):
            self.move_up()
        elif ch in (curses.KEY_DOWN, ord("j")):
            self.move_down()
        elif ch in (curses.KEY_LEFT, ord("h")):
            self.move_left()
        elif ch in (curses.KEY_RIGHT, ord("l")):
            self.move_right()
        elif ch in KEY_ENTER_CODES or ch == curses.KEY_F2:
            self.engine.start_edit()
        elif ch in (curses.KEY_DC, ord("x")):
            self.engine.clear_selected()
        elif ch == ord("y"):
            self.engine.copy()
        elif ch == ord("p"):
            self.engine.paste()
        else:
            return False
        return True

    # ---------- movement ----------
    def _move_to(self, row, field):
        cell = self.engine.selection
        if cell is not None and (row, field) != tuple(cell):
            self.engine.select(row, field)

    def move_up(self):
        cell = self.engine.selection
        self._move_to(max(0, cell.row - 1), cell.field)

    def move_down(self):
        cell = self.engine.selection
        last = max(0, self.engine.total_rows - 1)
        self._move_to(min(last, cell.row + 1), cell.field)

    def _field_index(self, fields, field):
        try:
            return fields.index(field)
        except ValueError:
            return None

    def move_left(self):
        cell = self.engine.selection
        fields = self.engine.fields()
        if not fields:
            return
        idx = self._field_index(fields, cell.field)
        if idx is None:
            self._move_to(cell.row, fields[0])
        elif idx > 0:
            self._move_to(cell.row, fields[idx - 1])

    def move_right(self):
        cell = self.engine.selection
        fields = self.engine.fields()
        if not fields:
            return
        idx = self._field_index(fields, cell.field)
        if idx is None:
            self._move_to(cell.row, fields[0])
        elif idx < len(fields) - 1:
            self._move_to(cell.row, fields[idx + 1])

    def jump_first_field(self):
        cell = self.engine.selection
        fields = self.engine.fields()
        if cell is not None and fields:
            self._move_to(cell.row, fields[0])

    def jump_last_field(self):
        cell = self.engine.selection
        fields = self.engine.fields()
        if cell is not None and fields:
            self._move_to(cell.row, fields[-1])
