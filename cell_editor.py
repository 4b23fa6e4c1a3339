import curses


class CellEditor:
    """Handles the in-cell edit control: draft text, caret, commit and cancel keys."""

    def __init__(self, engine):
        self.engine = engine
        self.cursor = 0
        self._cell = None

    def sync(self):
        cell = self.engine.editing
        if cell != self._cell:
            self._cell = cell
            self.cursor = len(self.engine.draft or "")

    def _reset(self):
        self._cell = None
        self.cursor = 0

    # ---------- public entrypoint ----------
    def handle_key(self, ch: int) -> bool:
        """Returns False for keys that end the edit and belong to the grid."""
        if not self.engine.is_editing:
            return False
        self.sync()

        if ch in (10, 13, curses.KEY_ENTER):
            self.engine.commit_edit()
            self._reset()
            return True

        if ch == 27:  # Esc
            self.engine.cancel_edit()
            self._reset()
            return True

        if ch in (curses.KEY_UP, curses.KEY_DOWN, 9):
            # leaving the cell counts as losing focus
            self.engine.blur()
            self._reset()
            return ch == 9

        buf = self.engine.draft or ""
        idx = max(0, min(self.cursor, len(buf)))

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if idx > 0:
                self.engine.update_draft(buf[: idx - 1] + buf[idx:])
                self.cursor = idx - 1
            return True

        if ch == curses.KEY_DC:
            if idx < len(buf):
                self.engine.update_draft(buf[:idx] + buf[idx + 1 :])
            return True

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, idx - 1)
            return True
        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(buf), idx + 1)
            return True
        if ch in (curses.KEY_HOME, 1):  # Ctrl+A
            self.cursor = 0
            return True
        if ch in (curses.KEY_END, 5):  # Ctrl+E
            self.cursor = len(buf)
            return True
        if ch == 21:  # Ctrl+U
            self.engine.update_draft(buf[idx:])
            self.cursor = 0
            return True

        if 32 <= ch < curses.KEY_MIN or ch > curses.KEY_MAX:
            try:
                ch_str = chr(ch)
            except ValueError:
                return True
            self.engine.update_draft(buf[:idx] + ch_str + buf[idx:])
            self.cursor = idx + 1
            return True

        return True

    # ---------- rendering helpers ----------
    def visible_slice(self, width: int) -> tuple[str, int]:
        """Window of the draft that keeps the caret inside ``width`` columns."""
        buf = self.engine.draft or ""
        width = max(1, width)
        start = max(0, self.cursor - width + 1)
        return buf[start : start + width], self.cursor - start
