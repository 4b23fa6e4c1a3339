import curses

from grid_commands import COMMAND_WORDS


class CommandPane:
    def __init__(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.active = False
        self.history = []
        self.history_idx = None  # None means not navigating history
        self.field_names = []
        self.meta_pending = False
        self.ghost_attr = curses.A_DIM
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(9, curses.COLOR_WHITE, -1)
            self.ghost_attr = curses.color_pair(9) | curses.A_DIM
        except curses.error:
            self.ghost_attr = curses.A_DIM

    # ---------- state helpers ----------
    def reset(self):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.active = False
        self.history_idx = None
        self.meta_pending = False

    def activate(self):
        self.active = True
        self.cursor = max(0, min(self.cursor, len(self.buffer)))
        self.history_idx = None

    def get_buffer(self):
        return self.buffer

    def set_buffer(self, text):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0
        self.history_idx = None

    def set_field_names(self, names):
        self.field_names = list(names or [])

    def remember(self, text):
        text = (text or "").strip()
        if text and (not self.history or self.history[-1] != text):
            self.history.append(text)
        self.history_idx = None

    def _apply_history(self):
        if self.history_idx is None:
            return
        if 0 <= self.history_idx < len(self.history):
            self.buffer = self.history[self.history_idx]
        else:
            self.buffer = ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    # ---------- completion helpers ----------
    def _current_token(self):
        """Returns (start, token, position) for the word left of the cursor."""
        after = self.buffer[self.cursor :]
        if after and not after[0].isspace():
            return None
        prefix = self.buffer[: self.cursor]
        start = len(prefix)
        while start > 0 and not prefix[start - 1].isspace():
            start -= 1
        token = prefix[start:]
        if not token:
            return None
        position = len(prefix[:start].split())
        return start, token, position

    def _get_suggestion(self):
        info = self._current_token()
        if not info:
            return None
        start, token, position = info
        if position == 0:
            candidates = COMMAND_WORDS
        elif position == 1:
            candidates = self.field_names
        else:
            return None

        lowered = token.lower()
        matches = [c for c in candidates if c.lower().startswith(lowered) and c != token]
        if not matches:
            return None
        matches.sort(key=lambda x: (len(x), x))
        chosen = matches[0]
        return {
            "replacement": chosen,
            "display": chosen[len(token) :],
            "start": start,
            "end": self.cursor,
        }

    def _apply_suggestion(self, suggestion):
        start = suggestion["start"]
        replacement = suggestion["replacement"]
        self.buffer = self.buffer[:start] + replacement + self.buffer[suggestion["end"] :]
        self.cursor = start + len(replacement)
        self.hscroll = min(self.hscroll, max(0, self.cursor))
        self.history_idx = None

    # ---------- word helpers ----------
    def _word_boundary_left(self):
        i = self.cursor
        while i > 0 and self.buffer[i - 1].isspace():
            i -= 1
        while i > 0 and not self.buffer[i - 1].isspace():
            i -= 1
        return i

    def _word_boundary_right(self):
        i = self.cursor
        n = len(self.buffer)
        while i < n and self.buffer[i].isspace():
            i += 1
        while i < n and not self.buffer[i].isspace():
            i += 1
        return i

    # ---------- input handling ----------
    def handle_key(self, ch):
        if not self.active:
            return None

        if self.meta_pending:
            self.meta_pending = False
            if ch in (ord("f"), ord("F")):
                self.cursor = self._word_boundary_right()
                return None
            if ch in (ord("b"), ord("B")):
                self.cursor = self._word_boundary_left()
                return None
            self.reset()
            return "cancel"

        if ch == 16:  # Ctrl+P
            if self.history:
                if self.history_idx is None:
                    self.history_idx = len(self.history) - 1
                else:
                    self.history_idx = max(0, self.history_idx - 1)
                self._apply_history()
            return None
        if ch == 14:  # Ctrl+N
            if self.history and self.history_idx is not None:
                self.history_idx += 1
                if self.history_idx >= len(self.history):
                    self.history_idx = None
                    self.buffer = ""
                    self.cursor = 0
                    self.hscroll = 0
                else:
                    self._apply_history()
            return None

        if ch == 9:  # Tab
            suggestion = self._get_suggestion()
            if suggestion:
                self._apply_suggestion(suggestion)
            return None

        if ch in (10, 13, curses.KEY_ENTER):
            return "submit"

        if ch == 27:  # Esc, or Alt prefix
            self.meta_pending = True
            return None

        if ch == 23:  # Ctrl+W
            start = self._word_boundary_left()
            if start < self.cursor:
                self.buffer = self.buffer[:start] + self.buffer[self.cursor :]
                self.cursor = start
                self.history_idx = None
            return None

        if ch == 21:  # Ctrl+U
            if self.cursor > 0:
                self.buffer = self.buffer[self.cursor :]
                self.cursor = 0
                self.history_idx = None
            return None

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            elif not self.buffer:
                self.reset()
                return "cancel"
            self.history_idx = None
            return None

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return None
        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return None
        if ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.cursor = 0
            return None
        if ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.cursor = len(self.buffer)
            return None

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            self.history_idx = None
            return None

        return None

    # ---------- rendering ----------
    def draw(self, win, active=False):
        win.erase()
        h, w = win.getmaxyx()
        prompt = ":" if self.active else ""
        text_w = max(1, w - len(prompt) - 1)

        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        visible = self.buffer[self.hscroll : self.hscroll + text_w]

        try:
            if prompt:
                win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
        except curses.error:
            pass

        if self.active:
            suggestion = self._get_suggestion()
            if suggestion:
                display = suggestion.get("display", "") or ""
                cursor_col = self.cursor - self.hscroll
                if display and 0 <= cursor_col < text_w:
                    remaining = text_w - cursor_col
                    try:
                        win.addnstr(
                            0, len(prompt) + cursor_col, display[:remaining], remaining, self.ghost_attr
                        )
                    except curses.error:
                        pass

        if active and self.active:
            cx = len(prompt) + (self.cursor - self.hscroll)
            try:
                win.move(0, max(0, min(cx, w - 1)))
            except curses.error:
                pass

        win.refresh()
