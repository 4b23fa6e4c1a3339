import curses

from grid_schema import display_color, display_text


class GridPane:
    PAIR_CELL_TEXT = 1
    COLOR_PAIRS = {"red": 2, "yellow": 3, "blue": 4, "green": 5, "gray": 6}
    MAX_COL_WIDTH = 40
    MIN_COL_WIDTH = 4

    def __init__(self):
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.COLOR_PAIRS["red"], curses.COLOR_RED, -1)
            curses.init_pair(self.COLOR_PAIRS["yellow"], curses.COLOR_YELLOW, -1)
            curses.init_pair(self.COLOR_PAIRS["blue"], curses.COLOR_BLUE, -1)
            curses.init_pair(self.COLOR_PAIRS["green"], curses.COLOR_GREEN, -1)
            curses.init_pair(self.COLOR_PAIRS["gray"], curses.COLOR_WHITE, -1)
        except curses.error:
            pass

        self.row_offset = 0
        self.col_offset = 0
        self.rendered_col_widths = {}
        self.caret = None  # (y, x) while editing

    # ---------- geometry ----------
    def column_widths(self, view, rows=None) -> list[int]:
        rows = view.rows if rows is None else rows
        widths = []
        for f, label, kind in zip(view.fields, view.labels, view.kinds):
            max_len = len(str(label))
            for row in rows:
                max_len = max(max_len, len(display_text(kind, row.values.get(f, ""))))
            widths.append(max(self.MIN_COL_WIDTH, min(self.MAX_COL_WIDTH, max_len + 2)))
        return widths

    @staticmethod
    def row_label_width(total_rows: int) -> int:
        return max(3, len(str(max(total_rows, 1))) + 1)

    def adjust_row_offset(self, curr_row: int, total_rows: int, body_h: int) -> range:
        body_h = max(1, body_h)
        if curr_row < self.row_offset:
            self.row_offset = curr_row
        elif curr_row >= self.row_offset + body_h:
            self.row_offset = curr_row - body_h + 1
        self.row_offset = max(0, min(self.row_offset, max(0, total_rows - body_h)))
        return range(self.row_offset, min(total_rows, self.row_offset + body_h))

    def adjust_col_offset(self, curr_col: int, widths: list[int], avail_w: int) -> tuple:
        if not widths:
            self.col_offset = 0
            return ()
        if curr_col < self.col_offset:
            self.col_offset = curr_col

        def _fit(start):
            used = 0
            count = 0
            for cw in widths[start:]:
                if used + cw + 1 > avail_w and count > 0:
                    break
                used += cw + 1
                count += 1
            return max(1, count)

        visible = _fit(self.col_offset)
        while curr_col >= self.col_offset + visible and self.col_offset < curr_col:
            self.col_offset += 1
            visible = _fit(self.col_offset)
        self.col_offset = max(0, min(self.col_offset, len(widths) - 1))
        return tuple(range(self.col_offset, min(len(widths), self.col_offset + visible)))

    # ---------- rendering ----------
    def _attr_for(self, kind, value):
        color = display_color(kind, value)
        if color is None:
            return curses.color_pair(self.PAIR_CELL_TEXT)
        attr = curses.color_pair(self.COLOR_PAIRS.get(color, self.PAIR_CELL_TEXT))
        if kind == "url":
            attr |= curses.A_UNDERLINE
        return attr

    def draw(self, win, view, editor=None, active=True):
        win.erase()
        h, w = win.getmaxyx()
        self.caret = None

        total_rows = len(view.rows)
        sel = view.selection
        curr_row = sel.row if sel is not None else 0
        curr_col = view.fields.index(sel.field) if (sel is not None and sel.field in view.fields) else 0

        body_h = max(1, h - 2)
        row_range = self.adjust_row_offset(curr_row, total_rows, body_h)
        visible_rows = [view.rows[r] for r in row_range]

        widths = self.column_widths(view, visible_rows)
        row_w = self.row_label_width(total_rows)
        avail_w = max(1, w - (row_w + 1))
        visible_cols = self.adjust_col_offset(curr_col, widths, avail_w)
        self.rendered_col_widths = {}

        # header
        x = row_w + 1
        for c in visible_cols:
            eff_cw = min(widths[c], max(1, w - x - 1))
            self.rendered_col_widths[c] = eff_cw
            label = str(view.labels[c])[:eff_cw].ljust(eff_cw)
            try:
                win.addnstr(0, x, label, eff_cw, curses.A_BOLD)
            except curses.error:
                pass
            x += eff_cw + 1
        try:
            win.hline(1, 0, curses.ACS_HLINE, w)
        except curses.error:
            pass

        # rows
        y = 2
        for row in visible_rows:
            if y >= h:
                break
            try:
                win.addnstr(y, 0, str(row.view_row + 1).rjust(row_w), row_w, curses.A_DIM)
            except curses.error:
                pass
            x = row_w + 1
            for c in visible_cols:
                f = view.fields[c]
                kind = view.kinds[c]
                eff_cw = self.rendered_col_widths[c]
                value = row.values.get(f, "")

                if view.is_editing(row.view_row, f) and editor is not None:
                    text, caret = editor.visible_slice(eff_cw)
                    attr = curses.A_UNDERLINE | curses.A_BOLD
                    self.caret = (y, x + caret)
                else:
                    text = display_text(kind, value)
                    attr = self._attr_for(kind, value)
                    if active and view.is_selected(row.view_row, f):
                        attr |= curses.A_REVERSE

                try:
                    win.addnstr(y, x, text[:eff_cw].ljust(eff_cw), eff_cw, attr)
                except curses.error:
                    pass
                x += eff_cw + 1
            y += 1

        if self.caret is not None:
            try:
                win.move(*self.caret)
            except curses.error:
                self.caret = None
        win.refresh()
