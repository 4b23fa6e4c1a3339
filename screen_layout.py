import curses


class ScreenLayout:
    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()

        # layout: formula bar (1 line), table (main), status bar (1 line), command bar (1 line)
        self.formula_h = 1
        self.status_h = 1
        self.cmd_h = 1

        self.table_h = max(1, self.H - self.formula_h - self.status_h - self.cmd_h)

        self.formula_win = curses.newwin(self.formula_h, self.W, 0, 0)
        self.formula_win.leaveok(True)

        self.table_win = curses.newwin(self.table_h, self.W, self.formula_h, 0)
        # grid pane owns the cursor only while a cell is being edited
        self.table_win.leaveok(False)

        self.status_win = curses.newwin(
            self.status_h, self.W, self.formula_h + self.table_h, 0
        )
        self.status_win.leaveok(True)

        self.cmd_win = curses.newwin(
            self.cmd_h, self.W, self.formula_h + self.table_h + self.status_h, 0
        )
