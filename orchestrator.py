import curses
import logging
import time

from cell_editor import CellEditor
from command_pane import CommandPane
from grid_commands import parse_command_line
from grid_engine import GridEngine
from grid_pane import GridPane
from import_worker import ImportJob
from keyboard_navigator import KeyboardNavigator
from screen_layout import ScreenLayout
from status_bar import render_formula, render_status

logger = logging.getLogger(__name__)

QUIT_KEYS = (3, 24)  # Ctrl+C / Ctrl+X


class Orchestrator:
    def __init__(self, stdscr, schema, config=None, initial_path=None):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.config = config or {}
        self.file_path = None

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        # ---- pending imports ----
        self.jobs: list[ImportJob] = []

        self.engine = GridEngine(
            schema,
            set_status=self._set_status,
            config=self.config,
            import_runner=self._start_import,
        )
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane()
        self.editor = CellEditor(self.engine)
        self.navigator = KeyboardNavigator(self.engine)
        self.command = CommandPane()
        self.command.set_field_names(self.engine.schema.fields)

        self.focus = 0  # 0=grid, 1=cmd
        self.engine.select(0)

        if initial_path:
            self.engine.import_file(initial_path)

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _start_import(self, path):
        logger.info("Reading %s", path)
        self.jobs.append(ImportJob(path, self.engine.codec.read).start())

    def poll_imports(self) -> bool:
        """Hand finished reads to the engine; True when anything completed."""
        finished = [job for job in self.jobs if job.done]
        if not finished:
            return False
        self.jobs = [job for job in self.jobs if not job.done]
        for job in finished:
            if self.engine.complete_import(job.path, job.content, job.error):
                self.file_path = job.path
        return True

    def _status_context(self, view):
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "focus": self.focus,
            "editing": view.editing is not None,
            "file_path": self.file_path,
            "record_count": view.record_count,
            "matched_count": view.matched_count,
            "sort": view.sort,
            "filter": view.filter,
            "hidden": view.hidden,
        }

    # ---------------- UI ----------------

    def redraw(self):
        view = self.engine.build_view()
        if view.editing is not None:
            self.editor.sync()

        fw = self.layout.formula_win
        fw.erase()
        _, w = fw.getmaxyx()
        value = view.draft if view.editing is not None else view.selected_value
        try:
            fw.addnstr(0, 0, render_formula(view.address, value, w), w, curses.A_BOLD)
        except curses.error:
            pass
        fw.refresh()

        self.grid.draw(self.layout.table_win, view, editor=self.editor, active=(self.focus == 0))

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self._status_context(view), w), w)
        except curses.error:
            pass
        sw.refresh()

        cmd_active = self.focus == 1 and self.command.active
        self.command.draw(self.layout.cmd_win, active=cmd_active)

        try:
            curses.curs_set(1 if (cmd_active or self.grid.caret is not None) else 0)
        except curses.error:
            pass
        if self.grid.caret is not None and not cmd_active:
            try:
                self.layout.table_win.move(*self.grid.caret)
                self.layout.table_win.refresh()
            except curses.error:
                pass

    # ---------------- command exec ----------------

    def _execute_command_buffer(self):
        text = self.command.get_buffer().strip()
        self.command.reset()
        self.focus = 0

        if not text:
            self._set_status("No command to execute", 3)
            return

        command = parse_command_line(text)
        if command is None:
            self._set_status(f"Unknown command: {text}", 3)
            return
        self.command.remember(text)
        self.engine.dispatch(command)

    # ---------------- key routing ----------------

    def handle_grid_key(self, ch) -> bool:
        if self.engine.is_editing:
            if self.editor.handle_key(ch):
                return True
            # arrow keys end the edit, then move
            return self.navigator.handle_key(ch)

        if ch == ord(":"):
            self.command.activate()
            self.focus = 1
            return True

        if self.engine.selection is None and ch in (
            curses.KEY_UP,
            curses.KEY_DOWN,
            curses.KEY_LEFT,
            curses.KEY_RIGHT,
        ):
            return self.engine.select(0)

        if ch in (curses.KEY_HOME, ord("0")):
            self.navigator.jump_first_field()
            return True
        if ch in (curses.KEY_END, ord("$")):
            self.navigator.jump_last_field()
            return True

        return self.navigator.handle_key(ch)

    def handle_key(self, ch) -> bool:
        """Route one key; returns False when the app should exit."""
        if ch in QUIT_KEYS:
            return False
        if ch == -1:
            return True

        if self.focus == 1:
            result = self.command.handle_key(ch)
            if result == "submit":
                self._execute_command_buffer()
            elif result == "cancel":
                self.focus = 0
            return True

        self.handle_grid_key(ch)
        return True

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while True:
            ch = self.stdscr.getch()
            self.poll_imports()
            if not self.handle_key(ch):
                break
            self.redraw()
