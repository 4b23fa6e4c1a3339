import unittest

from edit_state import CellRef, Editing, EditStateMachine, Idle, Selected


class FakeCells:
    def __init__(self, values=None):
        self.values = dict(values or {})
        self.writes = []

    def read(self, cell):
        return self.values.get(tuple(cell), "")

    def write(self, cell, text):
        self.writes.append((tuple(cell), text))
        self.values[tuple(cell)] = text


def _machine(values=None):
    cells = FakeCells(values)
    return EditStateMachine(cells.read, cells.write), cells


class EditStateMachineTests(unittest.TestCase):
    def test_starts_idle_and_rejects_edit_without_selection(self):
        machine, cells = _machine()
        self.assertIsInstance(machine.state, Idle)
        self.assertFalse(machine.start_edit())
        self.assertFalse(machine.commit_edit("x"))
        self.assertFalse(machine.cancel_edit())
        self.assertFalse(machine.clear_selected())
        self.assertEqual(cells.writes, [])

    def test_start_edit_loads_current_value(self):
        machine, _ = _machine({(0, "status"): "Blocked"})
        machine.select(CellRef(0, "status"))
        self.assertTrue(machine.start_edit())
        self.assertEqual(machine.state, Editing(CellRef(0, "status"), "Blocked"))
        self.assertFalse(machine.start_edit())

    def test_commit_writes_exactly_one_cell(self):
        machine, cells = _machine({(0, "status"): "Blocked"})
        machine.select(CellRef(0, "status"))
        machine.start_edit()
        machine.update_draft("Complete")
        self.assertTrue(machine.commit_edit())
        self.assertEqual(cells.writes, [((0, "status"), "Complete")])
        self.assertEqual(machine.state, Selected(CellRef(0, "status")))

    def test_commit_with_explicit_value_overrides_draft(self):
        machine, cells = _machine()
        machine.select(CellRef(1, "A"))
        machine.start_edit()
        machine.update_draft("draft")
        machine.commit_edit("final")
        self.assertEqual(cells.writes, [((1, "A"), "final")])

    def test_cancel_leaves_cells_untouched(self):
        machine, cells = _machine({(0, "A"): "keep"})
        machine.select(CellRef(0, "A"))
        machine.start_edit()
        machine.update_draft("changed")
        self.assertTrue(machine.cancel_edit())
        self.assertEqual(cells.writes, [])
        self.assertEqual(cells.values[(0, "A")], "keep")
        self.assertEqual(machine.state, Selected(CellRef(0, "A")))

    def test_blur_commits_draft(self):
        machine, cells = _machine()
        machine.select(CellRef(2, "B"))
        machine.start_edit()
        machine.update_draft("typed")
        self.assertTrue(machine.blur())
        self.assertEqual(cells.writes, [((2, "B"), "typed")])
        self.assertFalse(machine.blur())

    def test_select_elsewhere_discards_draft(self):
        machine, cells = _machine()
        machine.select(CellRef(0, "A"))
        machine.start_edit()
        machine.update_draft("lost")
        machine.select(CellRef(1, "A"))
        self.assertEqual(cells.writes, [])
        self.assertEqual(machine.selection, CellRef(1, "A"))
        self.assertFalse(machine.is_editing)

    def test_update_draft_only_while_editing(self):
        machine, _ = _machine()
        self.assertFalse(machine.update_draft("x"))
        machine.select(CellRef(0, "A"))
        self.assertFalse(machine.update_draft("x"))

    def test_clear_selected_writes_empty_without_editing(self):
        machine, cells = _machine({(0, "A"): "value"})
        machine.select(CellRef(0, "A"))
        self.assertTrue(machine.clear_selected())
        self.assertEqual(cells.writes, [((0, "A"), "")])
        self.assertFalse(machine.is_editing)

    def test_clear_is_rejected_while_editing(self):
        machine, cells = _machine()
        machine.select(CellRef(0, "A"))
        machine.start_edit()
        self.assertFalse(machine.clear_selected())
        self.assertEqual(cells.writes, [])


def test_copy_then_paste_writes_snapshot():
    machine, cells = _machine({(0, "A"): "one"})
    assert not machine.paste()
    machine.select(CellRef(0, "A"))
    assert machine.copy()
    cells.values[(0, "A")] = "changed later"
    machine.select(CellRef(3, "B"))
    assert machine.paste()
    assert cells.writes == [((3, "B"), "one")]
    assert machine.clipboard.cell == CellRef(0, "A")


def test_deselect_returns_to_idle():
    machine, _ = _machine()
    machine.select(CellRef(0, "A"))
    machine.deselect()
    assert machine.selection is None
    assert isinstance(machine.state, Idle)
