# tests/test_selection_model.py
import pytest

from timetable_core.domain.timegrid import TimeGrid
from timetable_core.merging.interval_merger import merge
from timetable_core.selection.selection_model import SelectionModel
from timetable_core.validation.validator import ValidationError

GRID = TimeGrid()


def _occupied(model):
    return [(c.day, c.slot) for c in model.snapshot()]


def test_press_and_release_on_same_cell_selects_it():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, 0)
    assert m.state == "pending"
    m.complete_range(0, 0)
    assert m.state == "idle"
    assert _occupied(m) == [(0, 0)]


def test_drag_selects_inclusive_range_in_either_direction():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(2, 5)
    m.hover(2, 4)
    m.complete_range(2, 3)
    assert _occupied(m) == [(2, 3), (2, 4), (2, 5)]


def test_hover_on_other_day_is_ignored():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(1, 2)
    m.hover(1, 4)
    m.hover(3, 6)
    assert m.pending.hover_slot == 4
    assert m.pending_cells() == [(1, 2), (1, 3), (1, 4)]


def test_cross_day_release_aborts_without_commit():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, 1)
    m.complete_range(1, 3)
    assert m.state == "idle"
    assert m.snapshot() == []


def test_complete_without_pending_is_noop():
    m = SelectionModel(GRID)
    m.complete_range(0, 0)
    assert m.snapshot() == []
    m.release_outside_grid()
    assert m.snapshot() == []


def test_pressing_occupied_cell_clears_whole_day_only():
    m = SelectionModel(GRID)
    for day, a, b in [(0, 0, 1), (0, 4, 5), (1, 0, 0)]:
        m.toggle_or_begin_range(day, a)
        m.complete_range(day, b)
    m.toggle_or_begin_range(0, 5)
    assert m.state == "idle"
    assert _occupied(m) == [(1, 0)]


def test_release_outside_grid_uses_last_hover():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(3, 1)
    m.hover(3, 3)
    m.release_outside_grid()
    assert _occupied(m) == [(3, 1), (3, 2), (3, 3)]


def test_release_outside_grid_without_hover_keeps_anchor():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(4, 7)
    m.release_outside_grid()
    assert _occupied(m) == [(4, 7)]


def test_existing_labels_survive_range_extension():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, 0)
    m.complete_range(0, 1)
    m.set_label(0, 1, "Aula 1")
    m.toggle_or_begin_range(0, 3)
    m.complete_range(0, 0)
    labels = {(c.day, c.slot): c.label for c in m.snapshot()}
    assert labels == {(0, 0): "", (0, 1): "Aula 1", (0, 2): "", (0, 3): ""}


def test_set_label_on_unselected_cell_is_rejected():
    m = SelectionModel(GRID)
    with pytest.raises(ValidationError):
        m.set_label(0, 0, "Aula 1")
    assert m.snapshot() == []


@pytest.mark.parametrize("day,slot", [(-1, 0), (5, 0), (0, -1), (0, 14), (True, 0)])
def test_invalid_indices_leave_state_unchanged(day, slot):
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, 2)
    m.hover(0, 3)
    before = (m.pending, m.snapshot())
    for op in (m.toggle_or_begin_range, m.hover, m.complete_range):
        with pytest.raises(ValidationError):
            op(day, slot)
        assert (m.pending, m.snapshot()) == before


def test_load_blocks_and_clear():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(1, 0)
    m.complete_range(1, 2)
    m.set_label(1, 0, "Lab")
    blocks = merge(m.snapshot(), GRID)

    other = SelectionModel(GRID)
    other.load_blocks(blocks)
    assert merge(other.snapshot(), GRID) == blocks
    other.clear()
    assert other.snapshot() == [] and other.state == "idle"


def test_gestures_to_blocks():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, GRID.index_of("07:45"))
    m.hover(0, GRID.index_of("08:25"))
    m.complete_range(0, GRID.index_of("09:05"))
    blocks = merge(m.snapshot(), GRID)
    assert [(b.day, b.start_time, b.end_time) for b in blocks] == [(0, "07:45", "09:45")]


def test_set_label_all_applies_to_every_selected_cell():
    m = SelectionModel(GRID)
    for day, a, b in [(0, 0, 1), (2, 4, 4)]:
        m.toggle_or_begin_range(day, a)
        m.complete_range(day, b)
    m.set_label(0, 0, "Lab")
    m.set_label_all("Aula 5")
    assert {c.label for c in m.snapshot()} == {"Aula 5"}
    assert _occupied(m) == [(0, 0), (0, 1), (2, 4)]


def test_set_label_all_for_one_day():
    m = SelectionModel(GRID)
    for day in (0, 1):
        m.toggle_or_begin_range(day, 3)
        m.complete_range(day, 4)
    m.set_label_all("Gimnasio", day=1)
    labels = {(c.day, c.slot): c.label for c in m.snapshot()}
    assert labels == {(0, 3): "", (0, 4): "", (1, 3): "Gimnasio", (1, 4): "Gimnasio"}
    assert merge(m.snapshot(), GRID)[1].label == "Gimnasio"


def test_set_label_all_rejects_invalid_day_and_keeps_state():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(0, 0)
    m.complete_range(0, 0)
    before = m.snapshot()
    with pytest.raises(ValidationError):
        m.set_label_all("Aula 1", day=6)
    assert m.snapshot() == before


def test_is_occupied():
    m = SelectionModel(GRID)
    m.toggle_or_begin_range(3, 2)
    assert not m.is_occupied(3, 2)
    m.complete_range(3, 2)
    assert m.is_occupied(3, 2)
