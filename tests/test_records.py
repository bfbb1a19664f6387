# tests/test_records.py
from datetime import datetime, time

import pytest

from timetable_core.domain.models import SelectionCell
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.io_layer.records import block_from_record, block_to_record, blocks_to_records, sort_records
from timetable_core.merging.interval_merger import merge
from timetable_core.validation.validator import ValidationError

GRID = TimeGrid()


def test_record_shape():
    block = merge([SelectionCell(day=2, slot=0, label="Aula 3")], GRID)[0]
    assert block_to_record(block) == {"dayOfWeek": 2, "startTime": "07:45", "endTime": "08:25", "classroom": "Aula 3"}


def test_merged_blocks_survive_persistence():
    cells = [SelectionCell(day=d, slot=s, label="Lab" if s == 3 else "") for d in (0, 4) for s in (0, 1, 3, 4, 5, 13)]
    blocks = merge(cells, GRID)
    assert [block_from_record(block_to_record(b), GRID) for b in blocks] == blocks


def test_off_grid_record_keeps_wall_clock_strings():
    b = block_from_record({"dayOfWeek": 1, "startTime": "13:00", "endTime": "13:40", "classroom": None}, GRID, owner="Música")
    assert (b.start_slot, b.end_slot) == (7, 8)
    assert (b.start_time, b.end_time, b.label, b.owner) == ("13:00", "13:40", "", "Música")
    assert block_to_record(b)["startTime"] == "13:00"


def test_time_cells_are_formatted_and_strings_kept_verbatim():
    b = block_from_record({"dayOfWeek": 0.0, "startTime": time(7, 45), "endTime": datetime(2024, 3, 4, 8, 25)}, GRID)
    assert (b.day, b.start_time, b.end_time) == (0, "07:45", "08:25")
    b = block_from_record({"dayOfWeek": "3", "startTime": "7:45", "endTime": "9:05"}, GRID)
    assert (b.day, b.start_time, b.end_time, b.slot_count) == (3, "7:45", "9:05", 2)
    assert block_to_record(b)["startTime"] == "7:45"


@pytest.mark.parametrize("record", [
    {"dayOfWeek": 0, "startTime": "09:05", "endTime": "09:05"},
    {"dayOfWeek": 0, "startTime": "10:25", "endTime": "9:45"},
    {"dayOfWeek": 5, "startTime": "07:45", "endTime": "08:25"},
    {"dayOfWeek": -1, "startTime": "07:45", "endTime": "08:25"},
    {"dayOfWeek": "lunes", "startTime": "07:45", "endTime": "08:25"},
    {"dayOfWeek": 0, "startTime": "", "endTime": "08:25"},
    {"startTime": "07:45", "endTime": "08:25"},
    {"dayOfWeek": 0, "startTime": "0745", "endTime": "08:25"},
])
def test_invalid_records_are_rejected(record):
    with pytest.raises(ValidationError):
        block_from_record(record, GRID)


def test_sort_records_by_day_then_start():
    recs = [
        {"dayOfWeek": 1, "startTime": "10:25"},
        {"dayOfWeek": 0, "startTime": "13:45"},
        {"dayOfWeek": 1, "startTime": "9:05"},
    ]
    assert [(r["dayOfWeek"], r["startTime"]) for r in sort_records(recs)] == [(0, "13:45"), (1, "9:05"), (1, "10:25")]


def test_blocks_to_records_is_sorted():
    a = block_from_record({"dayOfWeek": 2, "startTime": "07:45", "endTime": "08:25"}, GRID)
    b = block_from_record({"dayOfWeek": 0, "startTime": "09:05", "endTime": "09:45"}, GRID)
    assert [r["dayOfWeek"] for r in blocks_to_records([a, b])] == [0, 2]
