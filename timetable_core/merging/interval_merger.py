# timetable_core/merging/interval_merger.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from timetable_core.domain.models import ScheduleBlock, SelectionCell
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.validation.validator import validate_block, validate_day, validate_slot


def _emit(grid: TimeGrid, day: int, start: int, end: int, label: str) -> ScheduleBlock:
    # 終了時刻は最後のスロット + 1コマ（1セルだけでも40分の授業）
    return ScheduleBlock(
        day=day,
        start_slot=start,
        end_slot=end,
        start_time=grid.slot_label(start),
        end_time=grid.slot_end_label(end),
        label=label,
    )


def merge(cells: Iterable[SelectionCell], grid: TimeGrid) -> List[ScheduleBlock]:
    """
    選択セル → 曜日ごとの連続ブロック。
    - スロットが1つずつ連続していれば延長、隙間があれば分割
    - 教室：現在のブロックが空で後続セルに教室があれば引き継ぐ。
      異なる教室同士でも分割はしない（最初に見つかった教室を採用）
    出力は (曜日, 開始スロット) 順。
    """
    by_day: Dict[int, Dict[int, str]] = {}
    for c in cells:
        if not c.occupied:
            continue
        validate_day(c.day, grid)
        validate_slot(c.slot, grid)
        slots = by_day.setdefault(c.day, {})
        # 同じセルが重複したら空でない教室を残す
        if not slots.get(c.slot):
            slots[c.slot] = c.label or ""

    out: List[ScheduleBlock] = []
    for day in sorted(by_day):
        slots = by_day[day]
        start: Optional[int] = None
        end = -1
        label = ""
        for s in sorted(slots):
            if start is not None and s == end + 1:
                end = s
                if slots[s] and not label:
                    label = slots[s]
                continue
            if start is not None:
                out.append(_emit(grid, day, start, end, label))
            start, end, label = s, s, slots[s]
        if start is not None:
            out.append(_emit(grid, day, start, end, label))
    return out


def cells_from_blocks(blocks: Iterable[ScheduleBlock], grid: TimeGrid) -> List[SelectionCell]:
    """ブロック → 全スロット選択済みのセル列（再マージ用）"""
    cells: List[SelectionCell] = []
    for b in blocks:
        validate_block(b, grid)
        cells.extend(SelectionCell(day=b.day, slot=s, label=b.label) for s in b.covered_slots())
    return cells


def blocks_for_day(blocks: Iterable[ScheduleBlock], day: int) -> List[ScheduleBlock]:
    return sorted((b for b in blocks if b.day == day), key=lambda b: (b.start_slot, b.start_time))
