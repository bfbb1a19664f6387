# timetable_core/selection/selection_model.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from timetable_core.domain.models import ScheduleBlock, SelectionCell
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.validation.validator import ValidationError, validate_block, validate_day, validate_slot


@dataclass(frozen=True)
class PendingRange:
    """ドラッグ中の範囲（同じ曜日内のみ）"""
    day: int
    anchor_slot: int
    hover_slot: Optional[int] = None


class SelectionModel:
    """
    週グリッド上のドラッグ選択を (曜日, スロット) → 教室 のマップに変換する状態機械。
    状態は idle / pending の2つ。単一の利用者が操作する前提で、スレッド安全ではない。
    不正なインデックスは ValidationError で拒否し、状態は変更しない。
    """

    def __init__(self, grid: TimeGrid):
        self.grid = grid
        self._cells: Dict[Tuple[int, int], str] = {}
        self._pending: Optional[PendingRange] = None

    @property
    def state(self) -> str:
        return "pending" if self._pending is not None else "idle"

    @property
    def pending(self) -> Optional[PendingRange]:
        return self._pending

    def _check(self, day: int, slot: int) -> None:
        validate_day(day, self.grid)
        validate_slot(slot, self.grid)

    def is_occupied(self, day: int, slot: int) -> bool:
        return (day, slot) in self._cells

    def toggle_or_begin_range(self, day: int, slot: int) -> None:
        self._check(day, slot)
        if (day, slot) in self._cells:
            # 選択済みセルを押したらその曜日の選択をすべて解除する
            self._cells = {k: v for k, v in self._cells.items() if k[0] != day}
            self._pending = None
            return
        self._pending = PendingRange(day=day, anchor_slot=slot, hover_slot=slot)

    def hover(self, day: int, slot: int) -> None:
        self._check(day, slot)
        if self._pending is None or self._pending.day != day:
            return
        self._pending = PendingRange(day=day, anchor_slot=self._pending.anchor_slot, hover_slot=slot)

    def complete_range(self, day: int, slot: int) -> None:
        self._check(day, slot)
        p = self._pending
        if p is None:
            return
        self._pending = None
        if p.day != day:
            # 曜日をまたぐドラッグは無効（確定しない）
            return
        lo, hi = min(p.anchor_slot, slot), max(p.anchor_slot, slot)
        anchor_label = self._cells.get((day, p.anchor_slot), "")
        cells = dict(self._cells)
        for s in range(lo, hi + 1):
            if (day, s) not in cells:
                cells[(day, s)] = anchor_label
        self._cells = cells

    def release_outside_grid(self) -> None:
        """グリッド外でボタンを離した場合。最後のホバー位置（なければ起点）で確定する"""
        p = self._pending
        if p is None:
            return
        target = p.hover_slot if p.hover_slot is not None else p.anchor_slot
        self.complete_range(p.day, target)

    def set_label(self, day: int, slot: int, label: str) -> None:
        self._check(day, slot)
        if (day, slot) not in self._cells:
            raise ValidationError(f"未選択のセルには教室を設定できません: day={day} slot={slot}")
        cells = dict(self._cells)
        cells[(day, slot)] = label or ""
        self._cells = cells

    def set_label_all(self, label: str, day: Optional[int] = None) -> None:
        """選択済みセルすべて（day 指定時はその曜日だけ）に同じ教室を設定する"""
        if day is not None:
            validate_day(day, self.grid)
        self._cells = {
            k: (label or "") if day is None or k[0] == day else v
            for k, v in self._cells.items()
        }

    def pending_cells(self) -> List[Tuple[int, int]]:
        """ドラッグ中のハイライト範囲（起点〜ホバー位置）"""
        p = self._pending
        if p is None:
            return []
        end = p.hover_slot if p.hover_slot is not None else p.anchor_slot
        lo, hi = min(p.anchor_slot, end), max(p.anchor_slot, end)
        return [(p.day, s) for s in range(lo, hi + 1)]

    def snapshot(self) -> List[SelectionCell]:
        return [
            SelectionCell(day=d, slot=s, label=label)
            for (d, s), label in sorted(self._cells.items())
        ]

    def load_blocks(self, blocks: Iterable[ScheduleBlock]) -> None:
        """保存済みブロックから選択状態を復元する（既存科目の編集用）"""
        blocks = list(blocks)
        cells: Dict[Tuple[int, int], str] = {}
        for b in blocks:
            validate_block(b, self.grid)
            for s in b.covered_slots():
                cells[(b.day, s)] = b.label
        self._cells = cells
        self._pending = None

    def clear(self) -> None:
        self._cells = {}
        self._pending = None
