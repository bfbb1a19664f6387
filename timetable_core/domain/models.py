# timetable_core/domain/models.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


def _minutes(label: str) -> int:
    hh, mm = label.split(":")
    return int(hh) * 60 + int(mm)


@dataclass(frozen=True)
class SelectionCell:
    """ドラッグ選択中のセル（曜日×スロット）。保存はしない一時的な状態"""
    day: int
    slot: int
    label: str = ""        # 教室（自由記述）
    occupied: bool = True


@dataclass(frozen=True)
class ScheduleBlock:
    """
    保存・描画の単位。1曜日の連続したスロット範囲。
    start_slot / end_slot はスロット列へのインデックス（両端含む）。
    start_time / end_time は表示・保存用の壁時計文字列。
    """
    day: int
    start_slot: int
    end_slot: int
    start_time: str
    end_time: str
    label: str = ""
    owner: str = ""  # 出所（科目名など）。保存形式には含めない

    @property
    def slot_count(self) -> int:
        return self.end_slot - self.start_slot + 1

    def covered_slots(self) -> range:
        return range(self.start_slot, self.end_slot + 1)

    @property
    def start_minute(self) -> int:
        return _minutes(self.start_time)

    @property
    def end_minute(self) -> int:
        return _minutes(self.end_time)

    @property
    def duration_minutes(self) -> int:
        return self.end_minute - self.start_minute

    def intersects(self, other: "ScheduleBlock") -> bool:
        # 壁時計の半開区間で判定（端が接するだけなら重ならない）
        return self.day == other.day and self.start_minute < other.end_minute and other.start_minute < self.end_minute


@dataclass(frozen=True)
class OverlapCluster:
    """同じ曜日で時間が（推移的に）重なるブロックの極大集合"""
    day: int
    cluster_id: int
    blocks: Tuple[ScheduleBlock, ...]  # 入力順
    start_slot: int                    # 包絡範囲
    end_slot: int
    start_minute: int                  # 包絡範囲（壁時計の分）
    end_minute: int

    @property
    def size(self) -> int:
        return len(self.blocks)

    @property
    def is_singleton(self) -> bool:
        return len(self.blocks) == 1


@dataclass(frozen=True)
class RenderPlacement:
    """描画計画の1要素。縦方向は vertical_index/vertical_count の帯を占める"""
    block: ScheduleBlock
    horizontal_start_slot: int
    horizontal_slot_span: int
    vertical_index: int
    vertical_count: int
    cluster_id: int
    # 横方向の実際の範囲（分）。単独ブロックは自分の時刻、クラスタは包絡範囲
    start_minute: int
    end_minute: int
    # 同じ範囲をスロット単位の小数で（グリッド外の時刻でも比例した位置・幅）
    horizontal_offset: float
    horizontal_width: float

    @property
    def vertical_top(self) -> float:
        return self.vertical_index / self.vertical_count

    @property
    def vertical_height(self) -> float:
        return 1.0 / self.vertical_count

    @property
    def horizontal_end_slot(self) -> int:
        return self.horizontal_start_slot + self.horizontal_slot_span - 1
