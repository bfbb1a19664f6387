# timetable_core/domain/timegrid.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from timetable_core.config import AppConfig, GridConfig
from timetable_core.validation.validator import ValidationError


def parse_hhmm(label: str) -> int:
    """'HH:MM' → 0時からの分"""
    try:
        hh, mm = str(label).strip().split(":")
        h, m = int(hh), int(mm)
    except ValueError:
        raise ValidationError(f"時刻の形式が不正です（HH:MM）: {label!r}")
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise ValidationError(f"時刻の値が範囲外です: {label!r}")
    return h * 60 + m


def format_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _build_slots(day_start: str, day_end: str, slot_minutes: int) -> Tuple[str, ...]:
    """
    開始時刻から slot_minutes ずつ進めてスロットを列挙する。
    先頭（開始時刻そのもの）は常に含む。
    停止条件は「時 > 終了時」または「時 == 終了時 かつ 分 > 終了分」。
    07:45開始・40分刻みでは分 > 30 の分岐には到達しない（最後は 16:25）。
    """
    start = parse_hhmm(day_start)
    end = parse_hhmm(day_end)
    end_hour, end_minute = divmod(end, 60)

    slots = [format_hhmm(start)]
    hour, minute = divmod(start, 60)
    while True:
        minute += slot_minutes
        while minute >= 60:
            minute -= 60
            hour += 1
        if hour > end_hour or (hour == end_hour and minute > end_minute):
            break
        slots.append(f"{hour:02d}:{minute:02d}")
    return tuple(slots)


@dataclass(frozen=True)
class TimeGrid:
    """曜日×時限スロット（40分刻み）を扱う。スロット列は生成時に一度だけ確定する"""
    day_start: str = "07:45"
    day_end: str = "16:30"
    slot_minutes: int = 40
    weekday_count: int = 5
    _slots: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.slot_minutes <= 0:
            raise ValidationError(f"スロット幅が不正です: {self.slot_minutes}")
        object.__setattr__(self, "_slots", _build_slots(self.day_start, self.day_end, self.slot_minutes))

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "TimeGrid":
        g: GridConfig = cfg.grid
        return cls(
            day_start=g.day_start,
            day_end=g.day_end,
            slot_minutes=g.slot_minutes,
            weekday_count=g.weekday_count,
        )

    def slots(self) -> Tuple[str, ...]:
        return self._slots

    def weekdays(self) -> Tuple[int, ...]:
        return tuple(range(self.weekday_count))

    @property
    def slot_count(self) -> int:
        return len(self._slots)

    def slot_label(self, slot: int) -> str:
        return self._slots[slot]

    def slot_end_label(self, slot: int) -> str:
        """スロットの終了時刻（開始 + 1コマ）"""
        return format_hhmm(self.slot_start_minutes(slot) + self.slot_minutes)

    def slot_start_minutes(self, slot: int) -> int:
        return parse_hhmm(self._slots[slot])

    def index_of(self, label: str) -> int:
        """スロット開始時刻の文字列 → インデックス（グリッド外ならエラー）"""
        key = format_hhmm(parse_hhmm(label))
        try:
            return self._slots.index(key)
        except ValueError:
            raise ValidationError(f"グリッド上のスロットではありません: {label!r}")

    def span_for_times(self, start_label: str, end_label: str) -> Tuple[int, int]:
        """
        壁時計の開始/終了 → (開始スロット, 終了スロット) 両端含む。
        グリッドに揃っていない時刻（例 13:00〜13:40）は触れているスロットに丸める。
        """
        start = parse_hhmm(start_label)
        end = parse_hhmm(end_label)
        if start >= end:
            raise ValidationError(f"開始時刻が終了時刻以降です: {start_label}〜{end_label}")
        origin = self.slot_start_minutes(0)
        if start < origin:
            raise ValidationError(f"開始時刻がグリッド開始より前です: {start_label}")
        start_slot = (start - origin) // self.slot_minutes
        end_slot = (end - 1 - origin) // self.slot_minutes
        if end_slot >= self.slot_count:
            raise ValidationError(f"終了時刻がグリッドの範囲外です: {end_label}")
        return start_slot, end_slot
