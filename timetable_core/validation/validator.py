# timetable_core/validation/validator.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from timetable_core.config import DEFAULT_CONFIG
from timetable_core.domain.models import OverlapCluster, ScheduleBlock

if TYPE_CHECKING:
    from timetable_core.domain.timegrid import TimeGrid


@dataclass(frozen=True)
class ValidationError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ValidationWarning:
    message: str


_HHMM = re.compile(r"^\d{1,2}:\d{2}$")


def validate_day(day: int, grid: "TimeGrid") -> None:
    if not isinstance(day, int) or isinstance(day, bool) or not (0 <= day < grid.weekday_count):
        raise ValidationError(f"曜日インデックスが範囲外です: {day!r}")


def validate_slot(slot: int, grid: "TimeGrid") -> None:
    if not isinstance(slot, int) or isinstance(slot, bool) or not (0 <= slot < grid.slot_count):
        raise ValidationError(f"スロットインデックスが範囲外です: {slot!r}")


def validate_time_label(label: Any) -> str:
    s = "" if label is None else str(label).strip()
    if not _HHMM.match(s):
        raise ValidationError(f"時刻の形式が不正です（HH:MM）: {label!r}")
    return s


def validate_block(block: ScheduleBlock, grid: "TimeGrid") -> None:
    validate_day(block.day, grid)
    validate_slot(block.start_slot, grid)
    validate_slot(block.end_slot, grid)
    if block.start_slot > block.end_slot:
        raise ValidationError(
            f"ブロックの開始スロットが終了スロットより後です: day={block.day} "
            f"{block.start_slot}>{block.end_slot}"
        )
    validate_time_label(block.start_time)
    validate_time_label(block.end_time)
    if block.start_minute >= block.end_minute:
        raise ValidationError(
            f"ブロックの開始時刻が終了時刻以降です: day={block.day} {block.start_time}〜{block.end_time}"
        )


def validate_record(record: Dict[str, Any], grid: "TimeGrid") -> None:
    """保存前チェック：曜日・開始・終了が揃っていて開始 < 終了"""
    for key in ("dayOfWeek", "startTime", "endTime"):
        if record.get(key) in (None, ""):
            raise ValidationError(f"保存形式に {key} がありません: {record}")
    day = record["dayOfWeek"]
    try:
        day = int(day)
    except (TypeError, ValueError):
        raise ValidationError(f"dayOfWeek が整数ではありません: {day!r}")
    validate_day(day, grid)
    start = validate_time_label(record["startTime"])
    end = validate_time_label(record["endTime"])
    # HH:MM を分に直して比較（'9:05' と '10:25' の文字列比較を避ける）
    sh, sm = start.split(":")
    eh, em = end.split(":")
    if int(sh) * 60 + int(sm) >= int(eh) * 60 + int(em):
        raise ValidationError(f"開始時刻が終了時刻以降です: {start}〜{end}")


def collect_overlap_warnings(
    clusters: Iterable[OverlapCluster],
    day_labels: Optional[Dict[int, str]] = None,
) -> List[ValidationWarning]:
    if day_labels is None:
        day_labels = DEFAULT_CONFIG.labels.day_long
    # 重なり自体は描画で積み重ねるので警告止まり
    warnings: List[ValidationWarning] = []
    for c in clusters:
        if c.is_singleton:
            continue
        parts = []
        for b in c.blocks:
            who = f"{b.owner} " if b.owner else ""
            room = f"（{b.label}）" if b.label else ""
            parts.append(f"{who}{b.start_time}-{b.end_time}{room}")
        warnings.append(ValidationWarning(
            f"{day_labels.get(c.day, c.day)} に時間の重なりがあります: " + " / ".join(parts)
        ))
    return warnings


def check_planned_hours(
    blocks: Iterable[ScheduleBlock],
    catedras_hours: int,
    slot_minutes: int = DEFAULT_CONFIG.grid.slot_minutes,
) -> List[ValidationWarning]:
    """計画コマ数（授業時間の合計 ÷ 1コマの分数）と週あたりの horas cátedra を突き合わせる"""
    warnings: List[ValidationWarning] = []
    if catedras_hours <= 0:
        raise ValidationError(f"horas cátedra は1以上を指定してください: {catedras_hours}")
    planned = sum(b.duration_minutes for b in blocks) / slot_minutes
    if planned != catedras_hours:
        warnings.append(ValidationWarning(
            f"計画コマ数 {planned:g} が horas cátedra {catedras_hours} と一致しません。"
        ))
    return warnings
