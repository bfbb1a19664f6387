# timetable_core/io_layer/records.py
from __future__ import annotations

from datetime import datetime, time
from typing import Any, Dict, Iterable, List

from timetable_core.domain.models import ScheduleBlock
from timetable_core.domain.timegrid import TimeGrid, parse_hhmm
from timetable_core.validation.validator import validate_record


def normalize_time(value: Any) -> str:
    """xlsx のセル値（time/datetime/文字列）→ 'HH:MM'"""
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return f"{value.hour:02d}:{value.minute:02d}"
    if value is None:
        return ""
    return str(value).strip()


def block_to_record(block: ScheduleBlock) -> Dict[str, Any]:
    return {
        "dayOfWeek": block.day,
        "startTime": block.start_time,
        "endTime": block.end_time,
        "classroom": block.label,
    }


def block_from_record(record: Dict[str, Any], grid: TimeGrid, owner: str = "") -> ScheduleBlock:
    """保存形式 → ブロック。時刻文字列はそのまま保持し、スロット範囲だけ導出する"""
    rec = dict(record)
    rec["startTime"] = normalize_time(rec.get("startTime"))
    rec["endTime"] = normalize_time(rec.get("endTime"))
    validate_record(rec, grid)
    # 文字列は保存されていた表記のまま保持する（'7:45' も書き換えない）
    start = rec["startTime"]
    end = rec["endTime"]
    s, e = grid.span_for_times(start, end)
    classroom = rec.get("classroom")
    return ScheduleBlock(
        day=int(rec["dayOfWeek"]),
        start_slot=s,
        end_slot=e,
        start_time=start,
        end_time=end,
        label="" if classroom is None else str(classroom),
        owner=owner,
    )


def sort_records(records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """曜日 → 開始時刻の順"""
    return sorted(records, key=lambda r: (int(r["dayOfWeek"]), parse_hhmm(normalize_time(r["startTime"]))))


def blocks_to_records(blocks: Iterable[ScheduleBlock]) -> List[Dict[str, Any]]:
    return sort_records(block_to_record(b) for b in blocks)
