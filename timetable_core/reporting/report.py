# timetable_core/reporting/report.py
from __future__ import annotations

from typing import Dict, Iterable, List

import pandas as pd

from timetable_core.config import AppConfig
from timetable_core.domain.models import RenderPlacement, ScheduleBlock
from timetable_core.domain.timegrid import TimeGrid, format_hhmm
from timetable_core.io_layer.records import blocks_to_records


def build_block_table(blocks: Iterable[ScheduleBlock], cfg: AppConfig) -> pd.DataFrame:
    rows = []
    for b in sorted(blocks, key=lambda x: (x.day, x.start_slot, x.start_time)):
        rows.append(dict(
            subject=b.owner,
            day=b.day,
            day_label=cfg.labels.day_long.get(b.day, str(b.day)),
            start_time=b.start_time,
            end_time=b.end_time,
            classroom=b.label,
            slots=b.slot_count,
        ))
    return pd.DataFrame(rows, columns=["subject", "day", "day_label", "start_time", "end_time", "classroom", "slots"])


def build_planned_table(blocks: Iterable[ScheduleBlock], cfg: AppConfig) -> pd.DataFrame:
    """保存形式そのままの表（planned シートとして読み戻せる）"""
    x = cfg.xlsx
    records = blocks_to_records(blocks)
    df = pd.DataFrame(records, columns=["dayOfWeek", "startTime", "endTime", "classroom"])
    return df.rename(columns={
        "dayOfWeek": x.col_day, "startTime": x.col_start,
        "endTime": x.col_end, "classroom": x.col_classroom,
    })


def build_layout_table(placements: Iterable[RenderPlacement], cfg: AppConfig) -> pd.DataFrame:
    rows = []
    for p in placements:
        b = p.block
        rows.append(dict(
            subject=b.owner,
            day=b.day,
            day_label=cfg.labels.day_short.get(b.day, str(b.day)),
            start_time=b.start_time,
            end_time=b.end_time,
            classroom=b.label,
            cluster_id=p.cluster_id,
            span_start=format_hhmm(p.start_minute),
            span_end=format_hhmm(p.end_minute),
            span_offset=p.horizontal_offset,
            span_width=p.horizontal_width,
            span_start_slot=p.horizontal_start_slot,
            span_slots=p.horizontal_slot_span,
            stack_index=p.vertical_index,
            stack_count=p.vertical_count,
            top=p.vertical_top,
            height=p.vertical_height,
        ))
    df = pd.DataFrame(rows)
    if not df.empty:
        df = df.sort_values(["day", "span_start_slot", "stack_index"], kind="stable").reset_index(drop=True)
    return df


def build_week_matrix(blocks: Iterable[ScheduleBlock], cfg: AppConfig, grid: TimeGrid) -> pd.DataFrame:
    """行=スロット開始時刻、列=曜日（短縮ラベル）。重なるセルは ' / ' で連結"""
    cells: Dict[tuple, List[str]] = {}
    for b in blocks:
        text = b.owner or b.label or f"{b.start_time}-{b.end_time}"
        if b.owner and b.label:
            text = f"{b.owner} ({b.label})"
        for s in b.covered_slots():
            cells.setdefault((s, b.day), []).append(text)

    columns = [cfg.labels.day_short.get(d, str(d)) for d in grid.weekdays()]
    data = [
        [" / ".join(cells.get((s, d), [])) for d in grid.weekdays()]
        for s in range(grid.slot_count)
    ]
    return pd.DataFrame(data, index=list(grid.slots()), columns=columns)
