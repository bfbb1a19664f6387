# timetable_core/layout/overlap_layout.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from timetable_core.domain.models import OverlapCluster, RenderPlacement, ScheduleBlock
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.validation.validator import validate_block

logger = logging.getLogger(__name__)


def _clusters_for_day(day: int, indexed: List[Tuple[int, ScheduleBlock]]) -> List[List[Tuple[int, ScheduleBlock]]]:
    """
    区間グラフの連結成分。壁時計の開始時刻順に走査し、
    これまでの最大終了時刻以降に始まるところで成分を切る（端が接するだけなら別成分）。
    各成分の中は入力順に並べ直す。
    """
    ordered = sorted(indexed, key=lambda t: (t[1].start_minute, t[0]))
    groups: List[List[Tuple[int, ScheduleBlock]]] = []
    reach = -1
    for item in ordered:
        b = item[1]
        if not groups or b.start_minute >= reach:
            groups.append([item])
            reach = b.end_minute
        else:
            groups[-1].append(item)
            reach = max(reach, b.end_minute)
    for g in groups:
        g.sort(key=lambda t: t[0])
    # 成分の並びは最初に現れたブロックの入力順
    groups.sort(key=lambda g: g[0][0])
    return groups


def _validated(blocks: Iterable[ScheduleBlock], grid: TimeGrid) -> Dict[int, List[Tuple[int, ScheduleBlock]]]:
    by_day: Dict[int, List[Tuple[int, ScheduleBlock]]] = {}
    for i, b in enumerate(blocks):
        validate_block(b, grid)
        by_day.setdefault(b.day, []).append((i, b))
    return by_day


def find_clusters(blocks: Iterable[ScheduleBlock], grid: TimeGrid) -> List[OverlapCluster]:
    """曜日ごとの重なりクラスタ（要素1つのものも含む）。曜日順、曜日内は出現順"""
    out: List[OverlapCluster] = []
    by_day = _validated(blocks, grid)
    for day in sorted(by_day):
        for cid, g in enumerate(_clusters_for_day(day, by_day[day])):
            members = tuple(b for _, b in g)
            out.append(OverlapCluster(
                day=day,
                cluster_id=cid,
                blocks=members,
                start_slot=min(b.start_slot for b in members),
                end_slot=max(b.end_slot for b in members),
                start_minute=min(b.start_minute for b in members),
                end_minute=max(b.end_minute for b in members),
            ))
    return out


def _place(grid: TimeGrid, b: ScheduleBlock, cid: int, index: int, count: int,
           lo: int, hi: int, start_minute: int, end_minute: int) -> RenderPlacement:
    origin = grid.slot_start_minutes(0)
    return RenderPlacement(
        block=b,
        horizontal_start_slot=lo,
        horizontal_slot_span=hi - lo + 1,
        vertical_index=index,
        vertical_count=count,
        cluster_id=cid,
        start_minute=start_minute,
        end_minute=end_minute,
        horizontal_offset=(start_minute - origin) / grid.slot_minutes,
        horizontal_width=(end_minute - start_minute) / grid.slot_minutes,
    )


def layout(blocks: Iterable[ScheduleBlock], grid: TimeGrid) -> List[RenderPlacement]:
    """
    ブロック → 描画計画。戻り値は入力と同じ順（1ブロック=1配置）。
    - 単独ブロック：自分の時刻範囲をそのまま使い、縦は全高（0/1）
    - 重なりクラスタ：全員がクラスタの包絡範囲を横幅とし、
      縦を N 等分して入力順に 0..N-1 を割り当てる
    """
    blocks = list(blocks)
    by_day = _validated(blocks, grid)
    placed: Dict[int, RenderPlacement] = {}

    for day in sorted(by_day):
        for cid, g in enumerate(_clusters_for_day(day, by_day[day])):
            n = len(g)
            if n == 1:
                i, b = g[0]
                placed[i] = _place(grid, b, cid, 0, 1, b.start_slot, b.end_slot, b.start_minute, b.end_minute)
                continue
            lo = min(b.start_slot for _, b in g)
            hi = max(b.end_slot for _, b in g)
            start = min(b.start_minute for _, b in g)
            end = max(b.end_minute for _, b in g)
            logger.debug("day=%s cluster=%s: %d blocks stacked over slots %d..%d", day, cid, n, lo, hi)
            for k, (i, b) in enumerate(g):
                placed[i] = _place(grid, b, cid, k, n, lo, hi, start, end)

    return [placed[i] for i in range(len(blocks))]
