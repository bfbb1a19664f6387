# timetable_core/main_cli.py
from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Tuple

from timetable_core.config import DEFAULT_CONFIG, AppConfig
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.io_layer.paths import InputPaths
from timetable_core.io_layer.xlsx_reader import XlsxReader
from timetable_core.layout.overlap_layout import find_clusters, layout
from timetable_core.merging.interval_merger import merge
from timetable_core.reporting.export_xlsx import export_result_xlsx
from timetable_core.reporting.report import (
    build_block_table, build_layout_table, build_planned_table, build_week_matrix,
)
from timetable_core.selection.selection_model import SelectionModel
from timetable_core.validation.validator import ValidationError, check_planned_hours, collect_overlap_warnings

logger = logging.getLogger(__name__)


def parse_range(text: str, grid: TimeGrid) -> Tuple[int, int, int, str]:
    """
    'DAY:HH:MM-HH:MM@教室' → (曜日, 起点スロット, 終点スロット, 教室)
    終点はドラッグを離したセル（最後のスロットの開始時刻）。'@教室' と '-終点' は省略可。
    """
    day_part, sep, rest = text.partition(":")
    if not sep:
        raise ValidationError(f"範囲の形式が不正です（DAY:HH:MM-HH:MM[@教室]）: {text!r}")
    try:
        day = int(day_part)
    except ValueError:
        raise ValidationError(f"曜日が整数ではありません: {text!r}")
    times, _, room = rest.partition("@")
    start, _, end = times.partition("-")
    s = grid.index_of(start)
    e = grid.index_of(end) if end else s
    return day, s, e, room.strip()


def run_plan(args, cfg: AppConfig, grid: TimeGrid) -> int:
    model = SelectionModel(grid)
    for text in args.range:
        day, s, e, room = parse_range(text, grid)
        cleared = model.is_occupied(day, s)
        model.toggle_or_begin_range(day, s)
        if cleared:
            logger.warning("選択済みセルの再選択で曜日 %s の選択を解除しました: %s", day, text)
            continue
        model.complete_range(day, e)
        if room:
            for slot in range(min(s, e), max(s, e) + 1):
                model.set_label(day, slot, room)
    if args.classroom:
        # 全体の教室で埋めてから、範囲ごとの @教室 を戻す
        labelled = {(c.day, c.slot): c.label for c in model.snapshot() if c.label}
        model.set_label_all(args.classroom)
        for (d, slot), label in labelled.items():
            model.set_label(d, slot, label)

    blocks = merge(model.snapshot(), grid)
    if args.catedras is not None:
        for w in check_planned_hours(blocks, args.catedras, grid.slot_minutes):
            print(f"[WARN] {w.message}")

    sheets = {
        cfg.xlsx.planned_sheet: build_planned_table(blocks, cfg),
        cfg.xlsx.week_sheet: build_week_matrix(blocks, cfg, grid),
    }
    out_path = export_result_xlsx(args.out, sheets, index_sheets=(cfg.xlsx.week_sheet,))
    print(f"[RESULT] OK: {len(blocks)} 件の時限 → {out_path}")
    return 0


def run_layout(args, cfg: AppConfig, grid: TimeGrid) -> int:
    paths = InputPaths(planned_files=args.blocks, planned_sheet_name=args.sheet or cfg.xlsx.planned_sheet)
    reader = XlsxReader(cfg=cfg, grid=grid)
    blocks = reader.read_many(paths.planned_files, sheet=paths.planned_sheet_name)

    for w in collect_overlap_warnings(find_clusters(blocks, grid), cfg.labels.day_long):
        print(f"[WARN] {w.message}")

    placements = layout(blocks, grid)
    sheets = {
        cfg.xlsx.layout_sheet: build_layout_table(placements, cfg),
        cfg.xlsx.week_sheet: build_week_matrix(blocks, cfg, grid),
        "blocks": build_block_table(blocks, cfg),
    }
    out_path = export_result_xlsx(args.out, sheets, index_sheets=(cfg.xlsx.week_sheet,))
    print(f"[RESULT] OK: {len(placements)} 件の配置 → {out_path}")
    return 0


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(prog="timetable-core")
    p.add_argument("--verbose", action="store_true", help="DEBUGログを出す")
    sub = p.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="グリッド選択から計画時限を作る")
    plan.add_argument("--range", nargs="+", required=True,
                      help="選択範囲 DAY:HH:MM-HH:MM[@教室]（例: 0:07:45-09:05@Aula 3）")
    plan.add_argument("--classroom", default="", help="選択したすべてのコマに設定する教室（範囲ごとの @教室 が優先）")
    plan.add_argument("--catedras", type=int, default=None, help="週あたり horas cátedra（コマ数の照合用）")
    plan.add_argument("--out", default="assets/output/planned.xlsx", help="出力xlsx")

    lay = sub.add_parser("layout", help="複数科目の時限を重なりなしで配置する")
    lay.add_argument("--blocks", nargs="+", required=True, help="計画時限 xlsx（複数可）")
    lay.add_argument("--sheet", default=None, help="読み込むシート名")
    lay.add_argument("--out", default="assets/output/layout.xlsx", help="出力xlsx")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s: %(message)s")
    cfg = DEFAULT_CONFIG
    grid = TimeGrid.from_config(cfg)

    try:
        if args.command == "plan":
            return run_plan(args, cfg, grid)
        return run_layout(args, cfg, grid)
    except ValidationError as e:
        print(f"[ERROR] {e.message}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
