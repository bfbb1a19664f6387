# timetable_core/gui/app.py
from __future__ import annotations

from pathlib import Path
import sys

import pandas as pd
import streamlit as st

# Streamlitは実行ディレクトリが変わるため、リポジトリルートをパスに追加する。
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from timetable_core.config import DEFAULT_CONFIG, AppConfig
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.io_layer.xlsx_reader import XlsxReader
from timetable_core.layout.overlap_layout import find_clusters, layout
from timetable_core.merging.interval_merger import blocks_for_day, merge
from timetable_core.reporting.export_xlsx import export_result_bytes
from timetable_core.reporting.report import (
    build_block_table, build_layout_table, build_planned_table, build_week_matrix,
)
from timetable_core.selection.selection_model import SelectionModel
from timetable_core.validation.validator import ValidationError, check_planned_hours, collect_overlap_warnings

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _plan_tab(cfg: AppConfig, grid: TimeGrid) -> None:
    st.subheader("計画時限（セルを選択）")
    days = [cfg.labels.day_short[d] for d in grid.weekdays()]
    blank = pd.DataFrame(False, index=list(grid.slots()), columns=days)
    edited = st.data_editor(blank, use_container_width=True, key="plan_grid")

    room_all = st.text_input("教室（全体）", key="room_all").strip()
    rooms = {}
    cols = st.columns(len(days))
    for d, col in zip(grid.weekdays(), cols):
        rooms[d] = col.text_input(f"教室（{days[d]}）", key=f"room_{d}").strip()
    catedras = st.number_input("horas cátedra", min_value=0, max_value=grid.slot_count * grid.weekday_count, value=0)

    # 表のチェックを1セルずつのジェスチャとして流し込む
    model = SelectionModel(grid)
    for d, name in zip(grid.weekdays(), days):
        for s, checked in enumerate(edited[name].tolist()):
            if checked:
                model.toggle_or_begin_range(d, s)
                model.complete_range(d, s)
    if room_all:
        model.set_label_all(room_all)
    for d in grid.weekdays():
        # 曜日ごとの教室は全体の教室より優先
        if rooms[d]:
            model.set_label_all(rooms[d], day=d)

    blocks = merge(model.snapshot(), grid)
    if not blocks:
        st.info("セルが選択されていません。")
        return

    if catedras > 0:
        for w in check_planned_hours(blocks, int(catedras), grid.slot_minutes):
            st.warning(w.message)

    planned_df = build_planned_table(blocks, cfg)
    st.dataframe(build_block_table(blocks, cfg), use_container_width=True)
    st.download_button(
        label="計画時限xlsxをダウンロード",
        data=export_result_bytes({cfg.xlsx.planned_sheet: planned_df}),
        file_name="planned.xlsx",
        mime=XLSX_MIME,
    )


def _layout_tab(cfg: AppConfig, grid: TimeGrid) -> None:
    st.subheader("週の時間割（重なりを積み重ねて表示）")
    files = [p.strip() for p in st.text_area("計画時限 xlsx 複数可（改行区切り）").splitlines() if p.strip()]
    if st.button("配置を計算"):
        if not files:
            st.error("計画時限 xlsx のパスが未入力です。")
            st.stop()
        # 曜日の切り替えで再実行されても結果を残す
        st.session_state["layout_files"] = files
    files = st.session_state.get("layout_files")
    if not files:
        return

    reader = XlsxReader(cfg=cfg, grid=grid)
    try:
        blocks = reader.read_many(files)
        clusters = find_clusters(blocks, grid)
        placements = layout(blocks, grid)
    except ValidationError as e:
        st.error(e.message)
        st.stop()

    for w in collect_overlap_warnings(clusters, cfg.labels.day_long):
        st.warning(w.message)

    layout_df = build_layout_table(placements, cfg)
    week_df = build_week_matrix(blocks, cfg, grid)
    t1, t2, t3 = st.tabs(["週マトリクス", "配置一覧", "曜日別"])
    with t1:
        st.dataframe(week_df, use_container_width=True)
    with t2:
        st.dataframe(layout_df, use_container_width=True)
    with t3:
        day = st.selectbox("曜日", list(grid.weekdays()), format_func=lambda d: cfg.labels.day_long[d])
        st.dataframe(build_block_table(blocks_for_day(blocks, day), cfg), use_container_width=True)

    st.download_button(
        label="配置xlsxをダウンロード",
        data=export_result_bytes({cfg.xlsx.layout_sheet: layout_df, cfg.xlsx.week_sheet: week_df},
                                 index_sheets=(cfg.xlsx.week_sheet,)),
        file_name="layout.xlsx",
        mime=XLSX_MIME,
    )


def main():
    cfg = DEFAULT_CONFIG
    grid = TimeGrid.from_config(cfg)

    st.title("週時間割エディタ")
    st.caption(f"{grid.slots()[0]} 開始・{grid.slot_minutes}分刻み・{grid.slot_count}コマ（月〜金）")

    plan_tab, layout_tab = st.tabs(["計画", "週表示"])
    with plan_tab:
        _plan_tab(cfg, grid)
    with layout_tab:
        _layout_tab(cfg, grid)


if __name__ == "__main__":
    main()
