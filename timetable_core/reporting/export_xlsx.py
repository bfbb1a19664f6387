# timetable_core/reporting/export_xlsx.py
from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Dict, Iterable

import pandas as pd


def _write_sheets(target, sheets: Dict[str, pd.DataFrame], index_sheets: Iterable[str]) -> None:
    index_sheets = set(index_sheets)
    with pd.ExcelWriter(target, engine="openpyxl") as w:
        for name, df in sheets.items():
            # 週マトリクスは時刻の行ラベルを残す
            df.to_excel(w, sheet_name=name, index=(name in index_sheets))


def export_result_xlsx(out_path: str, sheets: Dict[str, pd.DataFrame], index_sheets: Iterable[str] = ("week",)) -> str:
    # 重要："planned" シートは次回の入力としてそのまま読み込める
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    _write_sheets(out_path, sheets, index_sheets)
    return out_path


def export_result_bytes(sheets: Dict[str, pd.DataFrame], index_sheets: Iterable[str] = ("week",)) -> bytes:
    """Streamlitダウンロード用にxlsxをメモリに書き出す"""
    buf = BytesIO()
    _write_sheets(buf, sheets, index_sheets)
    return buf.getvalue()
