# timetable_core/io_layer/paths.py
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class InputPaths:
    """
    複数科目=複数ファイルを読み込んで1週間にまとめる
    planned_files: 計画時限 xlsx（科目ごと、planned シート）
    """
    planned_files: List[str]

    # シート名（運用で変えるならここだけ）
    planned_sheet_name: str = "planned"
