# timetable_core/config.py
from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class GridConfig:
    """1日の時限グリッド（40分刻み）"""
    day_start: str = "07:45"   # 1限の開始
    day_end: str = "16:30"     # この時刻を超える開始スロットは作らない
    slot_minutes: int = 40     # 1コマ（horas cátedra 1時間）
    weekday_count: int = 5     # 月〜金


@dataclass(frozen=True)
class LabelConfig:
    """曜日ラベル（表示専用。0=月曜）"""
    day_long: Dict[int, str] = field(default_factory=lambda: {
        0: "Lunes", 1: "Martes", 2: "Miércoles", 3: "Jueves",
        4: "Viernes", 5: "Sábado", 6: "Domingo",
    })
    day_short: Dict[int, str] = field(default_factory=lambda: {
        0: "Lun", 1: "Mar", 2: "Mié", 3: "Jue", 4: "Vie", 5: "Sáb", 6: "Dom",
    })


@dataclass(frozen=True)
class XlsxConfig:
    # シート名（運用で変えるならここだけ）
    planned_sheet: str = "planned"
    layout_sheet: str = "layout"
    week_sheet: str = "week"

    # 保存形式の列名（外部ストレージの PlannedSchedule と同じ）
    col_day: str = "dayOfWeek"
    col_start: str = "startTime"
    col_end: str = "endTime"
    col_classroom: str = "classroom"
    col_subject: str = "subject"  # 任意列（複数科目を集めて描画する時の出所）


@dataclass(frozen=True)
class AppConfig:
    grid: GridConfig = GridConfig()
    labels: LabelConfig = LabelConfig()
    xlsx: XlsxConfig = XlsxConfig()


DEFAULT_CONFIG = AppConfig()
