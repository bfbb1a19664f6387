# timetable_core/io_layer/xlsx_reader.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from openpyxl import load_workbook

from timetable_core.config import AppConfig
from timetable_core.domain.models import ScheduleBlock
from timetable_core.domain.timegrid import TimeGrid
from timetable_core.io_layer.records import block_from_record
from timetable_core.validation.validator import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XlsxReader:
    cfg: AppConfig
    grid: TimeGrid

    def _header_index(self, header: tuple, path: str) -> Dict[str, int]:
        names = {str(h).strip(): i for i, h in enumerate(header) if h is not None}
        x = self.cfg.xlsx
        idx: Dict[str, int] = {}
        for key, col in (("dayOfWeek", x.col_day), ("startTime", x.col_start), ("endTime", x.col_end)):
            if col not in names:
                raise ValidationError(f"{path} に列 '{col}' がありません。")
            idx[key] = names[col]
        if x.col_classroom in names:
            idx["classroom"] = names[x.col_classroom]
        if x.col_subject in names:
            idx["subject"] = names[x.col_subject]
        return idx

    def read_planned_blocks(self, path: str, sheet: Optional[str] = None, owner: str = "") -> List[ScheduleBlock]:
        """
        1ファイル=1科目の計画時限。
        列: dayOfWeek / startTime / endTime / classroom（任意）/ subject（任意）
        subject 列がなければファイル名（拡張子なし）を出所にする。
        """
        sheet = sheet or self.cfg.xlsx.planned_sheet
        wb = load_workbook(path, data_only=True, read_only=True)
        try:
            if sheet not in wb.sheetnames:
                raise ValidationError(f"{path} に '{sheet}' シートが見つかりません。")
            rows = wb[sheet].iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                return []
            idx = self._header_index(header, path)
            default_owner = owner or Path(path).stem

            out: List[ScheduleBlock] = []
            for r in rows:
                if not r or all(v is None for v in r):
                    continue
                rec = {k: r[i] if i < len(r) else None for k, i in idx.items()}
                who = rec.pop("subject", None)
                out.append(block_from_record(rec, self.grid, owner=str(who).strip() if who else default_owner))
        finally:
            wb.close()

        logger.info("%s: %d blocks loaded", path, len(out))
        return out

    def read_many(self, paths: List[str], sheet: Optional[str] = None) -> List[ScheduleBlock]:
        """複数科目のブロックをファイル順に連結する（重なり積み重ねの順序になる）"""
        blocks: List[ScheduleBlock] = []
        for p in paths:
            blocks.extend(self.read_planned_blocks(p, sheet=sheet))
        return blocks
