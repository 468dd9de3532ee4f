"""Workbook writer: capitalization model in, .xlsx out."""

from __future__ import annotations

import logging
from typing import Optional

from openpyxl import Workbook

from ocx_domain.schemas import WorkbookCFG

from .interfaces import CapitalizationModel
from .stakeholder_sheet import StakeholderSheet

logger = logging.getLogger(__name__)


class WorkbookWriter:
    """Render a capitalization model as a workbook with one stakeholder sheet."""

    def __init__(self, config: Optional[WorkbookCFG] = None):
        self.config = config or WorkbookCFG()

    def render(self, model: CapitalizationModel, output_path: str) -> str:
        wb = self.build_workbook(model)
        wb.save(output_path)
        logger.info(f"Saved cap table workbook for {model.issuer_name!r} to {output_path}")
        return output_path

    def build_workbook(self, model: CapitalizationModel) -> Workbook:
        wb = Workbook()
        wb.remove(wb.active)

        sheet_cfg = self.config.stakeholder_sheet
        worksheet = wb.create_sheet(title=sheet_cfg.title)
        worksheet.sheet_view.showGridLines = self.config.show_gridlines
        StakeholderSheet(worksheet, model, sheet_cfg)

        return wb
