"""Cell styles shared by the stakeholder sheet writers.

Color conventions follow financial-model practice:
- Blue font: values looked up from the cap table (inputs)
- Black font: formulas
- White on dark blue: table headers
"""

from typing import Optional

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from ocx_domain.schemas import StakeholderSheetCFG

from .line_printer import CellStyle


class SheetStyles:
    """Named cell styles, parameterized by the sheet configuration."""

    def __init__(self, config: Optional[StakeholderSheetCFG] = None):
        config = config or StakeholderSheetCFG()

        blue_font = Font(color="0000FF")
        black_font = Font(color="000000")
        bold_font = Font(bold=True)
        header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        total_border = Border(top=Side(style="thin"), bottom=Side(style="double"))
        wrap_center = Alignment(horizontal="center", vertical="center", wrap_text=True)

        self.title: CellStyle = {"font": Font(size=14, bold=True)}
        self.subtitle: CellStyle = {"font": Font(italic=True, size=11)}
        self.banner: CellStyle = {
            "font": Font(bold=True, italic=True),
            "fill": PatternFill(start_color="E7E6E6", end_color="E7E6E6", fill_type="solid"),
            "alignment": Alignment(horizontal="center"),
        }

        self.header: CellStyle = {
            "font": Font(bold=True, color="FFFFFF"),
            "fill": header_fill,
            "alignment": wrap_center,
            "border": Border(right=Side(style="thin", color="FFFFFF")),
        }

        self.label: CellStyle = {"font": black_font}
        self.section_label: CellStyle = {"font": Font(italic=True)}
        self.total_label: CellStyle = {"font": bold_font, "border": total_border}

        self.shares: CellStyle = {"font": blue_font, "number_format": config.share_number_format}
        self.shares_formula: CellStyle = {"font": black_font, "number_format": config.share_number_format}
        self.percent: CellStyle = {"font": black_font, "number_format": config.percent_number_format}

        self.total_shares: CellStyle = {
            "font": bold_font,
            "border": total_border,
            "number_format": config.share_number_format,
        }
        self.total_percent: CellStyle = {
            "font": bold_font,
            "border": total_border,
            "number_format": config.percent_number_format,
        }
