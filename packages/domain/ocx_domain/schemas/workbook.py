"""Workbook configuration - top-level entry point for Excel generation.

The WorkbookCFG is the root configuration object passed to the Excel writer.
It says which sheets to render and how to format them; the capitalization
data itself comes from the model.
"""

from pydantic import Field, field_validator

from .base import DomainModel


# =============================================================================
# Stakeholder Sheet Configuration
# =============================================================================

class StakeholderSheetCFG(DomainModel):
    """Formatting options for the capitalization-by-stakeholder sheet.

    Example:
        # Narrow sheet without the group column
        StakeholderSheetCFG(show_stakeholder_group=False)

        # Percentages with one decimal place
        StakeholderSheetCFG(percent_number_format="0.0%")
    """

    title: str = Field(
        default="Stakeholders",
        description="Worksheet title (Excel limits titles to 31 characters)"
    )

    header_row_height: float = Field(
        default=30,
        gt=0,
        description="Height of the table header row (headings wrap onto two lines)"
    )

    share_number_format: str = Field(
        default="#,##0",
        description="Number format for share counts"
    )

    percent_number_format: str = Field(
        default="0.00%",
        description="Number format for ownership percentages"
    )

    date_format: str = Field(
        default="%B %d, %Y",
        description="strftime format for the 'As of' banner line"
    )

    show_stakeholder_group: bool = Field(
        default=True,
        description="Render the Stakeholder Group column next to stakeholder names"
    )

    freeze_header: bool = Field(
        default=True,
        description="Freeze the banner, table header and stakeholder name column"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Excel sheet titles are 1-31 characters without []:*?/\\."""
        if not v or len(v) > 31:
            raise ValueError(f"Sheet title must be 1-31 characters, got: {v!r}")
        invalid = set(v) & set("[]:*?/\\")
        if invalid:
            raise ValueError(f"Sheet title contains invalid characters {sorted(invalid)}: {v!r}")
        return v


# =============================================================================
# Workbook Configuration
# =============================================================================

class WorkbookCFG(DomainModel):
    """Top-level configuration for Excel workbook generation.

    Typical workflow:
        model = Model(as_of_date=date(2024, 6, 30)).consume_all(ocf_objects)
        WorkbookWriter(WorkbookCFG()).render(model, "captable.xlsx")
    """

    stakeholder_sheet: StakeholderSheetCFG = Field(
        default_factory=StakeholderSheetCFG,
        description="Capitalization by stakeholder sheet"
    )

    show_gridlines: bool = Field(
        default=False,
        description="Show Excel gridlines on generated sheets"
    )
