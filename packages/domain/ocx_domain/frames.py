"""DataFrame views of the capitalization model.

The stakeholder sheet is made of formulas; these frames hold the values
those formulas should evaluate to. They are handy for analysis outside of
Excel and for checking a rendered workbook against the model.

Output DataFrames:
- holdings_frame: one row per stakeholder, one column per sheet column
- totals_frame: one row per sheet column with outstanding totals and
  options remaining for issuance
"""

from collections import Counter
from decimal import Decimal
from typing import Any, List, Tuple

import pandas as pd

from .calculations import as_converted_shares
from .model import Model

KEY_COLUMNS = ["stakeholder_id", "stakeholder_name", "stakeholder_group"]
TOTAL_COLUMNS = ["total_outstanding", "total_as_converted", "fully_diluted"]


def outstanding_column(stock_class) -> str:
    return f"{stock_class.display_name} (outstanding)"


def as_converted_column(stock_class) -> str:
    return f"{stock_class.display_name} (as converted)"


def _converts(model: Model, stock_class) -> bool:
    return stock_class.is_preferred and model.get_stock_class_conversion_ratio(stock_class) != 1.0


def holdings_frame(model: Model) -> pd.DataFrame:
    """Compute the stakeholder-by-column holdings grid.

    Columns:
        * stakeholder_id, stakeholder_name, stakeholder_group
        * "<class> (outstanding)" for every stock class
        * "<class> (as converted)" for converting preferred classes
        * "<plan name>" for every stock plan
        * total_outstanding, total_as_converted, fully_diluted

    A label shared by two columns (two plans with one name, say) gets the id
    of its class or plan appended, e.g. ``"Plan (plan_1)"``.

    Share counts are floats, matching what the workbook stores.
    """
    share_columns = _share_columns(model)
    rows = []

    for stakeholder in model.stakeholders:
        row = {
            "stakeholder_id": stakeholder.id,
            "stakeholder_name": stakeholder.display_name,
            "stakeholder_group": stakeholder.group,
        }
        total_outstanding = Decimal("0")
        total_as_converted = Decimal("0")
        fully_diluted = Decimal("0")

        for label, kind, source in share_columns:
            if kind == "plan":
                granted = model.get_stakeholder_stock_plan_holdings(stakeholder, source)
                row[label] = float(granted)
                fully_diluted += granted
                continue

            outstanding = model.get_stakeholder_stock_holdings(stakeholder, source)
            if kind == "outstanding":
                row[label] = float(outstanding)
                total_outstanding += outstanding
                if not _converts(model, source):
                    total_as_converted += outstanding
                    fully_diluted += outstanding
            else:
                ratio = model.get_stock_class_conversion_ratio(source)
                converted = as_converted_shares(outstanding, ratio, source.rounding_type)
                row[label] = float(converted)
                total_as_converted += converted
                fully_diluted += converted

        row["total_outstanding"] = float(total_outstanding)
        row["total_as_converted"] = float(total_as_converted)
        row["fully_diluted"] = float(fully_diluted)
        rows.append(row)

    columns = KEY_COLUMNS + [label for label, _, _ in share_columns] + TOTAL_COLUMNS
    return pd.DataFrame(rows, columns=columns)


def totals_frame(model: Model) -> pd.DataFrame:
    """Compute column totals, including options remaining for issuance.

    Returns:
        DataFrame indexed by sheet column with ``granted``,
        ``options_remaining`` and ``total`` columns. Only plan columns and
        fully_diluted have options remaining.
    """
    holdings = holdings_frame(model)
    remaining_by_column = {
        label: float(model.get_options_remaining_for_issuance(source))
        for label, kind, source in _share_columns(model)
        if kind == "plan"
    }

    records = []
    for column in list(holdings.columns)[len(KEY_COLUMNS):]:
        granted = float(holdings[column].sum()) if not holdings.empty else 0.0
        if column == "fully_diluted":
            remaining = sum(remaining_by_column.values())
        else:
            remaining = remaining_by_column.get(column, 0.0)
        records.append({
            "column": column,
            "granted": granted,
            "options_remaining": remaining,
            "total": granted + remaining,
        })

    return pd.DataFrame(records).set_index("column")


def _share_columns(model: Model) -> List[Tuple[str, str, Any]]:
    """(label, kind, class or plan) for every share column, labels unique."""
    columns = []
    for stock_class in model.stock_classes:
        columns.append((outstanding_column(stock_class), "outstanding", stock_class))
        if _converts(model, stock_class):
            columns.append((as_converted_column(stock_class), "as_converted", stock_class))
    for stock_plan in model.stock_plans:
        columns.append((stock_plan.plan_name, "plan", stock_plan))

    counts = Counter(label for label, _, _ in columns)
    taken = set(KEY_COLUMNS + TOTAL_COLUMNS)
    unique = []
    for label, kind, source in columns:
        if counts[label] > 1 or label in taken:
            label = f"{label} ({source.id})"
        candidate, n = label, 2
        # Duplicate ids can still collide
        while candidate in taken:
            candidate = f"{label} #{n}"
            n += 1
        taken.add(candidate)
        unique.append((candidate, kind, source))
    return unique
