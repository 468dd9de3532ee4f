"""Exceptions raised while laying out worksheets."""

from ocx_domain.errors import OcxError


class RangeStateError(OcxError):
    """Raised when a range printer is used out of order.

    Examples: writing to a completed range, opening a second nested range
    before the first one completed, or writing to a parent while a child
    is open.
    """
    pass
