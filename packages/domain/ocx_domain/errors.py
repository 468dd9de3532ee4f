"""Exceptions raised by the OCX domain layer.

Structurally invalid OCF records surface as ``pydantic.ValidationError``;
the classes here cover failures the schemas cannot express.
"""


class OcxError(Exception):
    """Base class for OCX errors."""
    pass


class MalformedRatioError(OcxError, ArithmeticError):
    """Raised when a conversion ratio cannot be turned into a number.

    Zero denominators and non-numeric ratio parts end up here. A ratio that is
    simply absent is not an error; the stock class converts 1:1.
    """
    pass
