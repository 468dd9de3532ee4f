"""OCX Domain - Capitalization model built from Open Cap Table (OCF) data.

This package provides the foundational layer for OCF reporting:
- Typed OCF records decoded once at the ingestion boundary
- Exact ratio and share-count arithmetic
- A capitalization model answering holdings queries by transaction replay
- DataFrame views of the holdings grid

The domain layer is designed to be:
- Framework-agnostic (no spreadsheet dependencies)
- Testable (pure Python with Pydantic validation)
- Tolerant of unknown OCF object kinds
"""

from .schemas import *  # noqa: F403, F401
from .errors import OcxError, MalformedRatioError  # noqa: F401
from .model import Model  # noqa: F401

__version__ = "0.1.0"
