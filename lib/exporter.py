# =============================================================================
# lib/exporter.py - Canonical Row Export
# =============================================================================
# Renders canonical rows as CSV or JSON text.
#
# Excel output has no implementation: asking for it raises
# UnsupportedExportFormatError instead of silently returning another format.
# =============================================================================

import io
import json
import logging
from datetime import date, datetime
from typing import Any, Literal

import numpy as np
import pandas as pd

from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

ExportFormat = Literal["csv", "json", "excel"]

SUPPORTED_FORMATS = ("csv", "json")


class UnsupportedExportFormatError(ApplicationError):
    """Raised when an export format has no implementation."""

    def __init__(self, export_format: str):
        super().__init__(
            message=f"Export format not supported: {export_format}",
            code="EXPORT_FORMAT_UNSUPPORTED",
            suggestion=f"Use one of: {', '.join(SUPPORTED_FORMATS)}",
            details={"format": export_format, "supported": list(SUPPORTED_FORMATS)},
        )


def _serialize_value(value: Any) -> Any:
    """Convert dates and numpy scalars to plain Python / ISO values."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return None if np.isnan(value) else float(value)
    return value


def _json_default(value: Any) -> Any:
    serialized = _serialize_value(value)
    if serialized is value:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return serialized


def rows_to_csv(data: list[dict[str, Any]]) -> str:
    """
    Render rows as CSV text.

    The header comes from the first row's keys. Values containing a comma,
    a double quote or a line break are wrapped in quotes with inner quotes
    doubled. Lines end with "\\n" and there is no trailing newline.
    """
    if not data:
        return ""

    headers = list(data[0].keys())
    records = [
        {header: _serialize_value(row.get(header)) for header in headers}
        for row in data
    ]

    # object dtype keeps ints as ints (no float upcast around missing values)
    df = pd.DataFrame(records, columns=headers, dtype=object)

    csv_buffer = io.StringIO()
    df.to_csv(csv_buffer, index=False, lineterminator="\n")
    text = csv_buffer.getvalue()
    return text[:-1] if text.endswith("\n") else text


def rows_to_json(data: list[dict[str, Any]]) -> str:
    """Render rows as pretty-printed JSON (2-space indent)."""
    return json.dumps(data, indent=2, ensure_ascii=False, default=_json_default)


def export_data(data: list[dict[str, Any]], export_format: ExportFormat | str) -> str:
    """
    Export canonical rows in the requested format.

    Args:
        data: Canonical rows
        export_format: "csv" or "json"

    Returns:
        The rendered text

    Raises:
        UnsupportedExportFormatError: For "excel" or any unknown format
    """
    if export_format == "json":
        return rows_to_json(data)
    if export_format == "csv":
        return rows_to_csv(data)

    logger.warning(f"Rejected export request for format: {export_format}")
    raise UnsupportedExportFormatError(str(export_format))
