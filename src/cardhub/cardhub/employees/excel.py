"""Employee workbook codec (sheet ``Employees``, one column per API field)."""

from __future__ import annotations

import io
import zipfile
from typing import Any, Iterable, Mapping

import pandas as pd

from ..core.constants import EMPLOYEE_SHEET
from ..core.exceptions import ValidationError
from .model import EDITABLE_FIELDS

EXPORT_COLUMNS = ["uniqueUrl", *EDITABLE_FIELDS]


def rows_to_workbook(rows: Iterable[Mapping[str, Any]]) -> bytes:
    df = pd.DataFrame(list(rows), columns=EXPORT_COLUMNS)

    # Workbook is built in memory, never written to disk
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=EMPLOYEE_SHEET)
    return output.getvalue()


def workbook_to_rows(content: bytes) -> list[dict]:
    """Read the ``Employees`` sheet; empty cells come back as None."""
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=EMPLOYEE_SHEET, dtype=str, engine="openpyxl")
    except (ValueError, KeyError, zipfile.BadZipFile) as e:
        raise ValidationError(f'Could not read sheet "{EMPLOYEE_SHEET}": {e}') from e

    df = df.astype(object).where(df.notna(), None)
    return df.to_dict(orient="records")
