from __future__ import annotations

import io

import pandas as pd
import pytest

from src.cardhub.cardhub.core.exceptions import ValidationError
from src.cardhub.cardhub.employees.excel import rows_to_workbook, workbook_to_rows
from tests.employees.test_employee_service import _service


def _sheet(rows, sheet_name="Employees") -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()


def test_exported_workbook_reads_back_as_rows():
    svc, _ = _service()
    svc.create(company_id=1, payload={"name": "Sara", "jobTitle": "Sales", "phone": "0500", "uniqueUrl": "sara"})
    svc.create(company_id=2, payload={"name": "Other company"})

    rows = workbook_to_rows(rows_to_workbook(svc.export_rows(1)))

    assert len(rows) == 1
    assert rows[0]["name"] == "Sara"
    assert rows[0]["phone"] == "0500"
    assert rows[0]["uniqueUrl"] == "sara"
    assert rows[0]["email"] is None
    assert "id" not in rows[0]


def test_workbook_without_employee_sheet_is_rejected():
    with pytest.raises(ValidationError):
        workbook_to_rows(_sheet([{"name": "Sara"}], sheet_name="Sheet1"))


def test_non_excel_upload_is_rejected():
    with pytest.raises(ValidationError):
        workbook_to_rows(b"name,email\nSara,sara@acme.test\n")


def test_import_stops_at_plan_limit():
    svc, repo = _service(allowed=2)
    rows = [{"name": "A"}, {"name": "B"}, {"name": "C"}, {"name": "D"}]

    result = svc.import_rows(1, rows)

    assert len(result.imported) == 2
    assert result.limit_reached is True
    assert result.skipped == ["Row 4: Your plan allows 2 employees", "Row 5: plan limit reached"]
    assert repo.count(1) == 2


def test_import_skips_rows_without_name():
    svc, repo = _service()
    rows = workbook_to_rows(_sheet([{"name": "Lina", "jobTitle": "CTO"}, {"name": None, "jobTitle": "Ghost"}]))

    result = svc.import_rows(1, rows)

    assert len(result.imported) == 1
    assert result.skipped[0].startswith("Row 3:")
    assert result.to_dict()["summary"] == {"totalImported": 1, "totalSkipped": 1, "limitReached": False}
    assert [e.name for e in repo.rows.values()] == ["Lina"]
