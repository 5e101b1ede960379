"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TEMPLATE = "classic"
UNKNOWN = "unknown"
DEFAULT_DEVICE_TYPE = "desktop"

DEFAULT_EMPLOYEE_PAGE_SIZE = 10
DEFAULT_TOKEN_TTL_HOURS = 24
DEFAULT_CURRENCY = "SAR"

CARD_NOT_FOUND_MESSAGE = "Employee not found"
CARD_LOAD_FAILED_MESSAGE = "Failed to load card"
USAGE_LOAD_FAILED_MESSAGE = "Failed to load subscription or employee data"
LOGIN_REQUIRED_MESSAGE = "You must log in first"
EXPORT_FAILED_MESSAGE = "Failed to export employees"

EMPLOYEE_SHEET = "Employees"
EMPLOYEE_EXPORT_FILENAME = "employees.xlsx"
XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
