"""
Error taxonomy for the analytics engine and its record source.

Every failure is terminal for the single report being computed; none of
these carry partial results.
"""


class AnalyticsError(Exception):
    """Base class for failures raised while building a report."""


class UnresolvedReference(AnalyticsError):
    """An expense points at a category the record source does not know."""

    def __init__(self, expense_id: str, category_id: str) -> None:
        self.expense_id = expense_id
        self.category_id = category_id
        super().__init__(f"Expense {expense_id} references unknown category {category_id}")


class InvalidParameter(AnalyticsError):
    """A window parameter (days, months, year, month) is out of domain."""

    def __init__(self, name: str, value, reason: str = "must be a positive integer") -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid {name}={value!r}: {reason}")


class InvalidReportType(AnalyticsError):
    def __init__(self, report_type) -> None:
        self.report_type = report_type
        super().__init__(f"Invalid analytics type: {report_type!r}")


class UpstreamQueryFailure(AnalyticsError):
    """The record source failed to return data."""
