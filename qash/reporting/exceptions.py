class ReportingError(Exception):
    """Base error for report generation and delivery."""


class EmailDeliveryError(ReportingError):
    """SMTP server rejected or could not deliver the report."""
