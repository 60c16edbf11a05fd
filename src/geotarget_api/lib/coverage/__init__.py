"""Coverage library — address records, classifications, and validation results."""

from geotarget_api.lib.coverage.records import AddressRecord, Classification, ClassificationSummary, ValidationResult

__all__ = [
    "AddressRecord",
    "Classification",
    "ClassificationSummary",
    "ValidationResult",
]
