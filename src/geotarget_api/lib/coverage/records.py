"""Address records submitted for coverage classification and their results."""

import enum
from dataclasses import dataclass, field
from typing import Any


class Classification(enum.StrEnum):
    """Coverage disposition of an address. Exactly one applies to every result."""

    IN_COVERAGE = "in_coverage"
    OUT_OF_COVERAGE = "out_of_coverage"
    UNABLE_TO_DETERMINE = "unable_to_determine"
    INVALID_RECORD = "invalid_record"


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


@dataclass
class AddressRecord:
    """Caller-supplied address components; any subset may be blank."""

    zip_code: str | None = None
    city: str | None = None
    county: str | None = None
    original_data: Any = None

    @property
    def is_complete(self) -> bool:
        """At least one of zip code, city, or county is non-blank."""
        return _present(self.zip_code) or _present(self.city) or _present(self.county)


@dataclass
class ValidationResult:
    """Classification of one address against a whitelist."""

    address_record: Any
    classification: Classification
    state: str | None = None
    in_coverage: bool = False
    error: str | None = None

    @property
    def is_in_coverage(self) -> bool:
        return self.classification is Classification.IN_COVERAGE

    @property
    def is_out_of_coverage(self) -> bool:
        return self.classification is Classification.OUT_OF_COVERAGE

    @property
    def is_unable_to_determine(self) -> bool:
        return self.classification is Classification.UNABLE_TO_DETERMINE

    @property
    def is_invalid_record(self) -> bool:
        return self.classification is Classification.INVALID_RECORD


@dataclass
class ClassificationSummary:
    """Per-classification counts for a batch."""

    counts: dict[Classification, int] = field(default_factory=lambda: dict.fromkeys(Classification, 0))

    @classmethod
    def from_results(cls, results: list[ValidationResult]) -> "ClassificationSummary":
        summary = cls()
        for result in results:
            summary.counts[result.classification] += 1
        return summary

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict[str, int]:
        return {str(c): n for c, n in self.counts.items()}
