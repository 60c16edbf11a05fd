"""Address coverage classification against a state whitelist."""

from collections.abc import Iterable

from loguru import logger

from geotarget_api.lib.coverage import AddressRecord, Classification, ValidationResult
from geotarget_api.lib.jurisdictions import Whitelist
from geotarget_api.services.address_index import AddressIndex

BLOCKING_MESSAGE = "Please select at least one state to validate addresses"


class AddressValidator:
    """Classify address records as in or out of a whitelist's coverage.

    Lookup failures never escape: they become ``unable_to_determine`` results
    so one bad record cannot stop a batch.

    Args:
        whitelist: Approved state codes.
        index: Address index used to find each record's state.
    """

    def __init__(self, whitelist: Whitelist, index: AddressIndex) -> None:
        self._whitelist = whitelist
        self._index = index

    @property
    def whitelist(self) -> Whitelist:
        return self._whitelist

    def states_selected(self) -> bool:
        return bool(self._whitelist)

    def blocking_message(self) -> str:
        """Message shown when no state is selected."""
        return BLOCKING_MESSAGE

    def blocking_reason(self) -> str | None:
        """The blocking message when validation must be refused, otherwise None."""
        if self.states_selected():
            return None
        return self.blocking_message()

    async def validate_one(self, record: object) -> ValidationResult:
        """Classify a single record.

        Args:
            record: Expected to be an AddressRecord; anything else is an invalid record.

        Returns:
            ValidationResult with exactly one classification.
        """
        if not isinstance(record, AddressRecord):
            return ValidationResult(
                address_record=record,
                classification=Classification.INVALID_RECORD,
                error="Invalid address record type",
            )

        if not record.is_complete:
            return ValidationResult(
                address_record=record,
                classification=Classification.INVALID_RECORD,
                error="Address record missing required components",
            )

        try:
            state = await self._index.find_state(zip_code=record.zip_code, city=record.city, county=record.county)
        except Exception as e:
            logger.error(f"State lookup failed for {record.zip_code!r}/{record.city!r}/{record.county!r}: {e}")
            return ValidationResult(
                address_record=record,
                classification=Classification.UNABLE_TO_DETERMINE,
                error=f"Database query failed: {e}",
            )

        if state is None:
            return ValidationResult(
                address_record=record,
                classification=Classification.UNABLE_TO_DETERMINE,
                error="State could not be determined from geographic database",
            )

        if state in self._whitelist:
            return ValidationResult(
                address_record=record,
                classification=Classification.IN_COVERAGE,
                state=state,
                in_coverage=True,
            )
        return ValidationResult(
            address_record=record,
            classification=Classification.OUT_OF_COVERAGE,
            state=state,
        )

    async def validate_batch(self, records: Iterable[object]) -> list[ValidationResult]:
        """Classify every record in order; the result list matches the input one-to-one."""
        results = [await self.validate_one(record) for record in records]
        logger.info(f"Validated {len(results)} address records against {sorted(self._whitelist)}")
        return results
