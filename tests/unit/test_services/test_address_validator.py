"""Unit tests for address coverage classification."""

from unittest.mock import AsyncMock, MagicMock

from geotarget_api.lib.coverage import AddressRecord, Classification
from geotarget_api.services.address_index import AddressIndex
from geotarget_api.services.address_validator import BLOCKING_MESSAGE, AddressValidator


class TestStatesSelected:
    """Tests for the blocking check."""

    def test_empty_whitelist_blocks(self) -> None:
        validator = AddressValidator(frozenset(), MagicMock())
        assert not validator.states_selected()
        assert validator.blocking_reason() == BLOCKING_MESSAGE
        assert BLOCKING_MESSAGE == "Please select at least one state to validate addresses"

    def test_selected_whitelist_does_not_block(self) -> None:
        validator = AddressValidator(frozenset({"CA"}), MagicMock())
        assert validator.states_selected()
        assert validator.blocking_reason() is None
        assert validator.blocking_message() == BLOCKING_MESSAGE


class TestValidateOne:
    """Tests for AddressValidator.validate_one()."""

    async def test_in_coverage(self, address_index: AddressIndex) -> None:
        result = await AddressValidator(frozenset({"CA"}), address_index).validate_one(AddressRecord(zip_code="90210"))

        assert result.classification is Classification.IN_COVERAGE
        assert result.state == "CA"
        assert result.in_coverage is True
        assert result.error is None

    async def test_out_of_coverage(self, address_index: AddressIndex) -> None:
        result = await AddressValidator(frozenset({"NY"}), address_index).validate_one(AddressRecord(zip_code="90210"))

        assert result.classification is Classification.OUT_OF_COVERAGE
        assert result.state == "CA"
        assert result.in_coverage is False

    async def test_city_fallback(self, address_index: AddressIndex) -> None:
        record = AddressRecord(zip_code="99999", city="boston")
        result = await AddressValidator(frozenset({"MA"}), address_index).validate_one(record)
        assert result.is_in_coverage

    async def test_county_fallback(self, address_index: AddressIndex) -> None:
        validator = AddressValidator(frozenset({"MA"}), address_index)
        result = await validator.validate_one(AddressRecord(county="Middlesex"))
        assert result.state == "MA"

    async def test_unknown_address(self, address_index: AddressIndex) -> None:
        result = await AddressValidator(frozenset({"CA"}), address_index).validate_one(AddressRecord(city="Atlantis"))

        assert result.classification is Classification.UNABLE_TO_DETERMINE
        assert result.error == "State could not be determined from geographic database"
        assert result.state is None

    async def test_incomplete_record(self, address_index: AddressIndex) -> None:
        result = await AddressValidator(frozenset({"CA"}), address_index).validate_one(AddressRecord(city=" "))

        assert result.classification is Classification.INVALID_RECORD
        assert result.error == "Address record missing required components"

    async def test_wrong_type(self, address_index: AddressIndex) -> None:
        record = {"zip_code": "90210"}
        result = await AddressValidator(frozenset({"CA"}), address_index).validate_one(record)

        assert result.classification is Classification.INVALID_RECORD
        assert result.error == "Invalid address record type"
        assert result.address_record is record

    async def test_lookup_failure_is_contained(self) -> None:
        index = MagicMock()
        index.find_state = AsyncMock(side_effect=RuntimeError("connection reset"))

        result = await AddressValidator(frozenset({"CA"}), index).validate_one(AddressRecord(zip_code="90210"))

        assert result.classification is Classification.UNABLE_TO_DETERMINE
        assert result.error == "Database query failed: connection reset"


class TestValidateBatch:
    """Tests for AddressValidator.validate_batch()."""

    async def test_one_result_per_record_in_order(self, address_index: AddressIndex) -> None:
        records = [
            AddressRecord(zip_code="90210"),
            "not a record",
            AddressRecord(city="Boston"),
            AddressRecord(),
            AddressRecord(city="Atlantis"),
        ]

        results = await AddressValidator(frozenset({"CA"}), address_index).validate_batch(records)

        assert [r.address_record for r in results] == records
        assert [r.classification for r in results] == [
            Classification.IN_COVERAGE,
            Classification.INVALID_RECORD,
            Classification.OUT_OF_COVERAGE,
            Classification.INVALID_RECORD,
            Classification.UNABLE_TO_DETERMINE,
        ]

    async def test_failure_does_not_short_circuit(self) -> None:
        index = MagicMock()
        index.find_state = AsyncMock(side_effect=[RuntimeError("boom"), "CA"])

        results = await AddressValidator(frozenset({"CA"}), index).validate_batch(
            [AddressRecord(zip_code="1"), AddressRecord(zip_code="90210")]
        )

        assert [r.classification for r in results] == [
            Classification.UNABLE_TO_DETERMINE,
            Classification.IN_COVERAGE,
        ]

    async def test_empty_batch(self, address_index: AddressIndex) -> None:
        assert await AddressValidator(frozenset({"CA"}), address_index).validate_batch([]) == []
