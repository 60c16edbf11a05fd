"""Unit tests for whitelist-scoped typeahead and batch search."""

from geotarget_api.services.address_index import AddressIndex
from geotarget_api.services.location_search_service import LocationSearchEngine

GA_MN = frozenset({"GA", "MN"})


class TestSearch:
    """Tests for LocationSearchEngine.search()."""

    async def test_whitelist_filters_duluth(self, address_index: AddressIndex) -> None:
        engine = LocationSearchEngine(address_index)

        results = await engine.search("Duluth", frozenset({"GA"}))

        assert {c.state for c in results} == {"GA"}
        assert [c.zip_code for c in results] == ["30096", "30097"]

    async def test_both_states_ordered_by_state(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("duluth", GA_MN)
        assert [(c.state, c.zip_code) for c in results] == [("GA", "30096"), ("GA", "30097"), ("MN", "55802")]

    async def test_empty_whitelist(self, address_index: AddressIndex) -> None:
        assert await LocationSearchEngine(address_index).search("Duluth", frozenset()) == []

    async def test_short_query(self, address_index: AddressIndex) -> None:
        assert await LocationSearchEngine(address_index).search(" D ", GA_MN) == []

    async def test_zip_stage(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("30097", GA_MN)
        assert [c.display_name for c in results] == ["Duluth, GA 30097"]

    async def test_zip_conjoined_with_city(self, address_index: AddressIndex) -> None:
        engine = LocationSearchEngine(address_index)
        assert [c.zip_code for c in await engine.search("Duluth, 30097", GA_MN)] == ["30097"]

    async def test_zip_miss_falls_back_to_city(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("Atlanta 30399", GA_MN)
        assert [c.city for c in results] == ["Atlanta"]

    async def test_city_with_county_hint(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("Duluth, St. Louis County", GA_MN)
        assert [c.state for c in results] == ["MN"]

    async def test_county_stage(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("Fulton County", frozenset({"GA"}))
        assert [c.city for c in results] == ["Alpharetta", "Atlanta"]

    async def test_bare_name_tried_as_county(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("Gwinnett", frozenset({"GA"}))
        assert {c.city for c in results} == {"Duluth"}

    async def test_no_county_stage_when_city_and_county_given(self, address_index: AddressIndex) -> None:
        assert await LocationSearchEngine(address_index).search("Nowhere, Fulton County", frozenset({"GA"})) == []

    async def test_limit(self, address_index: AddressIndex) -> None:
        assert len(await LocationSearchEngine(address_index).search("Duluth", GA_MN, limit=2)) == 2

    async def test_candidates_carry_geo_targets(self, address_index: AddressIndex) -> None:
        results = await LocationSearchEngine(address_index).search("Boston", frozenset({"MA"}))
        assert results[0].geo_target == "geoTargetConstants/1018127"

    async def test_no_results_is_empty(self, address_index: AddressIndex) -> None:
        assert await LocationSearchEngine(address_index).search("Springfield", GA_MN) == []


class TestBatchSearch:
    """Tests for LocationSearchEngine.batch_search()."""

    async def test_terms_searched_independently(self, address_index: AddressIndex) -> None:
        result = await LocationSearchEngine(address_index).batch_search("Duluth, 90210, Atlanta", GA_MN)

        assert [(c.city, c.state) for c in result.results] == [
            ("Duluth", "GA"),
            ("Duluth", "GA"),
            ("Duluth", "MN"),
            ("Atlanta", "GA"),
        ]
        assert result.unmatched == ["90210"]
        assert result.count == 4
        assert result.unmatched_count == 1

    async def test_overlapping_terms_deduplicated(self, address_index: AddressIndex) -> None:
        result = await LocationSearchEngine(address_index).batch_search(["Duluth", "30096"], frozenset({"GA"}))
        assert [c.zip_code for c in result.results] == ["30096", "30097"]
        assert result.unmatched == []

    async def test_county_term(self, address_index: AddressIndex) -> None:
        result = await LocationSearchEngine(address_index).batch_search("Fulton County", frozenset({"GA"}))
        assert [c.city for c in result.results] == ["Alpharetta", "Atlanta"]

    async def test_state_only_term_is_unmatched(self, address_index: AddressIndex) -> None:
        result = await LocationSearchEngine(address_index).batch_search("GA", frozenset({"GA"}))
        assert result.results == []
        assert result.unmatched == ["GA"]

    async def test_empty_whitelist(self, address_index: AddressIndex) -> None:
        result = await LocationSearchEngine(address_index).batch_search("Duluth", frozenset())
        assert result.count == 0
