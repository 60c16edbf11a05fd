"""Unit tests for free-text location query parsing."""

from geotarget_api.lib.search import ParsedQuery, parse_query, split_terms


class TestSplitTerms:
    """Tests for split_terms()."""

    def test_splits_and_trims(self) -> None:
        assert split_terms(" Duluth , 30301,, Fulton County ") == ["Duluth", "30301", "Fulton County"]

    def test_blank_is_empty(self) -> None:
        assert split_terms(" , ") == []


class TestParseQuery:
    """Tests for parse_query()."""

    def test_city_only(self) -> None:
        assert parse_query("Duluth") == ParsedQuery(city="Duluth")

    def test_zip_only(self) -> None:
        assert parse_query("30301") == ParsedQuery(zip_code="30301")

    def test_zip_embedded_in_term(self) -> None:
        parsed = parse_query("Duluth 30097")
        assert parsed.zip_code == "30097"
        assert parsed.city == "Duluth"

    def test_longer_digit_runs_are_not_zip_codes(self) -> None:
        assert parse_query("123456").zip_code is None

    def test_county_token_removed(self) -> None:
        assert parse_query("Fulton County") == ParsedQuery(county="Fulton")

    def test_county_token_case_insensitive(self) -> None:
        assert parse_query("gwinnett COUNTY").county == "gwinnett"

    def test_county_word_inside_name_is_not_a_hint(self) -> None:
        assert parse_query("Countyline").city == "Countyline"

    def test_state_code_ignored(self) -> None:
        assert parse_query("Duluth, GA") == ParsedQuery(city="Duluth")

    def test_zip_and_city(self) -> None:
        assert parse_query("Duluth, 30097") == ParsedQuery(zip_code="30097", city="Duluth")

    def test_second_plain_name_becomes_county(self) -> None:
        assert parse_query("Duluth, Gwinnett") == ParsedQuery(city="Duluth", county="Gwinnett")

    def test_explicit_county_wins_over_second_name(self) -> None:
        parsed = parse_query("Duluth, Gwinnett County, Lawrenceville")
        assert parsed.city == "Duluth"
        assert parsed.county == "Gwinnett"

    def test_first_zip_wins(self) -> None:
        assert parse_query("30097, 30096").zip_code == "30097"

    def test_empty(self) -> None:
        assert parse_query("").is_empty
        assert parse_query(" , GA").is_empty
