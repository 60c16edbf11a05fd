"""Unit tests for POST /api/v1/addresses/validate."""

from unittest.mock import patch

from httpx import AsyncClient

URL = "/api/v1/addresses/validate"


class TestValidateAddresses:
    """Tests for address coverage validation."""

    async def test_blocked_until_states_selected(self, client: AsyncClient) -> None:
        response = await client.post(URL, json={"records": [{"zip_code": "30097"}]})

        assert response.status_code == 422
        assert response.json()["detail"] == "Please select at least one state to validate addresses"

    async def test_classifies_each_record(self, client: AsyncClient, select_states) -> None:
        await select_states("GA")

        response = await client.post(
            URL,
            json={
                "records": [
                    {"zip_code": "30097"},
                    {"city": "Boston"},
                    {"zip_code": "99999"},
                    {"zip_code": " ", "city": "", "county": None},
                ]
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["selected_states"] == ["GA"]
        assert [(r["classification"], r["state"], r["in_coverage"]) for r in body["results"]] == [
            ("in_coverage", "GA", True),
            ("out_of_coverage", "MA", False),
            ("unable_to_determine", None, False),
            ("invalid_record", None, False),
        ]
        assert body["summary"] == {
            "in_coverage": 1,
            "out_of_coverage": 1,
            "unable_to_determine": 1,
            "invalid_record": 1,
        }
        assert body["total"] == 4

    async def test_results_echo_input(self, client: AsyncClient, select_states) -> None:
        await select_states("MA")

        response = await client.post(URL, json={"records": [{"city": "Cambridge", "county": "Middlesex"}]})

        result = response.json()["results"][0]
        assert result["address"] == {"zip_code": None, "city": "Cambridge", "county": "Middlesex"}
        assert result["error"] is None

    async def test_lookup_failure_is_isolated(self, client: AsyncClient, select_states) -> None:
        await select_states("GA")

        with patch(
            "geotarget_api.services.address_index.AddressIndex.find_state",
            side_effect=RuntimeError("connection reset"),
        ):
            response = await client.post(URL, json={"records": [{"zip_code": "30097"}]})

        assert response.status_code == 200
        result = response.json()["results"][0]
        assert result["classification"] == "unable_to_determine"
        assert result["error"] == "Database query failed: connection reset"

    async def test_empty_batch(self, client: AsyncClient, select_states) -> None:
        await select_states("GA")

        response = await client.post(URL, json={"records": []})

        assert response.status_code == 200
        assert response.json()["total"] == 0
