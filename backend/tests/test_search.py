"""Tests for substring search, highlighting and pagination."""

import pytest
from fastapi.testclient import TestClient

from backend.app.repositories.search import MAX_OFFSET, like_pattern
from backend.app.services.search import highlight


class TestHighlight:
    def test_wraps_every_occurrence_case_insensitively(self):
        result = highlight("We love him, because he first loved us.", "LOVE")

        assert result == "We <em>love</em> him, because he first <em>love</em>d us."

    def test_metacharacters_are_literal(self):
        assert highlight("a.c abc", "a.c") == "<em>a.c</em> abc"
        assert highlight("nothing here", ".*") == "nothing here"

    def test_keeps_original_case(self):
        assert highlight("The LORD is my shepherd", "lord") == "The <em>LORD</em> is my shepherd"

    def test_empty_query(self):
        assert highlight("text", "") == "text"


@pytest.mark.parametrize(
    "query,expected",
    [
        ("love", "%love%"),
        ("100%", "%100\\%%"),
        ("a_b", "%a\\_b%"),
        ("back\\slash", "%back\\\\slash%"),
    ],
)
def test_like_pattern_escapes_wildcards(query, expected):
    assert like_pattern(query) == expected


class TestSearchEndpoint:
    def test_basic_search(self, client: TestClient):
        response = client.get("/search", params={"q": "shepherd"})

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "shepherd"
        assert data["translation"] == "en-kjv"
        assert data["total"] == 1
        hit = data["results"][0]
        assert hit["reference"] == "Psalms 23:1"
        assert hit["book"] == {"id": "psa", "name": "Psalms"}
        assert "<em>shepherd</em>" in hit["highlight"]

    def test_defaults(self, client: TestClient):
        data = client.get("/search", params={"q": "love"}).json()

        assert data["limit"] == 10
        assert data["offset"] == 0

    def test_pagination_total_is_stable(self, client: TestClient):
        first = client.get("/search", params={"q": "love", "limit": 5, "offset": 0}).json()
        second = client.get("/search", params={"q": "love", "limit": 5, "offset": 5}).json()

        assert first["total"] == second["total"] == 9
        assert len(first["results"]) == 5
        assert len(second["results"]) == 4
        first_refs = {r["reference"] for r in first["results"]}
        second_refs = {r["reference"] for r in second["results"]}
        assert first_refs.isdisjoint(second_refs)

    def test_results_in_canonical_order(self, client: TestClient):
        results = client.get("/search", params={"q": "love"}).json()["results"]

        keys = [(r["book"]["id"], r["chapter"], r["verse"]) for r in results]
        assert keys[0] == ("pro", 17, 17)
        assert keys[-1] == ("1jn", 4, 19)

    def test_every_highlight_marks_the_match(self, client: TestClient):
        results = client.get("/search", params={"q": "LOVE", "limit": 100}).json()["results"]

        assert all("<em>" in r["highlight"] for r in results)

    def test_limit_clamped(self, client: TestClient):
        data = client.get("/search", params={"q": "love", "limit": 500}).json()

        assert data["limit"] == 100

    def test_metacharacters_match_literally(self, client: TestClient):
        data = client.get("/search", params={"q": ".*"}).json()

        assert data["total"] == 0
        assert data["results"] == []

    def test_french_search_localizes_books(self, client: TestClient):
        data = client.get("/search", params={"q": "berger", "language": "fr"}).json()

        assert data["translation"] == "fr-lsg"
        assert data["results"][0]["reference"] == "Psaumes 23:1"

    def test_blank_query_returns_nothing(self, client: TestClient, mock_pg_conn):
        response = client.get("/search", params={"q": "   "})

        assert response.status_code == 200
        assert response.json()["total"] == 0
        mock_pg_conn.fetchval.assert_not_called()

    def test_missing_query(self, client: TestClient):
        response = client.get("/search")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_QUERY"

    def test_empty_query(self, client: TestClient):
        response = client.get("/search", params={"q": ""})

        assert response.json()["error"]["code"] == "MISSING_QUERY"

    @pytest.mark.parametrize(
        "params",
        [{"limit": 0}, {"offset": -1}, {"limit": "ten"}],
    )
    def test_invalid_paging(self, client: TestClient, params):
        response = client.get("/search", params={"q": "love", **params})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_QUERY"

    def test_unknown_translation(self, client: TestClient):
        response = client.get("/search", params={"q": "love", "translation": "xx"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TRANSLATION_NOT_FOUND"

    @pytest.mark.parametrize("offset", [MAX_OFFSET + 1, 10**19])
    def test_offset_above_maximum(self, client: TestClient, mock_pg_conn, offset):
        response = client.get("/search", params={"q": "love", "offset": offset})

        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "INVALID_QUERY",
            "message": f"offset must not exceed {MAX_OFFSET}",
        }
        mock_pg_conn.fetch.assert_not_called()

    def test_largest_offset_is_an_empty_page(self, client: TestClient):
        response = client.get("/search", params={"q": "love", "offset": MAX_OFFSET})

        assert response.status_code == 200
        data = response.json()
        assert data["offset"] == MAX_OFFSET
        assert data["total"] == 9
        assert data["results"] == []
