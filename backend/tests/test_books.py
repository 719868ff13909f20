"""Tests for book and chapter endpoints."""

import pytest
from fastapi.testclient import TestClient


class TestBooks:
    def test_list_books(self, client: TestClient):
        response = client.get("/books")

        assert response.status_code == 200
        data = response.json()
        assert data["translation"] == "en-kjv"
        assert data["language"] == "en"
        assert len(data["books"]) == 66
        assert data["books"][0] == {
            "id": "gen",
            "number": 1,
            "name": "Genesis",
            "testament": "old",
            "chapters": 50,
        }
        assert data["books"][-1]["testament"] == "new"

    def test_list_books_french(self, client: TestClient):
        data = client.get("/books", params={"language": "fr"}).json()

        assert data["translation"] == "fr-lsg"
        assert data["books"][18]["name"] == "Psaumes"

    def test_list_books_unknown_language(self, client: TestClient):
        response = client.get("/books", params={"language": "xx"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TRANSLATION_NOT_FOUND"

    def test_get_book_by_alias(self, client: TestClient, mock_pg_conn):
        response = client.get("/books/1cor")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "1co"
        assert data["name"] == "1 Corinthians"
        assert data["number"] == 46
        assert data["chapters"] == 16
        assert "1cor" in data["aliases"]
        mock_pg_conn.fetch.assert_not_called()

    def test_get_book_french_name(self, client: TestClient):
        data = client.get("/books/gen", params={"language": "fr"}).json()

        assert data["name"] == "Genèse"
        assert data["language"] == "fr"

    def test_unknown_book(self, client: TestClient):
        response = client.get("/books/xyz")

        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "BOOK_NOT_FOUND",
            "message": "Book 'xyz' not found",
        }


class TestChapters:
    def test_list_chapters_with_counts(self, client: TestClient):
        response = client.get("/books/psa/chapters")

        assert response.status_code == 200
        data = response.json()
        assert data["book"] == {"id": "psa", "name": "Psalms"}
        assert data["chapters"] == [{"number": 23, "verses": 6}]

    def test_list_chapters_unknown_book(self, client: TestClient):
        response = client.get("/books/xyz/chapters")

        assert response.json()["error"]["code"] == "BOOK_NOT_FOUND"

    def test_get_chapter(self, client: TestClient):
        response = client.get("/books/gen/chapters/1")

        assert response.status_code == 200
        data = response.json()
        assert data["chapter"] == 1
        assert [v["number"] for v in data["verses"]] == [1, 2, 3]

    def test_get_chapter_out_of_range(self, client: TestClient):
        response = client.get("/books/gen/chapters/51")

        assert response.status_code == 404
        assert response.json()["error"] == {
            "code": "CHAPTER_NOT_FOUND",
            "message": "Chapter 51 not found in Genesis",
        }

    def test_get_chapter_not_numeric(self, client: TestClient):
        response = client.get("/books/gen/chapters/one")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CHAPTER_NOT_FOUND"

    @pytest.mark.parametrize("chapter", ["1_0", "+1", "%201", "1.0", "\uff11"])
    def test_get_chapter_rejects_loose_integer_syntax(
        self, client: TestClient, mock_pg_conn, chapter
    ):
        response = client.get(f"/books/gen/chapters/{chapter}")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CHAPTER_NOT_FOUND"
        mock_pg_conn.fetch.assert_not_called()

    def test_get_chapter_absurdly_long_number(self, client: TestClient):
        response = client.get("/books/gen/chapters/" + "1" * 5000)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "CHAPTER_NOT_FOUND"

    def test_get_chapter_leading_zeros(self, client: TestClient):
        response = client.get("/books/gen/chapters/001")

        assert response.status_code == 200
        assert response.json()["chapter"] == 1

    def test_get_chapter_not_stored(self, client: TestClient):
        response = client.get("/books/gen/chapters/2")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Chapter 2 not found"
