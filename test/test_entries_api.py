import unittest
from unittest.mock import patch
from uuid import uuid4

from fastapi.testclient import TestClient

from reeltrack.exceptions import StoreError
from reeltrack.main import app


class _ApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)
        self.headers = self._register()

    def _register(self) -> dict:
        r = self.client.post(
            "/api/auth/register",
            json={"username": f"user-{uuid4().hex[:12]}", "password": "secret123"},
        )
        self.assertEqual(r.status_code, 201, r.text)
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    def _create(self, headers=None, **payload) -> dict:
        payload.setdefault("type", "movie")
        r = self.client.post("/api/movies", json=payload, headers=headers or self.headers)
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()


class TestAuthBoundary(_ApiTestCase):
    def test_missing_token_never_reaches_core(self) -> None:
        r = self.client.get("/api/movies")
        self.assertIn(r.status_code, (401, 403))

    def test_bad_token_rejected(self) -> None:
        r = self.client.get("/api/movies", headers={"Authorization": "Bearer nope"})
        self.assertEqual(r.status_code, 401)

    def test_login_returns_token(self) -> None:
        username = f"user-{uuid4().hex[:12]}"
        self.client.post(
            "/api/auth/register", json={"username": username, "password": "secret123"}
        )
        r = self.client.post(
            "/api/auth/login", json={"username": username, "password": "secret123"}
        )
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["user"]["username"], username)

        r = self.client.post(
            "/api/auth/login", json={"username": username, "password": "wrong-password"}
        )
        self.assertEqual(r.status_code, 401)

    def test_duplicate_username_rejected(self) -> None:
        username = f"user-{uuid4().hex[:12]}"
        payload = {"username": username, "password": "secret123"}
        self.assertEqual(self.client.post("/api/auth/register", json=payload).status_code, 201)
        self.assertEqual(self.client.post("/api/auth/register", json=payload).status_code, 400)

    def test_health_is_public(self) -> None:
        r = self.client.get("/api/health")
        self.assertEqual(r.json(), {"status": "ok", "message": "Server is running"})


class TestEntriesApi(_ApiTestCase):
    def test_create_and_fetch(self) -> None:
        created = self._create(
            title="Dune", year=2021, genres=["Sci-Fi"], tmdb_data={"id": 438631}
        )
        self.assertEqual(created["genres"], ["Sci-Fi"])
        self.assertEqual(created["tmdb_data"], {"id": 438631})
        self.assertFalse(created["watched"])

        r = self.client.get(f"/api/movies/{created['id']}", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["title"], "Dune")

    def test_create_requires_title(self) -> None:
        r = self.client.post("/api/movies", json={"type": "movie"}, headers=self.headers)
        self.assertEqual(r.status_code, 422)

    def test_other_users_entry_is_not_found(self) -> None:
        created = self._create(title="Private")
        other = self._register()

        self.assertEqual(
            self.client.get(f"/api/movies/{created['id']}", headers=other).status_code, 404
        )
        r = self.client.put(
            f"/api/movies/{created['id']}", json={"title": "Stolen"}, headers=other
        )
        self.assertEqual(r.status_code, 404)
        self.assertEqual(
            self.client.delete(f"/api/movies/{created['id']}", headers=other).status_code,
            404,
        )
        self.assertEqual(self.client.get("/api/movies", headers=other).json()["total"], 0)

    def test_list_filters_and_page_total(self) -> None:
        self._create(title="The Matrix", genres=["Action", "Sci-Fi"])
        self._create(title="Lost", type="tv", genres=["Drama"])
        self._create(title="Heat", genres=["Crime"])

        r = self.client.get(
            "/api/movies", params={"type": "movie", "sortBy": "title"}, headers=self.headers
        )
        body = r.json()
        self.assertEqual([m["title"] for m in body["movies"]], ["Heat", "The Matrix"])
        self.assertEqual(body["total"], 2)

        r = self.client.get(
            "/api/movies", params={"limit": 1, "offset": 1}, headers=self.headers
        )
        self.assertEqual(r.json()["total"], 1)

        r = self.client.get("/api/movies", params={"genre": "sci"}, headers=self.headers)
        self.assertEqual([m["title"] for m in r.json()["movies"]], ["The Matrix"])

    def test_update_validation(self) -> None:
        created = self._create(title="Dune")
        url = f"/api/movies/{created['id']}"

        r = self.client.put(url, json={}, headers=self.headers)
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "No updates provided")

        r = self.client.put(url, json={"user_id": 1}, headers=self.headers)
        self.assertEqual(r.status_code, 400)

        r = self.client.put(
            url, json={"userRating": 9, "userReview": "Spice"}, headers=self.headers
        )
        self.assertEqual(r.status_code, 200, r.text)
        self.assertEqual(r.json()["user_rating"], 9)
        self.assertEqual(r.json()["user_review"], "Spice")

    def test_update_rejects_values_the_store_cannot_hold(self) -> None:
        created = self._create(title="Dune", genres=["Sci-Fi"])
        url = f"/api/movies/{created['id']}"

        for changes in ({"genres": [1, {"a": 2}]}, {"year": 10**20}):
            with self.subTest(changes=changes):
                r = self.client.put(url, json=changes, headers=self.headers)
                self.assertEqual(r.status_code, 400, r.text)

        r = self.client.get("/api/movies", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["movies"][0]["genres"], ["Sci-Fi"])
        self.assertEqual(
            self.client.get("/api/movies/export", headers=self.headers).status_code, 200
        )

    def test_oversized_numbers_rejected_before_the_store(self) -> None:
        r = self.client.post(
            "/api/movies", json={"title": "Huge", "type": "movie", "tmdb_id": 10**20},
            headers=self.headers,
        )
        self.assertEqual(r.status_code, 422)
        self.assertEqual(
            self.client.get(f"/api/movies/{2**63}", headers=self.headers).status_code, 422
        )
        r = self.client.get("/api/movies", params={"limit": 10**20}, headers=self.headers)
        self.assertEqual(r.status_code, 422)

    def test_watch_progress_endpoints(self) -> None:
        created = self._create(title="Lost", type="tv", totalEpisodes=121)
        base = f"/api/movies/{created['id']}"

        r = self.client.post(f"{base}/toggle-watched", headers=self.headers)
        self.assertTrue(r.json()["watched"])

        r = self.client.put(
            f"{base}/episodes", json={"episodes": ["S1E1", "S1E2"]}, headers=self.headers
        )
        self.assertEqual(r.json()["watched_episodes"], ["S1E1", "S1E2"])
        self.assertTrue(r.json()["watched"])

        r = self.client.put(f"{base}/episodes", json={"episodes": []}, headers=self.headers)
        self.assertEqual(r.json()["watched_episodes"], [])

        r = self.client.post("/api/movies/999999/toggle-watched", headers=self.headers)
        self.assertEqual(r.status_code, 404)

    def test_stats(self) -> None:
        created = self._create(title="Dune", year=2021, genres=["Sci-Fi"])
        r = self.client.get("/api/movies/stats", headers=self.headers)
        self.assertEqual(
            r.json(), {"total": 1, "movieCount": 1, "seriesCount": 0, "watchedCount": 0}
        )

        self.client.post(f"/api/movies/{created['id']}/toggle-watched", headers=self.headers)
        r = self.client.get("/api/movies/stats", headers=self.headers)
        self.assertEqual(r.json()["watchedCount"], 1)

    def test_search(self) -> None:
        self._create(title="Blade Runner")
        r = self.client.get("/api/movies/search", params={"q": "blade"}, headers=self.headers)
        self.assertEqual([m["title"] for m in r.json()["movies"]], ["Blade Runner"])

        r = self.client.get("/api/movies/search", headers=self.headers)
        self.assertEqual(r.status_code, 400)

    def test_delete(self) -> None:
        created = self._create(title="Heat")
        r = self.client.delete(f"/api/movies/{created['id']}", headers=self.headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["movie"]["title"], "Heat")
        self.assertEqual(
            self.client.get(f"/api/movies/{created['id']}", headers=self.headers).status_code,
            404,
        )


class TestTransferApi(_ApiTestCase):
    def test_export_then_import(self) -> None:
        self._create(title="Dune", genres=["Sci-Fi"], userRating=9)
        self._create(title="Lost", type="tv", watchedEpisodes=["S1E1"])

        document = self.client.get("/api/movies/export", headers=self.headers).json()
        self.assertEqual(document["version"], "2.0")
        self.assertEqual([e["title"] for e in document["entries"]], ["Lost", "Dune"])

        r = self.client.post(
            "/api/movies/import",
            json={"entries": document["entries"] + [{"year": 1999}]},
            headers=self.headers,
        )
        self.assertEqual(
            r.json(), {"message": "Import successful", "imported": 2, "total": 3}
        )

        r = self.client.get("/api/movies", params={"sortBy": "title"}, headers=self.headers)
        movies = r.json()["movies"]
        self.assertEqual([m["title"] for m in movies], ["Dune", "Lost"])
        self.assertEqual(movies[0]["user_rating"], 9)
        self.assertEqual(movies[1]["watched_episodes"], ["S1E1"])

    def test_legacy_movies_key_accepted(self) -> None:
        r = self.client.post(
            "/api/movies/import",
            json={"movies": [{"title": "Alien", "type": "movie", "userRating": 8}]},
            headers=self.headers,
        )
        self.assertEqual(r.json()["imported"], 1)

    def test_import_rejects_non_list(self) -> None:
        r = self.client.post(
            "/api/movies/import", json={"entries": "nope"}, headers=self.headers
        )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Invalid import data")


class TestStoreFailure(_ApiTestCase):
    def test_store_error_is_opaque_500(self) -> None:
        with patch(
            "reeltrack.services.entry_service.EntryService.stats",
            side_effect=StoreError("stats"),
        ):
            r = self.client.get("/api/movies/stats", headers=self.headers)
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"detail": "Internal server error"})


class TestSystemApi(_ApiTestCase):
    def test_skipped_import_records_are_logged(self) -> None:
        marker = f"bad-{uuid4().hex[:8]}"
        self.client.post(
            "/api/movies/import",
            json={"entries": [{"title": marker, "type": "podcast"}]},
            headers=self.headers,
        )

        r = self.client.get(
            "/api/system/logs", params={"type": "error", "limit": 50}, headers=self.headers
        )
        self.assertEqual(r.status_code, 200)
        self.assertTrue(any(marker in line for line in r.json()["lines"]))

    def test_status(self) -> None:
        r = self.client.get("/api/system/status")
        self.assertEqual(r.json()["status"], "ok")
