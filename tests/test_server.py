"""End-to-end tests for the HTTP surface.

Each test builds a fresh app over an in-memory database and drives it with
FastAPI's TestClient, so the lifespan (pool start + migration) runs too.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient

from promptbox.db.database import StoragePool
from promptbox.errors import StartupError
from promptbox.server.app import create_app


class ApiTestBase(unittest.TestCase):
    def setUp(self):
        self.app = create_app(pool=StoragePool(":memory:"))
        self.client = TestClient(self.app)
        self.client.__enter__()
        self.addCleanup(self.client.__exit__, None, None, None)

    def _create(self, name: str = "t", content: str = "c") -> dict:
        resp = self.client.post("/api/prompts", json={"name": name, "content": content})
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()


# ===========================================================================
# 1. Happy paths
# ===========================================================================

class TestPromptLifecycle(ApiTestBase):
    def test_full_lifecycle(self):
        created = self._create("t", "c")
        prompt_id = created["id"]
        self.assertTrue(prompt_id)

        listing = self.client.get("/api/prompts")
        self.assertEqual(listing.status_code, 200)
        body = listing.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(
            {k: body[0][k] for k in ("id", "name", "content")},
            {"id": prompt_id, "name": "t", "content": "c"},
        )

        updated = self.client.put(f"/api/prompts/{prompt_id}", json={"name": "n", "content": "u"})
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(
            {k: updated.json()[k] for k in ("id", "name", "content")},
            {"id": prompt_id, "name": "n", "content": "u"},
        )

        deleted = self.client.delete(f"/api/prompts/{prompt_id}")
        self.assertEqual(deleted.status_code, 204)
        self.assertEqual(deleted.content, b"")

        missing = self.client.get(f"/api/prompts/{prompt_id}")
        self.assertEqual(missing.status_code, 404)

    def test_get_by_id(self):
        created = self._create("greeting", "Say hello.")
        resp = self.client.get(f"/api/prompts/{created['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), created)

    def test_list_empty(self):
        resp = self.client.get("/api/prompts")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [])

    def test_list_order_and_limit(self):
        a = self._create("A")
        b = self._create("B")
        c = self._create("C")

        ids = [p["id"] for p in self.client.get("/api/prompts").json()]
        self.assertEqual(ids, [c["id"], b["id"], a["id"]])

        limited = self.client.get("/api/prompts", params={"limit": 2}).json()
        self.assertEqual([p["id"] for p in limited], [c["id"], b["id"]])

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.json(), {"status": "ok"})


# ===========================================================================
# 2. Error mapping
# ===========================================================================

class TestErrorResponses(ApiTestBase):
    def test_unknown_id_is_404(self):
        for method in ("get", "delete"):
            resp = getattr(self.client, method)("/api/prompts/does-not-exist")
            self.assertEqual(resp.status_code, 404)
            self.assertEqual(resp.json()["error"], "Prompt not found")
            self.assertEqual(resp.json()["details"], {"id": "does-not-exist"})

        resp = self.client.put("/api/prompts/does-not-exist", json={"name": "n", "content": "c"})
        self.assertEqual(resp.status_code, 404)

    def test_blank_fields_are_400(self):
        resp = self.client.post("/api/prompts", json={"name": "  ", "content": "c"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Validation failed")
        self.assertEqual(resp.json()["details"], "empty values are not allowed")
        self.assertEqual(self.client.get("/api/prompts").json(), [])

    def test_blank_update_is_400_even_for_existing_prompt(self):
        created = self._create()
        resp = self.client.put(f"/api/prompts/{created['id']}", json={"name": "n", "content": ""})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get(f"/api/prompts/{created['id']}").json()["content"], "c")

    def test_invalid_json_is_400(self):
        resp = self.client.post(
            "/api/prompts",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid request")

    def test_missing_or_mistyped_fields_are_400(self):
        for payload in ({"name": "only"}, {"name": 1, "content": "c"}, {}):
            resp = self.client.post("/api/prompts", json=payload)
            self.assertEqual(resp.status_code, 400, payload)

    def test_bad_limit_is_400(self):
        for value in ("-1", "abc"):
            resp = self.client.get("/api/prompts", params={"limit": value})
            self.assertEqual(resp.status_code, 400, value)

    def test_limit_beyond_integer_range_lists_everything(self):
        self._create("A")
        self._create("B")
        resp = self.client.get("/api/prompts", params={"limit": str(10**30)})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()), 2)

    def test_lone_surrogate_is_400(self):
        resp = self.client.post(
            "/api/prompts",
            content=b'{"name": "\\ud800", "content": "x"}',
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(self.client.get("/api/prompts").json(), [])

    def test_unmatched_route_is_404(self):
        resp = self.client.get("/api/nothing-here")
        self.assertEqual(resp.status_code, 404)

    def test_unexpected_failure_is_500(self):
        repo = MagicMock()
        repo.list = AsyncMock(side_effect=RuntimeError("boom"))
        self.app.state.repository = repo
        resp = self.client.get("/api/prompts")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"error": "Internal server error"})


# ===========================================================================
# 3. Middleware
# ===========================================================================

class TestMiddleware(ApiTestBase):
    def test_headers_on_success_and_failure(self):
        ok = self.client.get("/api/prompts")
        bad = self.client.post("/api/prompts", json={"name": "", "content": ""})
        missing = self.client.get("/api/prompts/missing")
        unrouted = self.client.get("/nowhere")
        for resp in (ok, bad, missing, unrouted):
            self.assertEqual(resp.headers.get("X-Content-Type-Options"), "nosniff")
            self.assertEqual(
                resp.headers.get("Referrer-Policy"), "strict-origin-when-cross-origin"
            )

    def test_headers_on_internal_error(self):
        repo = MagicMock()
        repo.get_by_id = AsyncMock(side_effect=RuntimeError("boom"))
        self.app.state.repository = repo
        resp = self.client.get("/api/prompts/x")
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.headers.get("X-Content-Type-Options"), "nosniff")

    def test_requests_are_logged_with_final_status(self):
        with self.assertLogs("promptbox.server.app", level="INFO") as logs:
            self.client.get("/api/prompts/missing")
        self.assertTrue(any("GET /api/prompts/missing -> 404" in line for line in logs.output))


class TestMiddlewareOrder(unittest.TestCase):
    def test_first_registered_middleware_is_outermost(self):
        entries: list[str] = []

        def recorder(label: str):
            async def middleware(request, call_next):
                entries.append(f"{label}-in")
                response = await call_next(request)
                entries.append(f"{label}-out")
                return response

            return middleware

        chain = [recorder("first"), recorder("second"), recorder("third")]
        with patch("promptbox.server.app.MIDDLEWARE", chain):
            app = create_app(pool=StoragePool(":memory:"))
        with TestClient(app) as client:
            self.assertEqual(client.get("/api/health").status_code, 200)

        self.assertEqual(
            entries,
            ["first-in", "second-in", "third-in", "third-out", "second-out", "first-out"],
        )


# ===========================================================================
# 4. Startup
# ===========================================================================

class TestStartup(unittest.TestCase):
    def test_unopenable_database_aborts_startup(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("x")
            app = create_app(pool=StoragePool(blocker / "db.sqlite"))
            with self.assertRaises(StartupError):
                with TestClient(app):
                    pass

    def test_file_database_persists_between_apps(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "prompts.sqlite"
            with TestClient(create_app(pool=StoragePool(db_path))) as client:
                created = client.post("/api/prompts", json={"name": "kept", "content": "c"}).json()
            with TestClient(create_app(pool=StoragePool(db_path))) as client:
                fetched = client.get(f"/api/prompts/{created['id']}")
            self.assertEqual(fetched.status_code, 200)
            self.assertEqual(fetched.json()["name"], "kept")


if __name__ == "__main__":
    unittest.main()
