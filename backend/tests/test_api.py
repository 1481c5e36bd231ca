"""
Tests for API Routes.

Requires Python 3.11+.
"""

import copy
from typing import Any

import pytest
from fastapi.testclient import TestClient

from utils.config import Settings


def post_entries(client: TestClient, payload: dict[str, Any], count: int) -> list[int]:
    """Post `count` payloads with distinct triggers and return their ids."""
    ids = []
    for i in range(count):
        body = copy.deepcopy(payload)
        body["triggered_by"]["file"] = f"file_{i}.txt"
        response = client.post("/autodocs/git", json=body)
        assert response.status_code == 200
        ids.append(response.json()["diff_id"])
    return ids


class TestHealthEndpoint:
    """Test cases for health endpoint."""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "message": "Webhook server is running"}


class TestWebhookEndpoint:
    """Test cases for POST /autodocs/git."""

    def test_staged_only_payload(self, client: TestClient, settings: Settings, sample_payload_data):
        response = client.post("/autodocs/git", json=sample_payload_data)
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Webhook received and diffs saved"
        assert data["staged_files"] == 1
        assert data["unstaged_files"] == 0
        assert isinstance(data["diff_id"], int)
        assert data["timestamp"]

        blobs = sorted(p.name for p in settings.storage.diff_dir.iterdir())
        assert blobs == [f"staged_{data['diff_id']}.diff"]

        entry = client.get("/autodocs/git/logs").json()["logs"][0]
        assert entry["id"] == data["diff_id"]
        assert entry["has_staged_diff"] is True
        assert entry["has_unstaged_diff"] is False

    def test_unstaged_diff_written(self, client: TestClient, settings: Settings, sample_payload_data):
        sample_payload_data["staged_changes"] = {"files": [], "diff": "", "count": 0}
        sample_payload_data["unstaged_changes"] = {
            "files": ["b.txt", "c.txt"],
            "diff": "diff --git a/b.txt b/b.txt\n",
            "count": 2,
        }

        data = client.post("/autodocs/git", json=sample_payload_data).json()

        assert data["staged_files"] == 0
        assert data["unstaged_files"] == 2
        blobs = [p.name for p in settings.storage.diff_dir.iterdir()]
        assert blobs == [f"unstaged_{data['diff_id']}.diff"]

    def test_partial_payload_is_accepted(self, client: TestClient):
        response = client.post("/autodocs/git", json={"repository": "r", "branch": "main"})
        assert response.status_code == 200

        data = response.json()
        assert data["staged_files"] == 0
        assert data["unstaged_files"] == 0

    def test_null_sections_are_treated_as_empty(self, client: TestClient, settings: Settings):
        body = {
            "repository": "r",
            "triggered_by": None,
            "staged_changes": None,
            "unstaged_changes": {"files": None, "diff": None, "count": None},
            "untracked_files": None,
        }

        response = client.post("/autodocs/git", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["staged_files"] == 0
        assert data["unstaged_files"] == 0
        assert list(settings.storage.diff_dir.iterdir()) == []

        entry = client.get("/autodocs/git/logs").json()["logs"][0]
        assert entry["id"] == data["diff_id"]
        assert entry["untracked_files"] == []

    def test_invalid_event_type_rejected(self, client: TestClient, sample_payload_data):
        sample_payload_data["triggered_by"]["event_type"] = "renamed"
        response = client.post("/autodocs/git", json=sample_payload_data)
        assert response.status_code == 422

    def test_log_never_exceeds_cap(self, client: TestClient, settings: Settings, sample_payload_data):
        sample_payload_data["staged_changes"] = {"files": [], "diff": "", "count": 0}
        sample_payload_data["untracked_files"] = ["new.txt"]

        ids = post_entries(client, sample_payload_data, 101)

        data = client.get("/autodocs/git/logs", params={"limit": 1000}).json()
        assert data["total"] == 100
        logged_ids = [entry["id"] for entry in data["logs"]]
        assert ids[0] not in logged_ids
        assert logged_ids[0] == ids[-1]

    def test_corrupt_log_still_acknowledged(self, client: TestClient, settings: Settings, sample_payload_data):
        settings.storage.log_file.write_text("not json")

        response = client.post("/autodocs/git", json=sample_payload_data)

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestLogsEndpoint:
    """Test cases for GET /autodocs/git/logs."""

    def test_empty_log(self, client: TestClient):
        response = client.get("/autodocs/git/logs")
        assert response.status_code == 200
        assert response.json() == {"total": 0, "logs": []}

    def test_default_limit_is_ten(self, client: TestClient, sample_payload_data):
        post_entries(client, sample_payload_data, 12)

        data = client.get("/autodocs/git/logs").json()
        assert data["total"] == 12
        assert len(data["logs"]) == 10

    def test_limit_returns_newest_first(self, client: TestClient, sample_payload_data):
        ids = post_entries(client, sample_payload_data, 7)

        data = client.get("/autodocs/git/logs?limit=5").json()

        assert [entry["id"] for entry in data["logs"]] == list(reversed(ids))[:5]
        assert data["logs"][0]["triggered_by"]["file"] == "file_6.txt"

    @pytest.mark.parametrize("limit", ["0", "-3", "abc", ""])
    def test_unusable_limit_falls_back_to_ten(self, client: TestClient, sample_payload_data, limit: str):
        post_entries(client, sample_payload_data, 12)

        response = client.get(f"/autodocs/git/logs?limit={limit}")

        assert response.status_code == 200
        assert len(response.json()["logs"]) == 10

    def test_non_object_entries_are_server_error(self, client: TestClient, settings: Settings):
        settings.storage.log_file.write_text("[1, 2]")

        response = client.get("/autodocs/git/logs")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to read logs"}

    def test_corrupt_log_is_server_error(self, client: TestClient, settings: Settings):
        settings.storage.log_file.write_text("[{broken")

        response = client.get("/autodocs/git/logs")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to read logs"}


class TestDiffEndpoint:
    """Test cases for GET /autodocs/git/diff/{kind}/{id}."""

    def test_returns_submitted_bytes(self, client: TestClient, sample_payload_data):
        diff_text = "diff --git a/a.txt b/a.txt\r\n-ä\r\n+ö\n\n"
        sample_payload_data["staged_changes"]["diff"] = diff_text
        diff_id = client.post("/autodocs/git", json=sample_payload_data).json()["diff_id"]

        response = client.get(f"/autodocs/git/diff/staged/{diff_id}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.content == diff_text.encode("utf-8")

    def test_unwritten_kind_is_not_found(self, client: TestClient, sample_payload_data):
        diff_id = client.post("/autodocs/git", json=sample_payload_data).json()["diff_id"]

        response = client.get(f"/autodocs/git/diff/unstaged/{diff_id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Diff file not found"}

    @pytest.mark.parametrize(
        "path",
        [
            "/autodocs/git/diff/staged/123",
            "/autodocs/git/diff/bogus/123",
            "/autodocs/git/diff/staged/..%2F..%2Fetc",
        ],
    )
    def test_unknown_blob_is_not_found(self, client: TestClient, path: str):
        response = client.get(path)
        assert response.status_code == 404


class TestDashboard:
    """Test cases for the HTML dashboard."""

    def test_empty_dashboard(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Git Diff Webhook Dashboard" in response.text
        assert "No webhooks received yet." in response.text

    def test_totals_and_links(self, client: TestClient, sample_payload_data):
        staged_id = client.post("/autodocs/git", json=sample_payload_data).json()["diff_id"]

        sample_payload_data["staged_changes"] = {"files": [], "diff": "", "count": 0}
        sample_payload_data["unstaged_changes"] = {
            "files": ["b.txt"],
            "diff": "diff --git a/b.txt b/b.txt\n",
            "count": 1,
        }
        unstaged_id = client.post("/autodocs/git", json=sample_payload_data).json()["diff_id"]

        html = client.get("/").text

        assert '<div class="stat-number" id="total-webhooks">2</div>' in html
        assert '<div class="stat-number" id="with-staged">1</div>' in html
        assert '<div class="stat-number" id="with-unstaged">1</div>' in html
        assert f"/autodocs/git/diff/staged/{staged_id}" in html
        assert f"/autodocs/git/diff/unstaged/{unstaged_id}" in html
        assert f"/autodocs/git/diff/unstaged/{staged_id}" not in html
        # newest entry first
        assert html.index(f"/diff/unstaged/{unstaged_id}") < html.index(f"/diff/staged/{staged_id}")

    def test_shows_at_most_twenty_entries(self, client: TestClient, sample_payload_data):
        post_entries(client, sample_payload_data, 22)

        html = client.get("/").text

        assert html.count('class="log-entry"') == 20
        assert '<div class="stat-number" id="total-webhooks">22</div>' in html

    def test_file_names_are_escaped(self, client: TestClient, sample_payload_data):
        sample_payload_data["untracked_files"] = ["<script>alert(1)</script>.txt"]
        client.post("/autodocs/git", json=sample_payload_data)

        html = client.get("/").text

        assert "<script>alert(1)</script>" not in html
        assert "&lt;script&gt;" in html

    def test_corrupt_log_is_server_error(self, client: TestClient, settings: Settings):
        settings.storage.log_file.write_text("oops")

        response = client.get("/")

        assert response.status_code == 500

    def test_non_object_entries_are_server_error(self, client: TestClient, settings: Settings):
        settings.storage.log_file.write_text('["a", "b"]')

        response = client.get("/")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to read logs"}
