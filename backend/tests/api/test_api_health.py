"""HTTP tests for the health endpoint."""

from __future__ import annotations


def test_health_reports_database(client):
    resp = client.get("/api/v1/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert body["db"] == "ok"
    assert "version" in body
