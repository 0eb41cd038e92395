"""HTTP tests for the student endpoints."""

from __future__ import annotations

import pytest

from tests.factories.routine import IndividualRoutineFactory, RoutineDayFactory, RoutineEntryFactory

BASE = "/api/v1/student"


@pytest.fixture()
def routine(session):
    row = IndividualRoutineFactory(planned_sessions=3)
    RoutineDayFactory(routine=row, position=0, day_label="Upper")
    RoutineDayFactory(routine=row, position=1, day_label="Lower")
    session.commit()
    return row


@pytest.fixture()
def headers(routine, auth_headers):
    return auth_headers(routine.student, "student")


class TestStudentEndpoints:
    def test_trainer_token_is_403(self, client, routine, auth_headers):
        resp = client.get(f"{BASE}/routines", headers=auth_headers(routine.trainer, "trainer"))

        assert resp.status_code == 403

    def test_complete_day_flow(self, client, routine, headers):
        """
        GIVEN an assigned routine with two days
        WHEN the student completes the first day and amends its feedback
        THEN the counter, the weekly flags, the history and the next suggestion follow.
        """
        listed = client.get(f"{BASE}/routines", headers=headers).get_json()["data"]
        upper, lower = listed[0]["days"]
        assert listed[0]["nextSuggestedDayId"] == upper["id"]

        done = client.post(
            f"{BASE}/sessions/complete-day",
            json={"routineId": routine.id, "dayId": upper["id"], "effort": "moderate"},
            headers=headers,
        )
        assert done.status_code == 201
        result = done.get_json()["data"]
        assert result["completedSessions"] == 1
        assert result["plannedSessions"] == 3
        assert result["isCompleted"] is False
        assert result["session"]["routine"] == {
            "id": routine.id,
            "label": routine.title,
            "known": True,
            "detail": None,
        }
        session_id = result["session"]["id"]

        amended = client.patch(
            f"{BASE}/sessions/{session_id}/feedback", json={"comment": "good pump"}, headers=headers
        )
        assert amended.status_code == 200
        assert amended.get_json()["data"]["effort"] == "moderate"
        assert amended.get_json()["data"]["comment"] == "good pump"

        detail = client.get(f"{BASE}/routines/{routine.id}", headers=headers).get_json()["data"]
        assert [d["doneThisWeek"] for d in detail["days"]] == [True, False]
        assert detail["nextSuggestedDayId"] == lower["id"]

        week = client.get(f"{BASE}/sessions/current-week", headers=headers).get_json()["data"]
        assert [s["id"] for s in week["items"]] == [session_id]
        assert week["weekStart"] < week["weekEnd"]

        completed = client.get(f"{BASE}/routines/{routine.id}/completed-sessions", headers=headers)
        assert completed.get_json()["data"][0]["dayId"] == upper["id"]

        history = client.get(f"{BASE}/history?limit=5", headers=headers).get_json()
        assert [s["id"] for s in history["data"]] == [session_id]
        assert history["data"][0]["routine"]["label"] == routine.title
        assert history["data"][0]["trainer"]["label"] == routine.trainer.name
        assert history["meta"] == {"total": 1, "page": 1, "limit": 5, "totalPages": 1}

    def test_complete_unknown_day_is_404(self, client, routine, headers):
        resp = client.post(
            f"{BASE}/sessions/complete-day",
            json={"routineId": routine.id, "dayId": 999999},
            headers=headers,
        )

        assert resp.status_code == 404
        assert resp.mimetype == "application/problem+json"

    def test_bad_effort_is_400(self, client, routine, headers):
        day_id = routine.days[0].id

        resp = client.post(
            f"{BASE}/sessions/complete-day",
            json={"routineId": routine.id, "dayId": day_id, "effort": "heroic"},
            headers=headers,
        )

        assert resp.status_code == 400
        assert "effort" in resp.get_json()["details"]["errors"]

    def test_toggle_entry(self, client, session, routine, headers):
        entry = RoutineEntryFactory(day=routine.days[0])
        session.commit()

        resp = client.patch(
            f"{BASE}/routines/{routine.id}/entries/{entry.id}/completed", headers=headers
        )

        assert resp.status_code == 200
        assert resp.get_json()["data"] == {
            "routineId": routine.id,
            "entryId": entry.id,
            "completed": True,
        }

    def test_history_rejects_page_zero(self, client, headers):
        resp = client.get(f"{BASE}/history?page=0", headers=headers)

        assert resp.status_code == 400
