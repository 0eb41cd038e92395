"""Unit tests for :class:`WorkoutSession`."""

from __future__ import annotations

from tests.factories.session import WorkoutSessionFactory
from trainerdesk.models.base import as_utc


class TestWorkoutSessionModel:
    def test_defaults(self, session):
        row = WorkoutSessionFactory()
        session.flush()

        assert row.status == "completed"
        assert row.effort is None
        assert row.comment is None
        assert row.student_id is not None
        assert row.trainer_id is not None

    def test_completed_at_round_trips_as_utc(self, session):
        row = WorkoutSessionFactory()
        session.flush()
        session.expire(row)

        completed = as_utc(row.completed_at)
        assert completed.tzinfo is not None
        assert completed.utcoffset().total_seconds() == 0
