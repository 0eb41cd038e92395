"""Unit tests for the routine aggregate models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from tests.factories.account import StudentFactory, TrainerFactory
from tests.factories.routine import (
    IndividualRoutineFactory,
    RoutineDayFactory,
    RoutineEntryFactory,
    TemplateRoutineFactory,
)
from trainerdesk.models.routine import Routine, RoutineDay, RoutineEntry


class TestRoutineModel:
    def test_template_defaults(self, session):
        """
        GIVEN a template routine outside any folder
        WHEN it is flushed
        THEN it carries no student, no counters beyond zero and is never completed.
        """
        routine = TemplateRoutineFactory()
        session.flush()

        assert routine.is_template is True
        assert routine.student_id is None
        assert routine.folder_id is None
        assert routine.completed_sessions == 0
        assert routine.is_completed is False
        assert routine.progress_label is None

    @pytest.mark.parametrize(
        ("planned", "done", "expected"),
        [
            (10, 0, False),
            (10, 9, False),
            (10, 10, True),
            (10, 12, True),
            (0, 0, False),
            (0, 1, True),
            (None, 0, False),
            (None, 3, True),
        ],
    )
    def test_is_completed(self, session, planned, done, expected):
        routine = IndividualRoutineFactory(planned_sessions=planned, completed_sessions=done)
        session.flush()

        assert routine.is_completed is expected

    def test_progress_label(self, session):
        routine = IndividualRoutineFactory(planned_sessions=12, completed_sessions=3)
        session.flush()

        assert routine.progress_label == "3/12"

    def test_template_with_student_violates_check(self, session):
        """A template row assigned to a student is rejected by the database."""
        student = StudentFactory()
        session.flush()

        session.add(
            Routine(
                trainer_id=student.trainer_id,
                student_id=student.id,
                title="Broken",
                kind="template",
                organization_mode="numeric",
                completed_sessions=0,
                position_in_folder=0,
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_individual_without_student_violates_check(self, session):
        trainer = TrainerFactory()
        session.flush()

        session.add(
            Routine(
                trainer_id=trainer.id,
                title="Orphan",
                kind="individual",
                organization_mode="numeric",
                completed_sessions=0,
                position_in_folder=0,
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_negative_counter_violates_check(self, session):
        routine = IndividualRoutineFactory()
        session.flush()

        routine.completed_sessions = -1
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


class TestRoutineSubtree:
    def test_deleting_routine_removes_days_and_entries(self, session):
        """
        GIVEN a routine with one day and one entry
        WHEN the routine is deleted through the ORM
        THEN the day and entry rows are removed with it.
        """
        day = RoutineDayFactory()
        entry = RoutineEntryFactory(day=day)
        session.flush()
        routine_id, day_id, entry_id = day.routine_id, day.id, entry.id

        session.delete(day.routine)
        session.flush()

        assert session.get(Routine, routine_id) is None
        assert session.get(RoutineDay, day_id) is None
        assert session.get(RoutineEntry, entry_id) is None

    def test_removing_day_from_collection_deletes_orphan(self, session):
        routine = TemplateRoutineFactory()
        keep = RoutineDayFactory(routine=routine, position=0)
        drop = RoutineDayFactory(routine=routine, position=1)
        session.flush()
        drop_id = drop.id

        routine.days = [keep]
        session.flush()

        assert session.get(RoutineDay, drop_id) is None
        assert [d.id for d in routine.days] == [keep.id]

    def test_entry_completed_defaults_false(self, session):
        entry = RoutineEntryFactory()
        session.flush()

        assert entry.completed is False
        assert entry.exercise_id is not None
