"""Unit tests for cloning a routine into a student's individual routine."""

from __future__ import annotations

from datetime import date

import pytest

from tests.factories.account import StudentFactory, TrainerFactory
from tests.factories.routine import (
    IndividualRoutineFactory,
    RoutineDayFactory,
    RoutineEntryFactory,
    TemplateRoutineFactory,
)
from trainerdesk.models.routine import Routine
from trainerdesk.services._shared.base import ServiceContext
from trainerdesk.services._shared.errors import NotFoundError, ValidationError
from trainerdesk.services.routines import RoutineCloneService
from trainerdesk.services.routines.clone import clone_title
from trainerdesk.services.routines.dto import CloneToStudentIn


@pytest.fixture()
def service() -> RoutineCloneService:
    return RoutineCloneService(ctx=ServiceContext(role="trainer"))


class TestCloneTitle:
    @pytest.mark.parametrize(
        ("taken", "expected"),
        [
            (set(), "Upper (Ana)"),
            ({"Upper (Ana)"}, "Upper (Ana) #2"),
            ({"Upper (Ana)", "Upper (Ana) #2"}, "Upper (Ana) #3"),
        ],
    )
    def test_suffixes(self, taken, expected):
        assert clone_title("Upper", "Ana", taken) == expected

    def test_blank_first_name_keeps_source_title(self):
        assert clone_title("Upper", "", set()) == "Upper"


class TestRoutineCloneService:
    def test_clone_copies_subtree_and_resets_progress(self, service, session):
        """
        GIVEN a template with two days and entries marked completed
        WHEN it is cloned for a student
        THEN the copy is an individual routine with fresh ids, the same order
        and overrides, cleared flags and a zero counter.
        """
        trainer = TrainerFactory()
        student = StudentFactory(trainer=trainer, name="Ana Pérez")
        source = TemplateRoutineFactory(trainer=trainer, title="Upper", description="Heavy")
        d0 = RoutineDayFactory(routine=source, position=0, day_label="Push", subtitle="Chest")
        d1 = RoutineDayFactory(routine=source, position=1, day_label="Pull")
        RoutineEntryFactory(day=d0, position=0, sets="4", reps="8", load="60kg", completed=True)
        RoutineEntryFactory(day=d0, position=1, notes="slow")
        RoutineEntryFactory(day=d1, position=0)
        session.commit()
        source_day_ids = {d0.id, d1.id}

        service.ctx.actor_id = trainer.id
        out = service.clone_to_student(
            CloneToStudentIn(
                source_routine_id=source.id,
                student_id=student.id,
                expires_on=date(2026, 12, 1),
                planned_sessions=12,
            )
        )

        assert out.kind == "individual"
        assert out.title == "Upper (Ana)"
        assert out.description == "Heavy"
        assert out.student.id == student.id
        assert out.folder is None
        assert out.expires_on == date(2026, 12, 1)
        assert out.planned_sessions == 12
        assert out.completed_sessions == 0
        assert [d.day_label for d in out.days] == ["Push", "Pull"]
        assert out.days[0].subtitle == "Chest"
        assert {d.id for d in out.days}.isdisjoint(source_day_ids)
        first = out.days[0].entries[0]
        assert (first.sets, first.reps, first.load, first.completed) == ("4", "8", "60kg", False)
        assert out.days[0].entries[1].notes == "slow"

        session.expire_all()
        stored_source = session.get(Routine, source.id)
        assert stored_source.kind == "template"
        assert len(stored_source.days) == 2
        flags = sorted(e.completed for d in stored_source.days for e in d.entries)
        assert flags == [False, False, True]

    def test_clone_of_individual_source_leaves_it_unchanged(self, service, session):
        source = IndividualRoutineFactory(completed_sessions=7, planned_sessions=10)
        other_student = StudentFactory(trainer=source.trainer, name="Luis Gómez")
        session.commit()
        service.ctx.actor_id = source.trainer_id

        out = service.clone_to_student(
            CloneToStudentIn(source_routine_id=source.id, student_id=other_student.id)
        )

        assert out.completed_sessions == 0
        assert out.planned_sessions is None
        assert out.expires_on is None
        session.expire_all()
        assert session.get(Routine, source.id).completed_sessions == 7

    def test_repeated_clone_gets_suffix(self, service, session):
        student = StudentFactory(name="Ana Pérez")
        source = TemplateRoutineFactory(trainer=student.trainer, title="Upper")
        session.commit()
        service.ctx.actor_id = student.trainer_id
        dto = CloneToStudentIn(source_routine_id=source.id, student_id=student.id)

        first = service.clone_to_student(dto)
        second = service.clone_to_student(dto)

        assert (first.title, second.title) == ("Upper (Ana)", "Upper (Ana) #2")

    def test_foreign_student_is_not_found(self, service, session):
        source = TemplateRoutineFactory()
        foreign = StudentFactory()
        session.commit()
        service.ctx.actor_id = source.trainer_id

        with pytest.raises(NotFoundError) as exc:
            service.clone_to_student(
                CloneToStudentIn(source_routine_id=source.id, student_id=foreign.id)
            )
        assert exc.value.entity == "Student"

    def test_foreign_source_is_not_found(self, service, session):
        source = TemplateRoutineFactory()
        student = StudentFactory()
        session.commit()
        service.ctx.actor_id = student.trainer_id

        with pytest.raises(NotFoundError) as exc:
            service.clone_to_student(
                CloneToStudentIn(source_routine_id=source.id, student_id=student.id)
            )
        assert exc.value.entity == "Routine"

    def test_negative_plan_is_rejected(self, service, session):
        source = TemplateRoutineFactory()
        session.commit()
        service.ctx.actor_id = source.trainer_id

        with pytest.raises(ValidationError):
            service.clone_to_student(
                CloneToStudentIn(source_routine_id=source.id, student_id=1, planned_sessions=-2)
            )
