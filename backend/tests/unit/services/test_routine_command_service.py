"""Unit tests for :class:`RoutineCommandService`."""

from __future__ import annotations

from datetime import date

import pytest

from tests.factories.account import StudentFactory, TrainerFactory
from tests.factories.exercise import ExerciseFactory
from tests.factories.folder import FolderFactory
from tests.factories.routine import (
    IndividualRoutineFactory,
    RoutineDayFactory,
    RoutineEntryFactory,
    TemplateRoutineFactory,
)
from trainerdesk.models.routine import Routine, RoutineDay, RoutineEntry
from trainerdesk.services._shared.base import ServiceContext
from trainerdesk.services._shared.errors import AuthorizationError, NotFoundError, ValidationError
from trainerdesk.services.routines import RoutineCommandService
from trainerdesk.services.routines.dto import (
    DayIn,
    EntryIn,
    MoveToFolderIn,
    RoutineCreateIn,
    RoutineUpdateIn,
)


@pytest.fixture()
def service() -> RoutineCommandService:
    return RoutineCommandService(ctx=ServiceContext(role="trainer"))


def _day(label: str, position: int, *entries: EntryIn, day_id: int | None = None) -> DayIn:
    return DayIn(day_label=label, position=position, id=day_id, entries=list(entries))


class TestCreate:
    def test_template_lands_at_end_of_no_folder_bucket(self, service, session):
        """
        GIVEN a trainer with one template outside any folder
        WHEN a new template with two days is created without a folder
        THEN it is stored as a draft at position 1 with every day and entry.
        """
        trainer = TrainerFactory()
        TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        squat, bench = ExerciseFactory(), ExerciseFactory()
        session.commit()
        service.ctx.actor_id = trainer.id

        out = service.create(
            RoutineCreateIn(
                kind="template",
                title="  Full body  ",
                organization_mode="numeric",
                days=[
                    _day("Day A", 0, EntryIn(exercise_id=squat.id, position=0, sets="5", reps="5")),
                    _day("Day B", 1, EntryIn(exercise_id=str(bench.id), position=0)),
                ],
            )
        )

        assert out.title == "Full body"
        assert out.status == "draft"
        assert out.folder is None
        assert out.position_in_folder == 1
        assert [d.day_label for d in out.days] == ["Day A", "Day B"]
        assert out.days[0].entries[0].exercise.label == squat.name
        assert out.days[1].entries[0].exercise.id == bench.id
        stored = session.get(Routine, out.id)
        assert stored.trainer_id == trainer.id
        assert len(stored.days) == 2

    def test_individual_requires_student_of_trainer(self, service, session):
        trainer = TrainerFactory()
        foreign_student = StudentFactory()
        session.commit()
        service.ctx.actor_id = trainer.id

        with pytest.raises(NotFoundError) as exc:
            service.create(
                RoutineCreateIn(
                    kind="individual",
                    title="Plan",
                    organization_mode="weekday",
                    student_id=foreign_student.id,
                )
            )

        assert exc.value.entity == "Student"
        assert session.query(Routine).count() == 0

    def test_individual_carries_plan(self, service, session):
        student = StudentFactory()
        session.commit()
        service.ctx.actor_id = student.trainer_id

        out = service.create(
            RoutineCreateIn(
                kind="individual",
                title="Cut",
                organization_mode="weekday",
                student_id=student.id,
                expires_on=date(2026, 12, 31),
                planned_sessions=24,
            )
        )

        assert out.student.id == student.id
        assert out.student.label == student.name
        assert out.planned_sessions == 24
        assert out.completed_sessions == 0
        assert out.progress == "0/24"
        assert out.status is None
        assert out.position_in_folder is None

    def test_collects_every_field_error(self, service, session):
        """
        GIVEN a payload with a blank title, bad enum values and bad entries
        WHEN creating
        THEN one ValidationError reports every path and nothing is written.
        """
        trainer = TrainerFactory()
        session.commit()
        service.ctx.actor_id = trainer.id

        with pytest.raises(ValidationError) as exc:
            service.create(
                RoutineCreateIn(
                    kind="template",
                    title="   ",
                    organization_mode="daily",
                    status="published",
                    planned_sessions=3,
                    days=[
                        _day("", 0),
                        _day("Day B", "1", EntryIn(exercise_id="abc", position=None)),
                    ],
                )
            )

        fields = exc.value.fields
        assert set(fields) >= {
            "title",
            "organization_mode",
            "status",
            "planned_sessions",
            "days[0].day_label",
            "days[1].position",
            "days[1].entries[0].exercise_id",
            "days[1].entries[0].position",
        }
        assert session.query(Routine).count() == 0

    def test_individual_rejects_template_fields(self, service, session):
        student = StudentFactory()
        folder = FolderFactory()
        session.commit()
        service.ctx.actor_id = student.trainer_id

        with pytest.raises(ValidationError) as exc:
            service.create(
                RoutineCreateIn(
                    kind="individual",
                    title="Plan",
                    organization_mode="numeric",
                    student_id=student.id,
                    folder_id=folder.id,
                    status="active",
                    planned_sessions=-1,
                )
            )

        assert set(exc.value.fields) == {"folder_id", "status", "planned_sessions"}

    def test_unknown_folder_is_not_found(self, service, session):
        trainer = TrainerFactory()
        foreign = FolderFactory()
        session.commit()
        service.ctx.actor_id = trainer.id

        with pytest.raises(NotFoundError):
            service.create(
                RoutineCreateIn(
                    kind="template", title="T", organization_mode="numeric", folder_id=foreign.id
                )
            )

    def test_requires_actor(self, service):
        with pytest.raises(AuthorizationError):
            service.create(RoutineCreateIn(kind="template", title="T", organization_mode="numeric"))


class TestUpdate:
    def test_replace_days_keeps_echoed_ids(self, service, session):
        """
        GIVEN a routine with days D1, D2 and an entry on D1
        WHEN updating with D1 echoed (same exercise) plus a new day
        THEN D1 and its entry keep their ids, D2 is removed, a new day is added.
        """
        routine = TemplateRoutineFactory()
        d1 = RoutineDayFactory(routine=routine, position=0, day_label="Push")
        RoutineDayFactory(routine=routine, position=1, day_label="Pull")
        entry = RoutineEntryFactory(day=d1, position=0)
        session.commit()
        d1_id, entry_id, exercise_id = d1.id, entry.id, entry.exercise_id
        service.ctx.actor_id = routine.trainer_id

        out = service.update(
            RoutineUpdateIn(
                routine_id=routine.id,
                days=[
                    _day(
                        "Push heavy",
                        0,
                        EntryIn(id=entry_id, exercise_id=exercise_id, position=0, reps="6"),
                        day_id=d1_id,
                    ),
                    _day("Legs", 1),
                ],
            )
        )

        assert [d.day_label for d in out.days] == ["Push heavy", "Legs"]
        assert out.days[0].id == d1_id
        assert out.days[0].entries[0].id == entry_id
        assert out.days[0].entries[0].reps == "6"
        assert out.days[1].id != d1_id
        stored = session.query(RoutineDay).filter_by(routine_id=routine.id).all()
        assert sorted(d.day_label for d in stored) == ["Legs", "Push heavy"]

    def test_entry_with_new_exercise_gets_new_row(self, service, session):
        routine = TemplateRoutineFactory()
        day = RoutineDayFactory(routine=routine, position=0)
        entry = RoutineEntryFactory(day=day, position=0)
        other = ExerciseFactory()
        session.commit()
        entry_id = entry.id
        service.ctx.actor_id = routine.trainer_id

        out = service.update(
            RoutineUpdateIn(
                routine_id=routine.id,
                days=[_day(day.day_label, 0, EntryIn(id=entry_id, exercise_id=other.id, position=0), day_id=day.id)],
            )
        )

        assert out.days[0].entries[0].exercise.id == other.id
        stored = session.query(RoutineEntry).filter_by(day_id=day.id).all()
        assert [e.exercise_id for e in stored] == [other.id]

    def test_empty_days_clears_subtree(self, service, session):
        routine = TemplateRoutineFactory()
        RoutineDayFactory(routine=routine)
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        out = service.update(RoutineUpdateIn(routine_id=routine.id, days=[]))

        assert out.days == []

    def test_invalid_day_leaves_routine_untouched(self, service, session):
        """A bad day in the payload rolls back the metadata change as well."""
        routine = TemplateRoutineFactory(title="Original")
        RoutineDayFactory(routine=routine, day_label="Keep")
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        with pytest.raises(ValidationError) as exc:
            service.update(
                RoutineUpdateIn(routine_id=routine.id, title="Changed", days=[_day(" ", 0)])
            )

        assert "days[0].day_label" in exc.value.fields
        session.expire_all()
        stored = session.get(Routine, routine.id)
        assert stored.title == "Original"
        assert [d.day_label for d in stored.days] == ["Keep"]

    def test_kind_change_is_ignored(self, service, session):
        routine = TemplateRoutineFactory()
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        out = service.update(RoutineUpdateIn(routine_id=routine.id, kind="individual", title="Renamed"))

        assert out.kind == "template"
        assert out.title == "Renamed"

    def test_template_rejects_session_fields(self, service, session):
        routine = TemplateRoutineFactory()
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        with pytest.raises(ValidationError) as exc:
            service.update(RoutineUpdateIn(routine_id=routine.id, planned_sessions=3))

        assert "planned_sessions" in exc.value.fields

    def test_individual_counter_override(self, service, session):
        routine = IndividualRoutineFactory(planned_sessions=5, completed_sessions=2)
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        out = service.update(RoutineUpdateIn(routine_id=routine.id, completed_sessions=5))

        assert out.completed_sessions == 5
        assert out.is_completed is True

    def test_days_none_is_rejected(self, service, session):
        routine = TemplateRoutineFactory()
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        with pytest.raises(ValidationError) as exc:
            service.update(RoutineUpdateIn(routine_id=routine.id, days=None))

        assert "days" in exc.value.fields

    def test_foreign_routine_is_not_found(self, service, session):
        routine = TemplateRoutineFactory()
        outsider = TrainerFactory()
        session.commit()
        service.ctx.actor_id = outsider.id

        with pytest.raises(NotFoundError):
            service.update(RoutineUpdateIn(routine_id=routine.id, title="Mine now"))


class TestMoveToFolder:
    def test_create_then_move_into_folder(self, service, session):
        """
        GIVEN a trainer with an empty "Hypertrophy" folder
        WHEN a template is created without a folder and then moved into it
        THEN it sits at position 0 of the folder and the no-folder bucket compacts.
        """
        trainer = TrainerFactory()
        folder = FolderFactory(trainer=trainer, name="Hypertrophy")
        keeper = TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        session.commit()
        service.ctx.actor_id = trainer.id

        created = service.create(
            RoutineCreateIn(kind="template", title="Upper", organization_mode="numeric")
        )
        assert created.folder is None
        assert created.position_in_folder == 1

        moved = service.move_to_folder(MoveToFolderIn(routine_id=created.id, folder_id=folder.id))

        assert moved.folder.id == folder.id
        assert moved.folder.label == "Hypertrophy"
        assert moved.position_in_folder == 0
        session.expire_all()
        assert session.get(Routine, keeper.id).position_in_folder == 0

    def test_move_out_of_folder_appends_and_compacts(self, service, session):
        trainer = TrainerFactory()
        folder = FolderFactory(trainer=trainer)
        first = TemplateRoutineFactory(trainer=trainer, folder=folder, position_in_folder=0)
        second = TemplateRoutineFactory(trainer=trainer, folder=folder, position_in_folder=1)
        TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        session.commit()
        service.ctx.actor_id = trainer.id

        out = service.move_to_folder(MoveToFolderIn(routine_id=first.id, folder_id=None))

        assert out.folder is None
        assert out.position_in_folder == 1
        session.expire_all()
        assert session.get(Routine, second.id).position_in_folder == 0

    def test_individual_cannot_be_moved(self, service, session):
        routine = IndividualRoutineFactory()
        folder = FolderFactory(trainer=routine.trainer)
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        with pytest.raises(ValidationError):
            service.move_to_folder(MoveToFolderIn(routine_id=routine.id, folder_id=folder.id))

    def test_foreign_folder_is_not_found(self, service, session):
        routine = TemplateRoutineFactory()
        foreign = FolderFactory()
        session.commit()
        service.ctx.actor_id = routine.trainer_id

        with pytest.raises(NotFoundError):
            service.move_to_folder(MoveToFolderIn(routine_id=routine.id, folder_id=foreign.id))


class TestDelete:
    def test_delete_removes_subtree_and_compacts_bucket(self, service, session):
        trainer = TrainerFactory()
        gone = TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        stays = TemplateRoutineFactory(trainer=trainer, position_in_folder=1)
        day = RoutineDayFactory(routine=gone)
        session.commit()
        gone_id, day_id = gone.id, day.id
        service.ctx.actor_id = trainer.id

        service.delete(gone_id)

        session.expire_all()
        assert session.get(Routine, gone_id) is None
        assert session.get(RoutineDay, day_id) is None
        assert session.get(Routine, stays.id).position_in_folder == 0

    def test_delete_foreign_is_not_found(self, service, session):
        routine = TemplateRoutineFactory()
        outsider = TrainerFactory()
        session.commit()
        service.ctx.actor_id = outsider.id

        with pytest.raises(NotFoundError):
            service.delete(routine.id)
        assert session.get(Routine, routine.id) is not None
