"""Unit tests for ``RoutineRepository`` ownership scoping and bucket helpers."""

from __future__ import annotations

import pytest

from tests.factories.account import StudentFactory, TrainerFactory
from tests.factories.folder import FolderFactory
from tests.factories.routine import IndividualRoutineFactory, TemplateRoutineFactory
from trainerdesk.repositories.routine import RoutineRepository


class TestRoutineRepository:
    """Ensure lookups never cross trainer or student boundaries."""

    @pytest.fixture()
    def repo(self) -> RoutineRepository:
        return RoutineRepository()

    def test_get_owned_hides_foreign_routines(self, repo, session):
        mine = TemplateRoutineFactory()
        other = TrainerFactory()
        session.flush()

        assert repo.get_owned(mine.trainer_id, mine.id) is mine
        assert repo.get_owned(other.id, mine.id) is None

    def test_get_for_student_requires_individual_assignment(self, repo, session):
        routine = IndividualRoutineFactory()
        stranger = StudentFactory()
        session.flush()

        assert repo.get_for_student(routine.student_id, routine.id) is routine
        assert repo.get_for_student(stranger.id, routine.id) is None

    def test_list_for_trainer_orders_templates_before_individuals(self, repo, session):
        """
        GIVEN templates in two buckets and an individual routine
        WHEN listing without filters
        THEN the no-folder bucket comes first, then folders, then individuals.
        """
        trainer = TrainerFactory()
        folder = FolderFactory(trainer=trainer)
        student = StudentFactory(trainer=trainer)
        individual = IndividualRoutineFactory(student=student)
        in_folder = TemplateRoutineFactory(trainer=trainer, folder=folder, position_in_folder=0)
        loose_b = TemplateRoutineFactory(trainer=trainer, position_in_folder=1)
        loose_a = TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        session.flush()

        rows = repo.list_for_trainer(trainer.id)

        assert [r.id for r in rows] == [loose_a.id, loose_b.id, in_folder.id, individual.id]

    def test_list_for_trainer_filters(self, repo, session):
        trainer = TrainerFactory()
        folder = FolderFactory(trainer=trainer)
        in_folder = TemplateRoutineFactory(trainer=trainer, folder=folder, status="active")
        loose = TemplateRoutineFactory(trainer=trainer, status="draft")
        session.flush()

        assert [r.id for r in repo.list_for_trainer(trainer.id, folder_id=folder.id)] == [in_folder.id]
        assert [r.id for r in repo.list_for_trainer(trainer.id, no_folder=True)] == [loose.id]
        assert [r.id for r in repo.list_for_trainer(trainer.id, status="draft")] == [loose.id]
        assert len(repo.list_for_trainer(trainer.id, limit=1)) == 1

    def test_bucket_helpers(self, repo, session):
        trainer = TrainerFactory()
        folder = FolderFactory(trainer=trainer)
        first = TemplateRoutineFactory(trainer=trainer, folder=folder, position_in_folder=1)
        second = TemplateRoutineFactory(trainer=trainer, folder=folder, position_in_folder=0)
        TemplateRoutineFactory(trainer=trainer)
        session.flush()

        assert repo.count_in_bucket(trainer.id, folder.id) == 2
        assert repo.count_in_bucket(trainer.id, None) == 1
        assert [r.id for r in repo.list_bucket(trainer.id, folder.id)] == [second.id, first.id]

    def test_titles_for_student(self, repo, session):
        routine = IndividualRoutineFactory(title="Upper (Ana)")
        session.flush()

        assert repo.titles_for_student(routine.student_id) == {"Upper (Ana)"}

    def test_increment_completed_uses_stored_value(self, repo, session):
        routine = IndividualRoutineFactory(completed_sessions=4)
        session.flush()

        repo.increment_completed(routine)
        repo.increment_completed(routine)

        assert routine.completed_sessions == 6

    def test_get_loads_subtree(self, repo, session):
        routine = TemplateRoutineFactory()
        session.flush()
        session.expire_all()

        loaded = repo.get(routine.id)

        assert loaded.id == routine.id
        assert loaded.days == []
        assert repo.get(987654) is None
