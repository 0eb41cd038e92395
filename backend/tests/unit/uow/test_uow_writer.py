"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from tests.factories.account import TrainerFactory
from trainerdesk.models import Folder
from trainerdesk.uow import SQLAlchemyUnitOfWork


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN we create a folder via repo inside the context and leave without exception
        THEN the transaction is committed and the row is visible afterwards.
        """
        trainer = TrainerFactory()
        session.commit()
        initial = db.session.query(Folder).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.folders.add(Folder(trainer_id=trainer.id, name="Strength", position=0))

        after = db.session.query(Folder).count()
        assert after == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, app, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the context
        THEN the transaction is rolled back and no rows are persisted.
        """
        trainer = TrainerFactory()
        session.commit()
        initial = db.session.query(Folder).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.folders.add(Folder(trainer_id=trainer.id, name="Strength", position=0))
            raise RuntimeError("boom")  # forces rollback

        after = db.session.query(Folder).count()
        assert after == initial

    def test_writer_exposes_every_repository(self, app, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            for name in ("trainers", "students", "exercises", "folders", "routines", "workout_sessions"):
                assert getattr(uow, name).session is uow.session
