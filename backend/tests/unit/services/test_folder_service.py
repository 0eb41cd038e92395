"""Unit tests for :class:`FolderService`."""

from __future__ import annotations

import pytest

from tests.factories.account import TrainerFactory
from tests.factories.folder import FolderFactory
from tests.factories.routine import TemplateRoutineFactory
from trainerdesk.models.folder import Folder
from trainerdesk.models.routine import Routine
from trainerdesk.services._shared.base import ServiceContext
from trainerdesk.services._shared.errors import ConflictError, NotFoundError, ValidationError
from trainerdesk.services.folders import FolderService
from trainerdesk.services.folders.dto import FolderCreateIn, FolderUpdateIn


@pytest.fixture()
def service() -> FolderService:
    return FolderService(ctx=ServiceContext(role="trainer"))


class TestFolderService:
    def test_create_appends_position(self, service, session):
        trainer = TrainerFactory()
        FolderFactory(trainer=trainer, name="Strength", position=0)
        session.commit()
        service.ctx.actor_id = trainer.id

        out = service.create(FolderCreateIn(name="  Hypertrophy "))

        assert out.name == "Hypertrophy"
        assert out.position == 1
        assert out.template_count == 0

    def test_create_duplicate_name_conflicts(self, service, session):
        folder = FolderFactory(name="Strength")
        session.commit()
        service.ctx.actor_id = folder.trainer_id

        with pytest.raises(ConflictError):
            service.create(FolderCreateIn(name="Strength"))

    @pytest.mark.parametrize("name", ["", "   ", "x" * 101])
    def test_create_invalid_name(self, service, session, name):
        trainer = TrainerFactory()
        session.commit()
        service.ctx.actor_id = trainer.id

        with pytest.raises(ValidationError) as exc:
            service.create(FolderCreateIn(name=name))
        assert "name" in exc.value.fields

    def test_list_reports_template_counts(self, service, session):
        trainer = TrainerFactory()
        second = FolderFactory(trainer=trainer, position=1)
        first = FolderFactory(trainer=trainer, position=0)
        TemplateRoutineFactory(trainer=trainer, folder=second)
        session.commit()
        service.ctx.actor_id = trainer.id

        items = service.list().items

        assert [(f.id, f.template_count) for f in items] == [(first.id, 0), (second.id, 1)]

    def test_rename(self, service, session):
        folder = FolderFactory(name="Old")
        session.commit()
        service.ctx.actor_id = folder.trainer_id

        out = service.update(FolderUpdateIn(folder_id=folder.id, name="New"))

        assert out.name == "New"

    def test_rename_to_taken_name_conflicts(self, service, session):
        trainer = TrainerFactory()
        FolderFactory(trainer=trainer, name="A")
        b = FolderFactory(trainer=trainer, name="B")
        session.commit()
        service.ctx.actor_id = trainer.id

        with pytest.raises(ConflictError):
            service.update(FolderUpdateIn(folder_id=b.id, name="A"))

    def test_rename_foreign_is_not_found(self, service, session):
        folder = FolderFactory()
        outsider = TrainerFactory()
        session.commit()
        service.ctx.actor_id = outsider.id

        with pytest.raises(NotFoundError):
            service.update(FolderUpdateIn(folder_id=folder.id, name="Mine"))

    def test_delete_moves_templates_to_no_folder_bucket(self, service, session):
        """
        GIVEN folders F0, F1, F2 where F1 holds two templates and one loose template exists
        WHEN F1 is deleted
        THEN its templates follow the loose one in their old order and folder
        positions are dense again.
        """
        trainer = TrainerFactory()
        f0 = FolderFactory(trainer=trainer, position=0)
        f1 = FolderFactory(trainer=trainer, position=1)
        f2 = FolderFactory(trainer=trainer, position=2)
        loose = TemplateRoutineFactory(trainer=trainer, position_in_folder=0)
        a = TemplateRoutineFactory(trainer=trainer, folder=f1, position_in_folder=1)
        b = TemplateRoutineFactory(trainer=trainer, folder=f1, position_in_folder=0)
        session.commit()
        f1_id = f1.id
        service.ctx.actor_id = trainer.id

        service.delete(f1_id)

        session.expire_all()
        assert session.get(Folder, f1_id) is None
        positions = {
            r.id: (r.folder_id, r.position_in_folder)
            for r in session.query(Routine).filter_by(trainer_id=trainer.id)
        }
        assert positions == {loose.id: (None, 0), b.id: (None, 1), a.id: (None, 2)}
        assert [(f.id, f.position) for f in session.query(Folder).order_by(Folder.position)] == [
            (f0.id, 0),
            (f2.id, 1),
        ]

    def test_delete_foreign_is_not_found(self, service, session):
        folder = FolderFactory()
        outsider = TrainerFactory()
        session.commit()
        service.ctx.actor_id = outsider.id

        with pytest.raises(NotFoundError):
            service.delete(folder.id)
