"""Factory Boy definition for template folders."""

from __future__ import annotations

import factory
from tests.factories import BaseFactory
from tests.factories.account import TrainerFactory
from trainerdesk.models.folder import Folder


class FolderFactory(BaseFactory):
    """Build persisted :class:`trainerdesk.models.folder.Folder` instances."""

    class Meta:
        model = Folder
        exclude = ("trainer",)

    id = None
    trainer = factory.SubFactory(TrainerFactory)
    trainer_id = factory.SelfAttribute("trainer.id")
    name = factory.Sequence(lambda n: f"Folder {n}")
    position = factory.Sequence(lambda n: n)
