"""Exercise catalog lookups used to enrich routine entries."""

from __future__ import annotations

from collections.abc import Iterable
from typing import cast

from sqlalchemy import or_, select

from trainerdesk.models.exercise import Exercise
from trainerdesk.repositories.base import BaseRepository


class ExerciseRepository(BaseRepository[Exercise]):
    """Read access to the exercise catalog."""

    model = Exercise

    def visible_by_ids(self, trainer_id: int, ids: Iterable[int]) -> dict[int, Exercise]:
        """Map ids to exercises owned by ``trainer_id`` or shared by the catalog.

        :param trainer_id: Trainer whose private exercises are visible.
        :param ids: Exercise ids to look up; unknown ids are simply absent.
        :returns: ``{exercise_id: Exercise}`` for the visible subset.
        """
        wanted = {int(i) for i in ids}
        if not wanted:
            return {}
        stmt = select(self.model).where(
            self.model.id.in_(wanted),
            or_(self.model.trainer_id.is_(None), self.model.trainer_id == trainer_id),
        )
        rows = cast(list[Exercise], list(self.session.execute(stmt).scalars()))
        return {row.id: row for row in rows}
