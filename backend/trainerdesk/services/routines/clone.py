from __future__ import annotations

import logging
from collections.abc import Collection

from trainerdesk.models.routine import Routine
from trainerdesk.services._shared.base import BaseService
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import build_reference_book

from ._converters import routine_to_out
from ._subtree import copy_days
from .dto import CloneToStudentIn, RoutineOut

logger = logging.getLogger(__name__)


def clone_title(source_title: str, first_name: str, taken: Collection[str]) -> str:
    """
    Title for a cloned routine: ``"<source> (<first name>)"``.

    When the student already owns a routine with that title a `` #2``,
    `` #3``... suffix is appended until the title is free.
    """
    base = f"{source_title} ({first_name})" if first_name else source_title
    if base not in taken:
        return base
    suffix = 2
    while f"{base} #{suffix}" in taken:
        suffix += 1
    return f"{base} #{suffix}"


class RoutineCloneService(BaseService):
    """Copy any routine of the trainer into a new individual routine."""

    def clone_to_student(self, dto: CloneToStudentIn) -> RoutineOut:
        """
        Deep-copy ``source_routine_id`` for ``student_id``.

        Days and entries keep their exercise references, overrides and order;
        per-entry flags and the session counter start from zero. The source
        routine is only read.

        :raises NotFoundError: If the source or the student is not the trainer's.
        :raises ValidationError: If ``planned_sessions`` is negative.
        """
        trainer_id = self.require_actor()

        errors = FieldErrors()
        planned = dto.planned_sessions
        if planned is not None and (isinstance(planned, bool) or not isinstance(planned, int) or planned < 0):
            errors.add("planned_sessions", "must be a non-negative integer")
        errors.raise_if_any()

        with self.rw_uow() as uow:
            source = uow.routines.get_owned(trainer_id, dto.source_routine_id)
            if source is None:
                raise NotFoundError("Routine", dto.source_routine_id)
            student = uow.students.get_owned(trainer_id, dto.student_id)
            if student is None:
                raise NotFoundError("Student", dto.student_id)

            title = clone_title(
                source.title,
                student.first_name,
                uow.routines.titles_for_student(student.id),
            )
            clone = Routine(
                trainer_id=trainer_id,
                kind="individual",
                title=title,
                description=source.description,
                organization_mode=source.organization_mode,
                expires_on=dto.expires_on,
                planned_sessions=dto.planned_sessions,
                completed_sessions=0,
                position_in_folder=0,
            )
            clone.student = student
            clone.days = copy_days(source)
            uow.routines.add(clone)

            logger.info(
                "Routine cloned to student",
                extra={
                    "source_routine_id": source.id,
                    "routine_id": clone.id,
                    "student_id": student.id,
                    "days": len(clone.days),
                },
            )
            return routine_to_out(clone, build_reference_book(uow, [clone]))
