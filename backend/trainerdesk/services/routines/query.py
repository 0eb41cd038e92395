from __future__ import annotations

import logging

from trainerdesk.models.routine import ROUTINE_KINDS, TEMPLATE_STATUSES
from trainerdesk.services._shared.base import BaseService, ServiceContext
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import build_reference_book

from ._converters import routine_to_out
from .dto import RoutineListIn, RoutineListOut, RoutineOut

logger = logging.getLogger(__name__)


class RoutineQueryService(BaseService):
    """Read-only access to a trainer's routines."""

    def __init__(self, *, ctx: ServiceContext | None = None, max_limit: int = 200) -> None:
        super().__init__(ctx=ctx)
        self.max_limit = max_limit

    def get(self, routine_id: int) -> RoutineOut:
        """
        Fetch one routine with every reference resolved.

        :raises NotFoundError: If missing or owned by another trainer.
        """
        trainer_id = self.require_actor()
        with self.ro_uow() as uow:
            routine = uow.routines.get_owned(trainer_id, routine_id)
            if routine is None:
                raise NotFoundError("Routine", routine_id)
            return routine_to_out(routine, build_reference_book(uow, [routine]))

    def list(self, dto: RoutineListIn) -> RoutineListOut:
        """
        List routines in the default order (templates by folder bucket first).

        ``limit`` defaults to and is capped at ``max_limit``.
        """
        trainer_id = self.require_actor()

        errors = FieldErrors()
        if dto.kind is not None and dto.kind not in ROUTINE_KINDS:
            errors.add("kind", f"must be one of: {', '.join(ROUTINE_KINDS)}")
        if dto.status is not None and dto.status not in TEMPLATE_STATUSES:
            errors.add("status", f"must be one of: {', '.join(TEMPLATE_STATUSES)}")
        if dto.limit is not None and dto.limit < 1:
            errors.add("limit", "must be a positive integer")
        errors.raise_if_any()

        limit = min(dto.limit or self.max_limit, self.max_limit)
        with self.ro_uow() as uow:
            rows = uow.routines.list_for_trainer(
                trainer_id,
                kind=dto.kind,
                folder_id=dto.folder_id,
                no_folder=dto.no_folder,
                status=dto.status,
                student_id=dto.student_id,
                limit=limit,
            )
            book = build_reference_book(uow, rows)
            items = [routine_to_out(row, book) for row in rows]

        logger.debug("Routines listed", extra={"trainer_id": trainer_id, "count": len(items)})
        return RoutineListOut(items=items)
