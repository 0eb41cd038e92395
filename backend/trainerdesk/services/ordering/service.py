from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from trainerdesk.services._shared.base import BaseService, ServiceContext
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import parse_reference_id

from .dto import ReorderFoldersIn, ReorderOut, ReorderRoutinesIn
from .positions import assign_dense

logger = logging.getLogger(__name__)


def _parse_ids(raw: Sequence[Any], name: str) -> list[int]:
    """Validate an id list: every item a positive integer, no repeats."""
    errors = FieldErrors()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        errors.add(name, "must be a list of ids")
        errors.raise_if_any()

    ids: list[int] = []
    seen: set[int] = set()
    for index, value in enumerate(raw):
        parsed = parse_reference_id(value)
        if parsed is None:
            errors.add(f"{name}[{index}]", "must be a positive integer id")
            continue
        if parsed in seen:
            errors.add(f"{name}[{index}]", f"duplicate id {parsed}")
            continue
        seen.add(parsed)
        ids.append(parsed)
    errors.raise_if_any()
    return ids


class OrderingService(BaseService):
    """
    Dense integer ordering for folders and for templates inside a bucket.

    Each reorder is written in one unit of work, so positions are never left
    half-updated.

    :param strict: Reject a routine reorder batch when any id does not belong
        to the bucket, instead of skipping it.
    """

    def __init__(self, *, ctx: ServiceContext | None = None, strict: bool = False) -> None:
        super().__init__(ctx=ctx)
        self.strict = strict

    def reorder_folders(self, dto: ReorderFoldersIn) -> ReorderOut:
        """
        Give listed folders positions ``0..k-1``; unlisted ones follow.

        :raises ValidationError: On malformed or repeated ids.
        :raises NotFoundError: If any id is not one of the trainer's folders.
        """
        trainer_id = self.require_actor()
        ids = _parse_ids(dto.ordered_folder_ids, "ordered_folder_ids")

        with self.rw_uow() as uow:
            folders = uow.folders.list_for_trainer(trainer_id)
            by_id = {row.id: row for row in folders}
            unknown = [folder_id for folder_id in ids if folder_id not in by_id]
            if unknown:
                raise NotFoundError("Folder", unknown[0])

            listed = set(ids)
            ordered = [by_id[folder_id] for folder_id in ids]
            ordered.extend(row for row in folders if row.id not in listed)
            changed = assign_dense(ordered, "position")
            uow.folders.flush()

            logger.info(
                "Folders reordered",
                extra={"trainer_id": trainer_id, "order": [r.id for r in ordered], "changed": changed},
            )
            return ReorderOut(ordered_ids=[row.id for row in ordered])

    def reorder_routines(self, dto: ReorderRoutinesIn) -> ReorderOut:
        """
        Reorder templates of one (trainer, folder) bucket.

        Matched ids receive positions ``0..k-1`` in the given order and the
        bucket templates not listed follow them in their previous order, so
        the whole bucket stays dense. Ids that are unknown, foreign, not
        templates or outside the bucket are logged and skipped (or rejected in
        strict mode).

        :raises NotFoundError: If the folder is not the trainer's, if nothing
            matches a non-empty list, or on any mismatch in strict mode.
        """
        trainer_id = self.require_actor()
        ids = _parse_ids(dto.ordered_routine_ids, "ordered_routine_ids")
        if not ids:
            return ReorderOut(ordered_ids=[])

        with self.rw_uow() as uow:
            if dto.context_id is not None and uow.folders.get_owned(trainer_id, dto.context_id) is None:
                raise NotFoundError("Folder", dto.context_id)

            bucket = uow.routines.list_bucket(trainer_id, dto.context_id)
            listed = set(ids)
            matches = {row.id: row for row in bucket if row.id in listed}
            skipped = [routine_id for routine_id in ids if routine_id not in matches]
            if not matches:
                raise NotFoundError("Routine", ids[0])
            if skipped:
                if self.strict:
                    raise NotFoundError("Routine", skipped[0])
                logger.warning(
                    "Skipping routines outside the reorder context",
                    extra={
                        "trainer_id": trainer_id,
                        "context_id": dto.context_id,
                        "skipped_ids": skipped,
                    },
                )

            ordered = [matches[routine_id] for routine_id in ids if routine_id in matches]
            ordered.extend(row for row in bucket if row.id not in listed)
            changed = assign_dense(ordered, "position_in_folder")
            uow.routines.flush()

            logger.info(
                "Routines reordered",
                extra={
                    "trainer_id": trainer_id,
                    "context_id": dto.context_id,
                    "order": [r.id for r in ordered],
                    "changed": changed,
                },
            )
            return ReorderOut(ordered_ids=[row.id for row in ordered], skipped_ids=skipped)
