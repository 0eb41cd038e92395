from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from trainerdesk.models.base import as_utc
from trainerdesk.models.folder import Folder
from trainerdesk.repositories.folder import FolderRepository
from trainerdesk.services._shared.base import BaseService
from trainerdesk.services._shared.errors import ConflictError, FieldErrors, NotFoundError
from trainerdesk.services.ordering.positions import assign_dense

from .dto import FolderCreateIn, FolderListOut, FolderOut, FolderUpdateIn

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100


def _check_name(value: object) -> str:
    errors = FieldErrors()
    name = value.strip() if isinstance(value, str) else ""
    if not name:
        errors.add("name", "must be a non-empty string")
    elif len(name) > NAME_MAX_LENGTH:
        errors.add("name", f"must be at most {NAME_MAX_LENGTH} characters")
    errors.raise_if_any()
    return name


def _to_out(row: Folder, template_count: int) -> FolderOut:
    return FolderOut(
        id=row.id,
        name=row.name,
        position=row.position,
        template_count=template_count,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class FolderService(BaseService):
    """
    Application service for a trainer's template folders.

    Notes
    -----
    - Folder names are unique per trainer; duplicates raise
      :class:`ConflictError`.
    - Deleting a folder never deletes routines: they are moved to the
      no-folder bucket first.
    """

    def list(self) -> FolderListOut:
        """Folders ordered by position, each with its template count."""
        trainer_id = self.require_actor()
        with self.ro_uow() as uow:
            repo: FolderRepository = uow.folders
            counts = repo.template_counts(trainer_id)
            rows = repo.list_for_trainer(trainer_id)
            return FolderListOut(items=[_to_out(row, counts.get(row.id, 0)) for row in rows])

    def create(self, dto: FolderCreateIn) -> FolderOut:
        """
        Create a folder at the end of the trainer's folder list.

        :raises ValidationError: If the name is blank.
        :raises ConflictError: If the trainer already has a folder with that name.
        """
        trainer_id = self.require_actor()
        name = _check_name(dto.name)
        try:
            with self.rw_uow() as uow:
                repo: FolderRepository = uow.folders
                if repo.name_taken(trainer_id, name):
                    raise ConflictError("Folder", "name already exists")
                row = Folder(trainer_id=trainer_id, name=name, position=repo.next_position(trainer_id))
                repo.add(row)
                logger.info(
                    "Folder created",
                    extra={"folder_id": row.id, "trainer_id": trainer_id, "position": row.position},
                )
                return _to_out(row, 0)
        except IntegrityError as ie:
            raise ConflictError("Folder", "name already exists") from ie

    def update(self, dto: FolderUpdateIn) -> FolderOut:
        """
        Rename a folder.

        :raises NotFoundError: If the folder is not the trainer's.
        :raises ConflictError: If another folder already uses the name.
        """
        trainer_id = self.require_actor()
        name = _check_name(dto.name)
        try:
            with self.rw_uow() as uow:
                repo: FolderRepository = uow.folders
                row = repo.get_owned(trainer_id, dto.folder_id)
                if row is None:
                    raise NotFoundError("Folder", dto.folder_id)
                if repo.name_taken(trainer_id, name, exclude_id=row.id):
                    raise ConflictError("Folder", "name already exists")
                repo.assign_updates(row, {"name": name})
                count = repo.template_counts(trainer_id).get(row.id, 0)
                logger.info("Folder renamed", extra={"folder_id": row.id})
                return _to_out(row, count)
        except IntegrityError as ie:
            raise ConflictError("Folder", "name already exists") from ie

    def delete(self, folder_id: int) -> None:
        """
        Delete a folder after moving its templates to the no-folder bucket.

        The moved templates keep their relative order and are appended after
        the templates already outside any folder. Remaining folders are
        renumbered so positions stay dense.

        :raises NotFoundError: If the folder is not the trainer's.
        """
        trainer_id = self.require_actor()
        with self.rw_uow() as uow:
            repo: FolderRepository = uow.folders
            row = repo.get_owned(trainer_id, folder_id)
            if row is None:
                raise NotFoundError("Folder", folder_id)

            moved = uow.routines.list_bucket(trainer_id, folder_id)
            start = uow.routines.count_in_bucket(trainer_id, None)
            for offset, routine in enumerate(moved):
                routine.folder = None
                routine.position_in_folder = start + offset
            repo.flush()

            repo.delete(row)
            remaining = repo.list_for_trainer(trainer_id)
            assign_dense(remaining, "position")
            repo.flush()

            logger.info(
                "Folder deleted",
                extra={
                    "folder_id": folder_id,
                    "trainer_id": trainer_id,
                    "moved_routine_ids": [r.id for r in moved],
                },
            )
