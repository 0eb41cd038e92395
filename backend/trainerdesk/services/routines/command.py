from __future__ import annotations

import logging
from typing import Any

from trainerdesk.models.routine import (
    ORGANIZATION_MODES,
    ROUTINE_KINDS,
    TEMPLATE_STATUSES,
    Routine,
)
from trainerdesk.repositories.routine import RoutineRepository
from trainerdesk.services._shared.base import BaseService
from trainerdesk.services._shared.errors import FieldErrors, NotFoundError
from trainerdesk.services._shared.references import build_reference_book
from trainerdesk.services.ordering.positions import renumber_bucket

from ._converters import routine_to_out
from ._subtree import build_days, replace_days, validate_days
from .dto import MoveToFolderIn, RoutineCreateIn, RoutineOut, RoutineUpdateIn, is_set

logger = logging.getLogger(__name__)


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    stripped = str(value).strip()
    return stripped or None


def _check_title(value: Any, errors: FieldErrors) -> str:
    title = value.strip() if isinstance(value, str) else ""
    if not title:
        errors.add("title", "must be a non-empty string")
    return title


def _check_choice(name: str, value: Any, choices: tuple[str, ...], errors: FieldErrors) -> None:
    if value not in choices:
        errors.add(name, f"must be one of: {', '.join(choices)}")


def _check_count(name: str, value: Any, errors: FieldErrors, *, nullable: bool = True) -> None:
    if value is None:
        if not nullable:
            errors.add(name, "is required")
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        errors.add(name, "must be a non-negative integer")


class RoutineCommandService(BaseService):
    """Create, update, move and delete routines owned by the current trainer."""

    def create(self, dto: RoutineCreateIn) -> RoutineOut:
        """Validate and persist a routine together with its days and entries.

        :raises ValidationError: On any malformed field, collected in one error.
        :raises NotFoundError: If the student or folder is not the trainer's.
        """
        trainer_id = self.require_actor()

        errors = FieldErrors()
        title = _check_title(dto.title, errors)
        _check_choice("kind", dto.kind, ROUTINE_KINDS, errors)
        _check_choice("organization_mode", dto.organization_mode, ORGANIZATION_MODES, errors)
        if dto.kind == "individual":
            if dto.student_id is None:
                errors.add("student_id", "is required for individual routines")
            if dto.folder_id is not None:
                errors.add("folder_id", "only template routines can be placed in folders")
            if dto.status is not None:
                errors.add("status", "only template routines have a status")
            _check_count("planned_sessions", dto.planned_sessions, errors)
        elif dto.kind == "template":
            if dto.student_id is not None:
                errors.add("student_id", "template routines cannot be assigned to a student")
            if dto.status is not None:
                _check_choice("status", dto.status, TEMPLATE_STATUSES, errors)
            if dto.expires_on is not None:
                errors.add("expires_on", "only individual routines expire")
            if dto.planned_sessions is not None:
                errors.add("planned_sessions", "only individual routines plan sessions")
        days = validate_days(dto.days, errors)
        errors.raise_if_any()

        with self.rw_uow() as uow:
            repo: RoutineRepository = uow.routines
            routine = Routine(
                trainer_id=trainer_id,
                kind=dto.kind,
                title=title,
                description=_clean_text(dto.description),
                organization_mode=dto.organization_mode,
                completed_sessions=0,
            )
            if dto.kind == "individual":
                student = uow.students.get_owned(trainer_id, dto.student_id)
                if student is None:
                    raise NotFoundError("Student", dto.student_id)
                routine.student = student
                routine.expires_on = dto.expires_on
                routine.planned_sessions = dto.planned_sessions
                routine.position_in_folder = 0
            else:
                folder = None
                if dto.folder_id is not None:
                    folder = uow.folders.get_owned(trainer_id, dto.folder_id)
                    if folder is None:
                        raise NotFoundError("Folder", dto.folder_id)
                routine.folder = folder
                routine.status = dto.status or "draft"
                routine.position_in_folder = repo.count_in_bucket(trainer_id, dto.folder_id)

            routine.days = build_days(days)
            repo.add(routine)
            logger.info(
                "Routine created",
                extra={
                    "routine_id": routine.id,
                    "trainer_id": trainer_id,
                    "kind": routine.kind,
                    "days": len(routine.days),
                },
            )
            return routine_to_out(routine, build_reference_book(uow, [routine]))

    def update(self, dto: RoutineUpdateIn) -> RoutineOut:
        """Apply a partial update; ``days`` replaces the subtree wholesale.

        Every field is validated before anything is written, so a bad day in
        the payload leaves the stored routine untouched.
        """
        trainer_id = self.require_actor()

        with self.rw_uow() as uow:
            repo: RoutineRepository = uow.routines
            routine = repo.get_owned(trainer_id, dto.routine_id, for_update=True)
            if routine is None:
                raise NotFoundError("Routine", dto.routine_id)

            if is_set(dto.kind) and dto.kind != routine.kind:
                logger.info(
                    "Ignoring kind change on update",
                    extra={"routine_id": routine.id, "requested_kind": dto.kind},
                )

            errors = FieldErrors()
            updates: dict[str, Any] = {}
            if is_set(dto.title):
                updates["title"] = _check_title(dto.title, errors)
            if is_set(dto.description):
                updates["description"] = _clean_text(dto.description)
            if is_set(dto.organization_mode):
                _check_choice("organization_mode", dto.organization_mode, ORGANIZATION_MODES, errors)
                updates["organization_mode"] = dto.organization_mode

            if routine.kind == "template":
                if is_set(dto.status):
                    _check_choice("status", dto.status, TEMPLATE_STATUSES, errors)
                    updates["status"] = dto.status
                for name in ("expires_on", "planned_sessions", "completed_sessions"):
                    if is_set(getattr(dto, name)):
                        errors.add(name, "only individual routines track sessions")
            else:
                if is_set(dto.status):
                    errors.add("status", "only template routines have a status")
                if is_set(dto.folder_id):
                    errors.add("folder_id", "only template routines can be placed in folders")
                if is_set(dto.expires_on):
                    updates["expires_on"] = dto.expires_on
                if is_set(dto.planned_sessions):
                    _check_count("planned_sessions", dto.planned_sessions, errors)
                    updates["planned_sessions"] = dto.planned_sessions
                if is_set(dto.completed_sessions):
                    _check_count("completed_sessions", dto.completed_sessions, errors, nullable=False)
                    updates["completed_sessions"] = dto.completed_sessions

            clean_days = None
            if is_set(dto.days):
                if dto.days is None:
                    errors.add("days", "must be a list")
                else:
                    clean_days = validate_days(dto.days, errors)
            errors.raise_if_any()

            previous_folder = routine.folder_id
            moving = (
                routine.kind == "template"
                and is_set(dto.folder_id)
                and dto.folder_id != routine.folder_id
            )
            target_folder = None
            if moving:
                if dto.folder_id is not None:
                    target_folder = uow.folders.get_owned(trainer_id, dto.folder_id)
                    if target_folder is None:
                        raise NotFoundError("Folder", dto.folder_id)
                updates["folder_id"] = dto.folder_id
                updates["position_in_folder"] = repo.count_in_bucket(trainer_id, dto.folder_id)

            if "completed_sessions" in updates:
                logger.warning(
                    "Completed session counter overridden",
                    extra={
                        "routine_id": routine.id,
                        "previous": routine.completed_sessions,
                        "value": updates["completed_sessions"],
                    },
                )

            repo.assign_updates(routine, updates, flush=False)
            if moving:
                routine.folder = target_folder
            if clean_days is not None:
                diff = replace_days(routine, clean_days)
                logger.info(
                    "Routine days replaced",
                    extra={"routine_id": routine.id, **diff.as_log_extra()},
                )
            routine.touch()
            repo.flush()
            if moving:
                renumber_bucket(repo, trainer_id, previous_folder)

            logger.info(
                "Routine updated",
                extra={"routine_id": routine.id, "fields": sorted(updates)},
            )
            return routine_to_out(routine, build_reference_book(uow, [routine]))

    def move_to_folder(self, dto: MoveToFolderIn) -> RoutineOut:
        """Move a template into ``folder_id`` (or out of any folder when ``None``)."""
        return self.update(RoutineUpdateIn(routine_id=dto.routine_id, folder_id=dto.folder_id))

    def delete(self, routine_id: int) -> None:
        """Hard-delete a routine and its subtree."""
        trainer_id = self.require_actor()

        with self.rw_uow() as uow:
            repo: RoutineRepository = uow.routines
            routine = repo.get_owned(trainer_id, routine_id, for_update=True)
            if routine is None:
                raise NotFoundError("Routine", routine_id)

            was_template = routine.kind == "template"
            folder_id = routine.folder_id
            repo.delete(routine)
            if was_template:
                renumber_bucket(repo, trainer_id, folder_id)
            logger.info(
                "Routine deleted",
                extra={"routine_id": routine_id, "trainer_id": trainer_id},
            )
