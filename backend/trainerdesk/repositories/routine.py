"""Routine repository providing persistence-focused data access helpers.

Extends :class:`~trainerdesk.repositories.base.BaseRepository` with
owner-scoped lookups, the folder bucket queries used by the ordering engine
and the SQL-side session counter increment used by the progress tracker.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, cast

from sqlalchemy import Select, and_, case, func, select, update
from sqlalchemy.orm import InstrumentedAttribute, selectinload

from trainerdesk.models.routine import Routine, RoutineDay
from trainerdesk.repositories.base import BaseRepository


class RoutineRepository(BaseRepository[Routine]):
    """Persist :class:`Routine` aggregates with their days and entries.

    Every public lookup takes the owner (trainer or student) so callers cannot
    accidentally read across accounts.
    """

    model = Routine

    # ----------------------------- Whitelists ---------------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "title": self.model.title,
            "position_in_folder": self.model.position_in_folder,
            "created_at": self.model.created_at,
            "updated_at": self.model.updated_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "trainer_id": self.model.trainer_id,
            "student_id": self.model.student_id,
            "kind": self.model.kind,
            "folder_id": self.model.folder_id,
            "status": self.model.status,
        }

    def _updatable_fields(self) -> set[str]:
        return {
            "title",
            "description",
            "organization_mode",
            "status",
            "folder_id",
            "position_in_folder",
            "expires_on",
            "planned_sessions",
            "completed_sessions",
        }

    # ----------------------------- Eager loading -------------------------------
    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        """Load days and entries with ``selectinload`` to avoid row explosion."""
        return stmt.options(selectinload(self.model.days).selectinload(RoutineDay.entries))

    # ----------------------------- Lookups ------------------------------------
    def get_owned(self, trainer_id: int, routine_id: int, *, for_update: bool = False) -> Routine | None:
        """Return the routine only when ``trainer_id`` owns it.

        :param trainer_id: Owning trainer.
        :param routine_id: Routine identifier.
        :param for_update: Lock the row when the backend supports it.
        """
        stmt: Select[Any] = select(self.model).where(
            and_(self.model.id == routine_id, self.model.trainer_id == trainer_id)
        )
        stmt = self._default_eagerload(stmt)
        if for_update:
            stmt = stmt.with_for_update()
        return cast(Routine | None, self.session.execute(stmt).scalars().first())

    def get_for_student(self, student_id: int, routine_id: int) -> Routine | None:
        """Return an individual routine assigned to ``student_id``."""
        stmt: Select[Any] = select(self.model).where(
            self.model.id == routine_id,
            self.model.student_id == student_id,
            self.model.kind == "individual",
        )
        stmt = self._default_eagerload(stmt)
        return cast(Routine | None, self.session.execute(stmt).scalars().first())

    def list_for_student(self, student_id: int) -> list[Routine]:
        """A student's individual routines, most recently updated first."""
        return self.list(
            filters={"student_id": student_id, "kind": "individual"},
            sort=["-updated_at"],
        )

    def list_for_trainer(
        self,
        trainer_id: int,
        *,
        kind: str | None = None,
        folder_id: int | None = None,
        no_folder: bool = False,
        status: str | None = None,
        student_id: int | None = None,
        limit: int | None = None,
    ) -> list[Routine]:
        """List a trainer's routines with the default listing order.

        Templates come first, ordered by folder (no-folder bucket first),
        ``position_in_folder`` and most recent update; individual routines
        follow, most recently updated first.
        """
        stmt: Select[Any] = select(self.model).where(self.model.trainer_id == trainer_id)
        if kind is not None:
            stmt = stmt.where(self.model.kind == kind)
        if no_folder:
            stmt = stmt.where(self.model.folder_id.is_(None))
        elif folder_id is not None:
            stmt = stmt.where(self.model.folder_id == folder_id)
        if status is not None:
            stmt = stmt.where(self.model.status == status)
        if student_id is not None:
            stmt = stmt.where(self.model.student_id == student_id)

        is_individual = case((self.model.kind == "template", 0), else_=1)
        stmt = self._default_eagerload(stmt).order_by(
            is_individual,
            self.model.folder_id.is_not(None),
            self.model.folder_id.asc(),
            self.model.position_in_folder.asc(),
            self.model.updated_at.desc(),
            self.model.id.desc(),
        )
        if limit is not None:
            stmt = stmt.limit(int(limit))
        return cast(list[Routine], list(self.session.execute(stmt).scalars().all()))

    # ----------------------------- Folder buckets ------------------------------
    def _bucket_clause(self, trainer_id: int, folder_id: int | None) -> Any:
        folder_clause = (
            self.model.folder_id.is_(None) if folder_id is None else self.model.folder_id == folder_id
        )
        return and_(
            self.model.trainer_id == trainer_id,
            self.model.kind == "template",
            folder_clause,
        )

    def count_in_bucket(self, trainer_id: int, folder_id: int | None) -> int:
        """Number of templates in the (trainer, folder) bucket."""
        stmt = select(func.count(self.model.id)).where(self._bucket_clause(trainer_id, folder_id))
        return int(self.session.execute(stmt).scalar_one())

    def list_bucket(self, trainer_id: int, folder_id: int | None) -> list[Routine]:
        """Templates of one bucket ordered by position."""
        stmt: Select[Any] = select(self.model).where(self._bucket_clause(trainer_id, folder_id))
        stmt = stmt.order_by(self.model.position_in_folder.asc(), self.model.id.asc())
        return cast(list[Routine], list(self.session.execute(stmt).scalars().all()))

    def titles_for_student(self, student_id: int) -> set[str]:
        """Titles already used by a student's individual routines."""
        stmt = select(self.model.title).where(
            self.model.student_id == student_id, self.model.kind == "individual"
        )
        return {row for row in self.session.execute(stmt).scalars()}

    def titles_by_ids(self, ids: Iterable[int]) -> dict[int, str]:
        """Map routine ids to titles; ids of deleted routines are absent."""
        wanted = set(ids)
        if not wanted:
            return {}
        stmt = select(self.model.id, self.model.title).where(self.model.id.in_(wanted))
        return {row.id: row.title for row in self.session.execute(stmt)}

    # ----------------------------- Progress -----------------------------------
    def increment_completed(self, routine: Routine) -> None:
        """Add one completed session using a server-side ``+ 1``.

        The update runs inside the caller's transaction so it commits or rolls
        back together with the session insert. The counter is expired on the
        instance so the next access reads the stored value.
        """
        stmt = (
            update(self.model)
            .where(self.model.id == routine.id)
            .values(
                completed_sessions=self.model.completed_sessions + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        self.session.execute(stmt)
        self.session.expire(routine, ["completed_sessions", "updated_at"])
