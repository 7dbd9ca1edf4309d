"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from convergent.adapters.sqlalchemy.mappings import tracked_resource_table
from convergent.domain.model import TrackedResource

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

    from convergent.domain.model import ResourceKind


class SqlAlchemyTrackedResourceRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: TrackedResource) -> None:
        self.session.add(entity)

    def get(self, kind: ResourceKind, identifier: str) -> TrackedResource | None:
        return self.session.get(TrackedResource, (kind, identifier))

    def query(self, *, kind: ResourceKind | None = None) -> list[TrackedResource]:
        stmt = select(TrackedResource).order_by(
            tracked_resource_table.c.kind, tracked_resource_table.c.identifier
        )
        if kind is not None:
            stmt = stmt.where(tracked_resource_table.c.kind == kind)
        return list(self.session.execute(stmt).scalars())

    def remove(self, entity: TrackedResource) -> None:
        self.session.delete(entity)


if TYPE_CHECKING:
    from convergent.domain.ports.persistence import TrackedResourceRepository

    def _repository_check(session: Session) -> TrackedResourceRepository:
        return SqlAlchemyTrackedResourceRepository(session)
