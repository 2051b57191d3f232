"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from crud_api.db.models import Chocolate, User
from crud_api.db.session import Database

logger = logging.getLogger(__name__)


class NotFoundError(LookupError):
    """Raised when an entity id does not resolve to a row."""

    def __init__(self, entity: str, entity_id) -> None:
        super().__init__(f"{entity} with id {entity_id} does not exist")
        self.entity = entity
        self.entity_id = entity_id


# Ids are stored as signed 64-bit integers; anything outside cannot exist.
MAX_ID = 2**63 - 1


def _parse_id(entity: str, value) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise NotFoundError(entity, value) from None
    if not -MAX_ID - 1 <= parsed <= MAX_ID:
        raise NotFoundError(entity, value)
    return parsed


def _unique_ids(entity: str, values: Iterable) -> list[int]:
    seen: list[int] = []
    for value in values:
        parsed = _parse_id(entity, value)
        if parsed not in seen:
            seen.append(parsed)
    return seen


def _load_chocolates(session: Session, ids: list[int]) -> list[Chocolate]:
    if not ids:
        return []
    found = {c.id: c for c in session.execute(select(Chocolate).where(Chocolate.id.in_(ids))).scalars()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFoundError("chocolate", missing[0])
    return [found[i] for i in ids]


class ChocolateStorage:
    """CRUD helpers for chocolates."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def get_all(self, offset: int | None = None, limit: int | None = None) -> list[Chocolate]:
        stmt = select(Chocolate).order_by(Chocolate.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.database.session() as session:
            return list(session.execute(stmt).scalars().all())

    def count(self) -> int:
        with self.database.session() as session:
            return session.execute(select(func.count()).select_from(Chocolate)).scalar_one()

    def get_one(self, chocolate_id) -> Chocolate:
        pk = _parse_id("chocolate", chocolate_id)
        with self.database.session() as session:
            entity = session.get(Chocolate, pk)
            if entity is None:
                raise NotFoundError("chocolate", chocolate_id)
            return entity

    def insert(self, name: str, taste: Optional[str] = None) -> Chocolate:
        entity = Chocolate(name=name, taste=taste or "")
        with self.database.session() as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
        logger.debug("Inserted chocolate %s", entity.id)
        return entity

    def update(self, chocolate_id, **values) -> Chocolate:
        pk = _parse_id("chocolate", chocolate_id)
        with self.database.session() as session:
            entity = session.get(Chocolate, pk)
            if entity is None:
                raise NotFoundError("chocolate", chocolate_id)
            for key, value in values.items():
                setattr(entity, key, value)
            session.commit()
            session.refresh(entity)
        logger.debug("Updated chocolate %s: %s", pk, sorted(values))
        return entity

    def delete(self, chocolate_id) -> None:
        pk = _parse_id("chocolate", chocolate_id)
        with self.database.session() as session:
            entity = session.get(Chocolate, pk)
            if entity is None:
                raise NotFoundError("chocolate", chocolate_id)
            session.delete(entity)
            session.commit()
        logger.debug("Deleted chocolate %s", pk)


class UserStorage:
    """CRUD helpers for users, including the sweets relationship."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def _get(self, session: Session, user_id) -> User:
        pk = _parse_id("user", user_id)
        stmt = (
            select(User)
            .where(User.id == pk)
            .options(selectinload(User.sweets))
            .execution_options(populate_existing=True)
        )
        entity = session.execute(stmt).scalar_one_or_none()
        if entity is None:
            raise NotFoundError("user", user_id)
        return entity

    # -------------------------- users --------------------------
    def get_all(self, offset: int | None = None, limit: int | None = None) -> list[User]:
        stmt = select(User).options(selectinload(User.sweets)).order_by(User.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.database.session() as session:
            return list(session.execute(stmt).scalars().all())

    def count(self) -> int:
        with self.database.session() as session:
            return session.execute(select(func.count()).select_from(User)).scalar_one()

    def get_one(self, user_id) -> User:
        with self.database.session() as session:
            return self._get(session, user_id)

    def insert(self, username: str, sweet_ids: Iterable = ()) -> User:
        wanted = _unique_ids("chocolate", sweet_ids)
        with self.database.session() as session:
            entity = User(username=username)
            entity.sweets = _load_chocolates(session, wanted)
            session.add(entity)
            session.commit()
            entity = self._get(session, entity.id)
        logger.debug("Inserted user %s", entity.id)
        return entity

    def update(self, user_id, sweet_ids: Iterable | None = None, **values) -> User:
        """Set attributes and, when ``sweet_ids`` is given, swap the sweets, in one commit."""
        wanted = None if sweet_ids is None else _unique_ids("chocolate", sweet_ids)
        with self.database.session() as session:
            entity = self._get(session, user_id)
            if wanted is not None:
                entity.sweets = _load_chocolates(session, wanted)
            for key, value in values.items():
                setattr(entity, key, value)
            session.commit()
            entity = self._get(session, entity.id)
        logger.debug("Updated user %s: %s", user_id, sorted(values))
        return entity

    def delete(self, user_id) -> None:
        with self.database.session() as session:
            entity = self._get(session, user_id)
            session.delete(entity)
            session.commit()
        logger.debug("Deleted user %s", user_id)

    # -------------------------- sweets --------------------------
    def get_sweets(self, user_id) -> list[Chocolate]:
        return list(self.get_one(user_id).sweets)

    def add_sweets(self, user_id, chocolate_ids: Iterable) -> User:
        wanted = _unique_ids("chocolate", chocolate_ids)
        with self.database.session() as session:
            entity = self._get(session, user_id)
            current = {c.id for c in entity.sweets}
            for chocolate in _load_chocolates(session, wanted):
                if chocolate.id not in current:
                    entity.sweets.append(chocolate)
            session.commit()
            entity = self._get(session, entity.id)
        logger.debug("Linked sweets %s to user %s", wanted, user_id)
        return entity

    def remove_sweets(self, user_id, chocolate_ids: Iterable) -> User:
        unwanted = set(_unique_ids("chocolate", chocolate_ids))
        with self.database.session() as session:
            entity = self._get(session, user_id)
            entity.sweets = [c for c in entity.sweets if c.id not in unwanted]
            session.commit()
            entity = self._get(session, entity.id)
        logger.debug("Unlinked sweets %s from user %s", sorted(unwanted), user_id)
        return entity

    def replace_sweets(self, user_id, chocolate_ids: Iterable) -> User:
        """Swap the whole sweets set in one transaction."""
        return self.update(user_id, sweet_ids=chocolate_ids)
