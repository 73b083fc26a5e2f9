from typing import Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
import logging

from .models import User, utcnow
from ..schemas.user import UpsertUser

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class UserService:

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def upsert_user(db: Session, user_data: UpsertUser) -> User:
        """
        Insert the user or overwrite every supplied field in one statement.

        Identity refresh events can arrive concurrently for the same id, so
        this is a single INSERT ... ON CONFLICT (id) DO UPDATE rather than a
        read followed by an insert or update. Fields left out of ``user_data``
        keep their stored value.
        """
        values: Dict[str, Any] = user_data.model_dump(exclude_unset=True)
        values["id"] = user_data.id
        now = utcnow()

        insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
        if insert is None:
            raise NotImplementedError(f"upsert is not supported on {db.get_bind().dialect.name}")

        statement = insert(User).values(**values, created_at=now, updated_at=now)
        updates = {key: statement.excluded[key] for key in values if key != "id"}
        updates["updated_at"] = now
        statement = statement.on_conflict_do_update(index_elements=[User.id], set_=updates)

        try:
            db.execute(statement)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error upserting user {user_data.id}: {e}")
            db.rollback()
            raise

        user = db.query(User).populate_existing().filter(User.id == user_data.id).first()
        logger.info(f"Upserted user {user.id}")
        return user
