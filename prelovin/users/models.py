# prelovin/users/models.py

from sqlalchemy import Column, String, Text, DateTime
from ..database.core import Base
from datetime import datetime, timezone
import uuid


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    """
    A marketplace member. Rows are keyed by the identity provider's subject id
    and kept in sync through an upsert on every identity refresh.
    """
    __tablename__ = 'users'

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=True, index=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}')>"
