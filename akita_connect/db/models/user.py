"""User database model."""
import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from akita_connect.db.base import Base


class User(Base):
    """Member account mirrored from the hosted auth provider.

    The primary key is the auth provider's user id, so webhook records and
    access tokens can be resolved without a mapping table.
    """

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
