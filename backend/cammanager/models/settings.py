"""
CamManager - Key-Value Store Model
Durable slots for data that must survive a restart (the user collection)
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from cammanager.database import Base


class KeyValueEntry(Base):
    """
    Key-value slot.

    Common keys:
    - cammanager_users: JSON array of User records
    """
    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key='{self.key}')>"


# Slot holding the persisted user collection
USERS_KEY = "cammanager_users"
