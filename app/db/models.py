"""
app/db/models.py — SQLAlchemy ORM models for the client relationship store.

Tables:
  - Client            → a customer record with its current relationship status
  - ClientInteraction → a logged call / email / meeting, linked to a Client
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Base ─────────────────────────────────────────────────────────────────────

class Base(DeclarativeBase):
    pass


# ── Enums ────────────────────────────────────────────────────────────────────

class ClientStatus(str, enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    POTENTIAL = "Potential"


class InteractionType(str, enum.Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    OTHER = "other"


# ── Models ───────────────────────────────────────────────────────────────────

class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False)
    status = Column(Enum(ClientStatus), default=ClientStatus.POTENTIAL, nullable=False, index=True)

    # Falls back to created_at until the first interaction is logged
    last_interaction_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships — ordered by id so insertion order is preserved
    interactions = relationship(
        "ClientInteraction",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="ClientInteraction.id",
    )

    def __repr__(self) -> str:
        return f"<Client id={self.id} name={self.name!r} status={self.status}>"


class ClientInteraction(Base):
    __tablename__ = "client_interactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    date = Column(DateTime, default=utcnow, nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Enum(InteractionType), default=InteractionType.OTHER, nullable=False)

    # Relationships
    client = relationship("Client", back_populates="interactions")

    def __repr__(self) -> str:
        return f"<ClientInteraction id={self.id} client_id={self.client_id} type={self.type}>"
