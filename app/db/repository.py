"""
app/db/repository.py — All database read/write operations.

Business logic should never write raw SQL or ORM queries directly —
everything goes through this module. This keeps DB logic centralized
and easy to test/mock.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.db.models import Client, ClientInteraction, ClientStatus, InteractionType, utcnow
from app.engine.models import ClientRecord, Interaction
from app.errors import ClientNotFoundError

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "name": Client.name.asc(),
    "last_interaction": Client.last_interaction_at.desc(),
    "created_at": Client.created_at.desc(),
}


# ── Snapshots ────────────────────────────────────────────────────────────────

def to_record(client: Client) -> ClientRecord:
    """Freeze an ORM Client into the snapshot the engine works on."""
    return ClientRecord(
        id=str(client.id),
        name=client.name,
        phone=client.phone,
        status=client.status,
        last_interaction_at=client.last_interaction_at,
        interactions=tuple(
            Interaction(
                id=str(i.id),
                date=i.date,
                description=i.description,
                type=i.type,
            )
            for i in client.interactions
        ),
        created_at=client.created_at,
        updated_at=client.updated_at,
    )


# ── Client reads ─────────────────────────────────────────────────────────────

def get_all_clients(db: Session) -> list[Client]:
    """Every client with interactions loaded, oldest first."""
    return (
        db.query(Client)
        .options(selectinload(Client.interactions))
        .order_by(Client.id.asc())
        .all()
    )


def get_client(db: Session, client_id: int) -> Optional[Client]:
    return db.query(Client).filter(Client.id == client_id).first()


def get_client_or_raise(db: Session, client_id: int) -> Client:
    client = get_client(db, client_id)
    if client is None:
        raise ClientNotFoundError(client_id)
    return client


def list_clients(
    db: Session,
    status: Optional[ClientStatus] = None,
    search: Optional[str] = None,
    sort_by: str = "last_interaction",
    limit: int = 50,
) -> list[Client]:
    """Filter by status and by a name/phone substring, then sort."""
    query = db.query(Client)
    if status:
        query = query.filter(Client.status == status)
    if search:
        term = search.strip()
        query = query.filter(
            or_(Client.name.ilike(f"%{term}%"), Client.phone.contains(term))
        )
    order = SORT_COLUMNS.get(sort_by, SORT_COLUMNS["last_interaction"])
    return query.order_by(order, Client.id.asc()).limit(limit).all()


# ── Client writes ────────────────────────────────────────────────────────────

def create_client(
    db: Session,
    name: str,
    phone: str,
    status: ClientStatus = ClientStatus.POTENTIAL,
    now: Optional[datetime] = None,
) -> Client:
    """Create a client. Until the first interaction, last contact = creation time."""
    now = now or utcnow()
    client = Client(
        name=name.strip(),
        phone=phone.strip(),
        status=status,
        last_interaction_at=now,
        created_at=now,
        updated_at=now,
    )
    db.add(client)
    db.flush()  # get the ID without committing
    logger.info("Client created: %s (id=%d, status=%s)", client.name, client.id, status.value)
    return client


def update_client(db: Session, client_id: int, **fields) -> Client:
    """Patch name / phone / status. Unknown or None-valued fields are ignored."""
    client = get_client_or_raise(db, client_id)
    for key in ("name", "phone", "status"):
        value = fields.get(key)
        if value is not None:
            setattr(client, key, value.strip() if isinstance(value, str) else value)
    client.updated_at = utcnow()
    db.flush()
    return client


def update_client_status(
    db: Session,
    client_id: int,
    status: ClientStatus,
    now: Optional[datetime] = None,
) -> None:
    """Set a client's status without loading it."""
    updated = db.query(Client).filter(Client.id == client_id).update(
        {"status": status, "updated_at": now or utcnow()}
    )
    if not updated:
        raise ClientNotFoundError(client_id)
    logger.debug("Client %s status → %s", client_id, status.value)


def delete_client(db: Session, client_id: int) -> None:
    client = get_client_or_raise(db, client_id)
    db.delete(client)
    db.flush()
    logger.info("Client %d deleted.", client_id)


# ── Interactions ─────────────────────────────────────────────────────────────

def add_interaction(
    db: Session,
    client_id: int,
    description: str,
    type: InteractionType = InteractionType.OTHER,
    now: Optional[datetime] = None,
) -> ClientInteraction:
    """Append an interaction and bump the client's last-contact timestamp."""
    client = get_client_or_raise(db, client_id)
    now = now or utcnow()

    interaction = ClientInteraction(
        date=now,
        description=description.strip(),
        type=type,
    )
    client.interactions.append(interaction)
    client.last_interaction_at = now
    client.updated_at = now
    db.flush()
    logger.debug("Interaction %d (%s) logged for client %d", interaction.id, type.value, client_id)
    return interaction


def delete_interactions_before(db: Session, cutoff: datetime) -> int:
    """
    Remove interactions dated before `cutoff`.

    Returns the number of clients whose history was trimmed.
    """
    client_ids = {
        row.client_id
        for row in db.query(ClientInteraction.client_id).filter(ClientInteraction.date < cutoff)
    }
    if not client_ids:
        return 0

    db.query(ClientInteraction).filter(ClientInteraction.date < cutoff).delete(
        synchronize_session=False
    )
    db.query(Client).filter(Client.id.in_(client_ids)).update(
        {"updated_at": utcnow()}, synchronize_session=False
    )
    db.expire_all()
    logger.info("Trimmed old interactions from %d clients.", len(client_ids))
    return len(client_ids)
