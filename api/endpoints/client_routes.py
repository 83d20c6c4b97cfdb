"""
api/endpoints/client_routes.py — CRUD routes for clients and their interactions.

GET    /clients                    — List clients (filter by status, search, sort)
POST   /clients                    — Create a client
GET    /clients/stats              — Dashboard counts
GET    /clients/{id}               — Get a single client with its interactions
PATCH  /clients/{id}               — Update name / phone / status
DELETE /clients/{id}               — Delete a client
POST   /clients/{id}/interactions  — Log an interaction
PATCH  /clients/{id}/status        — Change relationship status
"""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.db.models import ClientStatus
from app.db.repository import (
    add_interaction,
    create_client,
    delete_client,
    get_client,
    list_clients,
    update_client,
    update_client_status,
)
from app.errors import ClientNotFoundError, ValidationError
from app.services.client_service import portfolio_dashboard
from app.services.validation import ensure_valid_client, ensure_valid_interaction
from api.schemas import (
    ClientCreate,
    ClientOut,
    ClientStatusUpdate,
    ClientUpdate,
    DashboardStatsOut,
    InteractionCreate,
    InteractionOut,
    OKResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _not_found(client_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Client {client_id} not found.")


def _invalid(exc: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=exc.errors)


@router.get("/", response_model=list[ClientOut], summary="List clients")
def list_all_clients(
    status: Optional[ClientStatus] = Query(
        default=None,
        description="Filter by status. Omit to return all clients.",
    ),
    search: Optional[str] = Query(default=None, description="Substring of name or phone"),
    sort_by: Literal["name", "last_interaction", "created_at"] = Query(default="last_interaction"),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Return clients, optionally filtered by status and a name/phone search term."""
    return list_clients(db, status=status, search=search, sort_by=sort_by, limit=limit)


@router.post("/", response_model=ClientOut, status_code=201, summary="Create client")
def create_new_client(payload: ClientCreate, db: Session = Depends(get_db)):
    try:
        ensure_valid_client(payload.name, payload.phone)
    except ValidationError as exc:
        raise _invalid(exc)
    client = create_client(db, name=payload.name, phone=payload.phone, status=payload.status)
    db.commit()
    return client


@router.get("/stats", response_model=DashboardStatsOut, summary="Dashboard counts")
def client_stats(db: Session = Depends(get_db)):
    """Totals by status plus clients with no interaction in the last 30 days."""
    return portfolio_dashboard(db)


@router.get("/{client_id}", response_model=ClientOut, summary="Get client by ID")
def get_one_client(client_id: int, db: Session = Depends(get_db)):
    client = get_client(db, client_id)
    if not client:
        raise _not_found(client_id)
    return client


@router.patch("/{client_id}", response_model=ClientOut, summary="Update client")
def patch_client(client_id: int, payload: ClientUpdate, db: Session = Depends(get_db)):
    try:
        ensure_valid_client(payload.name, payload.phone, partial=True)
        client = update_client(
            db, client_id, name=payload.name, phone=payload.phone, status=payload.status,
        )
    except ValidationError as exc:
        raise _invalid(exc)
    except ClientNotFoundError:
        raise _not_found(client_id)
    db.commit()
    return client


@router.delete("/{client_id}", response_model=OKResponse, summary="Delete client")
def remove_client(client_id: int, db: Session = Depends(get_db)):
    try:
        delete_client(db, client_id)
    except ClientNotFoundError:
        raise _not_found(client_id)
    db.commit()
    return OKResponse(message=f"Client {client_id} deleted.")


@router.post(
    "/{client_id}/interactions",
    response_model=InteractionOut,
    status_code=201,
    summary="Log an interaction",
)
def log_interaction(client_id: int, payload: InteractionCreate, db: Session = Depends(get_db)):
    try:
        ensure_valid_interaction(payload.description)
        interaction = add_interaction(
            db, client_id, description=payload.description, type=payload.type,
        )
    except ValidationError as exc:
        raise _invalid(exc)
    except ClientNotFoundError:
        raise _not_found(client_id)
    db.commit()
    return interaction


@router.patch("/{client_id}/status", response_model=ClientOut, summary="Change client status")
def patch_client_status(
    client_id: int,
    payload: ClientStatusUpdate,
    db: Session = Depends(get_db),
):
    """Manually set the relationship status: Active, Inactive or Potential."""
    try:
        update_client_status(db, client_id, payload.status)
    except ClientNotFoundError:
        raise _not_found(client_id)
    db.commit()
    client = get_client(db, client_id)
    db.refresh(client)
    logger.info("Client %d status updated to %s via API.", client_id, payload.status.value)
    return client
