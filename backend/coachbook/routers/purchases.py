"""Thin API layer: package purchase ledger view."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from coachbook.core.config import get_settings
from coachbook.core.exceptions import Unauthorized
from coachbook.routers.deps import Actor, get_actor
from coachbook.schemas.sessions import LedgerSummaryOut
from coachbook.services.ledger_service import ledger_summary

router = APIRouter(prefix="/package-purchases", tags=["package-purchases"])


@router.get("/{purchase_id}/ledger", response_model=LedgerSummaryOut)
def ledger(purchase_id: UUID, actor: Actor = Depends(get_actor)):
    """Balance of a purchase and whether it matches the sessions holding its units."""
    summary = ledger_summary(str(purchase_id))
    if summary["client_id"] != actor.id and actor.role not in get_settings().admin_roles_set():
        raise Unauthorized(details={"purchase_id": str(purchase_id)})
    return summary
