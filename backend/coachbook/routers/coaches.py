"""Thin API layer: coach calendar availability."""
from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query

from coachbook.schemas.sessions import AvailableSlotsOut
from coachbook.services.availability_service import resolve_day

router = APIRouter(prefix="/coaches", tags=["coaches"])


@router.get("/{coach_id}/available-slots", response_model=AvailableSlotsOut)
def available_slots(coach_id: UUID, on_date: date = Query(..., alias="date")):
    """Template slots for the weekday of `date` not overlapped by a scheduled session."""
    return resolve_day(str(coach_id), on_date)
