"""Thin API layer: session booking, lifecycle transitions and listings."""
from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from coachbook.models import SessionStatus
from coachbook.routers.deps import Actor, get_actor, require_admin
from coachbook.schemas.sessions import (
    BookSessionRequest,
    CancelSessionRequest,
    CompleteSessionRequest,
    RescheduleSessionRequest,
    SessionNotesRequest,
    SessionOut,
    SessionStatsOut,
)
from coachbook.services import session_service, stats_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("/book", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
def book(body: BookSessionRequest, background_tasks: BackgroundTasks, actor: Actor = Depends(get_actor)):
    """Book a session for the acting client, consuming one package unit if purchase_id is set."""
    return session_service.book_session(body, actor.id, background_tasks=background_tasks)


@router.get("/mine", response_model=list[SessionOut])
def my_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    upcoming: bool = False,
    actor: Actor = Depends(get_actor),
):
    return session_service.list_sessions(
        client_id=actor.id,
        status=status_filter.value if status_filter else None,
        upcoming=upcoming,
    )


@router.get("/coach", response_model=list[SessionOut])
def coach_sessions(
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    on_date: Optional[date] = Query(None, alias="date"),
    upcoming: bool = False,
    actor: Actor = Depends(get_actor),
):
    """Sessions of the acting coach; empty if the actor has no coach profile."""
    return session_service.list_coach_sessions(
        actor.id,
        status=status_filter.value if status_filter else None,
        on_date=on_date,
        upcoming=upcoming,
    )


@router.get("/stats/overview", response_model=SessionStatsOut)
def stats_overview(actor: Actor = Depends(require_admin)):
    return stats_service.session_stats()


@router.get("", response_model=list[SessionOut])
def list_all(
    client_id: Optional[UUID] = None,
    coach_id: Optional[UUID] = None,
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    on_date: Optional[date] = Query(None, alias="date"),
    upcoming: bool = False,
    actor: Actor = Depends(require_admin),
):
    return session_service.list_sessions(
        client_id=str(client_id) if client_id else None,
        coach_id=str(coach_id) if coach_id else None,
        status=status_filter.value if status_filter else None,
        on_date=on_date,
        upcoming=upcoming,
    )


@router.get("/{session_id}", response_model=SessionOut)
def get_one(session_id: UUID, actor: Actor = Depends(get_actor)):
    return session_service.get_session_for_actor(str(session_id), actor.id, actor.role)


@router.put("/{session_id}/cancel", response_model=SessionOut)
def cancel(
    session_id: UUID,
    body: CancelSessionRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
):
    return session_service.cancel_session(
        str(session_id), actor.id, actor.role, body.reason, background_tasks=background_tasks
    )


@router.put("/{session_id}/reschedule", response_model=SessionOut)
def reschedule(
    session_id: UUID,
    body: RescheduleSessionRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
):
    return session_service.reschedule_session(
        str(session_id),
        actor.id,
        actor.role,
        body.session_date,
        body.start_time,
        body.end_time,
        background_tasks=background_tasks,
    )


@router.put("/{session_id}/complete", response_model=SessionOut)
def complete(
    session_id: UUID,
    body: CompleteSessionRequest,
    background_tasks: BackgroundTasks,
    actor: Actor = Depends(get_actor),
):
    return session_service.complete_session(
        str(session_id),
        actor.id,
        actor.role,
        body.coach_notes,
        body.exercises,
        background_tasks=background_tasks,
    )


@router.put("/{session_id}/notes", response_model=SessionOut)
def notes(session_id: UUID, body: SessionNotesRequest, actor: Actor = Depends(get_actor)):
    return session_service.update_session_notes(
        str(session_id), actor.id, actor.role, body.coach_notes, body.exercises
    )
