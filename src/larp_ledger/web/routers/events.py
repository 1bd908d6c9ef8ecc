from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from larp_ledger.app import LedgerApp
from larp_ledger.models.event import Event, EventRsvp
from larp_ledger.models.user import User
from larp_ledger.web.deps import current_user, get_ledger, require_admin
from larp_ledger.web.schemas import AttendanceIn, EventCreateIn, EventPatchIn, RsvpIn

router = APIRouter(tags=["events"])


@router.get("", response_model=List[Event])
def api_list_events(
    active_only: bool = Query(False), ledger: LedgerApp = Depends(get_ledger),
) -> List[Event]:
    return ledger.events.list_events(active_only=active_only)


@router.post("", response_model=Event, status_code=201)
def api_create_event(
    body: EventCreateIn, admin: User = Depends(require_admin), ledger: LedgerApp = Depends(get_ledger),
) -> Event:
    return ledger.events.create_event(
        name=body.name,
        event_date=body.event_date,
        created_by=admin.id,
        description=body.description,
        location=body.location,
    )


@router.get("/{event_id}", response_model=Event)
def api_get_event(event_id: str, ledger: LedgerApp = Depends(get_ledger)) -> Event:
    return ledger.events.get_event(event_id)


@router.patch("/{event_id}", response_model=Event)
def api_update_event(
    event_id: str,
    body: EventPatchIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> Event:
    return ledger.events.update_event(event_id, **body.model_dump(exclude_unset=True))


@router.delete("/{event_id}", response_model=Event)
def api_deactivate_event(
    event_id: str, admin: User = Depends(require_admin), ledger: LedgerApp = Depends(get_ledger),
) -> Event:
    return ledger.events.deactivate_event(event_id)


@router.get("/{event_id}/rsvps", response_model=List[EventRsvp])
def api_list_rsvps(
    event_id: str, admin: User = Depends(require_admin), ledger: LedgerApp = Depends(get_ledger),
) -> List[EventRsvp]:
    return ledger.events.list_rsvps(event_id)


@router.post("/{event_id}/rsvp", response_model=EventRsvp, status_code=201)
def api_rsvp(
    event_id: str,
    body: RsvpIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> EventRsvp:
    return ledger.events.rsvp(
        event_id, body.character_id, user.id, body.xp_purchases, body.xp_candle_purchases,
    )


@router.delete("/rsvps/{rsvp_id}", status_code=204)
def api_cancel_rsvp(
    rsvp_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> Response:
    ledger.events.cancel_rsvp(rsvp_id, requested_by=user.id)
    return Response(status_code=204)


@router.post("/rsvps/{rsvp_id}/attendance", response_model=EventRsvp)
def api_mark_attendance(
    rsvp_id: str,
    body: AttendanceIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> EventRsvp:
    return ledger.events.mark_attendance(rsvp_id, body.attended, admin.id)
