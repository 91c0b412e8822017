"""Notification Routes: read, mark read, clear the ledger's notification log."""

from fastapi import APIRouter, Depends, Query

from medsim.api.dependencies import get_simulation
from medsim.schemas.appointments import NotificationResponse
from medsim.services.simulation import Simulation

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    unread: bool = Query(False),
    sim: Simulation = Depends(get_simulation),
):
    """Newest first. unread=true filters out read entries."""
    items = (
        sim.ledger.unread_notifications() if unread
        else sim.ledger.notifications()
    )
    return [NotificationResponse(**n.to_dict()) for n in items]


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str, sim: Simulation = Depends(get_simulation),
):
    outcome = sim.ledger.mark_notification_read(notification_id)
    if not outcome.ok:
        raise outcome.error
    return NotificationResponse(**outcome.value.to_dict())


@router.delete("")
async def clear_notifications(sim: Simulation = Depends(get_simulation)):
    return {"cleared": sim.ledger.clear_notifications()}
