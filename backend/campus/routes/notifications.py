"""In-app notification endpoints for the authenticated caller."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import services
from ..auth import require_token
from ..database import get_session
from ..responses import success_response
from ..schemas import NotificationOut, dump_many, to_payload

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def list_notifications(token: dict = Depends(require_token), db: Session = Depends(get_session)):
    items = services.NotificationService(db).list_for(token["id"])
    return JSONResponse(
        status_code=200,
        content=success_response(200, dump_many(NotificationOut, items), "Notifications fetched successfully"),
    )


@router.patch("/{notification_id}/read")
def mark_notification_read(
    notification_id: str, token: dict = Depends(require_token), db: Session = Depends(get_session)
):
    item = services.NotificationService(db).mark_read(token["id"], notification_id)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(NotificationOut, item), "Notification marked as read"),
    )
