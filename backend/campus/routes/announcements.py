"""Staff announcement endpoints.

All verbs require a session token. Reads are filtered per caller;
edits and deletes are limited to the announcement's issuer. Creating an
announcement schedules in-app notifications as background tasks.
"""

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import notifications, services
from ..auth import require_token
from ..database import get_session
from ..responses import success_response
from ..schemas import AnnouncementCreate, AnnouncementDelete, AnnouncementOut, AnnouncementUpdate, dump_many, to_payload

router = APIRouter(prefix="/api/staff/announcements", tags=["announcements"])


@router.get("")
def list_announcements(token: dict = Depends(require_token), db: Session = Depends(get_session)):
    """Return the announcements visible to the calling staff member."""
    announcements = services.AnnouncementService(db).list_for_staff(str(token["id"]))
    return JSONResponse(
        status_code=200,
        content=success_response(200, dump_many(AnnouncementOut, announcements), "Announcements fetched successfully"),
    )


@router.post("")
def create_announcement(
    payload: AnnouncementCreate,
    background_tasks: BackgroundTasks,
    token: dict = Depends(require_token),
    db: Session = Depends(get_session),
):
    """Create an announcement issued by the caller and notify its audience."""
    issuer = str(token["id"])
    announcement = services.AnnouncementService(db).create(issuer, payload)
    background_tasks.add_task(notifications.create_announcement_notifications, announcement.id)
    background_tasks.add_task(
        notifications.create_notification, issuer, "You created a new announcement", announcement.title
    )
    return JSONResponse(
        status_code=201,
        content=success_response(201, to_payload(AnnouncementOut, announcement), "Announcement created successfully"),
    )


@router.patch("")
def update_announcement(
    payload: AnnouncementUpdate, token: dict = Depends(require_token), db: Session = Depends(get_session)
):
    announcement = services.AnnouncementService(db).update(str(token["id"]), payload)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(AnnouncementOut, announcement), "Announcement updated successfully"),
    )


@router.delete("")
def delete_announcement(
    payload: AnnouncementDelete, token: dict = Depends(require_token), db: Session = Depends(get_session)
):
    services.AnnouncementService(db).delete(str(token["id"]), payload)
    return JSONResponse(status_code=200, content=success_response(200, None, "Announcement deleted successfully"))
