"""Fire-and-forget notification helpers.

These run as FastAPI background tasks after a response has been
produced, so they open their own database session and never raise:
a failure is logged and the triggering request is unaffected.
"""

import logging
from typing import Optional

from sqlmodel import Session

from . import models, repositories
from .database import engine
from .services import profile_fields, token_subject
from .utils.audience import is_recipient

logger = logging.getLogger("campus.notifications")


def create_notification(user_id: str, title: str, message: str) -> None:
    """Store a single notification for `user_id`."""
    try:
        with Session(engine) as session:
            repositories.NotificationRepository(session).add_many(
                [models.Notification(user_id=str(user_id), title=title, message=message)]
            )
    except Exception:
        logger.exception("failed to create notification for %s", user_id)
        return
    logger.info("notification created for %s", user_id)


def _load_profile(session: Session, user: models.User):
    if not user.user_id:
        return None
    if user.role == "STUDENT":
        return repositories.StudentRepository(session).get(user.user_id)
    return repositories.StaffRepository(session).get(user.user_id)


def announcement_recipients(session: Session, announcement: models.Announcement) -> list:
    """Return the ids to notify about `announcement`, issuer excluded."""
    users_repo = repositories.UserRepository(session)
    users = users_repo.list_all() if announcement.is_global else users_repo.list_by_role(announcement.role)
    recipients = []
    seen = {announcement.issuer}
    for user in users:
        subject = token_subject(user)
        if subject in seen:
            continue
        seen.add(subject)
        profile: Optional[dict] = None
        if announcement.filter and not announcement.is_global:
            row = _load_profile(session, user)
            profile = profile_fields(row) if row is not None else None
        if is_recipient(announcement, user.role, profile):
            recipients.append(subject)
    return recipients


def create_announcement_notifications(announcement_id: str) -> int:
    """Notify every recipient of an announcement; returns how many were stored."""
    try:
        with Session(engine) as session:
            announcement = repositories.AnnouncementRepository(session).get(announcement_id)
            if announcement is None:
                logger.warning("announcement %s vanished before notifying", announcement_id)
                return 0
            recipients = announcement_recipients(session, announcement)
            created = repositories.NotificationRepository(session).add_many(
                [
                    models.Notification(user_id=r, title=announcement.title, message=announcement.message)
                    for r in recipients
                ]
            )
    except Exception:
        logger.exception("failed to create notifications for announcement %s", announcement_id)
        return 0
    logger.info("announcement %s: %d notifications created", announcement_id, created)
    return created
