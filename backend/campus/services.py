"""Business logic services used by the route handlers.

Services are intentionally thin: they validate input, execute the few
domain rules the API has and persist aggregates via repositories.
Expected failures are raised as `ApiError` subclasses carrying the
message the client sees.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from passlib.context import CryptContext
import jwt
from sqlmodel import Session
from . import models, repositories
from .config import settings
from .errors import BadRequest, NotFound
from .schemas import (
    AnnouncementCreate,
    AnnouncementDelete,
    AnnouncementUpdate,
    RegisterIn,
    StaffOut,
    StudentOut,
    StudentProfileUpdate,
    to_payload,
)
from .utils.audience import is_visible_to_staff

PWD_CTX = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def token_subject(user: models.User) -> str:
    """The id a session token carries: the linked profile id, else the account id."""
    return user.user_id or user.id


def profile_fields(profile) -> dict:
    """Flatten a Staff/Student row into the camelCase fields filters refer to."""
    if isinstance(profile, models.Student):
        return to_payload(StudentOut, profile)
    return to_payload(StaffOut, profile)


class AuthService:
    """Account registration and credential checks."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def register(self, payload: RegisterIn) -> models.User:
        """Create a new account with a hashed password."""
        role = payload.role.upper()
        if role not in models.ROLES:
            raise BadRequest(f"Invalid role: {payload.role}")
        if self.user_repo.get_by_email(payload.email):
            raise BadRequest("User already exists")
        user = models.User(
            email=payload.email,
            name=payload.name,
            password_hash=PWD_CTX.hash(payload.password),
            role=role,
            user_id=payload.user_id,
        )
        return self.user_repo.create(user)

    def authenticate(self, email: str, password: str) -> Optional[str]:
        """Verify credentials and return a signed JWT token on success.

        Returns `None` if authentication fails.
        """
        user = self.user_repo.get_by_email(email)
        if not user:
            return None
        if not PWD_CTX.verify(password, user.password_hash):
            return None
        return self.issue_token(user)

    @staticmethod
    def issue_token(user: models.User) -> str:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRE_HOURS)
        payload = {
            "id": token_subject(user),
            "email": user.email,
            "role": user.role,
            "exp": int(expire.timestamp()),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


class DepartmentService:
    """Departments are addressed by their unique name."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.DepartmentRepository(session)

    def list_departments(self) -> List[models.Department]:
        return self.repo.list_all()

    def get(self, name: str) -> models.Department:
        department = self.repo.get_by_name(name)
        if not department:
            raise NotFound("Department not found")
        return department

    def create(self, name: Optional[str]) -> models.Department:
        if not name:
            raise BadRequest("Department name is required")
        if self.repo.get_by_name(name):
            raise BadRequest("Department already exists")
        return self.repo.create(models.Department(department=name))

    def rename(self, current: str, new_name: Optional[str]) -> models.Department:
        """Rename `current` to `new_name`.

        Renaming a department to its own name is a no-op success; taking
        the name of another department is refused.
        """
        if not new_name:
            raise BadRequest("Department name is required")
        existing = self.repo.get_by_name(new_name)
        if existing and existing.department != current:
            raise BadRequest("Department already exists")
        department = self.get(current)
        return self.repo.rename(department, new_name)

    def delete(self, name: str) -> None:
        self.repo.delete(self.get(name))


class AnnouncementService:
    """Staff announcements: audience filtering and issuer-only edits."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.AnnouncementRepository(session)
        self.staff_repo = repositories.StaffRepository(session)

    def list_for_staff(self, caller_id: str) -> List[models.Announcement]:
        """Return every announcement the staff member `caller_id` may read."""
        staff = self.staff_repo.get(str(caller_id))
        if not staff:
            raise NotFound("User profile not found")
        profile = profile_fields(staff)
        return [a for a in self.repo.list_all() if is_visible_to_staff(a, caller_id, profile)]

    def create(self, issuer: str, payload: AnnouncementCreate) -> models.Announcement:
        if not payload.title or not payload.message:
            raise BadRequest("Missing required fields")
        if payload.role not in models.ANNOUNCEMENT_ROLES:
            raise BadRequest("Missing permission")
        announcement = models.Announcement(
            title=payload.title,
            message=payload.message,
            filter=payload.filter,
            role=payload.role,
            is_global=payload.is_global,
            issuer=str(issuer),
        )
        return self.repo.create(announcement)

    def update(self, caller_id: str, payload: AnnouncementUpdate) -> models.Announcement:
        announcement = self._owned(caller_id, payload.id)
        changes = payload.model_dump(exclude_unset=True, exclude={"id"})
        if "role" in changes and changes["role"] not in models.ANNOUNCEMENT_ROLES:
            raise BadRequest("Missing permission")
        if any(key in changes and not changes[key] for key in ("title", "message")):
            raise BadRequest("Missing required fields")
        if "is_global" in changes and changes["is_global"] is None:
            del changes["is_global"]
        return self.repo.update(announcement, changes)

    def delete(self, caller_id: str, payload: AnnouncementDelete) -> None:
        self.repo.delete(self._owned(caller_id, payload.id))

    def _owned(self, caller_id: str, announcement_id) -> models.Announcement:
        """Load an announcement and check the caller issued it."""
        if not announcement_id:
            raise BadRequest("Id is required")
        announcement = self.repo.get(str(announcement_id))
        if not announcement:
            raise BadRequest("Announcement not found")
        if announcement.issuer != str(caller_id):
            raise BadRequest("This announcement was not issued by you")
        return announcement


class StudentProfileService:
    """Read, edit and remove student profiles."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.StudentRepository(session)
        self.user_repo = repositories.UserRepository(session)

    def get_for_account(self, account_id: str) -> models.Student:
        """Resolve the account `account_id` to its linked student profile."""
        user = self.user_repo.get(str(account_id))
        student = self.repo.get(user.user_id) if user and user.user_id else None
        if not student:
            raise NotFound("User profile not found")
        return student

    def update(self, student_id: str, payload: StudentProfileUpdate) -> models.Student:
        """Apply a profile edit to the student, its details and linked accounts.

        The three writes are staged on one session and committed together,
        so a failure leaves none of them applied.
        """
        fields = payload.model_fields_set
        if "email" in fields:
            raise BadRequest("Email cannot be updated")
        if "enrollment_no" in fields:
            raise BadRequest("Enrollment Number cannot be updated")
        if not fields:
            raise BadRequest("Data is required")
        changes = payload.model_dump(exclude_unset=True, exclude={"details", "email", "enrollment_no"})
        if "name" in changes and not changes["name"]:
            raise BadRequest("Name cannot be empty")
        student = self.repo.get(str(student_id))
        if not student:
            raise NotFound("Student not found")

        if payload.details is not None:
            details = self.repo.get_details(student.student_details_id)
            if not details:
                raise NotFound("Student details not found")
            for key, value in payload.details.model_dump(exclude_unset=True).items():
                setattr(details, key, value)
            self.session.add(details)

        for key, value in changes.items():
            setattr(student, key, value)
        self.session.add(student)

        if "name" in changes:
            for user in self.user_repo.list_linked_to(student.id):
                user.name = changes["name"]
                self.session.add(user)

        self.session.commit()
        self.session.refresh(student)
        return student

    def delete(self, student_id: str) -> None:
        student = self.repo.get(str(student_id))
        if not student:
            raise NotFound("Student not found")
        self.repo.delete(student)


class NotificationService:
    """Read side of in-app notifications."""
    def __init__(self, session: Session):
        self.session = session
        self.repo = repositories.NotificationRepository(session)

    def list_for(self, user_id: str) -> List[models.Notification]:
        return self.repo.list_for_user(str(user_id))

    def mark_read(self, user_id: str, notification_id: str) -> models.Notification:
        notification = self.repo.get(notification_id)
        if not notification or notification.user_id != str(user_id):
            raise NotFound("Notification not found")
        return self.repo.mark_read(notification)
