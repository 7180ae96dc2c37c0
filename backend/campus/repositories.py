"""Repository classes encapsulating database operations.

Each repository is small and focused on a single aggregate (users,
departments, profiles, announcements, notifications). Repositories
return SQLModel objects; single-row writes commit and refresh, while
multi-row changes are staged and committed once by the caller.
"""

from typing import List, Optional
from sqlmodel import Session, select
from . import models


class UserRepository:
    """CRUD operations for `User` accounts."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance."""
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def get(self, user_id: str) -> Optional[models.User]:
        """Get a `User` by primary key."""
        return self.session.get(models.User, user_id)

    def get_by_email(self, email: str) -> Optional[models.User]:
        """Return a `User` by email or `None` if not found."""
        stmt = select(models.User).where(models.User.email == email)
        return self.session.exec(stmt).first()

    def list_all(self) -> List[models.User]:
        return self.session.exec(select(models.User)).all()

    def list_by_role(self, role: str) -> List[models.User]:
        stmt = select(models.User).where(models.User.role == role)
        return self.session.exec(stmt).all()

    def list_linked_to(self, profile_id: str) -> List[models.User]:
        """Return every account whose `user_id` points at `profile_id`."""
        stmt = select(models.User).where(models.User.user_id == profile_id)
        return self.session.exec(stmt).all()


class DepartmentRepository:
    """CRUD operations for `Department` rows, keyed by name."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Department]:
        stmt = select(models.Department).order_by(models.Department.department)
        return self.session.exec(stmt).all()

    def get_by_name(self, name: str) -> Optional[models.Department]:
        stmt = select(models.Department).where(models.Department.department == name)
        return self.session.exec(stmt).first()

    def create(self, department: models.Department) -> models.Department:
        self.session.add(department)
        self.session.commit()
        self.session.refresh(department)
        return department

    def rename(self, department: models.Department, new_name: str) -> models.Department:
        department.department = new_name
        self.session.add(department)
        self.session.commit()
        self.session.refresh(department)
        return department

    def delete(self, department: models.Department) -> None:
        self.session.delete(department)
        self.session.commit()


class StaffRepository:
    """Lookups for `Staff` profiles."""
    def __init__(self, session: Session):
        self.session = session

    def get(self, staff_id: str) -> Optional[models.Staff]:
        return self.session.get(models.Staff, staff_id)

    def create(self, staff: models.Staff) -> models.Staff:
        self.session.add(staff)
        self.session.commit()
        self.session.refresh(staff)
        return staff


class StudentRepository:
    """`Student` profiles and their one-to-one `StudentDetails`."""
    def __init__(self, session: Session):
        self.session = session

    def get(self, student_id: str) -> Optional[models.Student]:
        return self.session.get(models.Student, student_id)

    def get_details(self, details_id: Optional[str]) -> Optional[models.StudentDetails]:
        if not details_id:
            return None
        return self.session.get(models.StudentDetails, details_id)

    def create(self, student: models.Student, details: Optional[models.StudentDetails] = None) -> models.Student:
        """Create a student, inserting `details` first so the link resolves."""
        if details is not None:
            self.session.add(details)
            self.session.flush()
            student.student_details_id = details.id
        self.session.add(student)
        self.session.commit()
        self.session.refresh(student)
        return student

    def delete(self, student: models.Student) -> None:
        """Delete a student together with its details row."""
        details = self.get_details(student.student_details_id)
        self.session.delete(student)
        if details is not None:
            self.session.flush()
            self.session.delete(details)
        self.session.commit()


class AnnouncementRepository:
    """CRUD operations for `Announcement` rows."""
    def __init__(self, session: Session):
        self.session = session

    def list_all(self) -> List[models.Announcement]:
        stmt = select(models.Announcement).order_by(models.Announcement.created_at.desc())
        return self.session.exec(stmt).all()

    def get(self, announcement_id: str) -> Optional[models.Announcement]:
        return self.session.get(models.Announcement, announcement_id)

    def create(self, announcement: models.Announcement) -> models.Announcement:
        self.session.add(announcement)
        self.session.commit()
        self.session.refresh(announcement)
        return announcement

    def update(self, announcement: models.Announcement, changes: dict) -> models.Announcement:
        for key, value in changes.items():
            setattr(announcement, key, value)
        self.session.add(announcement)
        self.session.commit()
        self.session.refresh(announcement)
        return announcement

    def delete(self, announcement: models.Announcement) -> None:
        self.session.delete(announcement)
        self.session.commit()


class NotificationRepository:
    """Persist and query in-app notifications."""
    def __init__(self, session: Session):
        self.session = session

    def add_many(self, notifications: List[models.Notification]) -> int:
        """Insert `notifications` in one commit and return how many."""
        for n in notifications:
            self.session.add(n)
        self.session.commit()
        return len(notifications)

    def list_for_user(self, user_id: str) -> List[models.Notification]:
        stmt = (
            select(models.Notification)
            .where(models.Notification.user_id == user_id)
            .order_by(models.Notification.created_at.desc())
        )
        return self.session.exec(stmt).all()

    def get(self, notification_id: str) -> Optional[models.Notification]:
        return self.session.get(models.Notification, notification_id)

    def mark_read(self, notification: models.Notification) -> models.Notification:
        notification.is_read = True
        self.session.add(notification)
        self.session.commit()
        self.session.refresh(notification)
        return notification
