"""SQLModel data models.

This module defines the application's database tables using SQLModel.
Each class maps to a table; one-to-one links are plain unique foreign
keys plus a `Relationship` where the API needs to load the pair.
"""

import uuid
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from datetime import datetime, timezone


ROLES = ("ADMIN", "STAFF", "FACULTY", "STUDENT")
ANNOUNCEMENT_ROLES = ("STUDENT", "FACULTY", "STAFF")


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Department(SQLModel, table=True):
    """An academic department. `department` is the unique display name
    and doubles as the lookup key in the admin routes."""
    id: str = Field(default_factory=_new_id, primary_key=True)
    department: str = Field(index=True, nullable=False, unique=True)
    created_at: datetime = Field(default_factory=_now)


class User(SQLModel, table=True):
    """A login account.

    Fields:
    - `email`: unique login name
    - `password_hash`: hashed password string (never store plaintext)
    - `role`: one of `ROLES`
    - `user_id`: id of the linked `Staff` or `Student` profile, if any
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    email: str = Field(index=True, nullable=False, unique=True)
    name: str
    password_hash: str
    role: str = Field(index=True)
    user_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=_now)


class Staff(SQLModel, table=True):
    """Profile of a staff or faculty member."""
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    department: Optional[str] = Field(default=None, index=True)
    designation: Optional[str] = None
    phone: Optional[str] = None


class StudentDetails(SQLModel, table=True):
    """Personal details kept beside a `Student` row."""
    __tablename__ = "student_details"

    id: str = Field(default_factory=_new_id, primary_key=True)
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    guardian_phone: Optional[str] = None
    blood_group: Optional[str] = None
    student: Optional["Student"] = Relationship(back_populates="details")


class Student(SQLModel, table=True):
    """Academic profile of a student.

    `email` and `enrollment_no` are fixed once the profile exists; the
    profile API refuses to change them.
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str
    email: str = Field(index=True, unique=True)
    enrollment_no: str = Field(index=True, unique=True)
    department: Optional[str] = Field(default=None, index=True)
    batch: Optional[str] = None
    semester: Optional[int] = None
    phone: Optional[str] = None
    student_details_id: Optional[str] = Field(default=None, foreign_key="student_details.id", unique=True)
    details: Optional[StudentDetails] = Relationship(back_populates="student")


class Announcement(SQLModel, table=True):
    """A staff announcement.

    `filter` maps a profile field name to the list of values that
    qualify a reader, e.g. `{"department": ["CSE", "ECE"]}`.
    """
    id: str = Field(default_factory=_new_id, primary_key=True)
    title: str
    message: str
    issuer: str = Field(index=True)
    role: str
    filter: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    is_global: bool = False
    created_at: datetime = Field(default_factory=_now)


class Notification(SQLModel, table=True):
    """An in-app notification addressed to `user_id`."""
    id: str = Field(default_factory=_new_id, primary_key=True)
    user_id: str = Field(index=True)
    title: str
    message: str
    is_read: bool = False
    created_at: datetime = Field(default_factory=_now)
