"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable and provide validation for
the route handlers and tests. The wire format is camelCase
(`enrollmentNo`, `isGlobal`); attribute names stay snake_case.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for every schema: camelCase aliases, ORM attribute loading."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class StrictCamelModel(CamelModel):
    """Request bodies that must not carry unknown fields."""
    model_config = ConfigDict(extra="forbid")


def to_payload(schema: Type[CamelModel], obj: Any) -> dict:
    """Serialize an ORM object through `schema` into a JSON-ready dict."""
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


# --- auth -----------------------------------------------------------------

class RegisterIn(CamelModel):
    """Payload for account registration."""
    email: str
    password: str
    name: str
    role: str
    user_id: Optional[str] = None


class LoginIn(CamelModel):
    """Payload for the login endpoint."""
    email: str
    password: str


class TokenOut(CamelModel):
    """Authentication response containing an access token."""
    access_token: str


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    role: str
    user_id: Optional[str] = None
    created_at: datetime


# --- departments ----------------------------------------------------------

class DepartmentIn(CamelModel):
    """Create/rename payload. Presence is checked by the service so the
    caller gets the domain message rather than a schema error."""
    department: Optional[str] = None


class DepartmentOut(CamelModel):
    id: str
    department: str
    created_at: datetime


# --- announcements --------------------------------------------------------

class AnnouncementCreate(CamelModel):
    title: Optional[str] = None
    message: Optional[str] = None
    filter: Optional[Dict[str, Any]] = None
    role: Optional[str] = None
    is_global: bool = False


class AnnouncementUpdate(StrictCamelModel):
    """Partial update; only the fields present in the body are written."""
    id: Optional[Union[str, int]] = None
    title: Optional[str] = None
    message: Optional[str] = None
    filter: Optional[Dict[str, Any]] = None
    role: Optional[str] = None
    is_global: Optional[bool] = None


class AnnouncementDelete(CamelModel):
    id: Optional[Union[str, int]] = None


class AnnouncementOut(CamelModel):
    id: str
    title: str
    message: str
    issuer: str
    role: str
    filter: Optional[Dict[str, Any]] = None
    is_global: bool
    created_at: datetime


# --- profiles -------------------------------------------------------------

class StaffOut(CamelModel):
    id: str
    name: str
    email: str
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None


class StudentDetailsOut(CamelModel):
    id: str
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    guardian_phone: Optional[str] = None
    blood_group: Optional[str] = None


class StudentOut(CamelModel):
    id: str
    name: str
    email: str
    enrollment_no: str
    department: Optional[str] = None
    batch: Optional[str] = None
    semester: Optional[int] = None
    phone: Optional[str] = None
    student_details_id: Optional[str] = None
    details: Optional[StudentDetailsOut] = None


class StudentDetailsUpdate(StrictCamelModel):
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    guardian_phone: Optional[str] = None
    blood_group: Optional[str] = None


class StudentProfileUpdate(StrictCamelModel):
    """PATCH body for a student profile.

    `email` and `enrollment_no` are accepted by the schema only so the
    service can refuse them with a precise message.
    """
    name: Optional[str] = None
    department: Optional[str] = None
    batch: Optional[str] = None
    semester: Optional[int] = None
    phone: Optional[str] = None
    details: Optional[StudentDetailsUpdate] = None
    email: Optional[str] = None
    enrollment_no: Optional[str] = None


# --- notifications --------------------------------------------------------

class NotificationOut(CamelModel):
    id: str
    user_id: str
    title: str
    message: str
    is_read: bool
    created_at: datetime


def dump_many(schema: Type[CamelModel], objs: List[Any]) -> List[dict]:
    return [to_payload(schema, o) for o in objs]
