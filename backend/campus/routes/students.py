"""Student profile endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..responses import success_response
from ..schemas import StudentOut, StudentProfileUpdate, to_payload

router = APIRouter(prefix="/api/student/profile", tags=["students"])


@router.get("/{id}")
def get_profile(id: str, db: Session = Depends(get_session)):
    """Return the student profile linked to account `id`, details included."""
    student = services.StudentProfileService(db).get_for_account(id)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(StudentOut, student), "Profile fetched successfully"),
    )


@router.patch("/{id}")
def update_profile(id: str, payload: StudentProfileUpdate, db: Session = Depends(get_session)):
    """Edit student `id`. `email` and `enrollmentNo` are immutable."""
    student = services.StudentProfileService(db).update(id, payload)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(StudentOut, student), "Profile updated successfully"),
    )


@router.delete("/{id}")
def delete_profile(id: str, db: Session = Depends(get_session)):
    services.StudentProfileService(db).delete(id)
    return JSONResponse(status_code=200, content=success_response(200, None, "Profile deleted successfully"))
