"""Admin department endpoints.

Departments are addressed by name: the `{id}` path segment is the
department name itself.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlmodel import Session

from .. import services
from ..database import get_session
from ..responses import success_response
from ..schemas import DepartmentIn, DepartmentOut, dump_many, to_payload

router = APIRouter(prefix="/api/admin/department", tags=["departments"])


@router.get("")
def list_departments(db: Session = Depends(get_session)):
    departments = services.DepartmentService(db).list_departments()
    return JSONResponse(
        status_code=200,
        content=success_response(200, dump_many(DepartmentOut, departments), "Departments fetched successfully"),
    )


@router.post("")
def create_department(payload: DepartmentIn, db: Session = Depends(get_session)):
    department = services.DepartmentService(db).create(payload.department)
    return JSONResponse(
        status_code=201,
        content=success_response(201, to_payload(DepartmentOut, department), "Department created successfully"),
    )


@router.get("/{id}")
def get_department(id: str, db: Session = Depends(get_session)):
    department = services.DepartmentService(db).get(id)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(DepartmentOut, department), "Department fetched successfully"),
    )


@router.put("/{id}")
def rename_department(id: str, payload: DepartmentIn, db: Session = Depends(get_session)):
    """Rename department `id` to the `department` given in the body."""
    department = services.DepartmentService(db).rename(id, payload.department)
    return JSONResponse(
        status_code=200,
        content=success_response(200, to_payload(DepartmentOut, department), "Department updated successfully"),
    )


@router.delete("/{id}")
def delete_department(id: str, db: Session = Depends(get_session)):
    services.DepartmentService(db).delete(id)
    return JSONResponse(status_code=200, content=success_response(200, None, "Department deleted successfully"))
