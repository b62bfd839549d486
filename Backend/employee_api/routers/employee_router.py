# employee_router.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from employee_api import repository
from employee_api.database import check_connection, get_db
from employee_api.errors import StoreError
from employee_api.repository import UpsertOutcome
from employee_api.uploads import PROFILE_IMAGE_FIELD, single_upload, staged_upload
from employee_api.utils import success_resp
from employee_api.validators import validate_employee_form

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["employees"])


# ------------------------------------------------------------------
# ENDPOINT: health probe
# ------------------------------------------------------------------
@router.get("/health")
def health_check(request: Request):
    try:
        check_connection(request.app.state.engine)
    except SQLAlchemyError as e:
        logger.error("Health check error: %s", e)
        body = {"success": False, "status": "Error", "error": "Database connection failed"}
        if request.app.state.settings.is_development:
            body["details"] = str(e)
        return JSONResponse(status_code=500, content=body)

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "status": "OK",
            "database": "Connected",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# ------------------------------------------------------------------
# ENDPOINT: listings
# ------------------------------------------------------------------
@router.get("/all-users")
def get_all_users(db: Session = Depends(get_db)):
    try:
        data = repository.list_summary(db)
    except StoreError as e:
        raise StoreError("Failed to fetch employees", details=e.details) from e
    return success_resp("Employees fetched successfully", data, count=len(data))


@router.get("/employees")
def get_employees(db: Session = Depends(get_db)):
    try:
        data = repository.list_detailed(db)
    except StoreError as e:
        raise StoreError("Failed to fetch employees", details=e.details) from e
    return success_resp("Employees fetched successfully", data, count=len(data))


# ------------------------------------------------------------------
# ENDPOINT: add or update employee (multipart form)
# ------------------------------------------------------------------
@router.post("/add-employee")
def add_employee(
    request: Request,
    id: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    dob: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    joinDate: Optional[str] = Form(None),
    experience: Optional[str] = Form(None),
    skills: Optional[str] = Form(None),
    achievement: Optional[str] = Form(None),
    profile_images: Optional[List[UploadFile]] = File(None, alias=PROFILE_IMAGE_FIELD),
    db: Session = Depends(get_db),
):
    """
    Create the employee if the id is new, otherwise overwrite it.
    The profile image is optional; leaving it out keeps the stored one.
    At most one file may be attached.
    """
    settings = request.app.state.settings
    form = {
        "id": id, "name": name, "role": role, "gender": gender, "dob": dob,
        "location": location, "email": email, "phone": phone, "joinDate": joinDate,
        "experience": experience, "skills": skills, "achievement": achievement,
    }

    upload = single_upload(profile_images)
    with staged_upload(upload, settings.upload_dir, settings.max_upload_size) as image_path:
        record = validate_employee_form(form, settings.email_domain)
        outcome = repository.upsert_employee(db, record, image_path)

    data = {"id": record.id, "status": outcome.value, "profileImage": image_path}
    if outcome is UpsertOutcome.CREATED:
        return success_resp("Employee added successfully", data, status.HTTP_201_CREATED)
    return success_resp("Employee updated successfully", data, status.HTTP_200_OK)


# ------------------------------------------------------------------
# ENDPOINT: delete employee
# ------------------------------------------------------------------
@router.delete("/delete-employee/{emp_id}")
def delete_employee(emp_id: str, db: Session = Depends(get_db)):
    removed = repository.delete_employee(db, emp_id)
    return success_resp("Employee deleted successfully", removed)
