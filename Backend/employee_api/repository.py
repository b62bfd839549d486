# repository.py
import logging
from enum import Enum
from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from employee_api.errors import (
    DuplicateEmployeeError,
    EmployeeNotFoundError,
    EmployeeServiceError,
    StoreError,
)
from employee_api.models.employee_model import Employee
from employee_api.schemas.employee_schema import EmployeeIn, EmployeeRecord, EmployeeSummary

logger = logging.getLogger(__name__)


class UpsertOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


def _translate_store_error(e: SQLAlchemyError, action: str) -> EmployeeServiceError:
    """Map driver/SQLAlchemy failures onto the service error kinds."""
    if isinstance(e, IntegrityError):
        # the primary key is the only unique constraint on employees
        return DuplicateEmployeeError(details=str(e.orig))
    logger.error("Store error while %s: %s", action, e, exc_info=True)
    return StoreError(details=str(e))


def _summary(row: Employee) -> dict:
    return EmployeeSummary.model_validate(row).model_dump(by_alias=True, mode="json")


def _record(row: Employee) -> dict:
    return EmployeeRecord.model_validate(row).model_dump(by_alias=True, mode="json")


def list_summary(db: Session) -> List[dict]:
    try:
        rows = db.execute(select(Employee).order_by(Employee.id.desc())).scalars().all()
    except SQLAlchemyError as e:
        raise _translate_store_error(e, "listing employees") from e
    return [_summary(r) for r in rows]


def list_detailed(db: Session) -> List[dict]:
    try:
        rows = db.execute(select(Employee).order_by(Employee.id.desc())).scalars().all()
    except SQLAlchemyError as e:
        raise _translate_store_error(e, "listing employees") from e
    return [_record(r) for r in rows]


def get_employee(db: Session, emp_id: str) -> Optional[dict]:
    try:
        row = db.execute(select(Employee).where(Employee.id == emp_id)).scalar_one_or_none()
    except SQLAlchemyError as e:
        raise _translate_store_error(e, f"fetching employee {emp_id}") from e
    return _record(row) if row is not None else None


def _exists(db: Session, emp_id: str) -> bool:
    return db.execute(select(Employee.id).where(Employee.id == emp_id)).first() is not None


def upsert_employee(db: Session, record: EmployeeIn, profile_image: Optional[str] = None) -> UpsertOutcome:
    """
    Insert the employee, or overwrite every base field of an existing one.

    ``profile_image`` replaces the stored image only when given; an update
    without a new image keeps the old path. A create that loses a race to a
    concurrent create surfaces as DuplicateEmployeeError through the primary
    key constraint.
    """
    values = record.columns()
    try:
        if _exists(db, record.id):
            if profile_image is not None:
                values["profile_image"] = profile_image
            result = db.execute(
                update(Employee).where(Employee.id == record.id).values(**values)
            )
            if result.rowcount == 0:
                db.rollback()
                raise EmployeeNotFoundError()
            db.commit()
            logger.info("Updated employee %s", record.id)
            return UpsertOutcome.UPDATED

        db.execute(insert(Employee).values(**values, profile_image=profile_image))
        db.commit()
        logger.info("Created employee %s", record.id)
        return UpsertOutcome.CREATED
    except SQLAlchemyError as e:
        db.rollback()
        raise _translate_store_error(e, f"saving employee {record.id}") from e


def delete_employee(db: Session, emp_id: str) -> dict:
    """Delete the employee and return the removed record."""
    snapshot = get_employee(db, emp_id)
    if snapshot is None:
        raise EmployeeNotFoundError()
    try:
        result = db.execute(delete(Employee).where(Employee.id == emp_id))
        if result.rowcount == 0:
            db.rollback()
            raise EmployeeNotFoundError()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise _translate_store_error(e, f"deleting employee {emp_id}") from e
    logger.info("Deleted employee %s", emp_id)
    return snapshot
