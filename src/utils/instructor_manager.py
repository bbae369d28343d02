"""Instructor management utilities.

An instructor row is mirrored by a User holding the Instructor role, linked by
email. Creating, updating and deleting instructors keeps that user and the
department headship in step.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from config import KEEP_CURRENT_PASSWORD
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.department import DepartmentModel
from models.instructor import InstructorModel
from schemas.instructor import InstructorInfo
from schemas.user import RoleType
from utils.course_manager import CourseManager
from utils.department_manager import DepartmentManager
from utils.user_manager import UserManager, normalize_email

logger = logging.getLogger(__name__)


def wants_password_change(password: Optional[str]) -> bool:
    """Whether an update request carries a real new password."""
    return bool(password and password.strip()) and password != KEEP_CURRENT_PASSWORD


class InstructorManager:
    """Manages instructors, their user accounts and department headships."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)
        self.departments = DepartmentManager(db)
        self.courses = CourseManager(db)

    def get_instructor(self, instructor_id: int) -> InstructorModel:
        model = (
            self.db.query(InstructorModel)
            .filter(InstructorModel.id == instructor_id)
            .first()
        )
        if not model:
            raise NotFoundError.for_entity("Instructor", instructor_id)
        return model

    def list_instructors(self) -> List[InstructorModel]:
        return self.db.query(InstructorModel).order_by(InstructorModel.id).all()

    def to_info(self, model: InstructorModel) -> InstructorInfo:
        """Build the response for an instructor, including its department name."""
        department_name = None
        if model.department_id is not None:
            department = (
                self.db.query(DepartmentModel)
                .filter(DepartmentModel.id == model.department_id)
                .first()
            )
            department_name = department.name if department else None
        info = InstructorInfo.model_validate(model)
        info.department_name = department_name
        return info

    def list_instructor_infos(self) -> List[InstructorInfo]:
        names = dict(self.db.query(DepartmentModel.id, DepartmentModel.name).all())
        results = []
        for model in self.list_instructors():
            info = InstructorInfo.model_validate(model)
            info.department_name = names.get(model.department_id)
            results.append(info)
        return results

    def create_instructor(
        self,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: datetime,
        department_id: Optional[int] = None,
        phone_number: Optional[str] = None,
        password: Optional[str] = None,
    ) -> InstructorModel:
        """Create an instructor and make sure its user account exists.

        The first instructor placed in a department without a head becomes
        the department head. A user already registered under the email (for
        example through self-registration) is reused and given the Instructor
        role; otherwise a new user is created with the given password.

        Args:
            first_name: First (and middle) name.
            last_name: Last name.
            email: Email, also the link to the user account.
            hire_date: Hire date, used as the user's enrollment date.
            department_id: Optional department affiliation.
            phone_number: Optional phone number.
            password: Password for a newly created user account.

        Returns:
            The created InstructorModel.

        Raises:
            NotFoundError: If the department does not exist.
            ValidationError: If a new user account is needed and no valid
                password was given.
        """
        if department_id is not None:
            self.departments.get_department(department_id)

        existing_user = self.users.get_user_by_email(email)
        if existing_user is None:
            if not wants_password_change(password):
                raise ValidationError(
                    "Password is required to create the instructor account."
                )
            self.users.check_password_policy(password)

        instructor = InstructorModel(
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone_number=phone_number,
            hire_date=hire_date,
            department_id=department_id,
        )
        self.db.add(instructor)
        self.db.commit()
        self.db.refresh(instructor)
        logger.info("Created instructor %s (%s)", instructor.id, email)

        if department_id is not None:
            self.departments.assign_head_if_vacant(department_id, instructor.id)

        if existing_user is not None:
            self.users.add_role(existing_user, RoleType.INSTRUCTOR)
        else:
            self.users.create_user(
                email=email,
                password=password,
                role=RoleType.INSTRUCTOR,
                first_name=first_name,
                last_name=last_name,
                phone_number=phone_number,
                enrollment_date=hire_date,
            )

        self.db.refresh(instructor)
        return instructor

    def update_instructor(
        self,
        instructor_id: int,
        first_name: str,
        last_name: str,
        email: str,
        hire_date: datetime,
        department_id: Optional[int] = None,
        phone_number: Optional[str] = None,
        password: Optional[str] = None,
    ) -> InstructorModel:
        """Update an instructor, its headships and its linked user.

        When the department changes to another department, the instructor
        claims the new department's headship if vacant and gives up the old
        department's headship if it held it.

        Raises:
            NotFoundError: If the instructor or the new department does not exist.
            ConflictError: If the new email belongs to another user.
            ValidationError: If a new password is too short.
        """
        instructor = self.get_instructor(instructor_id)
        if department_id is not None:
            self.departments.get_department(department_id)

        old_department_id = instructor.department_id
        old_email = instructor.email
        user = self.users.get_user_by_email(old_email)

        if normalize_email(email) != normalize_email(old_email):
            other = self.users.get_user_by_email(email)
            if other is not None and (user is None or other.id != user.id):
                raise ConflictError("Email is already in use")
        if user is not None and wants_password_change(password):
            self.users.check_password_policy(password)

        instructor.first_name = first_name
        instructor.last_name = last_name
        instructor.email = email
        instructor.phone_number = phone_number
        instructor.hire_date = hire_date
        instructor.department_id = department_id
        self.db.commit()

        if department_id is not None and department_id != old_department_id:
            self.departments.assign_head_if_vacant(department_id, instructor_id)
            if old_department_id is not None:
                self.departments.clear_head_if(old_department_id, instructor_id)

        if user is not None:
            self.users.update_account(
                user,
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone_number=phone_number,
                enrollment_date=hire_date,
            )
            if wants_password_change(password):
                token = self.users.generate_password_reset_token(user)
                self.users.reset_password(user.email, token, password)

        logger.info("Updated instructor %s", instructor_id)
        self.db.refresh(instructor)
        return instructor

    def delete_instructor(self, instructor_id: int) -> None:
        """Delete an instructor and its user account.

        Headships held by the instructor are cleared and its course
        assignments removed.

        Raises:
            NotFoundError: If the instructor does not exist.
        """
        instructor = self.get_instructor(instructor_id)
        user = self.users.get_user_by_email(instructor.email)
        if user is not None:
            self.users.delete_user(user)

        cleared = self.departments.clear_headships_of(instructor_id)
        self.courses.remove_assignments_of(instructor_id)
        self.db.delete(instructor)
        self.db.commit()
        logger.info(
            "Deleted instructor %s (cleared %d headship(s))", instructor_id, cleared
        )

    def relink_email(self, old_email: str, new_email: str) -> int:
        """Point instructor rows at a user's new email.

        Returns:
            Number of instructor rows updated.
        """
        updated = (
            self.db.query(InstructorModel)
            .filter(func.lower(InstructorModel.email) == normalize_email(old_email))
            .update({InstructorModel.email: new_email}, synchronize_session=False)
        )
        self.db.commit()
        if updated:
            logger.info("Moved %d instructor record(s) to %s", updated, new_email)
        return updated
