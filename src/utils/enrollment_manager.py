"""Enrollment ledger utilities.

The (student_id, course_id) pair is unique. Creation checks it up front for a
readable error and the unique index catches concurrent duplicates.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.course import CourseModel
from models.department import DepartmentModel
from models.enrollment import EnrollmentModel
from models.user import UserModel
from schemas.enrollment import EnrollmentDetail
from schemas.user import RoleType
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

ALREADY_ENROLLED_MESSAGE = "The student is already enrolled in this course."
MISSING_REFERENCE_MESSAGE = "The specified course or student does not exist in the system."

PAIR_CONSTRAINT = "uq_enrollments_student_course"


def _is_duplicate_pair(exc: IntegrityError) -> bool:
    """Whether an IntegrityError comes from the (student, course) unique index."""
    detail = str(exc.orig)
    # SQLite reports the columns, other backends the constraint name
    return PAIR_CONSTRAINT in detail or (
        "UNIQUE constraint failed" in detail and "enrollments." in detail
    )


def _integrity_error(exc: IntegrityError):
    if _is_duplicate_pair(exc):
        return ConflictError(ALREADY_ENROLLED_MESSAGE)
    return NotFoundError(MISSING_REFERENCE_MESSAGE, inner=str(exc.orig))


def _require_positive(value: int, label: str) -> None:
    if value is None or value <= 0:
        raise ValidationError(f"{label} must be greater than zero.")


class EnrollmentManager:
    """Manages student course enrollments."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)

    # --- Read projections ---

    def _detail_query(self):
        return (
            self.db.query(EnrollmentModel, CourseModel, DepartmentModel, UserModel)
            .join(CourseModel, CourseModel.id == EnrollmentModel.course_id)
            .outerjoin(DepartmentModel, DepartmentModel.id == CourseModel.department_id)
            .join(UserModel, UserModel.id == EnrollmentModel.student_id)
        )

    @staticmethod
    def _to_detail(enrollment, course, department, student) -> EnrollmentDetail:
        return EnrollmentDetail(
            enrollment_id=enrollment.id,
            course_id=enrollment.course_id,
            student_id=enrollment.student_id,
            grade=enrollment.grade,
            course_name=course.title,
            credits=course.credits,
            department_id=course.department_id,
            department_name=department.name if department else None,
            student_name=f"{student.first_name} {student.last_name}",
            student_email=student.email,
        )

    def list_all(self) -> List[EnrollmentDetail]:
        query = self._detail_query().order_by(EnrollmentModel.id)
        return [self._to_detail(*row) for row in query.all()]

    def get_by_id(self, enrollment_id: int) -> EnrollmentDetail:
        _require_positive(enrollment_id, "Enrollment ID")
        row = self._detail_query().filter(EnrollmentModel.id == enrollment_id).first()
        if row is None:
            raise NotFoundError.for_entity("Enrollment", enrollment_id)
        return self._to_detail(*row)

    def list_by_student(self, student_id: int) -> List[EnrollmentDetail]:
        _require_positive(student_id, "Student ID")
        query = (
            self._detail_query()
            .filter(EnrollmentModel.student_id == student_id)
            .order_by(EnrollmentModel.id)
        )
        return [self._to_detail(*row) for row in query.all()]

    def list_by_course(self, course_id: int) -> List[EnrollmentDetail]:
        _require_positive(course_id, "Course ID")
        query = (
            self._detail_query()
            .filter(EnrollmentModel.course_id == course_id)
            .order_by(EnrollmentModel.id)
        )
        return [self._to_detail(*row) for row in query.all()]

    # --- Mutations ---

    def create(
        self, course_id: int, student_id: int, grade: Optional[float] = None
    ) -> EnrollmentModel:
        """Enroll a student in a course.

        Args:
            course_id: Course to enroll in.
            student_id: User id of the student.
            grade: Optional initial grade.

        Returns:
            The persisted EnrollmentModel with its generated id.

        Raises:
            ValidationError: If an id is not positive or the user is not
                registered as a student.
            NotFoundError: If the course or the user does not exist.
            ConflictError: If the student is already enrolled in the course.
        """
        _require_positive(course_id, "Course ID")
        _require_positive(student_id, "Student ID")

        course_exists = (
            self.db.query(CourseModel.id).filter(CourseModel.id == course_id).first()
        )
        if not course_exists:
            raise NotFoundError("The specified course does not exist in the system.")

        student = self.users.get_user_by_id(student_id)
        if student is None:
            raise NotFoundError("The specified student does not exist in the system.")
        if not self.users.has_role(student, RoleType.STUDENT):
            raise ValidationError("The specified user is not registered as a student.")

        existing = (
            self.db.query(EnrollmentModel.id)
            .filter(
                EnrollmentModel.course_id == course_id,
                EnrollmentModel.student_id == student_id,
            )
            .first()
        )
        if existing:
            raise ConflictError(ALREADY_ENROLLED_MESSAGE)

        enrollment = EnrollmentModel(
            course_id=course_id, student_id=student_id, grade=grade
        )
        try:
            self.db.add(enrollment)
            self.db.commit()
            self.db.refresh(enrollment)
        except IntegrityError as e:
            self.db.rollback()
            raise _integrity_error(e) from e

        logger.info(
            "Enrolled student %s in course %s (enrollment %s)",
            student_id,
            course_id,
            enrollment.id,
        )
        return enrollment

    def update(
        self,
        enrollment_id: int,
        course_id: int,
        student_id: int,
        grade: Optional[float] = None,
    ) -> EnrollmentModel:
        """Overwrite an enrollment's course, student and grade.

        Student role and course existence are not re-checked here.

        Raises:
            ValidationError: If an id is not positive.
            NotFoundError: If the enrollment does not exist, or the database
                rejects a reference to a missing course or student.
            ConflictError: If the new pair collides with another enrollment.
        """
        _require_positive(enrollment_id, "Enrollment ID")
        _require_positive(course_id, "Course ID")
        _require_positive(student_id, "Student ID")

        enrollment = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.id == enrollment_id)
            .first()
        )
        if enrollment is None:
            raise NotFoundError.for_entity("Enrollment", enrollment_id)

        enrollment.course_id = course_id
        enrollment.student_id = student_id
        enrollment.grade = grade
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise _integrity_error(e) from e
        self.db.refresh(enrollment)
        logger.info("Updated enrollment %s", enrollment_id)
        return enrollment

    def delete(self, enrollment_id: int) -> None:
        """Delete an enrollment.

        Raises:
            ValidationError: If the id is not positive.
            NotFoundError: If the enrollment does not exist.
        """
        _require_positive(enrollment_id, "Enrollment ID")
        enrollment = (
            self.db.query(EnrollmentModel)
            .filter(EnrollmentModel.id == enrollment_id)
            .first()
        )
        if enrollment is None:
            raise NotFoundError.for_entity("Enrollment", enrollment_id)
        self.db.delete(enrollment)
        self.db.commit()
        logger.info("Deleted enrollment %s", enrollment_id)
