"""Course catalog management utilities."""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError
from models.course import CourseInstructorModel, CourseModel
from models.department import DepartmentModel
from models.enrollment import EnrollmentModel
from models.instructor import InstructorModel

logger = logging.getLogger(__name__)


class CourseManager:
    """Manages courses and instructor course assignments."""

    def __init__(self, db: Session):
        self.db = db

    def get_course(self, course_id: int) -> CourseModel:
        model = self.db.query(CourseModel).filter(CourseModel.id == course_id).first()
        if not model:
            raise NotFoundError.for_entity("Course", course_id)
        return model

    def course_exists(self, course_id: int) -> bool:
        return (
            self.db.query(CourseModel.id).filter(CourseModel.id == course_id).first()
            is not None
        )

    def list_courses(self) -> List[CourseModel]:
        return self.db.query(CourseModel).order_by(CourseModel.id).all()

    def _check_department(self, department_id: int) -> None:
        exists = (
            self.db.query(DepartmentModel.id)
            .filter(DepartmentModel.id == department_id)
            .first()
        )
        if not exists:
            raise NotFoundError.for_entity("Department", department_id)

    def create_course(self, title: str, credits: int, department_id: int) -> CourseModel:
        """Create a course in an existing department.

        Raises:
            NotFoundError: If the department does not exist.
        """
        self._check_department(department_id)
        model = CourseModel(title=title, credits=credits, department_id=department_id)
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created course %s (%s)", model.id, title)
        return model

    def update_course(
        self, course_id: int, title: str, credits: int, department_id: int
    ) -> CourseModel:
        model = self.get_course(course_id)
        self._check_department(department_id)
        model.title = title
        model.credits = credits
        model.department_id = department_id
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated course %s", course_id)
        return model

    def delete_course(self, course_id: int) -> None:
        """Delete a course with its enrollments and instructor assignments."""
        model = self.get_course(course_id)
        self.db.query(EnrollmentModel).filter(
            EnrollmentModel.course_id == course_id
        ).delete(synchronize_session=False)
        self.db.query(CourseInstructorModel).filter(
            CourseInstructorModel.course_id == course_id
        ).delete(synchronize_session=False)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted course %s", course_id)

    # --- Instructor assignments ---

    def list_course_ids_for_instructor(self, instructor_id: int) -> List[int]:
        rows = (
            self.db.query(CourseInstructorModel.course_id)
            .filter(CourseInstructorModel.instructor_id == instructor_id)
            .all()
        )
        return [row.course_id for row in rows]

    def available_courses_for(self, instructor: InstructorModel) -> List[CourseModel]:
        """Courses an instructor could still be assigned to.

        Restricted to the instructor's department when it has one.
        """
        assigned = self.list_course_ids_for_instructor(instructor.id)
        query = self.db.query(CourseModel)
        if instructor.department_id is not None:
            query = query.filter(CourseModel.department_id == instructor.department_id)
        if assigned:
            query = query.filter(CourseModel.id.notin_(assigned))
        return query.order_by(CourseModel.id).all()

    def assign_instructor(self, course_id: int, instructor_id: int) -> CourseInstructorModel:
        """Assign an instructor to teach a course.

        Raises:
            NotFoundError: If the course or instructor does not exist.
            ConflictError: If the instructor already teaches the course.
        """
        self.get_course(course_id)
        instructor_exists = (
            self.db.query(InstructorModel.id)
            .filter(InstructorModel.id == instructor_id)
            .first()
        )
        if not instructor_exists:
            raise NotFoundError.for_entity("Instructor", instructor_id)

        model = CourseInstructorModel(course_id=course_id, instructor_id=instructor_id)
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(
                "The instructor is already assigned to this course."
            ) from e
        logger.info("Assigned instructor %s to course %s", instructor_id, course_id)
        return model

    def remove_assignments_of(self, instructor_id: int) -> None:
        self.db.query(CourseInstructorModel).filter(
            CourseInstructorModel.instructor_id == instructor_id
        ).delete(synchronize_session=False)
        self.db.commit()
