"""Department management utilities.

Besides plain CRUD this module owns the head-instructor bookkeeping: the first
instructor placed in a department without a head becomes its head, and a head
moving away (or being deleted) frees the headship. Both transitions are single
conditional UPDATE statements so concurrent requests cannot both claim a
vacant headship.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from models.course import CourseInstructorModel, CourseModel
from models.department import DepartmentModel
from models.enrollment import EnrollmentModel
from models.instructor import InstructorModel
from schemas.department import DepartmentListItem

logger = logging.getLogger(__name__)


class DepartmentManager:
    """Manages departments and their head-instructor references."""

    def __init__(self, db: Session):
        self.db = db

    def get_department(self, department_id: int) -> DepartmentModel:
        model = (
            self.db.query(DepartmentModel)
            .filter(DepartmentModel.id == department_id)
            .first()
        )
        if not model:
            raise NotFoundError.for_entity("Department", department_id)
        return model

    def list_departments(self) -> List[DepartmentModel]:
        return self.db.query(DepartmentModel).order_by(DepartmentModel.id).all()

    def list_with_relations(self) -> List[DepartmentListItem]:
        """List departments with head name, course count and student count."""
        course_counts = dict(
            self.db.query(CourseModel.department_id, func.count(CourseModel.id))
            .group_by(CourseModel.department_id)
            .all()
        )
        student_counts = dict(
            self.db.query(
                CourseModel.department_id,
                func.count(distinct(EnrollmentModel.student_id)),
            )
            .join(EnrollmentModel, EnrollmentModel.course_id == CourseModel.id)
            .group_by(CourseModel.department_id)
            .all()
        )
        query = (
            self.db.query(DepartmentModel, InstructorModel)
            .outerjoin(
                InstructorModel,
                InstructorModel.id == DepartmentModel.head_instructor_id,
            )
            .order_by(DepartmentModel.id)
        )
        results = []
        for department, head in query.all():
            results.append(
                DepartmentListItem(
                    id=department.id,
                    name=department.name,
                    budget=department.budget,
                    start_date=department.start_date,
                    head_instructor_id=department.head_instructor_id,
                    administrator_name=(
                        f"{head.first_name} {head.last_name}" if head else None
                    ),
                    course_count=course_counts.get(department.id, 0),
                    student_count=student_counts.get(department.id, 0),
                )
            )
        return results

    def _check_instructor(self, instructor_id: Optional[int]) -> None:
        if instructor_id is None:
            return
        exists = (
            self.db.query(InstructorModel.id)
            .filter(InstructorModel.id == instructor_id)
            .first()
        )
        if not exists:
            raise NotFoundError.for_entity("Instructor", instructor_id)

    def create_department(
        self,
        name: str,
        budget: float,
        start_date: date,
        head_instructor_id: Optional[int] = None,
    ) -> DepartmentModel:
        """Create a department.

        Raises:
            NotFoundError: If head_instructor_id is set but does not exist.
        """
        self._check_instructor(head_instructor_id)
        model = DepartmentModel(
            name=name,
            budget=budget,
            start_date=start_date,
            head_instructor_id=head_instructor_id,
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created department %s (%s)", model.id, name)
        return model

    def update_department(
        self,
        department_id: int,
        name: str,
        budget: float,
        start_date: date,
        head_instructor_id: Optional[int] = None,
    ) -> DepartmentModel:
        model = self.get_department(department_id)
        self._check_instructor(head_instructor_id)
        model.name = name
        model.budget = budget
        model.start_date = start_date
        model.head_instructor_id = head_instructor_id
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated department %s", department_id)
        return model

    def delete_department(self, department_id: int) -> None:
        """Delete a department.

        Instructors of the department are detached; its courses are removed
        together with their enrollments and instructor assignments.

        Raises:
            NotFoundError: If the department does not exist.
        """
        model = self.get_department(department_id)
        course_ids = [
            row.id
            for row in self.db.query(CourseModel.id)
            .filter(CourseModel.department_id == department_id)
            .all()
        ]
        if course_ids:
            self.db.query(EnrollmentModel).filter(
                EnrollmentModel.course_id.in_(course_ids)
            ).delete(synchronize_session=False)
            self.db.query(CourseInstructorModel).filter(
                CourseInstructorModel.course_id.in_(course_ids)
            ).delete(synchronize_session=False)
            self.db.query(CourseModel).filter(
                CourseModel.id.in_(course_ids)
            ).delete(synchronize_session=False)
        self.db.query(InstructorModel).filter(
            InstructorModel.department_id == department_id
        ).update({InstructorModel.department_id: None}, synchronize_session=False)
        self.db.delete(model)
        self.db.commit()
        logger.info(
            "Deleted department %s and %d course(s)", department_id, len(course_ids)
        )

    # --- Head instructor bookkeeping ---

    def assign_head_if_vacant(self, department_id: int, instructor_id: int) -> bool:
        """Make an instructor the department head when it has none.

        Args:
            department_id: Department to update.
            instructor_id: Candidate head.

        Returns:
            True if the instructor became head, False if a head already existed.
        """
        updated = (
            self.db.query(DepartmentModel)
            .filter(
                DepartmentModel.id == department_id,
                DepartmentModel.head_instructor_id.is_(None),
            )
            .update(
                {DepartmentModel.head_instructor_id: instructor_id},
                synchronize_session=False,
            )
        )
        self.db.commit()
        if updated:
            logger.info(
                "Instructor %s is now head of department %s", instructor_id, department_id
            )
        return bool(updated)

    def clear_head_if(self, department_id: int, instructor_id: int) -> bool:
        """Clear the department head only if it is the given instructor.

        Returns:
            True if the headship was cleared.
        """
        updated = (
            self.db.query(DepartmentModel)
            .filter(
                DepartmentModel.id == department_id,
                DepartmentModel.head_instructor_id == instructor_id,
            )
            .update(
                {DepartmentModel.head_instructor_id: None},
                synchronize_session=False,
            )
        )
        self.db.commit()
        if updated:
            logger.info(
                "Instructor %s is no longer head of department %s",
                instructor_id,
                department_id,
            )
        return bool(updated)

    def clear_headships_of(self, instructor_id: int) -> int:
        """Clear every headship held by an instructor.

        Returns:
            Number of departments updated.
        """
        updated = (
            self.db.query(DepartmentModel)
            .filter(DepartmentModel.head_instructor_id == instructor_id)
            .update(
                {DepartmentModel.head_instructor_id: None},
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated
