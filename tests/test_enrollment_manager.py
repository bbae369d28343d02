import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import ConflictError, NotFoundError, ValidationError
from schemas.user import RoleType
from utils.course_manager import CourseManager
from utils.enrollment_manager import (
    ALREADY_ENROLLED_MESSAGE,
    MISSING_REFERENCE_MESSAGE,
    EnrollmentManager,
)


@pytest.fixture
def course(db, department):
    return CourseManager(db).create_course("Algorithms", 4, department.id)


def test_enroll_student(db, course, make_user):
    student = make_user(RoleType.STUDENT)
    enrollment = EnrollmentManager(db).create(course.id, student.id)

    assert enrollment.id > 0
    assert enrollment.grade is None
    details = EnrollmentManager(db).list_by_student(student.id)
    assert len(details) == 1
    assert details[0].course_name == "Algorithms"
    assert details[0].department_name == "Computer Science"
    assert details[0].student_email == student.email


@pytest.mark.parametrize("course_id,student_id", [(0, 1), (1, 0), (-3, 1)])
def test_non_positive_ids_are_rejected(db, course_id, student_id):
    with pytest.raises(ValidationError) as exc:
        EnrollmentManager(db).create(course_id, student_id)
    assert "must be greater than zero" in exc.value.message


def test_unknown_course(db, make_user):
    student = make_user(RoleType.STUDENT)
    with pytest.raises(NotFoundError) as exc:
        EnrollmentManager(db).create(999, student.id)
    assert exc.value.message == "The specified course does not exist in the system."


def test_unknown_student(db, course):
    with pytest.raises(NotFoundError) as exc:
        EnrollmentManager(db).create(course.id, 999)
    assert exc.value.message == "The specified student does not exist in the system."


def test_only_students_can_enroll(db, course, make_user):
    instructor = make_user(RoleType.INSTRUCTOR)
    with pytest.raises(ValidationError) as exc:
        EnrollmentManager(db).create(course.id, instructor.id)
    assert exc.value.message == "The specified user is not registered as a student."


def test_duplicate_enrollment_conflicts(db, course, make_user):
    student = make_user(RoleType.STUDENT)
    manager = EnrollmentManager(db)
    manager.create(course.id, student.id, grade=88)

    with pytest.raises(ConflictError) as exc:
        manager.create(course.id, student.id)
    assert exc.value.message == ALREADY_ENROLLED_MESSAGE
    assert len(manager.list_by_course(course.id)) == 1


def test_update_into_existing_pair_conflicts(db, department, course, make_user):
    other_course = CourseManager(db).create_course("Databases", 3, department.id)
    student = make_user(RoleType.STUDENT)
    manager = EnrollmentManager(db)
    manager.create(course.id, student.id)
    second = manager.create(other_course.id, student.id)

    with pytest.raises(ConflictError):
        manager.update(second.id, course.id, student.id, grade=70)


def test_update_grade(db, course, make_user):
    student = make_user(RoleType.STUDENT)
    manager = EnrollmentManager(db)
    enrollment = manager.create(course.id, student.id)

    updated = manager.update(enrollment.id, course.id, student.id, grade=91.5)
    assert updated.grade == 91.5
    assert manager.get_by_id(enrollment.id).grade == 91.5


def test_delete_enrollment(db, course, make_user):
    student = make_user(RoleType.STUDENT)
    manager = EnrollmentManager(db)
    enrollment = manager.create(course.id, student.id)

    manager.delete(enrollment.id)
    with pytest.raises(NotFoundError):
        manager.get_by_id(enrollment.id)
    with pytest.raises(NotFoundError):
        manager.delete(enrollment.id)


def test_deleting_course_removes_enrollments(db, course, make_user):
    student = make_user(RoleType.STUDENT)
    EnrollmentManager(db).create(course.id, student.id)

    CourseManager(db).delete_course(course.id)
    assert EnrollmentManager(db).list_by_student(student.id) == []


def test_update_with_missing_reference_is_not_a_duplicate(db, course, make_user, monkeypatch):
    student = make_user(RoleType.STUDENT)
    manager = EnrollmentManager(db)
    enrollment = manager.create(course.id, student.id)

    def reject_foreign_key():
        raise IntegrityError(
            "UPDATE enrollments", {}, sqlite3.IntegrityError("FOREIGN KEY constraint failed")
        )

    monkeypatch.setattr(db, "commit", reject_foreign_key)
    with pytest.raises(NotFoundError) as exc:
        manager.update(enrollment.id, 999, student.id)
    assert exc.value.message == MISSING_REFERENCE_MESSAGE
