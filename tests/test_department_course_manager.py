from datetime import date, datetime

import pytest

from core.exceptions import ConflictError, NotFoundError
from schemas.user import RoleType
from utils.course_manager import CourseManager
from utils.department_manager import DepartmentManager
from utils.enrollment_manager import EnrollmentManager
from utils.instructor_manager import InstructorManager


def _instructor(db, email, department_id=None):
    return InstructorManager(db).create_instructor(
        first_name="Grace",
        last_name="Hopper",
        email=email,
        hire_date=datetime(2022, 1, 10),
        department_id=department_id,
        password="navy1234",
    )


def test_department_listing_counts(db, department, make_user):
    head = _instructor(db, "grace@school.edu", department.id)
    courses = CourseManager(db)
    algorithms = courses.create_course("Algorithms", 4, department.id)
    networks = courses.create_course("Networks", 3, department.id)
    alice = make_user(RoleType.STUDENT)
    bob = make_user(RoleType.STUDENT)
    enrollments = EnrollmentManager(db)
    enrollments.create(algorithms.id, alice.id)
    enrollments.create(networks.id, alice.id)
    enrollments.create(networks.id, bob.id)

    [item] = DepartmentManager(db).list_with_relations()

    assert item.head_instructor_id == head.id
    assert item.administrator_name == "Grace Hopper"
    assert item.course_count == 2
    assert item.student_count == 2


def test_head_must_exist(db):
    with pytest.raises(NotFoundError):
        DepartmentManager(db).create_department(
            name="History", budget=10, start_date=date(2024, 1, 1), head_instructor_id=42
        )


def test_delete_department_cascades_to_courses(db, department, make_user):
    instructor_id = _instructor(db, "staff@school.edu", department.id).id
    course_id = CourseManager(db).create_course("Security", 3, department.id).id
    student_id = make_user(RoleType.STUDENT).id
    EnrollmentManager(db).create(course_id, student_id)

    DepartmentManager(db).delete_department(department.id)

    db.expire_all()
    assert not CourseManager(db).course_exists(course_id)
    assert EnrollmentManager(db).list_by_student(student_id) == []
    assert InstructorManager(db).get_instructor(instructor_id).department_id is None


def test_course_requires_department(db):
    with pytest.raises(NotFoundError):
        CourseManager(db).create_course("Orphan", 1, 77)


def test_assign_course_twice_conflicts(db, department):
    instructor = _instructor(db, "assign@school.edu", department.id)
    courses = CourseManager(db)
    course = courses.create_course("Operating Systems", 4, department.id)

    courses.assign_instructor(course.id, instructor.id)
    with pytest.raises(ConflictError):
        courses.assign_instructor(course.id, instructor.id)
    with pytest.raises(NotFoundError):
        courses.assign_instructor(course.id, 999)


def test_available_courses_exclude_assigned_and_other_departments(db, department):
    other = DepartmentManager(db).create_department(
        name="Arts", budget=1, start_date=date(2024, 1, 1)
    )
    instructor = _instructor(db, "avail@school.edu", department.id)
    courses = CourseManager(db)
    taught = courses.create_course("Graphics", 3, department.id)
    open_course = courses.create_course("Robotics", 3, department.id)
    courses.create_course("Painting", 2, other.id)
    courses.assign_instructor(taught.id, instructor.id)

    available = courses.available_courses_for(instructor)

    assert [c.id for c in available] == [open_course.id]
