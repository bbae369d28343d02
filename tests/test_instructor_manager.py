from datetime import date, datetime

import pytest

from config import KEEP_CURRENT_PASSWORD
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.password_reset_token import PasswordResetTokenModel
from schemas.user import RoleType
from utils.course_manager import CourseManager
from utils.department_manager import DepartmentManager
from utils.instructor_manager import InstructorManager
from utils.user_manager import UserManager

HIRED = datetime(2023, 8, 15)


def _create(db, email, department_id=None, password="teach123"):
    return InstructorManager(db).create_instructor(
        first_name="Ada",
        last_name=email.split("@")[0],
        email=email,
        hire_date=HIRED,
        department_id=department_id,
        password=password,
    )


def _head_of(db, department_id):
    db.expire_all()
    return DepartmentManager(db).get_department(department_id).head_instructor_id


def test_first_instructor_becomes_head(db, department):
    first = _create(db, "first@school.edu", department.id)
    second = _create(db, "second@school.edu", department.id)

    assert _head_of(db, department.id) == first.id
    assert second.department_id == department.id


def test_moving_head_frees_old_department(db, department):
    other = DepartmentManager(db).create_department(
        name="Mathematics", budget=5000, start_date=date(2024, 1, 1)
    )
    head = _create(db, "head@school.edu", department.id)

    InstructorManager(db).update_instructor(
        head.id,
        first_name="Ada",
        last_name="Head",
        email="head@school.edu",
        hire_date=HIRED,
        department_id=other.id,
    )

    assert _head_of(db, department.id) is None
    assert _head_of(db, other.id) == head.id


def test_moving_non_head_keeps_old_head(db, department):
    other = DepartmentManager(db).create_department(
        name="Physics", budget=5000, start_date=date(2024, 1, 1)
    )
    head = _create(db, "head@school.edu", department.id)
    other_head = _create(db, "phys@school.edu", other.id)
    mover = _create(db, "mover@school.edu", department.id)

    InstructorManager(db).update_instructor(
        mover.id,
        first_name="Ada",
        last_name="Mover",
        email="mover@school.edu",
        hire_date=HIRED,
        department_id=other.id,
    )

    assert _head_of(db, department.id) == head.id
    assert _head_of(db, other.id) == other_head.id


def test_creating_instructor_creates_user_account(db, department):
    _create(db, "Linked@School.edu", department.id, password="linked123")

    user = UserManager(db).get_user_by_email("linked@school.edu")
    assert user is not None
    assert RoleType.INSTRUCTOR.value in user.role_names
    assert UserManager(db).authenticate("linked@school.edu", "linked123").id == user.id


def test_password_required_for_new_account(db, department):
    with pytest.raises(ValidationError):
        _create(db, "nopass@school.edu", department.id, password=None)
    with pytest.raises(ValidationError):
        _create(db, "sentinel@school.edu", department.id, password=KEEP_CURRENT_PASSWORD)
    assert InstructorManager(db).list_instructors() == []


def test_existing_user_is_reused(db, department, make_user):
    student = make_user(RoleType.STUDENT, email="both@school.edu")
    _create(db, "both@school.edu", department.id, password=None)

    db.expire_all()
    user = UserManager(db).get_user_by_id(student.id)
    assert user.role_names == {"Student", "Instructor"}


def test_unknown_department(db):
    with pytest.raises(NotFoundError):
        _create(db, "lost@school.edu", department_id=404)


def test_keep_current_password_sentinel(db, department):
    instructor = _create(db, "keep@school.edu", department.id, password="original1")
    manager = InstructorManager(db)

    manager.update_instructor(
        instructor.id,
        first_name="Ada",
        last_name="Keep",
        email="keep@school.edu",
        hire_date=HIRED,
        department_id=department.id,
        password=KEEP_CURRENT_PASSWORD,
    )
    UserManager(db).authenticate("keep@school.edu", "original1")

    manager.update_instructor(
        instructor.id,
        first_name="Ada",
        last_name="Keep",
        email="keep@school.edu",
        hire_date=HIRED,
        department_id=department.id,
        password="changed22",
    )
    UserManager(db).authenticate("keep@school.edu", "changed22")


def test_email_change_follows_user(db, department, make_user):
    instructor = _create(db, "old@school.edu", department.id)
    make_user(RoleType.STUDENT, email="taken@school.edu")
    manager = InstructorManager(db)

    with pytest.raises(ConflictError):
        manager.update_instructor(
            instructor.id,
            first_name="Ada",
            last_name="Old",
            email="TAKEN@school.edu",
            hire_date=HIRED,
            department_id=department.id,
        )

    manager.update_instructor(
        instructor.id,
        first_name="Ada",
        last_name="New",
        email="new@school.edu",
        hire_date=HIRED,
        department_id=department.id,
    )
    assert UserManager(db).get_user_by_email("old@school.edu") is None
    assert UserManager(db).get_user_by_email("new@school.edu").last_name == "New"


def test_delete_instructor_clears_headship_and_account(db, department):
    head = _create(db, "gone@school.edu", department.id)
    course = CourseManager(db).create_course("Compilers", 4, department.id)
    CourseManager(db).assign_instructor(course.id, head.id)

    InstructorManager(db).delete_instructor(head.id)

    assert _head_of(db, department.id) is None
    assert UserManager(db).get_user_by_email("gone@school.edu") is None
    assert CourseManager(db).list_course_ids_for_instructor(head.id) == []
    with pytest.raises(NotFoundError):
        InstructorManager(db).get_instructor(head.id)


def test_rejected_password_leaves_instructor_untouched(db, department):
    other = DepartmentManager(db).create_department(
        name="Chemistry", budget=5000, start_date=date(2024, 1, 1)
    )
    instructor = _create(db, "ada@school.edu", department.id)

    with pytest.raises(ValidationError):
        InstructorManager(db).update_instructor(
            instructor.id,
            first_name="Renamed",
            last_name="Ada",
            email="ada2@school.edu",
            hire_date=HIRED,
            department_id=other.id,
            password="abc",
        )

    db.expire_all()
    unchanged = InstructorManager(db).get_instructor(instructor.id)
    assert unchanged.first_name == "Ada"
    assert unchanged.email == "ada@school.edu"
    assert unchanged.department_id == department.id
    assert _head_of(db, department.id) == instructor.id
    assert _head_of(db, other.id) is None
    assert UserManager(db).get_user_by_email("ada@school.edu") is not None
    assert db.query(PasswordResetTokenModel).count() == 0
