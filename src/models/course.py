from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from .base import Base


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    credits = Column(Integer, nullable=False, default=0)
    department_id = Column(
        Integer, ForeignKey("departments.id"), index=True, nullable=False
    )


class CourseInstructorModel(Base):
    __tablename__ = "course_instructors"
    __table_args__ = (
        UniqueConstraint(
            "course_id",
            "instructor_id",
            name="uq_course_instructors_course_instructor",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False
    )
    instructor_id = Column(
        Integer,
        ForeignKey("instructors.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
