"""Runtime and catalog analysis.

Reports process metrics next to per-course enrollment and staffing counts.
"""

import gc
import logging
import os
import resource
import threading
import time
from datetime import datetime
from typing import List

import pytz
from sqlalchemy import func
from sqlalchemy.orm import Session

import config
from models.course import CourseInstructorModel, CourseModel
from models.enrollment import EnrollmentModel
from schemas.analysis import AnalysisResponse, CourseStats, GCStats, UserCounts
from schemas.user import RoleType
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

STARTED_AT = datetime.now(pytz.utc)
_STARTED_MONOTONIC = time.monotonic()


def estimate_cpu_percent(sample_seconds: float) -> float:
    """Estimate this process's CPU usage over a short sampling window.

    Args:
        sample_seconds: Length of the window; zero or less skips sampling.

    Returns:
        Usage in percent of all processors, 0.0 when it cannot be measured.
    """
    if sample_seconds <= 0:
        return 0.0
    try:
        cpu_before = time.process_time()
        wall_before = time.monotonic()
        time.sleep(sample_seconds)
        cpu_used = time.process_time() - cpu_before
        wall_elapsed = time.monotonic() - wall_before
        processors = os.cpu_count() or 1
        return round(cpu_used / (wall_elapsed * processors) * 100, 2)
    except (OSError, ZeroDivisionError) as e:
        logger.warning("CPU usage sampling failed: %s", e)
        return 0.0


class AnalysisManager:
    """Collects the analysis snapshot."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)

    def course_stats(self) -> List[CourseStats]:
        students = dict(
            self.db.query(EnrollmentModel.course_id, func.count(EnrollmentModel.id))
            .group_by(EnrollmentModel.course_id)
            .all()
        )
        instructors = dict(
            self.db.query(
                CourseInstructorModel.course_id,
                func.count(CourseInstructorModel.id),
            )
            .group_by(CourseInstructorModel.course_id)
            .all()
        )
        return [
            CourseStats(
                course_id=course.id,
                title=course.title,
                student_count=students.get(course.id, 0),
                instructor_count=instructors.get(course.id, 0),
            )
            for course in self.db.query(CourseModel).order_by(CourseModel.id).all()
        ]

    def user_counts(self) -> UserCounts:
        return UserCounts(
            students=self.users.count_users_in_role(RoleType.STUDENT),
            instructors=self.users.count_users_in_role(RoleType.INSTRUCTOR),
            admins=self.users.count_users_in_role(RoleType.ADMIN),
        )

    def snapshot(self) -> AnalysisResponse:
        """Build the analysis response.

        Returns:
            AnalysisResponse with process metrics, per-course counts and
            user counts by role.
        """
        gen0, gen1, gen2 = gc.get_count()
        # ru_maxrss is reported in kilobytes on Linux
        max_rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss * 1024
        return AnalysisResponse(
            uptime_seconds=round(time.monotonic() - _STARTED_MONOTONIC, 3),
            started_at=STARTED_AT,
            process_id=os.getpid(),
            processor_count=os.cpu_count() or 1,
            max_rss_bytes=max_rss,
            threads=threading.active_count(),
            gc=GCStats(gen0=gen0, gen1=gen1, gen2=gen2),
            cpu_percent=estimate_cpu_percent(config.CPU_SAMPLE_SECONDS),
            timestamp=datetime.now(pytz.utc),
            courses=self.course_stats(),
            user_counts=self.user_counts(),
        )
