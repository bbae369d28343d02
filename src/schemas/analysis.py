"""Analysis view schema definitions."""

from datetime import datetime
from typing import List

from pydantic import BaseModel


class CourseStats(BaseModel):
    course_id: int
    title: str
    student_count: int
    instructor_count: int


class UserCounts(BaseModel):
    students: int
    instructors: int
    admins: int


class GCStats(BaseModel):
    gen0: int
    gen1: int
    gen2: int


class AnalysisResponse(BaseModel):
    uptime_seconds: float
    started_at: datetime
    process_id: int
    processor_count: int
    max_rss_bytes: int
    threads: int
    gc: GCStats
    cpu_percent: float
    timestamp: datetime
    courses: List[CourseStats]
    user_counts: UserCounts
