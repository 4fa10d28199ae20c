from typing import Optional

from app.schemas.base import CamelModel


class StatsOverview(CamelModel):
    total: int
    by_status: dict[str, int]
    by_student: dict[str, int]
    avg_grade: Optional[float] = None


class AnalyticsOverview(CamelModel):
    total: int
    by_status: dict[str, int]
    avg_grade: Optional[float] = None
    # buckets: 0-20, 21-40, 41-60, 61-80, 81-100
    grade_distribution: list[int]
    graded_count: int
    ungraded_count: int


class MonthlyCount(CamelModel):
    month: str
    count: int


class SubmissionTrends(CamelModel):
    trends: list[MonthlyCount]


class StudentPerformance(CamelModel):
    avg_grade: Optional[float] = None
    best_grade: Optional[float] = None
    worst_grade: Optional[float] = None
    total_submissions: int
    approved_count: int
    pending_count: int
    resubmit_count: int
    avg_time_to_approval: Optional[float] = None


class TopStudent(CamelModel):
    student_id: str
    name: str
    avg_grade: float
    submission_count: int


class ProfessorPerformance(CamelModel):
    total_submissions: int
    unique_students: int
    avg_grade: Optional[float] = None
    avg_grading_time: Optional[float] = None
    pending_count: int
    approved_count: int
    resubmit_count: int
    top_students: list[TopStudent]


class TypeDistribution(CamelModel):
    distribution: dict[str, int]
