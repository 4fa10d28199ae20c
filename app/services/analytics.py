import math
from collections import Counter, defaultdict
from datetime import date

from sqlalchemy.orm import Session

from app.core.config import TOP_STUDENTS_LIMIT, TREND_MONTHS
from app.core.current_user import Identity
from app.core.utils import as_utc, utcnow
from app.models.submission import Submission
from app.schemas.analytics import (
    AnalyticsOverview,
    MonthlyCount,
    ProfessorPerformance,
    StatsOverview,
    StudentPerformance,
    SubmissionTrends,
    TopStudent,
    TypeDistribution,
)
from app.services import users as user_service
from app.services.submissions import list_all_submissions, reconcile_professor

SECONDS_PER_DAY = 60 * 60 * 24


def _round1(value: float | None) -> float | None:
    # half-up, not banker's rounding; a zero average reads as "no data"
    if not value:
        return None
    return math.floor(value * 10 + 0.5) / 10


def _mean(values: list[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def _graded(submissions: list[Submission]) -> list[Submission]:
    return [s for s in submissions if s.grade is not None]


def _days_open(sub: Submission) -> float:
    return (as_utc(sub.updated_at) - as_utc(sub.created_at)).total_seconds() / SECONDS_PER_DAY


def _avg_days_open(submissions: list[Submission]) -> float | None:
    return _mean([d for d in (_days_open(s) for s in submissions) if d > 0])


def _count_status(submissions: list[Submission], status: str) -> int:
    return sum(1 for s in submissions if s.status == status)


def scoped_submissions(db: Session, identity: Identity) -> list[Submission]:
    """Students see their own work; professors see reconciled matches."""
    submissions = list_all_submissions(db)
    if identity.is_professor:
        return reconcile_professor(db, submissions, identity.user_id, persist=True)
    return [s for s in submissions if s.student_id == identity.user_id]


def stats_overview(db: Session) -> StatsOverview:
    submissions = list_all_submissions(db)
    return StatsOverview(
        total=len(submissions),
        by_status=dict(Counter(s.status for s in submissions)),
        by_student=dict(Counter(s.student_id for s in submissions)),
        avg_grade=_mean([s.grade for s in _graded(submissions)]),
    )


def grade_distribution(grades: list[float]) -> list[int]:
    buckets = [0, 0, 0, 0, 0]
    for grade in grades:
        if grade <= 20:
            buckets[0] += 1
        elif grade <= 40:
            buckets[1] += 1
        elif grade <= 60:
            buckets[2] += 1
        elif grade <= 80:
            buckets[3] += 1
        else:
            buckets[4] += 1
    return buckets


def overview(db: Session, identity: Identity) -> AnalyticsOverview:
    submissions = scoped_submissions(db, identity)
    grades = [s.grade for s in _graded(submissions)]
    return AnalyticsOverview(
        total=len(submissions),
        by_status=dict(Counter(s.status for s in submissions)),
        avg_grade=_round1(_mean(grades)),
        grade_distribution=grade_distribution(grades),
        graded_count=len(grades),
        ungraded_count=len(submissions) - len(grades),
    )


def _last_months(today: date, count: int) -> list[tuple[int, int]]:
    months = []
    for offset in range(count - 1, -1, -1):
        # months since year 0, shifted back by offset
        index = today.year * 12 + (today.month - 1) - offset
        months.append((index // 12, index % 12 + 1))
    return months


def submission_trends(db: Session, identity: Identity) -> SubmissionTrends:
    submissions = scoped_submissions(db, identity)
    per_month = Counter(
        (as_utc(s.created_at).year, as_utc(s.created_at).month) for s in submissions
    )
    trends = [
        MonthlyCount(month=date(year, month, 1).strftime("%b %Y"), count=per_month[(year, month)])
        for year, month in _last_months(utcnow().date(), TREND_MONTHS)
    ]
    return SubmissionTrends(trends=trends)


def student_performance(db: Session, identity: Identity) -> StudentPerformance:
    submissions = scoped_submissions(db, identity)
    grades = [s.grade for s in _graded(submissions)]
    approved = [s for s in submissions if s.status == "approved"]

    return StudentPerformance(
        avg_grade=_round1(_mean(grades)),
        best_grade=max(grades) if grades else None,
        worst_grade=min(grades) if grades else None,
        total_submissions=len(submissions),
        approved_count=len(approved),
        pending_count=_count_status(submissions, "submitted"),
        resubmit_count=_count_status(submissions, "resubmit"),
        avg_time_to_approval=_round1(_avg_days_open(approved)),
    )


def professor_performance(db: Session, identity: Identity) -> ProfessorPerformance:
    submissions = scoped_submissions(db, identity)
    graded = _graded(submissions)

    per_student: dict[str, list[float]] = defaultdict(list)
    for sub in graded:
        per_student[sub.student_id].append(sub.grade)

    ranked = sorted(
        per_student.items(),
        key=lambda item: _mean(item[1]),
        reverse=True,
    )[:TOP_STUDENTS_LIMIT]

    names = {u.user_id: u.name for u in user_service.list_all_users(db)}
    top_students = [
        TopStudent(
            student_id=student_id,
            name=names.get(student_id) or student_id,
            avg_grade=_mean(grades),
            submission_count=len(grades),
        )
        for student_id, grades in ranked
    ]

    return ProfessorPerformance(
        total_submissions=len(submissions),
        unique_students=len({s.student_id for s in submissions}),
        avg_grade=_round1(_mean([s.grade for s in graded])),
        avg_grading_time=_round1(_avg_days_open(graded)),
        pending_count=_count_status(submissions, "submitted"),
        approved_count=_count_status(submissions, "approved"),
        resubmit_count=_count_status(submissions, "resubmit"),
        top_students=top_students,
    )


def type_distribution(db: Session, identity: Identity) -> TypeDistribution:
    submissions = scoped_submissions(db, identity)
    return TypeDistribution(distribution=dict(Counter(s.type for s in submissions)))
