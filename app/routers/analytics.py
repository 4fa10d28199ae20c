from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.schemas.analytics import (
    AnalyticsOverview,
    StatsOverview,
    SubmissionTrends,
    TypeDistribution,
)
from app.services import analytics

router = APIRouter()


@router.get("/stats/overview", response_model=StatsOverview)
def stats_overview(db: Session = Depends(get_db)):
    return analytics.stats_overview(db)


@router.get("/analytics/overview", response_model=AnalyticsOverview)
def analytics_overview(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return analytics.overview(db, me)


@router.get("/analytics/submission-trends", response_model=SubmissionTrends)
def submission_trends(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return analytics.submission_trends(db, me)


@router.get("/analytics/performance")
def performance(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    # the two shapes overlap, so serialize the concrete one explicitly
    if me.is_professor:
        result = analytics.professor_performance(db, me)
    else:
        result = analytics.student_performance(db, me)
    return result.model_dump(by_alias=True, mode="json")


@router.get("/analytics/type-distribution", response_model=TypeDistribution)
def type_distribution(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return analytics.type_distribution(db, me)
