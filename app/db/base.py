# import every model so Base.metadata knows about all tables
from app.db.base_class import Base  # noqa: F401
from app.models import (  # noqa: F401
    announcement,
    discussion,
    group,
    notification,
    submission,
    template,
    user,
)
