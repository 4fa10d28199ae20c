from app.db.base import Base
from app.db.seed import import_json_seeds
from app.db.session import SessionLocal, engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        import_json_seeds(db)
    finally:
        db.close()
