from classroom_dashboard.db.base import Base
from classroom_dashboard.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
