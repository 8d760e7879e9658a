# import models so Base.metadata sees every table
from classroom_dashboard.db.base_class import Base  # noqa: F401
from classroom_dashboard.models.attendance import Attendance  # noqa: F401
from classroom_dashboard.models.user import User  # noqa: F401
