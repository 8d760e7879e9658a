import os
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Session tokens (signed JWT wrapping the identity provider token)
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE = timedelta(
    minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
)

DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/classroom_dashboard.db")

# Classroom platform
CLASSROOM_API_BASE_URL = os.getenv(
    "CLASSROOM_API_BASE_URL", "https://classroom.googleapis.com/v1"
)
CLASSROOM_TIMEOUT_SECONDS = float(os.getenv("CLASSROOM_TIMEOUT_SECONDS", "15"))

# Due dates are calendar values; "local" means the server's own zone
DUE_DATE_TIMEZONE = os.getenv("DUE_DATE_TIMEZONE", "local")

# Display defaults for incomplete platform records
DEFAULT_ASSIGNMENT_TITLE = "untitled"
DEFAULT_STUDENT_NAME = "Unnamed student"
