import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "venue_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# no key: the validator answers with a deterministic configuration error
GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-2.5-flash"
AI_TIMEOUT_SECONDS = 5.0

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "/tmp/venue-attendance-uploads")
UPLOAD_URL_PREFIX = "/uploads"
