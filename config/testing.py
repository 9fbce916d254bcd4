SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

STORE_BACKEND = "memory"
DB_CONFIG = {}
AUTO_INIT_DB = False

GEOCODER_ENABLED = False
GPS_TIMEOUT_SECONDS = 1.0

SCHEDULER_ENABLED = False
