"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import timedelta
from decimal import Decimal

STANDARD_HOURS_PER_DAY = Decimal("8")
HOURS_QUANTUM = Decimal("0.01")

DEFAULT_GEOFENCE_RADIUS_M = 100.0
EARTH_RADIUS_M = 6_371_000.0

DEFAULT_GPS_TIMEOUT_SECONDS = 15.0
DEFAULT_GPS_WORKERS = 8
DEFAULT_GEOCODER_TIMEOUT_SECONDS = 3.0

DEFAULT_SWEEP_INTERVAL_SECONDS = 60

SESSION_TTL = timedelta(minutes=15)
SESSION_CLEANUP_INTERVAL = timedelta(minutes=5)

TOIL_EXPIRY_DAYS = 21
TOIL_EXPIRING_WINDOW_DAYS = 7

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_HISTORY_LIMIT = 30

MANUAL_CHECKIN_LOCATION = "Manual Check-in"
MANUAL_CHECKOUT_LOCATION = "Manual Check-out"
REMOTE_LOCATION = "Remote"
AUTO_CHECKOUT_LOCATION = "Auto Check-out (Midnight)"
AUTO_CHECKOUT_ADMIN_NOTE = "Auto-checkout due to missing manual checkout"
OUTSIDE_LOCATION = "Outside Work Locations"
