"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000
DEFAULT_RADIUS_METERS = 100

POSITION_TIMEOUT_SECONDS = 10
SIGN_OUT_DELAY_SECONDS = 3
MONITOR_REFRESH_SECONDS = 10

DEFAULT_HISTORY_LIMIT = 200
DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 4

EXTRA_WAITER_NOTE = "Validación biométrica omitida (Mozo Extra)."
SAVE_FAILED_MESSAGE = "No se pudo guardar la fichada. Intente nuevamente."
DEFAULT_DRESS_CODE = "Uniforme estándar"
