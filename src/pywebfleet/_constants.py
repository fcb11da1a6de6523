"""Internal constants shared across the library."""

from datetime import timedelta

BASE_URL = "https://csv.webfleet.com/extern"
USER_AGENT = "pywebfleet"

ACTION_SHOW_TRACKS = "showTracks"
ACTION_SHOW_STOPS = "showStops"
ACTION_SHOW_OBJECT_REPORT = "showObjectReportExtern"

# showTracks rejects user-defined ranges longer than two days.
MAX_WINDOW_SPAN = timedelta(hours=48)
WINDOW_SEAM = timedelta(seconds=1)

RANGE_TOO_WIDE_CODE = 9002
RANGE_TOO_WIDE_MESSAGE = "Custom range exceeds 2 days; please select 48h or less"

MICRODEGREE_SCALE = 1_000_000
MAX_LATITUDE = 90.0
MAX_LONGITUDE = 180.0

# Stop durations above this are taken to be seconds rather than minutes.
DURATION_SECONDS_THRESHOLD = 10_000

UD_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"
ISO_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})
