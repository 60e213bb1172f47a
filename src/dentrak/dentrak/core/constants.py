"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_ATTENDANCE_NOTE = "Work day (Bulk/Single Add)"
DEFAULT_BLOCK_REASON = "Blocked"
BULK_BLOCK_REASON = "Blocked (Bulk)"
UNKNOWN_PRACTICE_NAME = "Unknown"

# Weekday indexes: Sunday=0 .. Saturday=6
WORK_WEEKDAYS = frozenset({1, 2, 3, 4, 5})

CONFLICT_PREVIEW_LIMIT = 5

DEMO_PRACTICE_NAMES = (
    "All Care Dental by the Sea",
    "City Center Dentistry",
    "Rural Community Clinic",
)
