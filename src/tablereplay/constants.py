#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
PACKAGE_NAME = "tablereplay"
CONFIGS_ROOT = f"pkg://{PACKAGE_NAME}.configs.replay"

ALL_CAPACITIES = "All"
LUNCH_SHIFT = "Comida"
DINNER_SHIFT = "Cena"
# the layout export encodes the meal shift numerically
SHIFT_CODES = {"1": LUNCH_SHIFT, "2": DINNER_SHIFT}
CONFIRMED_STATUSES = (
    "Sentada",
    "Cuenta solicitada",
    "Liberada",
    "Llegada",
    "Confirmada",
    "Re-Confirmada",
)

DEFAULT_DURATION_MINUTES = 90
DEFAULT_PARTY_SIZE = 1
END_BUFFER_MINUTES = 10
TIME_SLOT_MINUTES = 30
PLAYBACK_STEP_MINUTES = 10
CLOCK_FORMAT = "%H:%M"
STAMP_FORMAT = "%Y-%m-%d %H:%M"

# column names of the table layout export
LAYOUT_DATE_COLUMN = "date"
LAYOUT_SHIFT_COLUMN = "meal"
LAYOUT_RESTAURANT_COLUMN = "restaurant_name"
LAYOUT_TABLES_COLUMN = "tables"

# column names of the reservation export
RESERVATION_DATE_COLUMN = "date"
RESERVATION_SHIFT_COLUMN = "meal_shift"
RESERVATION_RESTAURANT_COLUMN = "restaurant"
RESERVATION_STATUS_COLUMN = "status_long"
RESERVATION_TIME_COLUMN = "time"
CREATION_DATE_COLUMN = "date_add"
CREATION_TIME_COLUMN = "time_add"
TABLES_COLUMN = "tables"
TABLE_COLUMN = "table"
PARTY_SIZE_COLUMN = "for"
DURATION_COLUMN = "duration"
RESERVATION_ID_COLUMN = "id"
