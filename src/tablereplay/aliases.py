#
# For licensing see accompanying LICENSE file.
# Copyright © 2025 Apple Inc. All Rights Reserved.
#
# identity of a physical table, unique within one replay
TableId = int
# minutes relative to the earliest reservation of the replayed shift
MinuteOffset = int
# the raw text of a CSV export, header row included
CsvText = str
# slug identifying a restaurant in the exports (eg restaurante-turqueta)
RestaurantId = str
# a meal shift label as it appears in the reservation export (eg Comida)
MealShiftLabel = str
# a day formatted as YYYY-MM-DD
DayStr = str
# "All" or the string form of a table capacity
CapacityFilter = str
