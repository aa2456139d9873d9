"""Constants for EcoLog.

This module centralizes the impact factors and default values used throughout the application.
"""

from decimal import Decimal

from ecolog.models.action import ActionCategory


# Per-unit impact factors: (co2 kg, water L, waste kg, points)
# energy_saving per kWh, recycling/upcycling per kg, sustainable_commute per km
IMPACT_FACTORS = {
    ActionCategory.ENERGY_SAVING.value: (Decimal("0.5"), Decimal("10"), Decimal("0"), Decimal("5")),
    ActionCategory.RECYCLING.value: (Decimal("2"), Decimal("50"), Decimal("1"), Decimal("10")),
    ActionCategory.UPCYCLING.value: (Decimal("3"), Decimal("75"), Decimal("1"), Decimal("15")),
    ActionCategory.SUSTAINABLE_COMMUTE.value: (Decimal("0.15"), Decimal("2"), Decimal("0"), Decimal("3")),
}

# Quantity used when none (or garbage) is supplied
DEFAULT_QUANTITY = Decimal("1")

# Fixed-precision storage of physical impact values
IMPACT_PRECISION = Decimal("0.01")

# Listing defaults
DEFAULT_ACTIONS_LIMIT = 50
DEFAULT_LEADERBOARD_LIMIT = 10
MAX_LEADERBOARD_LIMIT = 100

# Corporate dashboards count only the corporate account itself for now
CORPORATE_ACTIVE_EMPLOYEES = 1

# Display name fallback when a user has neither a name nor an email
ANONYMOUS_NAME = "Anonymous"

# Guest identities
GUEST_ID_PREFIX = "guest:"
GUEST_FIRST_NAME = "Guest"
GUEST_LAST_NAME = "User"

# Dashboard periods
PERIOD_MONTH = "month"
PERIOD_QUARTER = "quarter"

# Quantities above 10**MAX_QUANTITY_EXPONENT are treated as unparseable
MAX_QUANTITY_EXPONENT = 100
# Decimal precision used while computing impact; covers MAX_QUANTITY_EXPONENT
IMPACT_CONTEXT_PRECISION = 2 * MAX_QUANTITY_EXPONENT

# Largest values that fit the Numeric(10, 2) / Integer storage columns
MAX_STORED_AMOUNT = Decimal("99999999.99")
MAX_STORED_POINTS = 2147483647
