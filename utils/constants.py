APP_NAME = "Finance Tracker"
DB_FILE = "finance_tracker.db"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

TRANSACTION_TYPES = ["expense", "income"]
FREQUENCIES = ["daily", "weekly", "monthly"]
DAY_INTERVALS = {
    "daily": 1,
    "weekly": 7,
}

AUTO_SUFFIX = " (Auto)"
DEFAULT_PAYMENT = "Bank"

# Recurrence policies
CATCHUP_SINGLE = "single"        # one occurrence per due definition per check
CATCHUP_BACKFILL = "backfill"    # one occurrence per missed period
CATCHUP_POLICIES = [CATCHUP_SINGLE, CATCHUP_BACKFILL]
RECURRING_CATCHUP_DAYS = 90

OVERFLOW_ROLL = "roll"      # Jan 31 + 1 month -> Mar 3 (Mar 2 in leap years)
OVERFLOW_CLAMP = "clamp"    # Jan 31 + 1 month -> Feb 28/29
OVERFLOW_POLICIES = [OVERFLOW_ROLL, OVERFLOW_CLAMP]

# Percent-change guards. Totals with no prior baseline report 0; a category
# that is new this month reports 100.
TOTAL_PERCENT_NO_BASELINE = 0.0
CATEGORY_PERCENT_NEW = 100.0
CATEGORY_PERCENT_NO_BASELINE = 0.0
CHANGE_NOISE_FLOOR = 0.01

SUGGESTION_MIN_CHARS = 2
SUGGESTION_LIMIT = 5
BREAKDOWN_DISPLAY_LIMIT = 4
INSIGHT_DISPLAY_LIMIT = 5

DEFAULT_SETTINGS = {
    "currency_symbol": "€",
    "catchup_policy": CATCHUP_SINGLE,
    "month_overflow": OVERFLOW_ROLL,
    "suggestion_limit": str(SUGGESTION_LIMIT),
}

CATEGORIES = {
    "expense": [
        "Groceries", "Restaurant & Dining", "Fast Food & Snacks",
        "Clothing & Accessories", "Electronics", "Household Items",
        "Personal Care & Beauty", "Healthcare & Medical", "Public Transport",
        "Gas & Fuel", "Rent & Mortgage", "Utilities (Electric, Water, Gas)",
        "Internet & Phone Bills", "Subscriptions (Netflix, Spotify, etc)",
        "Insurance", "Education & Courses", "Entertainment & Movies",
        "Travel & Vacation", "Gifts & Donations", "Pet Care", "Other Expenses",
    ],
    "income": [
        "Salary", "Freelance Work", "Part-time Job", "Business Income",
        "Investment Returns", "Dividends", "Rental Income", "Gift Received",
        "Bonus", "Commission", "Other Income",
    ],
}

CHART_COLORS = [
    "#F44336", "#FF9800", "#9C27B0", "#2196F3", "#00BCD4",
    "#FF5722", "#4CAF50", "#8BC34A", "#009688", "#888888",
]
INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
