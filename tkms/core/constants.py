"""
Application-wide constants
"""

SERVICE_NAME = "tkms-backend"
API_VERSION = "v1"

# Roles
ROLE_EMPLOYEE = "employee"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super-admin"
ADMIN_ROLES = (ROLE_ADMIN, ROLE_SUPER_ADMIN)

# Weekday names in Python weekday() order
WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Leave credit bounds
DEFAULT_LEAVE_CREDITS = 5
MAX_LEAVE_CREDITS = 30

# Listing caps
DEFAULT_LIST_LIMIT = 100
NOTIFICATION_LIST_LIMIT = 100
EMPLOYEE_ID_MAX_ATTEMPTS = 10

SYSTEM_SETTINGS_ID = 1

# Longest leave request, in inclusive calendar days
MAX_LEAVE_DAYS = 366
