"""
Application-level constants for hardcoded business logic.

These values represent core application behavior and should NEVER be changed
via environment variables or configuration.

For configurable values (connection pools, Keycloak, logging, etc.),
see book_catalog/settings.py.
"""

# ============================================================================
# Listing
# ============================================================================

# Number of records returned by every list endpoint
PAGE_SIZE = 10

# Largest value of an INTEGER primary key column; bounds IDs and page numbers
MAX_RECORD_ID = 2**31 - 1


# ============================================================================
# Serialization
# ============================================================================

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# ============================================================================
# Logging
# ============================================================================

# Maximum size of a single JSON log line before the message is truncated
MAX_LOG_SIZE_BYTES = 64 * 1024
