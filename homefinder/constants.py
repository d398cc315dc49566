"""
Business logic constants for the HomeFinder search service.

These values are stable across environments (dev/staging/prod) and do not
need env-var overrides. For operational parameters that vary per environment
(base URLs, timeouts, session limits), see config.py.
"""

# --- NLP endpoint status codes with dedicated handling ---
# 406: the prompt is not about property search
STATUS_NOT_PROPERTY_SEARCH = 406
STATUS_UNAUTHORIZED = 401
STATUS_RATE_LIMITED = 429

# --- User-facing messages ---
QUERY_REQUIRED_MESSAGE = "Query is required"
API_KEY_MISSING_MESSAGE = "Repliers API key not provided"
API_KEY_MALFORMED_MESSAGE = "Repliers API key contains unsupported characters"
NOT_PROPERTY_SEARCH_MESSAGE = (
    "This query doesn't seem to be about property search. "
    "Please try asking about homes, condos, or real estate."
)
INVALID_API_KEY_MESSAGE = "Invalid API key. Please check your Repliers API key."
RATE_LIMITED_MESSAGE = "Too many requests. Please wait a moment and try again."
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."

# Translation failures with a more specific message than SEARCH_FAILED_MESSAGE
TRANSLATION_STATUS_MESSAGES: dict[int, str] = {
    STATUS_UNAUTHORIZED: INVALID_API_KEY_MESSAGE,
    STATUS_RATE_LIMITED: RATE_LIMITED_MESSAGE,
}

# --- API metadata ---
API_TITLE = "HomeFinder API"
API_VERSION = "0.1.0"
