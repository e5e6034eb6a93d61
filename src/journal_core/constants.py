"""Limits for note retrieval and summaries."""

# Maximum notes fetched for a single summary pass
MAX_USER_NOTES = 50

# Filtered listing
DEFAULT_FILTER_LIMIT = 20
MAX_FILTER_LIMIT = 50
