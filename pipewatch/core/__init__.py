"""Refresh engine: rate limiting, fetching and the periodic refresh loop."""
