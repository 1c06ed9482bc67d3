# Back-office live-server test suite
#
# API tests (pytest + httpx) run against a real `flask run` process with
# its own temporary SQLite database and file stores.
#
# Run with: python -m pytest tests/api [-m smoke]
