"""
DiffWatch API Package.

FastAPI receiver for working tree change notifications.
Requires Python 3.11+.
"""

# Import app lazily to avoid circular imports
# Use: from api.main import app
