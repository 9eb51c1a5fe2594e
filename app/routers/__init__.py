# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - imports.py: Import wizard endpoints (preview, validate, export, confirm)
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import imports

__all__ = [
    "health",
    "imports",
]
