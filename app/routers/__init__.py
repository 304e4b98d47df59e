# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by admin screen:
# - health.py: Health check endpoints
# - dashboard.py: Navigation entries for the landing screen
# - products.py, gallery.py, stories.py, team.py: media-carrying records
# - quotes.py, profiles.py: customer records
# - admins.py: the admin roster
# - editing.py: create/update/delete flow shared by the media screens
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import dashboard
from . import products
from . import gallery
from . import stories
from . import team
from . import quotes
from . import profiles
from . import admins

__all__ = [
    "health",
    "dashboard",
    "products",
    "gallery",
    "stories",
    "team",
    "quotes",
    "profiles",
    "admins",
]
