# Import all routes
from .users import router as users_router
from .noc import router as noc_router

# All routers that should be included in main app
__all__ = [
    "users_router",
    "noc_router"
]
