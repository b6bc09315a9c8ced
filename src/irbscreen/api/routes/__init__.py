"""
API route modules.
"""

from irbscreen.api.routes.review import router as review_router

__all__ = [
    "review_router",
]
