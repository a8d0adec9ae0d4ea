"""
AI Routes Package
=================

All API routes of the generative AI client service.
"""

from . import chat_routes
from . import image_routes
from . import job_routes

__all__ = [
    "chat_routes",
    "image_routes",
    "job_routes"
]
