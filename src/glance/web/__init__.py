"""Web layer — page shell and HTTP routes for the live preview."""

from glance.web.page import Assets, render_page
from glance.web.routes import STATS_ENDPOINT, register_routes

__all__ = [
    "STATS_ENDPOINT",
    "Assets",
    "register_routes",
    "render_page",
]
