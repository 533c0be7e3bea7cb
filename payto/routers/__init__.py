"""Aggregate FastAPI routers for inclusion in the application."""
from . import slack, health

all_routers = [
    slack.router,
    health.router,
]
