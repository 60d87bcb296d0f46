"""API routes package"""

from . import (
    health,
    profiles,
    estimates,
    baseline,
    periods,
    reservations,
    budget,
    observations,
    jobs,
)

__all__ = [
    "health",
    "profiles",
    "estimates",
    "baseline",
    "periods",
    "reservations",
    "budget",
    "observations",
    "jobs",
]
