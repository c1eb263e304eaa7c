"""User roles that gate editor and campaign operations."""

from enum import Enum


class UserRole(str, Enum):
    """Who is driving the session."""
    ZONE_OWNER = "ZONE_OWNER"
    ADVERTISER = "ADVERTISER"
    REGULAR = "REGULAR"


# Roles allowed to mutate zones
OWNER_ROLES = frozenset({UserRole.ZONE_OWNER})

# Roles allowed to launch campaigns
ADVERTISER_ROLES = frozenset({UserRole.ADVERTISER})

ALL_ROLES = frozenset(UserRole)
