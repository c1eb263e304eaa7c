"""
Zone Errors
===========

Exception taxonomy for the zone engine.

Pure functions (geometry, model, pricing) raise these; the editor is the only
layer that decides whether an error blocks a transition or is absorbed.
"""


class ZoneError(Exception):
    """Base class for zone engine errors."""
    pass


class InvalidGeometry(ZoneError, ValueError):
    """Raised when a shape/dimension invariant is violated."""
    pass


class ImmutableFieldError(ZoneError, ValueError):
    """Raised when an update targets a field fixed at creation (id, shape)."""
    pass


class UnknownFieldError(ZoneError, KeyError):
    """Raised when an update targets a field the zone does not have."""
    pass


class BelowMinimumArea(ZoneError):
    """Zone area is under the viable minimum; activation stays disabled."""

    def __init__(self, area_sqm: int, min_area_sqm: int):
        self.area_sqm = area_sqm
        self.min_area_sqm = min_area_sqm
        super().__init__(
            f"Zone area {area_sqm} m² is below the minimum of {min_area_sqm} m²"
        )


class StaleSelection(ZoneError):
    """Selected zone no longer exists in the external collection."""

    def __init__(self, zone_id: str):
        self.zone_id = zone_id
        super().__init__(f"Selected zone '{zone_id}' is no longer available")
