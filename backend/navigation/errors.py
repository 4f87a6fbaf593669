# backend/navigation/errors.py
"""
Failure types raised by the navigation core.

Every failure is an exception deriving from NavigationError so the HTTP layer
can turn it into a JSON error response with one handler.
"""


class NavigationError(Exception):
    """Base class for navigation failures."""

    status_code = 500


class NoRoadData(NavigationError):
    """The road network is empty or has not been loaded yet."""

    status_code = 503


class NoPathFound(NavigationError):
    """Start and finish snapped to disconnected parts of the road graph."""

    status_code = 404


class DegenerateGeometry(NavigationError):
    """
    A ring, line or coordinate is malformed (too few vertices, non-finite
    ordinates). The geometry kernel and viewport filter catch it and degrade
    to an empty result; the HTTP layer validates input before it can surface.
    """


class InvalidBounds(NavigationError):
    """Viewport corners are not finite or not ordered south-west / north-east."""

    status_code = 400
