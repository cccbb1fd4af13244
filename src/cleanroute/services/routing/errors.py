"""Routing service errors."""


class InvalidParameterError(ValueError):
    """A request parameter cannot be used to compute a route."""


class SharingUnavailableError(RuntimeError):
    """Route sharing needs the managed database, which is not configured."""
