"""Route table build errors.

Both are raised while the registry is assembled at startup and are
never handled at request time.
"""


class RouteDefinitionError(ValueError):
    """A route declaration is malformed (bad method, path or parameter)."""


class RouteConflictError(RouteDefinitionError):
    """Two routes resolve to the same method and path shape."""
