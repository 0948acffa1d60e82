class KubeMeterError(Exception):
    """Base exception for kubemeter."""

    pass


class QueryParameterError(KubeMeterError):
    """Base exception for invalid query parameters (bad request)."""

    pass


class ParseError(QueryParameterError):
    """Raised when a time, duration or integer parameter is malformed."""

    pass


class ParamConflict(QueryParameterError):
    """Raised when 'time' and the combination of 'start' and 'end' are mixed."""

    def __init__(self, message: str = "'time' and the combination of 'start' and 'end' are mutually exclusive."):
        super().__init__(message)


class InvalidStartEnd(QueryParameterError):
    """Raised when 'start' is after 'end'."""

    def __init__(self, message: str = "'start' must be before 'end'."):
        super().__init__(message)


class InvalidPage(QueryParameterError):
    """Raised when 'page' is not a positive integer."""

    def __init__(self, message: str = "Invalid parameter 'page'."):
        super().__init__(message)


class InvalidLimit(QueryParameterError):
    """Raised when 'limit' is not a positive integer."""

    def __init__(self, message: str = "Invalid parameter 'limit'."):
        super().__init__(message)


class InvalidComponent(QueryParameterError):
    """Raised when a component type has no metric catalog."""

    pass


class NoHit(KubeMeterError):
    """Raised when the query window entirely precedes the namespace creation time."""

    def __init__(self, message: str = "'end' or 'time' must be after the namespace creation time."):
        super().__init__(message)


class BackendQueryError(KubeMeterError):
    """Raised when a query against the time-series backend fails."""

    pass


class ResourceNotFound(KubeMeterError):
    """Raised when a Kubernetes resource referenced by a query does not exist."""

    pass
