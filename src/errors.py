# ABOUTME: Error taxonomy raised by the aggregation layer and mapped to HTTP responses.
# ABOUTME: Each class carries its status code and a fixed public message; causes stay in the logs.


class AggregationError(Exception):
    """Base class for failures an aggregation route reports to its caller."""

    status_code = 500
    default_message = "Unexpected error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(AggregationError):
    """A client-supplied parameter failed validation."""

    status_code = 400
    default_message = "Invalid input."


class NotFound(AggregationError):
    """The requested entity does not exist upstream."""

    status_code = 404
    default_message = "Not found."


class NoContent(AggregationError):
    """The upstream answered successfully but with an empty body."""

    status_code = 404
    default_message = "No content."


class UpstreamUnavailable(AggregationError):
    """Transport or HTTP failure while calling a dependency."""

    status_code = 500
    default_message = "Upstream service unavailable."


class UpstreamDataIncomplete(AggregationError):
    """The dependency responded but omitted required fields."""

    status_code = 500
    default_message = "Upstream response was incomplete."
