class ValidationError(ValueError):
    """Raised when operator input is rejected before any state is touched."""
    pass


class InvalidTransitionError(ValueError):
    """Raised when a status change is applied to a booking that is no longer Booked."""
    pass


class BookingNotFoundError(LookupError):
    pass


class CustomerNotFoundError(LookupError):
    pass


class GatewayError(RuntimeError):
    """Raised when the spreadsheet backend is unreachable or answers with success=false."""
    pass


class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass
