class IntegrationError(Exception):
    """Base integration exception."""


class ContractError(IntegrationError):
    """Raised for non-retryable Supabase errors (4xx, malformed payloads)."""


class UpstreamUnavailable(IntegrationError):
    """Raised when Supabase cannot be reached."""
