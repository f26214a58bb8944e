from __future__ import annotations


class PostcodeError(Exception):
    """Base error for postcode-anywhere."""


class ConfigurationError(PostcodeError):
    """Raised when the lookup is misconfigured (missing licence key, bad cutoff)."""


class ValidationError(PostcodeError):
    """Raised when input validation fails."""


class InvalidPostcode(ValidationError):
    """The provided string is not a valid UK postcode."""

    def __init__(self, postcode: str) -> None:
        self.postcode = postcode
        super().__init__(f"Invalid UK postcode: '{postcode}'")


class UpstreamError(PostcodeError):
    """Raised when the upstream address API fails."""


class TransportError(UpstreamError):
    """The address API could not be reached or returned no usable body."""


class UpstreamDataError(UpstreamError):
    """The address API answered, but the payload carries no usable addresses."""
