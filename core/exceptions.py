#!/usr/bin/env python3
"""
Service-layer exceptions.

Only configuration problems and missing entities are raised to callers.
Provider rejections, audit failures and stale conditional updates are
reported through return values instead.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class EntityNotFoundException(ServiceException):
    """Raised when a job posting or applicant referenced by a submission does not exist."""
    pass


class ChannelConfigurationError(ServiceException):
    """Raised when a selected channel provider is unknown or missing required settings.

    Distinct from a delivery failure: nothing has been sent when this is raised.
    """

    def __init__(self, channel: str, provider: str, message: str):
        self.channel = channel
        self.provider = provider
        super().__init__(f"{channel} provider '{provider}': {message}")
