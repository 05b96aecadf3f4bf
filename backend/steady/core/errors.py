"""Exception taxonomy shared by services, routes and batch jobs."""
from __future__ import annotations


class SteadyError(Exception):
    """Base class for application errors."""


class MalformedResponse(SteadyError):
    """The AI model returned non-JSON, or JSON that is not an object."""

    def __init__(self, message: str, raw_text: str | None = None):
        super().__init__(message)
        self.raw_text = raw_text


class DeliveryFailure(SteadyError):
    """An external collaborator (mail provider, AI provider) call failed."""


class MailDeliveryError(DeliveryFailure):
    """The mail provider rejected or could not transport a message."""


class AIServiceError(DeliveryFailure):
    """The generative text provider failed to answer."""


class NotFound(SteadyError):
    """A row does not exist, or is not owned by the requesting user."""

    def __init__(self, entity: str, identifier: object):
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier
