"""
Error taxonomy shared by the services and the API layer.
"""


class AssistantError(Exception):
    """Base class for errors raised by the assistant core."""


class InvalidInput(AssistantError, ValueError):
    """Empty message, blank search term or malformed chat history."""


class StoreError(AssistantError):
    """The place store could not be read or written."""


class ProviderError(AssistantError):
    """The external place provider could not be reached or returned garbage."""


class AgentError(AssistantError):
    """The text-generation agent failed to produce a reply."""
