"""Domain layer: error kinds surfaced by the command workflows."""
from typing import Any, Optional


GENERIC_FAILURE = "Sorry, something went wrong on my end. Please try again in a moment. :bow:"
NOT_REGISTERED = "Sorry, you need to register first before you can send payments!"


class PaytoError(Exception):
    """Base error; ``user_message`` is what the requester gets to see."""

    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message


class ValidationError(PaytoError):
    """Malformed command text."""


class NotRegisteredError(PaytoError):
    def __init__(self, user_message: str = NOT_REGISTERED):
        super().__init__(user_message)


class RecipientUnresolvedError(PaytoError):
    """The recipient has no SPSP address in their chat profile."""

    def __init__(self, recipient_name: str, notified: bool = True):
        text = f"uh oh! it looks like @{recipient_name} doesn't have their SPSP Address set in their profile."
        if notified:
            text += " I've sent them a note about it."
        super().__init__(text)
        self.recipient_name = recipient_name
        self.notified = notified


class UpstreamError(PaytoError):
    """A Slack or ILP Kit call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None,
                 user_message: str = GENERIC_FAILURE):
        super().__init__(user_message)
        self.message = message
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status={self.status_code})"
        return self.message

    @property
    def detail(self) -> str:
        """Best human-readable reason, preferring the upstream ``message`` field."""
        if isinstance(self.body, dict):
            for key in ("message", "error"):
                if self.body.get(key):
                    return str(self.body[key])
        return self.message


class AuthorizationError(PaytoError):
    """Inbound request carried the wrong verification token."""

    def __init__(self, user_message: str = "invalid verification token"):
        super().__init__(user_message)
