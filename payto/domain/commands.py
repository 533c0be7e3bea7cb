"""Domain layer: typed commands parsed from slash command text."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional


class Command(ABC):
    """Command interface."""

    @property
    @abstractmethod
    def kind(self) -> str:
        """One of send, register, info, help."""


@dataclass(frozen=True)
class Send(Command):
    recipient_id: str
    recipient_name: str
    amount: str
    message: Optional[str] = None

    @property
    def kind(self) -> str:
        return "send"


@dataclass(frozen=True)
class Register(Command):
    """Register an existing ILP Kit account."""
    account_endpoint: str
    identifier: str
    secret: str

    @property
    def kind(self) -> str:
        return "register"


@dataclass(frozen=True)
class RegisterInvite(Command):
    """Provision a new ILP Kit account using an invite code."""
    host: str
    invite_code: str

    @property
    def kind(self) -> str:
        return "register"


@dataclass(frozen=True)
class Info(Command):
    @property
    def kind(self) -> str:
        return "info"


@dataclass(frozen=True)
class Help(Command):
    @property
    def kind(self) -> str:
        return "help"


@dataclass(frozen=True)
class CommandRequest:
    """Who asked for what, and where follow-ups go."""
    user_id: str
    user_name: str
    text: str
    response_url: str = ""
    command: str = ""


Deferred = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class CommandResult:
    """Immediate reply plus optional out-of-band work reporting via response_url."""
    text: str
    response_type: str = "ephemeral"
    deferred: Optional[Deferred] = None


class CommandHandler(ABC):
    """Handler interface for processing commands."""

    @abstractmethod
    async def handle(self, command: Command, request: CommandRequest) -> CommandResult:
        """Handle the command."""
        pass
