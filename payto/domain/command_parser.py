"""Domain layer: slash command parsing using an ordered list of regex rules."""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence
from urllib.parse import urlsplit

from payto.domain.commands import Command, Send, Register, RegisterInvite, Info, Help
from payto.domain.credentials import Credentials
from payto.domain.errors import ValidationError


REGISTER_USAGE = (
    "registration request must include an ILP Kit invite link "
    "(`/payto register https://kit.example/register/CODE`) "
    "or your account and password (`/payto register alice@kit.example password`)"
)


@dataclass(frozen=True)
class CommandRule:
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], Command]


def _rule(name: str, pattern: str, build: Callable[[re.Match], Command]) -> CommandRule:
    return CommandRule(name, re.compile(pattern, re.IGNORECASE | re.DOTALL), build)


def _send(m: re.Match) -> Command:
    message = (m.group("message") or "").strip() or None
    return Send(
        recipient_id=m.group("id"),
        recipient_name=m.group("name") or m.group("id"),
        amount=m.group("amount"),
        message=message,
    )


def _register_invite(m: re.Match) -> Command:
    return RegisterInvite(host=m.group("host"), invite_code=m.group("code"))


def _register_url(m: re.Match) -> Command:
    parts = urlsplit(m.group("url"))
    segments = [s for s in parts.path.split("/") if s]
    if not parts.netloc or not segments:
        raise ValidationError(f"couldn't find an account name in {m.group('url')}")
    return Register(
        account_endpoint=f"{parts.scheme}://{parts.netloc}",
        identifier=segments[-1],
        secret=m.group("secret"),
    )


def _register_address(m: re.Match) -> Command:
    credentials = Credentials.from_address(f"{m.group('user')}@{m.group('host')}", m.group("secret"))
    return Register(
        account_endpoint=credentials.account_endpoint,
        identifier=credentials.identifier,
        secret=credentials.secret,
    )


def _register_incomplete(m: re.Match) -> Command:
    raise ValidationError(REGISTER_USAGE)


# Evaluated top to bottom; escaped (Slack-formatted) variants come before plain ones.
DEFAULT_RULES: List[CommandRule] = [
    _rule("send", r"^<@(?P<id>[A-Z0-9]+)(?:\|(?P<name>[^>]+))?>\s+(?P<amount>\d+\.?\d*)(?:\s+(?P<message>.*))?$", _send),
    _rule("register-invite-escaped", r"^register\s+<(?P<host>https?://[^/|>\s]+)/register/(?P<code>[^|>\s]+)(?:\|[^>]*)?>$", _register_invite),
    _rule("register-invite", r"^register\s+(?P<host>https?://[^/\s]+)/register/(?P<code>\S+)$", _register_invite),
    _rule("register-url-escaped", r"^register\s+<(?P<url>https?://[^|>\s]+)(?:\|[^>]*)?>\s+(?P<secret>\S+)$", _register_url),
    _rule("register-url", r"^register\s+(?P<url>https?://\S+)\s+(?P<secret>\S+)$", _register_url),
    _rule("register-address-escaped", r"^register\s+<mailto:(?P<user>[^@|>\s]+)@(?P<host>[^|>\s]+)(?:\|[^>]*)?>\s+(?P<secret>\S+)$", _register_address),
    _rule("register-address", r"^register\s+(?P<user>[^@\s<>]+)@(?P<host>[^\s<>]+)\s+(?P<secret>\S+)$", _register_address),
    _rule("register-incomplete", r"^register\b", _register_incomplete),
    _rule("info", r"^(?:info|balance)$", lambda m: Info()),
]

# Dedicated slash commands map onto a keyword of the main command.
SLASH_COMMAND_KEYWORDS = {
    "/payto-register": "register",
    "/payto-info": "info",
    "/payto-help": "help",
}


class CommandParser:
    """Classify slash command text into a Command; falls back to Help."""

    def __init__(self, rules: Optional[Sequence[CommandRule]] = None):
        self.rules: List[CommandRule] = list(rules if rules is not None else DEFAULT_RULES)

    def parse(self, text: str, slash_command: Optional[str] = None) -> Command:
        text = (text or "").strip()
        keyword = SLASH_COMMAND_KEYWORDS.get((slash_command or "").lower())
        if keyword and not re.match(rf"{keyword}(?:\s|$)", text, re.IGNORECASE):
            text = f"{keyword} {text}".strip()
        for rule in self.rules:
            match = rule.pattern.match(text)
            if match:
                return rule.build(match)
        return Help()


default_parser = CommandParser()
