"""Application layer: command handlers implementing the payment workflows."""
import base64
import logging
import re
import secrets
from functools import partial
from typing import Any, Dict, Optional

from fastapi.concurrency import run_in_threadpool

from payto.application import messages
from payto.config import Settings
from payto.domain.commands import (
    Command, CommandHandler, CommandRequest, CommandResult, Register, RegisterInvite, Send,
)
from payto.domain.credentials import Credentials
from payto.domain.errors import NotRegisteredError, RecipientUnresolvedError, UpstreamError
from payto.infrastructure.ilp_kit_client import IlpKitClient
from payto.infrastructure.repositories import CredentialRepository
from payto.infrastructure.slack_client import SlackClient

logger = logging.getLogger(__name__)

SPSP_FIELD_LABEL = re.compile(r"spsp address", re.IGNORECASE)
PLACEHOLDER_EMAIL = "payto@example.com"


class _SlackBackedHandler(CommandHandler):
    def __init__(self, settings: Settings, slack: SlackClient):
        self.settings = settings
        self.slack = slack

    async def _follow_up(self, request: CommandRequest, text: str, response_type: str = "ephemeral") -> None:
        """Post to the command's response_url; losing a follow-up is only logged."""
        try:
            await run_in_threadpool(self.slack.respond, request.response_url, text, response_type)
        except UpstreamError as e:
            logger.error(f"❌ Could not deliver follow-up to @{request.user_name}: {e}")


class SendPaymentHandler(_SlackBackedHandler):
    """Resolve the recipient, acknowledge, then quote and pay out of band."""

    def __init__(self, settings: Settings, store: CredentialRepository, slack: SlackClient,
                 payments: IlpKitClient):
        super().__init__(settings, slack)
        self.store = store
        self.payments = payments

    async def handle(self, command: Send, request: CommandRequest) -> CommandResult:
        credentials = await run_in_threadpool(self.store.get, request.user_id)
        if credentials is None:
            raise NotRegisteredError()

        logger.info(f"💸 @{request.user_name} wants to send {command.amount} to @{command.recipient_name}")
        address = await self.resolve_address(command.recipient_id)
        if not address:
            notified = await self.send_signup_nudge(command, request)
            raise RecipientUnresolvedError(command.recipient_name, notified=notified)

        return CommandResult(
            text=messages.payment_ack(command.amount, command.recipient_name),
            deferred=partial(self.execute_payment, credentials, address, command, request),
        )

    def _find_spsp_field(self, fields: Dict[str, Any]) -> Optional[str]:
        field_id = self.settings.slack_spsp_field_id
        if field_id and field_id in fields:
            return (fields[field_id] or {}).get("value")
        for field in fields.values():
            if SPSP_FIELD_LABEL.search((field or {}).get("label") or ""):
                return field.get("value")
        return None

    async def resolve_address(self, user_id: str) -> Optional[str]:
        try:
            profile = await run_in_threadpool(self.slack.get_user_profile, user_id)
        except UpstreamError as e:
            logger.warning(f"⚠️ Could not load profile for {user_id}: {e}")
            return None
        address = self._find_spsp_field(profile.get("fields") or {})
        return address.strip() if address and address.strip() else None

    async def send_signup_nudge(self, command: Send, request: CommandRequest) -> bool:
        """Best-effort DM telling the recipient to add an SPSP address; returns whether it went out."""
        try:
            team = await run_in_threadpool(self.slack.get_team_info)
            text = messages.signup_nudge(
                to_id=command.recipient_id,
                to_name=command.recipient_name,
                from_id=request.user_id,
                from_name=request.user_name,
                team_name=team.get("name", "Slack"),
                team_domain=team.get("domain", "app"),
            )
            await run_in_threadpool(self.slack.post_message, command.recipient_id, text, self.settings.bot_username)
            logger.info(f"📨 Sent signup message to @{command.recipient_name}")
            return True
        except Exception as e:
            logger.warning(f"⚠️ Error sending signup message to @{command.recipient_name}: {e}")
            return False

    async def execute_payment(self, credentials: Credentials, address: str, command: Send,
                              request: CommandRequest) -> None:
        logger.info(f"🚀 Paying {command.amount} to {address} from {credentials.address}")
        try:
            quote = await run_in_threadpool(self.payments.quote, credentials, address, command.amount)
        except UpstreamError as e:
            logger.error(f"❌ Quote failed for {address}: {e}")
            await self._follow_up(request, messages.QUOTE_FAILED)
            return

        destination = None
        if self.settings.resolve_destination:
            try:
                destination = await run_in_threadpool(self.payments.parse_destination, credentials, address)
            except UpstreamError as e:
                logger.error(f"❌ Destination lookup failed for {address}: {e}")
                await self._follow_up(request, messages.DESTINATION_FAILED.format(address=address))
                return

        try:
            await run_in_threadpool(self.payments.send_payment, credentials, quote, destination, command.message)
        except UpstreamError as e:
            logger.error(f"❌ Payment {quote.id} failed: {e}")
            await self._follow_up(request, messages.PAYMENT_FAILED)
            return

        logger.info(f"✅ Payment {quote.id} sent: {quote.source_amount} -> {quote.destination_amount}")
        await self._follow_up(
            request,
            messages.payment_confirmation(request.user_id, command.recipient_id,
                                          quote.source_amount, quote.destination_amount),
            response_type="in_channel",
        )
        try:
            await run_in_threadpool(
                self.slack.post_message,
                command.recipient_id,
                messages.payment_received(request.user_id, quote.destination_amount, command.message),
                self.settings.bot_username,
            )
        except Exception as e:
            logger.warning(f"⚠️ Could not notify @{command.recipient_name} about payment {quote.id}: {e}")


class RegisterHandler(_SlackBackedHandler):
    """Store existing account credentials or provision a new account from an invite."""

    def __init__(self, settings: Settings, store: CredentialRepository, slack: SlackClient,
                 payments: IlpKitClient):
        super().__init__(settings, slack)
        self.store = store
        self.payments = payments

    async def handle(self, command: Command, request: CommandRequest) -> CommandResult:
        if isinstance(command, RegisterInvite):
            return CommandResult(
                text="Registering...",
                deferred=partial(self.provision_account, command, request),
            )
        return await self.register_account(command, request)

    async def register_account(self, command: Register, request: CommandRequest) -> CommandResult:
        credentials = Credentials(command.account_endpoint, command.identifier, command.secret)
        await run_in_threadpool(self.store.upsert, request.user_id, credentials)
        logger.info(f"🔑 Registered {credentials.address} for @{request.user_name}")
        return CommandResult(
            text=f"Registered! Your SPSP address is {credentials.address}",
            deferred=partial(self.publish_address, credentials.address, request),
        )

    async def publish_address(self, address: str, request: CommandRequest) -> None:
        """Put the address in the user's profile, or remind them to do it."""
        field_id = self.settings.slack_spsp_field_id
        if field_id:
            try:
                await run_in_threadpool(self.slack.set_profile_field, request.user_id, field_id, address)
                logger.info(f"📝 Set SPSP Address of @{request.user_name} to {address}")
                return
            except UpstreamError as e:
                logger.warning(f"⚠️ Could not set SPSP Address of @{request.user_name}: {e}")
        await self._follow_up(request, messages.profile_reminder(address))

    @staticmethod
    def generate_username(user_name: str) -> str:
        return f"payto-{user_name}-{secrets.token_hex(4)}"[:21]

    @staticmethod
    def generate_password() -> str:
        return base64.b64encode(secrets.token_bytes(12)).decode("ascii")

    async def provision_account(self, command: RegisterInvite, request: CommandRequest) -> None:
        username = self.generate_username(request.user_name)
        password = self.generate_password()

        try:
            profile = await run_in_threadpool(self.slack.get_user_profile, request.user_id)
        except UpstreamError as e:
            logger.error(f"❌ Could not load profile of @{request.user_name}: {e}")
            await self._follow_up(request, messages.PROFILE_EMAIL_FAILED)
            return

        email = (profile.get("email") or PLACEHOLDER_EMAIL).replace("@", f"+{username}@", 1)
        full_name = " ".join(p for p in (profile.get("first_name"), profile.get("last_name")) if p)
        full_name = full_name or profile.get("real_name") or request.user_name

        try:
            user = await run_in_threadpool(
                self.payments.provision_account, command.host, username, password,
                command.invite_code, email, full_name,
            )
        except UpstreamError as e:
            logger.error(f"❌ Error registering user {username} on {command.host}: {e}")
            await self._follow_up(request, f"Error registering user {username} on {command.host}: {e.detail}")
            return

        credentials = Credentials(command.host, username, password)
        await run_in_threadpool(self.store.upsert, request.user_id, credentials)
        logger.info(f"🆕 Created account {credentials.address}, balance is {user.balance}")
        await self._follow_up(
            request,
            f"Registered user {username} on {command.host} with invite code, balance is {user.balance}. "
            f"Your SPSP address is {credentials.address}",
        )


class InfoHandler(CommandHandler):
    """Account summary; lookups that fail are replaced with placeholders."""

    def __init__(self, store: CredentialRepository, payments: IlpKitClient):
        self.store = store
        self.payments = payments

    async def handle(self, command: Command, request: CommandRequest) -> CommandResult:
        credentials = await run_in_threadpool(self.store.get, request.user_id)
        if credentials is None:
            raise NotRegisteredError(messages.INFO_NOT_REGISTERED)

        try:
            balance = await run_in_threadpool(self.payments.get_balance, credentials)
        except UpstreamError as e:
            logger.warning(f"⚠️ Balance lookup failed for {credentials.address}: {e}")
            balance = messages.UNKNOWN_BALANCE

        try:
            code, symbol = await run_in_threadpool(self.payments.get_currency, credentials)
            currency = f"{code} ({symbol})" if symbol else code
        except UpstreamError as e:
            logger.warning(f"⚠️ Currency lookup failed for {credentials.address}: {e}")
            currency = messages.UNKNOWN_CURRENCY

        return CommandResult(text=messages.account_info(credentials.address, balance, currency))


class HelpHandler(CommandHandler):
    """Handler for help and anything unrecognised."""

    async def handle(self, command: Command, request: CommandRequest) -> CommandResult:
        return CommandResult(text=messages.HELP_TEXT)
