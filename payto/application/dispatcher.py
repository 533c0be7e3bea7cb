"""Application layer: routes parsed commands to their handlers."""
import logging
from dataclasses import replace
from typing import Dict, Optional

from fastapi.concurrency import run_in_threadpool

from payto.application.handlers import HelpHandler, InfoHandler, RegisterHandler, SendPaymentHandler
from payto.config import Settings
from payto.domain.command_parser import CommandParser, default_parser
from payto.domain.commands import CommandHandler, CommandRequest, CommandResult, Deferred
from payto.domain.errors import GENERIC_FAILURE, PaytoError, UpstreamError
from payto.infrastructure.ilp_kit_client import IlpKitClient
from payto.infrastructure.repositories import CredentialRepository
from payto.infrastructure.slack_client import SlackClient

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Parse the command text, run the matching handler, and shield Slack from raw faults."""

    def __init__(self, settings: Settings, credential_store: CredentialRepository, slack: SlackClient,
                 payments: IlpKitClient, parser: Optional[CommandParser] = None):
        self.settings = settings
        self.credential_store = credential_store
        self.slack = slack
        self.payments = payments
        self.parser = parser or default_parser
        self.handlers: Dict[str, CommandHandler] = {
            "send": SendPaymentHandler(settings, credential_store, slack, payments),
            "register": RegisterHandler(settings, credential_store, slack, payments),
            "info": InfoHandler(credential_store, payments),
            "help": HelpHandler(),
        }

    async def dispatch(self, request: CommandRequest) -> CommandResult:
        try:
            command = self.parser.parse(request.text, request.command)
            logger.info(f"[CMD] {command.kind} from @{request.user_name} ({request.user_id})")
            result = await self.handlers[command.kind].handle(command, request)
        except UpstreamError as e:
            logger.error(f"❌ Upstream failure for @{request.user_name}: {e} body={e.body}")
            return CommandResult(text=e.user_message)
        except PaytoError as e:
            logger.info(f"[CMD] rejected for @{request.user_name}: {e.user_message}")
            return CommandResult(text=e.user_message)
        except Exception as e:
            logger.error(f"Command error for @{request.user_name}: {e}", exc_info=True)
            return CommandResult(text=GENERIC_FAILURE)

        if result.deferred is not None:
            result = replace(result, deferred=self._guard(result.deferred, request))
        return result

    def _guard(self, deferred: Deferred, request: CommandRequest) -> Deferred:
        """Wrap deferred work so an unexpected fault becomes a follow-up message."""
        async def run() -> None:
            try:
                await deferred()
            except Exception as e:
                logger.error(f"Deferred work failed for @{request.user_name}: {e}", exc_info=True)
                try:
                    await run_in_threadpool(self.slack.respond, request.response_url, GENERIC_FAILURE)
                except UpstreamError as notify_error:
                    logger.error(f"❌ Could not report failure to @{request.user_name}: {notify_error}")
        return run
