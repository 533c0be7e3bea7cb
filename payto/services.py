"""Service singletons (initialized once) used across routers.

Everything is built from the one Settings instance so routers and tests
never reach for the environment themselves.
"""
import logging

from database.connection import build_engine, create_session_factory, create_tables
from payto.application.dispatcher import CommandDispatcher
from payto.config import Settings, get_settings
from payto.infrastructure.ilp_kit_client import IlpKitClient
from payto.infrastructure.repositories import (
    CredentialRepository, InMemoryCredentialRepository, SqlAlchemyCredentialRepository,
)
from payto.infrastructure.slack_client import SlackClient

logger = logging.getLogger(__name__)


def build_credential_store(settings: Settings) -> CredentialRepository:
    if settings.uses_memory_store:
        logger.info("🗄️  Using in-memory credential store")
        return InMemoryCredentialRepository()
    engine = build_engine(settings.database_url)
    create_tables(engine)
    logger.info(f"🗄️  Using SQL credential store ({engine.url.get_backend_name()})")
    return SqlAlchemyCredentialRepository(create_session_factory(engine))


def build_dispatcher(settings: Settings, credential_store: CredentialRepository) -> CommandDispatcher:
    if not settings.slack_token:
        logger.warning("⚠️  SLACK_TOKEN not set; Slack API calls will be rejected")
    slack = SlackClient(token=settings.slack_token or "", timeout=settings.http_timeout)
    payments = IlpKitClient(timeout=settings.http_timeout)
    return CommandDispatcher(settings, credential_store, slack, payments)


settings = get_settings()
credential_store = build_credential_store(settings)
dispatcher = build_dispatcher(settings, credential_store)
logger.info("🤖 Payto dispatcher ready")
