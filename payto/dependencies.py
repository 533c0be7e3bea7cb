"""Shared FastAPI dependencies (auth, service lookup).

Centralizes cross-router logic so tests can swap services through
``app.dependency_overrides``.
"""
import hmac
import logging

from fastapi import Depends, Form

from payto import services
from payto.application.dispatcher import CommandDispatcher
from payto.config import Settings
from payto.domain.errors import AuthorizationError
from payto.infrastructure.repositories import CredentialRepository
from payto.schemas import SlashCommandForm

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    return services.settings


def get_dispatcher() -> CommandDispatcher:
    return services.dispatcher


def get_credential_store() -> CredentialRepository:
    return services.credential_store


def slash_command_form(
    token: str = Form(default=""),
    user_id: str = Form(default=""),
    user_name: str = Form(default=""),
    text: str = Form(default=""),
    command: str = Form(default=""),
    response_url: str = Form(default=""),
    team_id: str | None = Form(default=None),
    channel_id: str | None = Form(default=None),
) -> SlashCommandForm:
    return SlashCommandForm(
        token=token, user_id=user_id, user_name=user_name, text=text, command=command,
        response_url=response_url, team_id=team_id, channel_id=channel_id,
    )


def verify_slack_token(
    form: SlashCommandForm = Depends(slash_command_form),
    settings: Settings = Depends(get_app_settings),
) -> SlashCommandForm:
    """Reject requests whose verification token doesn't match ours."""
    expected = settings.slack_verification_token
    if not expected or not hmac.compare_digest(form.token.encode(), expected.encode()):
        logger.warning(f"got invalid request from user_id={form.user_id} command={form.command}")
        raise AuthorizationError()
    return form
