import json
import logging
from typing import Any, Dict, Optional

import requests

from payto.domain.errors import UpstreamError

logger = logging.getLogger(__name__)

SLACK_API_URL = "https://slack.com/api"


class SlackClient:
    """Thin wrapper over the handful of Slack Web API methods the bot needs."""

    def __init__(self, token: str, timeout: float = 10, session: Optional[requests.Session] = None,
                 base_url: str = SLACK_API_URL):
        self.token = token
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

        logger.info(f"🔧 SlackClient initialized (token: {'***' + token[-4:] if token and len(token) > 4 else 'NOT_SET'})")

    def _call(self, method: str, data: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/{method}"
        headers = {"Authorization": f"Bearer {self.token}"}
        try:
            response = self.session.post(url, data=data, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Slack {method} request failed: {e}")
            raise UpstreamError(f"Slack {method} request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"❌ Slack {method} failed: status={response.status_code} body={response.text}")
            raise UpstreamError(f"Slack {method} failed", status_code=response.status_code, body=response.text)

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Slack {method} returned invalid JSON", status_code=response.status_code,
                                body=response.text) from e

        if not payload.get("ok"):
            logger.error(f"❌ Slack {method} returned error: {payload.get('error')}")
            raise UpstreamError(f"Slack {method} error: {payload.get('error')}",
                                status_code=response.status_code, body=payload)
        return payload

    def get_user_profile(self, user_id: str) -> Dict[str, Any]:
        payload = self._call("users.profile.get", {"user": user_id, "include_labels": "true"})
        return payload.get("profile") or {}

    def post_message(self, channel: str, text: str, username: Optional[str] = None) -> Dict[str, Any]:
        data = {"channel": channel, "text": text, "as_user": "false"}
        if username:
            data["username"] = username
        logger.info(f"📤 Posting message to {channel}: '{text[:80]}{'...' if len(text) > 80 else ''}'")
        return self._call("chat.postMessage", data)

    def set_profile_field(self, user_id: str, field_id: str, value: str) -> Dict[str, Any]:
        profile = {"fields": {field_id: {"value": value, "alt": ""}}}
        return self._call("users.profile.set", {"user": user_id, "profile": json.dumps(profile)})

    def get_team_info(self) -> Dict[str, Any]:
        payload = self._call("team.info", {})
        return payload.get("team") or {}

    def respond(self, response_url: str, text: str, response_type: str = "ephemeral") -> None:
        """Post a follow-up to a slash command's response_url."""
        if not response_url:
            raise UpstreamError("no response_url to reply to")
        try:
            response = self.session.post(
                response_url,
                json={"response_type": response_type, "text": text},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Follow-up to response_url failed: {e}")
            raise UpstreamError(f"response_url post failed: {e}") from e
        if response.status_code >= 300:
            logger.error(f"❌ Follow-up rejected: status={response.status_code} body={response.text}")
            raise UpstreamError("response_url post rejected", status_code=response.status_code, body=response.text)
