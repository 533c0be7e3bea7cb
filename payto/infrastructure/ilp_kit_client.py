"""Infrastructure layer: ILP Kit REST API client."""
import logging
from typing import Any, Optional, Tuple
from urllib.parse import quote as url_quote, urljoin

import requests
from pydantic import ValidationError as SchemaError

from payto.domain.credentials import Credentials
from payto.domain.errors import UpstreamError
from payto.schemas import DestinationDetails, IlpKitConfig, IlpKitUser, Quote

logger = logging.getLogger(__name__)


def _body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _model(model, body: Any, what: str):
    if not isinstance(body, dict):
        raise UpstreamError(f"unexpected ILP Kit response for {what}", body=body)
    try:
        return model.model_validate(body)
    except SchemaError as e:
        raise UpstreamError(f"malformed ILP Kit {what}: {e}", body=body) from e


class IlpKitClient:
    """Talks to a user's ILP Kit with their stored credentials."""

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, base: str, path: str, credentials: Optional[Credentials] = None,
                 **kwargs) -> Any:
        url = urljoin(base.rstrip("/") + "/", path.lstrip("/"))
        auth = (credentials.identifier, credentials.secret) if credentials else None
        try:
            response = self.session.request(method, url, auth=auth, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ ILP Kit {method} {url} failed: {e}")
            raise UpstreamError(f"ILP Kit {method} {path} failed: {e}") from e

        body = _body(response)
        if response.status_code >= 300:
            logger.error(f"❌ ILP Kit {method} {url} error: status={response.status_code} body={body}")
            raise UpstreamError(f"ILP Kit {method} {path} failed", status_code=response.status_code, body=body)
        return body

    def connect(self, credentials: Credentials) -> IlpKitUser:
        """Authenticate and load the account record."""
        body = self._request("GET", credentials.account_endpoint,
                             f"/api/users/{url_quote(credentials.identifier)}", credentials)
        return _model(IlpKitUser, body, "user")

    def get_balance(self, credentials: Credentials) -> str:
        user = self.connect(credentials)
        if user.balance is None:
            raise UpstreamError(f"no balance reported for {credentials.address}")
        return user.balance

    def get_currency(self, credentials: Credentials) -> Tuple[str, Optional[str]]:
        body = self._request("GET", credentials.account_endpoint, "/api/config", credentials)
        config = _model(IlpKitConfig, body, "config")
        if not config.currency_code:
            raise UpstreamError(f"no currency reported by {credentials.account_endpoint}")
        return config.currency_code, config.currency_symbol

    def quote(self, credentials: Credentials, destination: str, destination_amount: str) -> Quote:
        body = self._request("POST", credentials.account_endpoint, "/api/payments/quote", credentials,
                             json={"destination": destination, "destinationAmount": destination_amount})
        if isinstance(body, dict):
            body.setdefault("destination", destination)
        quote = _model(Quote, body, "quote")
        logger.info(f"💱 Quote {quote.id}: {quote.source_amount} -> {quote.destination_amount} to {destination}")
        return quote

    def parse_destination(self, credentials: Credentials, destination: str) -> DestinationDetails:
        body = self._request("GET", credentials.account_endpoint, "/api/parse/destination", credentials,
                             params={"destination": destination})
        return _model(DestinationDetails, body, "destination")

    def send_payment(self, credentials: Credentials, quote: Quote,
                     destination: Optional[DestinationDetails] = None, message: Optional[str] = None) -> Any:
        payload = {"quote": quote.to_wire(), "message": message or ""}
        if destination is not None:
            payload["destination"] = destination.to_wire()
        return self._request("PUT", credentials.account_endpoint, f"/api/payments/{url_quote(quote.id)}",
                             credentials, json=payload)

    def provision_account(self, host: str, username: str, password: str, invite_code: str,
                          email: str, name: str) -> IlpKitUser:
        logger.info(f"🆕 Registering {username} on {host} with invite code {invite_code}")
        body = self._request("POST", host, f"/api/users/{url_quote(username)}", json={
            "password": password,
            "inviteCode": invite_code,
            "email": email,
            "name": name,
        })
        return _model(IlpKitUser, body, "user")
