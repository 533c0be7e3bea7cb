"""Infrastructure layer: credential store interface and implementations."""
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

from database.models import CredentialRecord
from payto.domain.credentials import Credentials


class CredentialRepository(ABC):
    """Key/value store from Slack user id to payment credentials."""

    @abstractmethod
    def get(self, user_id: str) -> Optional[Credentials]:
        """Get the credentials registered by a Slack user."""
        pass

    @abstractmethod
    def upsert(self, user_id: str, credentials: Credentials) -> None:
        """Replace the whole record for a Slack user."""
        pass

    def ping(self) -> bool:
        return True


class InMemoryCredentialRepository(CredentialRepository):
    """Process-local store; records are immutable so readers never see a partial write."""

    def __init__(self):
        self._records: Dict[str, Credentials] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[Credentials]:
        return self._records.get(user_id)

    def upsert(self, user_id: str, credentials: Credentials) -> None:
        with self._lock:
            self._records[user_id] = credentials

    def __len__(self) -> int:
        return len(self._records)


class SqlAlchemyCredentialRepository(CredentialRepository):
    """SQLAlchemy implementation; one short-lived session per call."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, user_id: str) -> Optional[Credentials]:
        with self.session_factory() as db:
            record = db.get(CredentialRecord, user_id)
            if record is None:
                return None
            return Credentials(
                account_endpoint=record.account_endpoint,
                identifier=record.identifier,
                secret=record.secret,
            )

    def upsert(self, user_id: str, credentials: Credentials) -> None:
        with self.session_factory() as db:
            with db.begin():
                db.merge(CredentialRecord(
                    slack_user_id=user_id,
                    account_endpoint=credentials.account_endpoint,
                    identifier=credentials.identifier,
                    secret=credentials.secret,
                ))

    def ping(self) -> bool:
        with self.session_factory() as db:
            db.execute(text("SELECT 1"))
        return True
