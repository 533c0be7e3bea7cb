"""Domain layer: payment account credentials."""
from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class Credentials:
    """Everything needed to authenticate against a user's ILP Kit."""

    account_endpoint: str
    identifier: str
    secret: str

    @property
    def host(self) -> str:
        return urlsplit(self.account_endpoint).netloc.rsplit("@", 1)[-1]

    @property
    def address(self) -> str:
        """SPSP address in the ``user@host`` form used at registration."""
        return f"{self.identifier}@{self.host}"

    @classmethod
    def from_address(cls, address: str, secret: str) -> "Credentials":
        identifier, _, host = address.partition("@")
        if not identifier or not host:
            raise ValueError(f"not a user@host address: {address!r}")
        return cls(account_endpoint=f"https://{host}", identifier=identifier, secret=secret)

    def __repr__(self) -> str:
        return f"Credentials(account_endpoint={self.account_endpoint!r}, identifier={self.identifier!r}, secret='***')"
