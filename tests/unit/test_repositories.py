"""
Unit tests for credentials and the credential stores.
"""
import threading

import pytest

from database.connection import build_engine, create_session_factory, create_tables
from payto.domain.credentials import Credentials
from payto.infrastructure.repositories import InMemoryCredentialRepository, SqlAlchemyCredentialRepository


class TestCredentials:
    """Test address derivation."""

    def test_address_round_trip(self):
        credentials = Credentials.from_address("alice@kit.example", "s3cret")
        assert credentials.account_endpoint == "https://kit.example"
        assert credentials.identifier == "alice"
        assert credentials.address == "alice@kit.example"

    def test_address_keeps_port(self):
        credentials = Credentials("http://localhost:3010", "alice", "s3cret")
        assert credentials.address == "alice@localhost:3010"

    def test_invalid_address(self):
        with pytest.raises(ValueError):
            Credentials.from_address("kit.example", "s3cret")

    def test_repr_hides_secret(self):
        assert "s3cret" not in repr(Credentials("https://kit.example", "alice", "s3cret"))


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryCredentialRepository()
    engine = build_engine(f"sqlite:///{tmp_path / 'credentials.db'}")
    create_tables(engine)
    return SqlAlchemyCredentialRepository(create_session_factory(engine))


class TestCredentialStores:
    """Both stores share the get/upsert contract."""

    def test_missing_user(self, store):
        assert store.get("UNOBODY") is None

    def test_upsert_then_get(self, store):
        credentials = Credentials("https://kit.example", "alice", "s3cret")
        store.upsert("U1", credentials)
        assert store.get("U1") == credentials

    def test_upsert_overwrites_whole_record(self, store):
        store.upsert("U1", Credentials("https://old.example", "alice", "old"))
        store.upsert("U1", Credentials("https://new.example", "alice2", "new"))
        assert store.get("U1") == Credentials("https://new.example", "alice2", "new")

    def test_keys_are_independent(self, store):
        store.upsert("U1", Credentials("https://kit.example", "alice", "a"))
        store.upsert("U2", Credentials("https://kit.example", "bob", "b"))
        assert store.get("U1").identifier == "alice"
        assert store.get("U2").identifier == "bob"

    def test_ping(self, store):
        assert store.ping() is True


def test_memory_store_concurrent_upserts_never_mix_records():
    store = InMemoryCredentialRepository()
    records = [Credentials(f"https://kit{i}.example", f"user{i}", f"secret{i}") for i in range(20)]

    def writer(record):
        for _ in range(50):
            store.upsert("U1", record)

    threads = [threading.Thread(target=writer, args=(r,)) for r in records]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    final = store.get("U1")
    assert final in records
    assert len(store) == 1
