from user_registry_api.app.schemas.user import User
from user_registry_api.app.services.user_service import UserService

LEAKED_PASSWORD = "password123"


class CountingChecker:
    def __init__(self):
        self.calls = []

    def is_leaked(self, password):
        self.calls.append(password)
        return False


def test_add_then_get_returns_stored_user(service):
    assert service.add(User(username="alice", password="S3cr3t!"))

    user = service.get("alice", "S3cr3t!")

    assert user == User(username="alice", password="S3cr3t!")
    assert service.exists("alice")


def test_get_requires_exact_password(service):
    service.add(User(username="alice", password="S3cr3t!"))

    assert service.get("alice", "s3cr3t!") is None
    assert service.get("alice", "") is None
    assert service.get("bob", "S3cr3t!") is None


def test_add_rejects_duplicate_username(service):
    assert service.add(User(username="alice", password="one"))
    assert not service.add(User(username="alice", password="two"))

    # First writer wins.
    assert service.get("alice", "one") is not None
    assert service.get("alice", "two") is None


def test_get_all_in_insertion_order(service):
    assert service.get_all() == []
    for name in ("carol", "alice", "bob"):
        service.add(User(username=name, password="pw"))

    assert [u.username for u in service.get_all()] == ["carol", "alice", "bob"]


def test_delete_is_idempotent(service):
    service.add(User(username="alice", password="pw"))

    service.delete("alice")
    service.delete("alice")
    service.delete("nobody")

    assert not service.exists("alice")
    assert service.get_all() == []


def test_password_leaked_delegates_to_checker(store):
    checker = CountingChecker()
    service = UserService(store, checker)

    assert service.password_leaked("hunter2") is False
    assert checker.calls == ["hunter2"]


def test_password_leaked_uses_static_corpus(service):
    assert service.password_leaked(LEAKED_PASSWORD) is True
    assert service.password_leaked("correct horse battery staple") is False
