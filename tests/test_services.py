import pytest

from cirrus import services
from cirrus.database import Base
from cirrus.exceptions import (
    InvalidUserName,
    StorageQueryError,
    UserAlreadyExists,
    UserNotFound,
)
from cirrus.hashing import verify_password
from cirrus.models import User


def stored_hash(database, name):
    with database.session() as session:
        user = session.get(User, name)
        return user.password_hash if user else None


def no_prompt(message):
    raise AssertionError("unexpected password prompt")


def test_create_user_stores_hash(database):
    services.create_user(database, "alice", "wonderland", prompt=no_prompt)
    password_hash = stored_hash(database, "alice")
    assert password_hash != "wonderland"
    assert verify_password("wonderland", password_hash)


def test_create_existing_user_fails_without_mutation(database):
    services.create_user(database, "alice", "first")
    original = stored_hash(database, "alice")

    with pytest.raises(UserAlreadyExists) as excinfo:
        services.create_user(database, "alice", "second", prompt=no_prompt)
    assert excinfo.value.name == "alice"
    assert stored_hash(database, "alice") == original


def test_names_are_case_sensitive(database):
    services.create_user(database, "alice", "pw")
    services.create_user(database, "Alice", "pw")
    assert sorted(services.list_users(database)) == ["Alice", "alice"]


def test_create_user_prompts_for_missing_password(database):
    prompts = []

    def prompt(message):
        prompts.append(message)
        return "prompted"

    services.create_user(database, "bob", prompt=prompt)
    assert prompts == [services.NEW_USER_PROMPT]
    assert verify_password("prompted", stored_hash(database, "bob"))


def test_existing_user_is_rejected_before_prompting(database):
    services.create_user(database, "bob", "pw")
    with pytest.raises(UserAlreadyExists):
        services.create_user(database, "bob", prompt=no_prompt)


def test_empty_name_is_rejected(database):
    with pytest.raises(InvalidUserName):
        services.create_user(database, "", "pw", prompt=no_prompt)
    assert services.list_users(database) == []


def test_delete_user(database):
    services.create_user(database, "carol", "pw")
    services.delete_user(database, "carol")
    assert stored_hash(database, "carol") is None

    with pytest.raises(UserNotFound):
        services.delete_user(database, "carol")


def test_delete_missing_user(database):
    with pytest.raises(UserNotFound) as excinfo:
        services.delete_user(database, "nobody")
    assert "nobody" in str(excinfo.value)


def test_list_after_create_and_delete(database):
    assert services.list_users(database) == []
    for name in ("a", "b", "c"):
        services.create_user(database, name, name * 3)
    services.delete_user(database, "b")
    assert set(services.list_users(database)) == {"a", "c"}


def test_set_password_replaces_hash(database):
    services.create_user(database, "dave", "old")
    original = stored_hash(database, "dave")

    services.set_password(database, "dave", "new", prompt=no_prompt)
    updated = stored_hash(database, "dave")
    assert updated != original
    assert verify_password("new", updated)
    assert not verify_password("old", updated)


def test_set_password_prompts(database):
    services.create_user(database, "erin", "old")
    services.set_password(database, "erin", prompt=lambda message: "typed")
    assert verify_password("typed", stored_hash(database, "erin"))


def test_set_password_for_missing_user(database):
    with pytest.raises(UserNotFound):
        services.set_password(database, "ghost", "pw")
    assert services.list_users(database) == []


def test_query_failure_is_storage_error(database):
    Base.metadata.drop_all(bind=database.engine)
    with pytest.raises(StorageQueryError):
        services.list_users(database)
    with pytest.raises(StorageQueryError):
        services.create_user(database, "frank", "pw")


def test_empty_name_rejected_by_delete_and_set_password(database):
    with pytest.raises(InvalidUserName):
        services.delete_user(database, "")
    with pytest.raises(InvalidUserName):
        services.set_password(database, "", prompt=no_prompt)
