"""Tests for account orchestration."""
import pytest

from account_service.errors import AuthError, ConflictError, NotFoundError, ValidationError
from account_service.models import AccessToken, User
from account_service.service import AccountService

from .conftest import PASSWORD


@pytest.fixture
def service(db):
    return AccountService(db)


def register(service, email="bob@example.com", password=PASSWORD):
    return service.register("Bob", "Smith", email, password)


def test_register_returns_view_without_password(service, db):
    view = register(service)

    assert view.email == "bob@example.com"
    assert view.first_name == "Bob"
    assert view.last_name == "Smith"
    assert view.id is not None
    assert "password" not in view.model_dump()

    stored = db.query(User).one()
    assert stored.password != PASSWORD
    # registration never issues a token
    assert db.query(AccessToken).count() == 0


def test_register_twice_conflicts(service, db):
    first = register(service)

    with pytest.raises(ConflictError):
        service.register("Eve", "Other", "bob@example.com", "Another123!")

    users = db.query(User).all()
    assert len(users) == 1
    assert users[0].id == first.id
    assert users[0].first_name == "Bob"


def test_register_validation_runs_before_any_write(service, db):
    with pytest.raises(ValidationError) as exc_info:
        service.register("", "Smith", "not-an-email", "alllowercase1!")

    assert set(exc_info.value.errors) == {"first_name", "email", "password"}
    assert db.query(User).count() == 0


def test_login_wrong_password(service):
    register(service, email="x@x.com")

    with pytest.raises(AuthError) as exc_info:
        service.login("x@x.com", "wrong")

    assert exc_info.value.reason == AuthError.INCORRECT_PASSWORD
    assert exc_info.value.message == "Incorrect password. Please try again."


def test_login_unknown_email(service):
    with pytest.raises(AuthError) as exc_info:
        service.login("nouser@x.com", "Anything1!")

    assert exc_info.value.reason == AuthError.EMAIL_NOT_FOUND
    assert exc_info.value.message == "Email not found. Please try again."


def test_login_requires_fields(service):
    with pytest.raises(ValidationError) as exc_info:
        service.login(None, "")
    assert set(exc_info.value.errors) == {"email", "password"}


def test_register_login_current_user_round_trip(service):
    registered = register(service)

    view, token = service.login("bob@example.com", PASSWORD)
    assert view == registered

    current = service.current_user(token)
    assert current.email == "bob@example.com"
    assert current.first_name == "Bob"
    assert current.last_name == "Smith"


def test_current_user_invalid_token(service):
    with pytest.raises(AuthError) as exc_info:
        service.current_user("1|" + "0" * 40)
    assert exc_info.value.reason == AuthError.INVALID_TOKEN


def test_current_user_token_outlives_user(service, db):
    register(service)
    view, token = service.login("bob@example.com", PASSWORD)

    db.query(User).filter(User.id == view.id).delete()
    db.commit()

    with pytest.raises(NotFoundError) as exc_info:
        service.current_user(token)
    assert exc_info.value.message == "User not found."


def test_logout_revokes_token(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    assert service.logout(token) == 1

    with pytest.raises(AuthError):
        service.current_user(token)


def test_logout_revokes_every_token_of_user(service):
    register(service)
    _, laptop = service.login("bob@example.com", PASSWORD)
    _, phone = service.login("bob@example.com", PASSWORD)

    assert service.logout(phone) == 2

    for token in (laptop, phone):
        with pytest.raises(AuthError):
            service.current_user(token)


def test_logout_keeps_other_users_tokens(service):
    register(service)
    register(service, email="alice@example.com")
    _, bob_token = service.login("bob@example.com", PASSWORD)
    _, alice_token = service.login("alice@example.com", PASSWORD)

    service.logout(bob_token)

    assert service.current_user(alice_token).email == "alice@example.com"


def test_logout_invalid_token(service):
    with pytest.raises(AuthError) as exc_info:
        service.logout("nope")
    assert exc_info.value.reason == AuthError.INVALID_TOKEN


def test_update_profile(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    updated = service.update_profile(token, "Robert", "Smyth")

    assert updated.first_name == "Robert"
    assert updated.last_name == "Smyth"
    assert updated.email == "bob@example.com"
    assert service.current_user(token).first_name == "Robert"


def test_update_profile_requires_both_names(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    with pytest.raises(ValidationError) as exc_info:
        service.update_profile(token, "Robert", "")
    assert list(exc_info.value.errors) == ["last_name"]
    assert service.current_user(token).first_name == "Bob"


def test_update_profile_rolls_back_on_failure(service, monkeypatch):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)
    real_update = service.users.update

    def failing_update(user_id, **patch):
        real_update(user_id, **patch)
        raise RuntimeError("write failed")

    monkeypatch.setattr(service.users, "update", failing_update)
    with pytest.raises(RuntimeError):
        service.update_profile(token, "Robert", "Smyth")
    monkeypatch.undo()

    assert service.current_user(token).first_name == "Bob"


def test_change_password(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    service.change_password(token, PASSWORD, "Changed456#")

    view, _ = service.login("bob@example.com", "Changed456#")
    assert view.email == "bob@example.com"
    with pytest.raises(AuthError) as exc_info:
        service.login("bob@example.com", PASSWORD)
    assert exc_info.value.reason == AuthError.INCORRECT_PASSWORD


def test_change_password_keeps_existing_tokens(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    service.change_password(token, PASSWORD, "Changed456#")

    assert service.current_user(token).email == "bob@example.com"


def test_change_password_old_password_mismatch(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    with pytest.raises(AuthError) as exc_info:
        service.change_password(token, "NotMine123!", "Changed456#")
    assert exc_info.value.reason == AuthError.OLD_PASSWORD_MISMATCH

    service.login("bob@example.com", PASSWORD)


def test_change_password_policy(service):
    register(service)
    _, token = service.login("bob@example.com", PASSWORD)

    with pytest.raises(ValidationError) as exc_info:
        service.change_password(token, PASSWORD, "alllowercase1!")
    assert list(exc_info.value.errors) == ["new_password"]

    service.login("bob@example.com", PASSWORD)


def test_protected_operations_require_token(service):
    register(service)
    with pytest.raises(AuthError):
        service.update_profile(None, "Robert", "Smyth")
    with pytest.raises(AuthError):
        service.change_password("", PASSWORD, "Changed456#")
