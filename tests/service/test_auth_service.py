import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from app.core.exceptions import EmailAlreadyExists, InvalidCredentials, ValidationError
from app.schema.auth import UserLogin, UserRegister
from app.service.auth_service import AuthService


def _client_error(code, message="boom"):
    return ClientError({"Error": {"Code": code, "Message": message}}, "operation")


@pytest.fixture
def cognito():
    wrapper = MagicMock()
    wrapper.sign_up.return_value = {"user_sub": "sub", "username": "cognito-new", "user_confirmed": False}
    wrapper.initiate_auth.return_value = {
        "id_token": "id-token",
        "access_token": "access-token",
        "refresh_token": None,
        "expires_in": 3600,
    }
    return wrapper


def test_register_master(db, cognito):
    user = AuthService(db, cognito=cognito).register_user(
        UserRegister(email="m@example.com", password="password1", role="MASTER", city="Bishkek")
    )
    assert user.role == "MASTER"
    assert user.cognito_username == "cognito-new"
    cognito.sign_up.assert_called_once_with(email="m@example.com", password="password1")


def test_register_duplicate_email(db, cognito, make_user):
    existing = make_user()
    with pytest.raises(EmailAlreadyExists):
        AuthService(db, cognito=cognito).register_user(UserRegister(email=existing.email, password="password1"))
    cognito.sign_up.assert_not_called()


def test_register_weak_password_is_validation_error(db, cognito):
    cognito.sign_up.side_effect = _client_error("InvalidPasswordException", "Password too weak")
    with pytest.raises(ValidationError, match="Password too weak"):
        AuthService(db, cognito=cognito).register_user(UserRegister(email="x@example.com", password="password1"))


def test_login_creates_session_with_role(db, cognito, redis_mock, make_user):
    user = make_user(role="MASTER")
    response = AuthService(db, cognito=cognito).login(UserLogin(email=user.email, password="pw"))
    assert response.access_token == "id-token"
    assert response.user.role == "MASTER"

    key, _ttl, payload = redis_mock.setex.call_args.args
    assert key == "session:id-token"
    assert json.loads(payload)["role"] == "MASTER"
    assert json.loads(payload)["user_id"] == str(user.id)


def test_login_rejects_bad_password(db, cognito, redis_mock, make_user):
    user = make_user()
    cognito.initiate_auth.side_effect = _client_error("NotAuthorizedException")
    with pytest.raises(InvalidCredentials):
        AuthService(db, cognito=cognito).login(UserLogin(email=user.email, password="bad"))
    redis_mock.setex.assert_not_called()


def test_logout_survives_cognito_failure(db, cognito, redis_mock):
    cognito.global_sign_out.side_effect = _client_error("NotAuthorizedException")
    redis_mock.delete.return_value = 1
    assert AuthService(db, cognito=cognito).logout("tok", {"access_token": "a"}) is True
    redis_mock.delete.assert_called_once_with("session:tok")
