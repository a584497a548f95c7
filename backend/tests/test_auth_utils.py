from datetime import timedelta

import jwt
import pytest

from backend.auth_service.utils import (
    PasswordHasher,
    TokenIssuer,
    json_body,
    require_organizer,
    verify_token_from_request,
)


def test_password_hasher_roundtrip():
    ph = PasswordHasher()
    hashed = ph.hash("s3cret")

    assert hashed != "s3cret"
    assert hashed.startswith("$argon2")
    assert ph.verify("s3cret", hashed) is True
    assert ph.verify("wrong", hashed) is False


def test_password_hasher_salts_each_hash():
    ph = PasswordHasher()
    assert ph.hash("same") != ph.hash("same")


def test_password_hasher_rejects_garbage_hash():
    assert PasswordHasher().verify("pass", "not-a-hash") is False


def test_issue_token():
    issuer = TokenIssuer("test_secret", ttl_minutes=60)
    token = issuer.issue(123, "org@mail.com")

    assert isinstance(token, str)

    # Decode to verify contents using the same secret
    payload = jwt.decode(token, "test_secret", algorithms=["HS256"])
    assert payload["id"] == 123
    assert payload["username"] == "org@mail.com"
    assert payload["exp"] - payload["iat"] == 3600


def test_decode_rejects_other_secret():
    token = TokenIssuer("other_secret").issue(1, "a@mail.com")
    with pytest.raises(jwt.InvalidTokenError):
        TokenIssuer("test_secret").decode(token)


def test_decode_rejects_expired():
    issuer = TokenIssuer("test_secret")
    token = issuer.issue(1, "a@mail.com", ttl=timedelta(seconds=-1))
    with pytest.raises(jwt.ExpiredSignatureError):
        issuer.decode(token)


def test_issuer_requires_secret():
    with pytest.raises(RuntimeError):
        TokenIssuer("")


def test_verify_token_from_request_valid(app):
    token = app.extensions["token_issuer"].issue(789, "org@mail.com")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        oid, username, err, code = verify_token_from_request()
        assert oid == 789
        assert username == "org@mail.com"
        assert err is None
        assert code is None


def test_verify_token_from_request_missing_header(app):
    with app.test_request_context():
        oid, _, err, code = verify_token_from_request()
        assert oid is None
        assert code == 401
        assert err.json["message"] == "missing token"


def test_verify_token_from_request_invalid_format(app):
    with app.test_request_context(headers={"Authorization": "InvalidFormat"}):
        oid, _, err, code = verify_token_from_request()
        assert oid is None
        assert code == 401
        assert err.json["message"] == "missing token"


def test_verify_token_from_request_garbage_token(app):
    with app.test_request_context(headers={"Authorization": "Bearer invalid.token.here"}):
        oid, _, err, code = verify_token_from_request()
        assert oid is None
        assert code == 401
        assert err.json["message"] == "invalid token"


def test_verify_token_from_request_expired(app):
    token = app.extensions["token_issuer"].issue(1, "a@mail.com", ttl=timedelta(seconds=-1))

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        _, _, err, code = verify_token_from_request()
        assert code == 401
        assert err.json["message"] == "token expired"


def test_approval_token_bound_to_one_organizer():
    issuer = TokenIssuer("test_secret")
    token = issuer.issue_approval(7)

    assert issuer.verify_approval(token, 7) is True
    assert issuer.verify_approval(token, 8) is False


@pytest.mark.parametrize("token", [None, "", "invalid.token.here"])
def test_verify_approval_rejects_missing_or_garbage(token):
    assert TokenIssuer("test_secret").verify_approval(token, 1) is False


def test_verify_approval_rejects_login_token_and_other_secret():
    issuer = TokenIssuer("test_secret")

    assert issuer.verify_approval(issuer.issue(1, "a@mail.com"), 1) is False
    assert issuer.verify_approval(TokenIssuer("other_secret").issue_approval(1), 1) is False


def test_verify_approval_rejects_expired():
    issuer = TokenIssuer("test_secret")
    token = issuer.issue_approval(1, ttl=timedelta(seconds=-1))
    assert issuer.verify_approval(token, 1) is False


def test_verify_token_from_request_rejects_approval_token(app):
    token = app.extensions["token_issuer"].issue_approval(1)

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        oid, _, err, code = verify_token_from_request()
        assert oid is None
        assert code == 401
        assert err.json["message"] == "invalid token"


def test_require_organizer(app):
    token = app.extensions["token_issuer"].issue(4, "a@mail.com")
    headers = {"Authorization": f"Bearer {token}"}

    with app.test_request_context(headers=headers):
        assert require_organizer(4) == (None, None)

    with app.test_request_context(headers=headers):
        err, code = require_organizer(5)
        assert code == 403
        assert err.json["message"] == "Permission denied"

    with app.test_request_context():
        _, code = require_organizer(4)
        assert code == 401


@pytest.mark.parametrize("body, expected", [
    ({"email": "a@mail.com"}, {"email": "a@mail.com"}),
    (["a@mail.com"], {}),
    ("a@mail.com", {}),
    (None, {}),
])
def test_json_body_only_accepts_objects(app, body, expected):
    with app.test_request_context(method="POST", json=body):
        assert json_body() == expected
