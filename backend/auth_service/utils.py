"""
Shared authentication helpers.
Provides password hashing, token issuance and verification of Bearer
tokens on incoming requests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError
from flask import Response, current_app, jsonify, request

# Fixed work factor. Changing these only affects newly created hashes;
# argon2 encodes the parameters inside every hash it produces.
HASH_TIME_COST = 3
HASH_MEMORY_COST = 65536
HASH_PARALLELISM = 4

APPROVAL_PURPOSE = "organizer-approval"
APPROVAL_TTL = timedelta(days=7)


class PasswordHasher:
    """One-way salted password hashing backed by argon2."""

    def __init__(self):
        self._ph = Argon2Hasher(
            time_cost=HASH_TIME_COST,
            memory_cost=HASH_MEMORY_COST,
            parallelism=HASH_PARALLELISM,
        )

    def hash(self, plaintext: str) -> str:
        return self._ph.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Return True if `plaintext` matches `hashed`; never raises on mismatch."""
        try:
            return self._ph.verify(hashed, plaintext)
        except (VerificationError, InvalidHashError):
            return False


class TokenIssuer:
    """
    Issues and decodes HS256 JWTs.

    Args:
        secret (str): Signing secret.
        ttl_minutes (int): Lifetime of issued tokens.
    """

    algorithm = "HS256"

    def __init__(self, secret: str, ttl_minutes: int = 60):
        if not secret:
            raise RuntimeError("JWT secret is missing")
        self._secret = secret
        self.ttl = timedelta(minutes=ttl_minutes)

    def issue(self, subject_id: int, subject_email: str, ttl: Optional[timedelta] = None) -> str:
        """
        Generates a new JWT for an organizer.

        Args:
            subject_id (int): Organizer id.
            subject_email (str): Organizer email (the login username).
            ttl (timedelta, optional): Overrides the default lifetime.

        Returns:
            str: Encoded JWT string.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": subject_id,
            "username": subject_email,
            "iat": now,
            "exp": now + (ttl or self.ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Raises:
            jwt.ExpiredSignatureError: If the token has expired.
            jwt.InvalidTokenError: For any other invalid token.
        """
        return jwt.decode(token, self._secret, algorithms=[self.algorithm])

    def issue_approval(self, organizer_id: int, ttl: timedelta = APPROVAL_TTL) -> str:
        """
        Sign the token that goes into the admin's approval link. It is bound
        to one organizer id and can't be used as a login token.
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": organizer_id,
            "purpose": APPROVAL_PURPOSE,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify_approval(self, token: Optional[str], organizer_id: int) -> bool:
        if not token:
            return False
        try:
            payload = self.decode(token)
        except jwt.InvalidTokenError:
            return False
        return payload.get("purpose") == APPROVAL_PURPOSE and payload.get("id") == organizer_id


def verify_token_from_request() -> Tuple[Optional[int], Optional[str], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header using the app's TokenIssuer.

    Returns:
        tuple: (organizer_id, username, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, organizer_id and username are None.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return None, None, jsonify({"message": "missing token"}), 401

    token = auth.split(" ", 1)[1]
    issuer: TokenIssuer = current_app.extensions["token_issuer"]

    try:
        payload = issuer.decode(token)
    except jwt.ExpiredSignatureError:
        return None, None, jsonify({"message": "token expired"}), 401
    except jwt.InvalidTokenError:
        return None, None, jsonify({"message": "invalid token"}), 401

    # Approval-link tokens are signed with the same secret but are not logins
    if payload.get("purpose"):
        return None, None, jsonify({"message": "invalid token"}), 401

    return payload.get("id"), payload.get("username"), None, None


def require_organizer(organizer_id: int) -> Tuple[Optional[Response], Optional[int]]:
    """
    Allow the request only if its token belongs to `organizer_id`.

    Returns:
        tuple: (error_response, status_code), both None when allowed.
    """
    token_id, _, err, code = verify_token_from_request()
    if err:
        return err, code
    if token_id != organizer_id:
        return jsonify({"message": "Permission denied"}), 403
    return None, None


def json_body() -> Dict[str, Any]:
    """The request's JSON body when it is an object, otherwise an empty dict."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
