"""
Organizer Directory: the register -> approve -> login workflow.

An organizer is created `pending`, an admin moves it to `approved`, and only
approved organizers may log in. The directory holds no state of its own; the
repository's constraints decide every race (duplicate email, double
approval), and the directory turns their outcome into workflow errors.
"""

import logging
from typing import Any, Dict, Optional

from backend.auth_service.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from backend.auth_service.models import STATUS_APPROVED, STATUS_PENDING, Organizer

logger = logging.getLogger(__name__)

REGISTER_REQUIRED_MSG = "fname, lname, Email (username) and Password are required"
LOGIN_REQUIRED_MSG = "Email (username) and Password are required"
EMAIL_TAKEN_MSG = "Email (username) already registered"
INVALID_APPROVAL_MSG = "Invalid or expired approval link"


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def normalize_email(email: Any) -> str:
    return _clean(email).lower()


class OrganizerDirectory:
    """
    Args:
        repository: OrganizerRepository (or any object with the same methods).
        hasher: Object with hash(plaintext) and verify(plaintext, hashed).
        token_issuer: TokenIssuer; signs login tokens and approval-link tokens.
        notifier: Object with notify_admin(...) and notify_organizer_approved(...).
        admin_notify_email (str, optional): Where approval requests go. When
            unset, registration skips the admin email and logs a warning.
        base_url (str): Public URL the approval link is built from.
    """

    def __init__(
        self,
        repository,
        hasher,
        token_issuer,
        notifier,
        admin_notify_email: Optional[str] = None,
        base_url: str = "http://localhost:5050",
    ):
        self.repository = repository
        self.hasher = hasher
        self.token_issuer = token_issuer
        self.notifier = notifier
        self.admin_notify_email = admin_notify_email
        self.base_url = base_url.rstrip("/")

    def approval_link(self, organizer_id: int) -> str:
        token = self.token_issuer.issue_approval(organizer_id)
        return f"{self.base_url}/auths/approve/{organizer_id}?token={token}"

    # --- REGISTER ---
    def register(
        self,
        fname: Any,
        lname: Any,
        email: Any,
        password: Any,
        contact_no: Optional[str] = None,
    ) -> Organizer:
        """
        Create a pending organizer and ask the admin to approve it.

        Returns:
            Organizer: The created record (status `pending`).

        Raises:
            ValidationError: A required field is missing or empty.
            ConflictError: The email is already registered, in any status.
            InternalError: Hashing or persistence failed.
        """
        fname, lname = _clean(fname), _clean(lname)
        email = normalize_email(email)
        if not fname or not lname or not email or not isinstance(password, str) or not password:
            raise ValidationError(REGISTER_REQUIRED_MSG)

        if self.repository.find_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN_MSG)

        try:
            password_hash = self.hasher.hash(password)
        except Exception as e:
            raise InternalError(f"Password hashing failed: {e}") from e

        # A concurrent registration with the same email loses here on the
        # unique index and surfaces as ConflictError from the repository.
        organizer = self.repository.insert(
            organizer_name=f"{fname} {lname}",
            fname=fname,
            lname=lname,
            email=email,
            password_hash=password_hash,
            status=STATUS_PENDING,
            contact_no=_clean(contact_no) or None,
        )
        logger.info(f"Organizer {organizer.organizer_id} registered, pending approval")

        self._request_admin_approval(organizer)
        return organizer

    def _request_admin_approval(self, organizer: Organizer) -> None:
        if not self.admin_notify_email:
            logger.warning("ADMIN_NOTIFY_EMAIL not set; approval request email skipped")
            return

        try:
            self.notifier.notify_admin(
                self.admin_notify_email,
                organizer,
                self.approval_link(organizer.organizer_id),
            )
        except InternalError as e:
            # The record is already committed; registration still succeeds.
            logger.error(
                f"Approval request email for organizer {organizer.organizer_id} failed: {e.detail}"
            )

    # --- LOGIN ---
    def login(self, email: Any, password: Any) -> Dict[str, Any]:
        """
        Authenticate an approved organizer.

        Returns:
            dict: {"token": str, "organizer": Organizer}

        Raises:
            ValidationError: Email or password missing.
            AuthenticationError: Unknown email or wrong password (same message).
            AuthorizationError: The account exists but is not approved.
        """
        email = normalize_email(email)
        if not email or not isinstance(password, str) or not password:
            raise ValidationError(LOGIN_REQUIRED_MSG)

        organizer = self.repository.find_by_email(email)
        if organizer is None:
            raise AuthenticationError()

        # Status gates access before the credential is even looked at
        if not organizer.is_approved:
            raise AuthorizationError()

        if not self.hasher.verify(password, organizer.password_hash):
            raise AuthenticationError()

        token = self.token_issuer.issue(organizer.organizer_id, organizer.email)
        logger.info(f"Organizer {organizer.organizer_id} logged in")
        return {"token": token, "organizer": organizer}

    # --- APPROVE ---
    def approve(self, organizer_id: int, approval_token: Optional[str]) -> Organizer:
        """
        Move a pending organizer to approved and notify them.

        The status change is committed before the email goes out. If the email
        fails the call raises, but the organizer stays approved and a retry
        gets ConflictError rather than a second transition.

        Raises:
            AuthorizationError: The approval token is missing, expired or
                signed for another organizer.
            NotFoundError: No organizer with this id.
            ConflictError: Already approved (including a lost race).
            NotificationError: The confirmation email could not be sent.
        """
        if not self.token_issuer.verify_approval(approval_token, organizer_id):
            raise AuthorizationError(INVALID_APPROVAL_MSG)

        organizer = self.repository.find_by_id(organizer_id)
        if organizer is None:
            raise NotFoundError("Organizer not found")
        if organizer.is_approved:
            raise ConflictError("Organizer already approved")

        approved = self.repository.update_status(organizer_id, STATUS_PENDING, STATUS_APPROVED)
        logger.info(f"Organizer {organizer_id} approved")

        self.notifier.notify_organizer_approved(approved)
        return approved
