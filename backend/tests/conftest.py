import itertools

import pytest

from backend.auth_service.directory import OrganizerDirectory
from backend.auth_service.errors import ConflictError, NotFoundError
from backend.auth_service.models import Organizer
from backend.config import ServiceConfig
from backend.gateway.server import create_app

ADMIN_EMAIL = "admin@email.com"
BASE_URL = "http://localhost:3000"


class InMemoryOrganizerRepository:
    """
    Stand-in for OrganizerRepository that enforces the same constraints
    the database does: unique email, conditional status update.
    """

    def __init__(self):
        self.rows = {}
        self._ids = itertools.count(1)

    def find_by_email(self, email):
        return next((o for o in self.rows.values() if o.email == email), None)

    def find_by_id(self, organizer_id):
        return self.rows.get(organizer_id)

    def insert(self, organizer_name, fname, lname, email, password_hash, status, contact_no=None):
        if self.find_by_email(email) is not None:
            raise ConflictError("Email (username) already registered")
        organizer = Organizer(
            organizer_id=next(self._ids),
            organizer_name=organizer_name,
            fname=fname,
            lname=lname,
            email=email,
            password_hash=password_hash,
            status=status,
            contact_no=contact_no,
        )
        self.rows[organizer.organizer_id] = organizer
        return organizer

    def update_status(self, organizer_id, from_status, to_status):
        organizer = self.rows.get(organizer_id)
        if organizer is None:
            raise NotFoundError("Organizer not found")
        if organizer.status != from_status:
            raise ConflictError(f"Organizer already {to_status}")
        organizer.status = to_status
        return organizer

    def add(self, email, password_hash="hashed:pass", status="pending", fname="John", lname="Doe"):
        """Seed a record directly, bypassing the workflow."""
        return self.insert(f"{fname} {lname}", fname, lname, email, password_hash, status)


@pytest.fixture
def config():
    return ServiceConfig(
        database_url=None,
        jwt_secret="test_secret",
        token_expiration_minutes=60,
        admin_notify_email=ADMIN_EMAIL,
        base_url=BASE_URL,
    )


@pytest.fixture
def app(config):
    app = create_app(config)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repo():
    return InMemoryOrganizerRepository()


@pytest.fixture
def hasher(mocker):
    """
    Fake hasher: "hashed:<password>". verify is a spy so tests can assert
    it was (or was not) consulted.
    """
    fake = mocker.Mock()
    fake.hash.side_effect = lambda pw: f"hashed:{pw}"
    fake.verify.side_effect = lambda pw, hashed: hashed == f"hashed:{pw}"
    return fake


@pytest.fixture
def notifier(mocker):
    return mocker.Mock()


@pytest.fixture
def directory(app, repo, hasher, notifier, config):
    """
    OrganizerDirectory over the in-memory repository, installed into the
    app so route tests go through it.
    """
    directory = OrganizerDirectory(
        repository=repo,
        hasher=hasher,
        token_issuer=app.extensions["token_issuer"],
        notifier=notifier,
        admin_notify_email=config.admin_notify_email,
        base_url=config.base_url,
    )
    app.extensions["organizer_directory"] = directory
    return directory


@pytest.fixture
def mock_db(app, mocker):
    """
    Mocks the database connection and cursor.

    Returns a function that swaps the app's db_connect factory for one
    handing out a mock connection, and returns (mock_conn, mock_cursor).
    """

    def _patch():
        mock_conn = mocker.MagicMock()
        mock_cursor = mocker.MagicMock()

        # Setup the context managers for connection and cursor
        mock_conn.__enter__.return_value = mock_conn
        mock_conn.__exit__.return_value = None
        mock_cursor.__enter__.return_value = mock_cursor
        mock_cursor.__exit__.return_value = None

        mock_conn.cursor.return_value = mock_cursor
        app.extensions["db_connect"] = mocker.Mock(return_value=mock_conn)
        return mock_conn, mock_cursor

    return _patch


@pytest.fixture
def token_header(app):
    """Build an Authorization header for any organizer id."""

    def _header(organizer_id, email="approved@mail.com"):
        token = app.extensions["token_issuer"].issue(organizer_id, email)
        return {"Authorization": f"Bearer {token}"}

    return _header


@pytest.fixture
def auth_header(token_header):
    return token_header(1)


@pytest.fixture
def approve_url(app):
    """The approval link the admin would receive for `organizer_id`."""

    def _url(organizer_id):
        token = app.extensions["token_issuer"].issue_approval(organizer_id)
        return f"/auths/approve/{organizer_id}?token={token}"

    return _url
