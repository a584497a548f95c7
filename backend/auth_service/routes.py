"""
Authentication service route handlers.

Provides routes for:
- Organizer registration (pending until approved)
- Organizer login
- Admin approval (the link sent in the approval request email)

The workflow itself lives in `auth_service.directory`; these handlers only
read the request, call the directory and shape the response.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from backend.auth_service.directory import OrganizerDirectory
from backend.auth_service.errors import DirectoryError, InternalError
from backend.auth_service.utils import json_body

auth_bp = Blueprint("auth", __name__)
logger = logging.getLogger(__name__)


def get_directory() -> OrganizerDirectory:
    return current_app.extensions["organizer_directory"]


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log the method and path of every request to the authentication service.
    Headers are left out since they carry bearer tokens.
    """
    logger.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logger.info(f"[Auth] Response {response.status}")
    return response


# --- ERROR MAPPING ---
@auth_bp.errorhandler(DirectoryError)
def handle_directory_error(err: DirectoryError) -> Tuple[Response, int]:
    """
    Turn workflow errors into JSON. Internal errors are logged with their
    detail and answered with a generic message.
    """
    if isinstance(err, InternalError):
        logger.error(
            f"[Auth] Internal error on {request.method} {request.path}: "
            f"{err.detail} (retryable={err.retryable})"
        )
    return jsonify({"message": err.message}), err.status_code


@auth_bp.errorhandler(Exception)
def handle_unexpected_error(err: Exception):
    if isinstance(err, HTTPException):
        return err
    logger.exception(f"[Auth] Unhandled error on {request.method} {request.path}: {err}")
    return jsonify({"message": "Internal server error"}), 500


# --- REGISTER ---
@auth_bp.route("/register", methods=["POST"])
def register() -> Tuple[Response, int]:
    """
    Register a new organizer. The account stays pending until approved.

    Expects a JSON body with:
    - fname (str)
    - lname (str)
    - email (str): Unique, used as the login username.
    - password (str)
    - contact_no (str, optional)

    Returns:
        201: JSON with a message and the created organizer.
        400: Missing fields.
        409: Email already registered.
        500: Server-side error (hashing or database).
    """
    data: Dict[str, Any] = json_body()

    organizer = get_directory().register(
        fname=data.get("fname"),
        lname=data.get("lname"),
        email=data.get("email"),
        password=data.get("password"),
        contact_no=data.get("contact_no"),
    )

    return jsonify({
        "message": "Registration request sent for admin approval.",
        "organizer": organizer.to_public(),
    }), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate an approved organizer and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: JSON with a message and the JWT token.
        400: Missing credentials.
        401: Invalid credentials (wrong password or unknown email).
        403: Account not approved yet.
        500: Database error.
    """
    data: Dict[str, Any] = json_body()

    result = get_directory().login(data.get("email"), data.get("password"))

    return jsonify({"message": "Login successful", "token": result["token"]}), 200


# --- APPROVE ---
@auth_bp.route("/approve/<int:organizer_id>", methods=["GET"])
def approve_organizer(organizer_id: int) -> Tuple[Response, int]:
    """
    Approve a pending organizer and email them the confirmation.

    Expects the `token` query parameter carried by the link in the admin's
    approval request email.

    Returns:
        200: JSON with a message and the updated organizer.
        403: Approval token missing, expired or for another organizer.
        404: Organizer not found.
        409: Organizer already approved.
        500: Database or email failure (the approval may already be stored).
    """
    organizer = get_directory().approve(organizer_id, request.args.get("token"))

    return jsonify({
        "message": "Organizer approved successfully",
        "organizer": organizer.to_public(),
    }), 200
