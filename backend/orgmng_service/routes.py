"""
Organizer management routes: list, read, update and delete organizers.

Only approved organizers are listed or readable here. The approval status is
owned by the auth service and cannot be changed through this blueprint.
"""

import logging
from typing import Any, Dict, Tuple

import psycopg2.errors
from flask import Blueprint, Response, current_app, jsonify, request

from backend.auth_service.directory import EMAIL_TAKEN_MSG, normalize_email
from backend.auth_service.utils import json_body, require_organizer
from backend.database.db_connection import app_db

organizers_bp = Blueprint("organizers", __name__)

PUBLIC_COLUMNS = "organizer_id, organizer_name, fname, lname, email, contact_no"


@organizers_bp.before_request
def before_request() -> None:
    logging.info(f"[Organizers] Incoming {request.method} {request.path}")


@organizers_bp.route("/", methods=["GET"])
def list_organizers() -> Tuple[Response, int]:
    """
    List approved organizers ordered by id.
    """
    sql = f"SELECT {PUBLIC_COLUMNS} FROM organizer WHERE status = 'approved' ORDER BY organizer_id;"
    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                organizers = [dict(row) for row in cur.fetchall()]
    except Exception as e:
        logging.error(f"Error fetching organizers: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify(organizers), 200


@organizers_bp.route("/<int:organizer_id>", methods=["GET"])
def get_organizer(organizer_id: int) -> Tuple[Response, int]:
    """
    Get one approved organizer.

    Returns:
        200: Organizer object (no password hash).
        404: No approved organizer with this id.
        500: Database error.
    """
    sql = f"SELECT {PUBLIC_COLUMNS} FROM organizer WHERE organizer_id = %s AND status = 'approved';"
    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (organizer_id,))
                organizer = cur.fetchone()
    except Exception as e:
        logging.error(f"Error fetching organizer {organizer_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    if not organizer:
        return jsonify({"message": "Approved organizer not found"}), 404
    return jsonify(dict(organizer)), 200


@organizers_bp.route("/<int:organizer_id>", methods=["PUT"])
def update_organizer(organizer_id: int) -> Tuple[Response, int]:
    """
    Update an organizer's profile. Fields left out keep their value.
    Only the organizer named in the token may update their own profile.

    Allowed fields:
    - organizer_name, fname, lname
    - email, contact_no
    - password (re-hashed before storage)

    Returns:
        200: Updated organizer.
        401: Missing or invalid token.
        403: Token belongs to another organizer.
        404: Organizer not found.
        409: Email already taken by another organizer.
        500: Hashing or database error.
    """
    err, code = require_organizer(organizer_id)
    if err:
        return err, code

    data: Dict[str, Any] = json_body()

    password_hash = None
    if data.get("password"):
        try:
            password_hash = current_app.extensions["password_hasher"].hash(data["password"])
        except Exception as e:
            logging.error(f"Error hashing password for organizer {organizer_id}: {e}")
            return jsonify({"message": "Error hashing password"}), 500

    sql = f"""
        UPDATE organizer
        SET organizer_name = COALESCE(%s, organizer_name),
            fname = COALESCE(%s, fname),
            lname = COALESCE(%s, lname),
            email = COALESCE(%s, email),
            contact_no = COALESCE(%s, contact_no),
            password_hash = COALESCE(%s, password_hash)
        WHERE organizer_id = %s
        RETURNING {PUBLIC_COLUMNS}, status;
    """
    values = (
        data.get("organizer_name") or None,
        data.get("fname") or None,
        data.get("lname") or None,
        normalize_email(data.get("email")) or None,
        data.get("contact_no") or None,
        password_hash,
        organizer_id,
    )

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, values)
                organizer = cur.fetchone()
                if not organizer:
                    return jsonify({"message": "Organizer not found"}), 404
                conn.commit()
    except psycopg2.errors.UniqueViolation:
        return jsonify({"message": EMAIL_TAKEN_MSG}), 409
    except Exception as e:
        logging.error(f"Error updating organizer {organizer_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Organizer updated", "organizer": dict(organizer)}), 200


@organizers_bp.route("/<int:organizer_id>", methods=["DELETE"])
def delete_organizer(organizer_id: int) -> Tuple[Response, int]:
    """
    Delete an organizer and return the removed record.
    Organizers can only delete their own account.
    """
    err, code = require_organizer(organizer_id)
    if err:
        return err, code

    sql = f"DELETE FROM organizer WHERE organizer_id = %s RETURNING {PUBLIC_COLUMNS}, status;"
    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (organizer_id,))
                organizer = cur.fetchone()
                if not organizer:
                    return jsonify({"message": "Organizer not found"}), 404
                conn.commit()
    except Exception as e:
        logging.error(f"Error deleting organizer {organizer_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Organizer deleted", "organizer": dict(organizer)}), 200
