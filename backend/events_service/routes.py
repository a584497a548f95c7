"""
Events service routes: create, read, update and delete exhibition events.

Reading is public. Creating, updating and deleting need an organizer token
issued by the auth service's /login.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Response, jsonify, request

from backend.auth_service.utils import json_body, verify_token_from_request
from backend.database.db_connection import app_db

events_bp = Blueprint("events", __name__)

EVENT_COLUMNS = (
    "event_id, event_name, start_time, end_time, location, description, "
    "media_urls, event_category, organizer_id"
)
UPDATABLE_FIELDS = [
    "event_name", "start_time", "end_time", "location", "description",
    "media_urls", "event_category",
]
TIME_ORDER_MSG = "End time must be later than start time"
NOT_OWNER_MSG = "Permission denied"


def parse_dt(val: Optional[str]) -> Optional[datetime]:
    """
    Safely parse an ISO-8601 or datetime-local string to a datetime object.

    Args:
        val (str): The date string to parse.

    Returns:
        datetime: The parsed datetime, or None if invalid.
    """
    if not val:
        return None
    try:
        # Handles 'YYYY-MM-DDTHH:MM' and '...Z' or '...+00:00'
        if val.endswith('Z'):
            val = val[:-1] + '+00:00'
        return datetime.fromisoformat(val)
    except (ValueError, TypeError, AttributeError):
        return None


def _is_before(start: datetime, end: datetime) -> bool:
    # Naive and aware datetimes can't be compared; treat naive as UTC
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    if end.tzinfo is None:
        end = end.replace(tzinfo=timezone.utc)
    return start < end


def serialize_event(row) -> Dict[str, Any]:
    event = dict(row)
    for key in ("start_time", "end_time"):
        if isinstance(event.get(key), datetime):
            event[key] = event[key].isoformat()
    return event


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.route("/", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all events ordered by start time.

    Returns:
        200: List of event objects.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events ORDER BY start_time;"

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                rows = [serialize_event(r) for r in cur.fetchall()]
    except Exception as e:
        logging.error(f"Database error listing events: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify(rows), 200


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
        500: Database error.
    """
    sql = f"SELECT {EVENT_COLUMNS} FROM events WHERE event_id = %s;"

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (event_id,))
                event = cur.fetchone()
    except Exception as e:
        logging.error(f"Database error getting event {event_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    if not event:
        return jsonify({"message": "Event not found"}), 404
    return jsonify(serialize_event(event)), 200


@events_bp.route("/", methods=["POST"])
def create_event() -> Tuple[Response, int]:
    """
    Create an event.

    Validations:
    - event_name, start_time and end_time are required.
    - Times must be ISO-8601 and start before end.

    The event is owned by the organizer in the token.

    Returns:
        201: { "message": str, "event": {...} }
        400: Validation error.
        401: Missing or invalid token.
        500: Server error.
    """
    organizer_id, _, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_body()

    event_name = data.get("event_name")
    start_str = data.get("start_time")
    end_str = data.get("end_time")

    if not event_name or not start_str or not end_str:
        return jsonify({"message": "event_name, start_time, and end_time are required"}), 400

    start_dt = parse_dt(start_str)
    end_dt = parse_dt(end_str)
    if not start_dt or not end_dt:
        return jsonify({"message": "Invalid datetime format. Use ISO-8601."}), 400

    if not _is_before(start_dt, end_dt):
        return jsonify({"message": TIME_ORDER_MSG}), 400

    sql = f"""
        INSERT INTO events (
            event_name, start_time, end_time, location, description,
            media_urls, event_category, organizer_id
        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
        RETURNING {EVENT_COLUMNS};
    """

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    event_name, start_dt, end_dt,
                    data.get("location"),
                    data.get("description"),
                    data.get("media_urls"),
                    data.get("event_category"),
                    organizer_id,
                ))
                new_event = cur.fetchone()
                conn.commit()
    except Exception as e:
        logging.error(f"Database error creating event: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Event created successfully", "event": serialize_event(new_event)}), 201


@events_bp.route("/<int:event_id>", methods=["PUT"])
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event. Only the fields present in the body change.
    Only the owning organizer may update it.

    The time-order check runs against the final start/end, so moving only
    one end of the range is still validated against the stored other end.

    Returns:
        200: { "message": str, "event": {...} }
        400: Validation error.
        401: Missing or invalid token.
        403: Event belongs to another organizer.
        404: Event not found.
        500: Database error.
    """
    organizer_id, _, err, code = verify_token_from_request()
    if err:
        return err, code

    data: Dict[str, Any] = json_body()
    updates = {k: data[k] for k in UPDATABLE_FIELDS if k in data and data[k] is not None}
    if not updates:
        return jsonify({"message": "No valid fields to update"}), 400

    for key in ("start_time", "end_time"):
        if key in updates:
            parsed = parse_dt(updates[key])
            if not parsed:
                return jsonify({"message": f"Invalid {key} format. Use ISO-8601."}), 400
            updates[key] = parsed

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT start_time, end_time, organizer_id FROM events WHERE event_id = %s;",
                    (event_id,),
                )
                ev = cur.fetchone()
                if not ev:
                    return jsonify({"message": "Event not found"}), 404
                if ev["organizer_id"] != organizer_id:
                    return jsonify({"message": NOT_OWNER_MSG}), 403

                final_start = updates.get("start_time", ev["start_time"])
                final_end = updates.get("end_time", ev["end_time"])
                if not _is_before(final_start, final_end):
                    return jsonify({"message": TIME_ORDER_MSG}), 400

                set_clause = ", ".join(f"{k} = %s" for k in updates)
                values = list(updates.values()) + [event_id]
                cur.execute(
                    f"UPDATE events SET {set_clause} WHERE event_id = %s RETURNING {EVENT_COLUMNS};",
                    values,
                )
                updated = cur.fetchone()
                conn.commit()
    except Exception as e:
        logging.error(f"Database error updating event {event_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Event updated successfully", "event": serialize_event(updated)}), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
def delete_event(event_id: int) -> Tuple[Response, int]:
    """
    Delete an event owned by the caller and return the removed row.
    """
    organizer_id, _, err, code = verify_token_from_request()
    if err:
        return err, code

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT organizer_id FROM events WHERE event_id = %s;", (event_id,))
                ev = cur.fetchone()
                if not ev:
                    return jsonify({"message": "Event not found"}), 404
                if ev["organizer_id"] != organizer_id:
                    return jsonify({"message": NOT_OWNER_MSG}), 403

                cur.execute(
                    f"DELETE FROM events WHERE event_id = %s RETURNING {EVENT_COLUMNS};",
                    (event_id,),
                )
                deleted = cur.fetchone()
                conn.commit()
    except Exception as e:
        logging.error(f"Database error deleting event {event_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Event deleted successfully", "event": serialize_event(deleted)}), 200
