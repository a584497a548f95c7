"""
Building service route handlers.
Manages the exhibition buildings and the zone each one belongs to.
"""

import logging

from flask import Blueprint, request, jsonify
from backend.auth_service.utils import json_body
from backend.database.db_connection import app_db

buildings_bp = Blueprint("buildings", __name__)

BUILDING_COLUMNS = "building_id, zone_id, building_name, description"


@buildings_bp.before_request
def before_request():
    logging.info(f"[Buildings] Incoming {request.method} {request.path}")


@buildings_bp.route("/", methods=["GET"])
def list_buildings():
    """
    Get all buildings ordered by id.
    """
    sql = f"SELECT {BUILDING_COLUMNS} FROM building ORDER BY building_id;"
    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql)
                buildings = [dict(row) for row in cur.fetchall()]
                return jsonify(buildings), 200
    except Exception as e:
        logging.error(f"Error fetching buildings: {e}")
        return jsonify({"message": "Database error"}), 500


@buildings_bp.route("/<int:building_id>", methods=["GET"])
def get_building(building_id):
    """
    Get a single building by id.
    """
    sql = f"SELECT {BUILDING_COLUMNS} FROM building WHERE building_id = %s;"
    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (building_id,))
                building = cur.fetchone()
    except Exception as e:
        logging.error(f"Error fetching building {building_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    if not building:
        return jsonify({"message": "Building not found"}), 404
    return jsonify(dict(building)), 200


@buildings_bp.route("/", methods=["POST"])
def create_building():
    """
    Create a new building. zone_id and building_name are required.
    """
    data = json_body()
    zone_id = data.get("zone_id")
    building_name = data.get("building_name")

    if not zone_id or not building_name:
        return jsonify({"message": "zone_id and building_name are required"}), 400

    sql = f"""
        INSERT INTO building (zone_id, building_name, description)
        VALUES (%s, %s, %s)
        RETURNING {BUILDING_COLUMNS};
    """

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (zone_id, building_name, data.get("description")))
                building = cur.fetchone()
                conn.commit()
    except Exception as e:
        logging.error(f"Error creating building: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Building created successfully", "building": dict(building)}), 201


@buildings_bp.route("/<int:building_id>", methods=["PUT"])
def update_building(building_id):
    """
    Update a building. Fields left out of the body keep their current value.
    """
    data = json_body()

    sql = f"""
        UPDATE building
        SET zone_id = COALESCE(%s, zone_id),
            building_name = COALESCE(%s, building_name),
            description = COALESCE(%s, description)
        WHERE building_id = %s
        RETURNING {BUILDING_COLUMNS};
    """

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    data.get("zone_id"),
                    data.get("building_name") or None,
                    data.get("description"),
                    building_id,
                ))
                updated = cur.fetchone()
                if not updated:
                    return jsonify({"message": "Building not found"}), 404
                conn.commit()
    except Exception as e:
        logging.error(f"Error updating building {building_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Building updated successfully", "building": dict(updated)}), 200


@buildings_bp.route("/<int:building_id>", methods=["DELETE"])
def delete_building(building_id):
    """
    Delete a building and return the removed row.
    """
    sql = f"DELETE FROM building WHERE building_id = %s RETURNING {BUILDING_COLUMNS};"

    try:
        with app_db() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (building_id,))
                deleted = cur.fetchone()
                if not deleted:
                    return jsonify({"message": "Building not found"}), 404
                conn.commit()
    except Exception as e:
        logging.error(f"Error deleting building {building_id}: {e}")
        return jsonify({"message": "Database error"}), 500

    return jsonify({"message": "Building deleted successfully", "building": dict(deleted)}), 200
