#!/usr/bin/env python3
"""JSON document store server for FleetBook.

Collections are kept in a single JSON file. Supported routes::

    GET|POST              /<collection>
    GET                   /<collection>/query?field=value&field_gte=...
    GET|PUT|PATCH|DELETE  /<collection>/<id>
"""

import json
import os
from uuid import uuid4

from flask import Flask, jsonify, request
from flask_cors import CORS

app = Flask(__name__)
CORS(app)

COLLECTIONS = ("accounts", "cars", "drivers", "bookings", "employees", "notifications")
EMPTY_DB = {name: [] for name in COLLECTIONS}

# Path to the JSON database file
DB_FILE = os.getenv("FLEETBOOK_DB_FILE", "data/db.json")

RANGE_OPERATORS = {
    "_gte": lambda a, b: a >= b,
    "_gt": lambda a, b: a > b,
    "_lte": lambda a, b: a <= b,
    "_lt": lambda a, b: a < b,
}


def read_db():
    """Read the database from the JSON file."""
    with open(DB_FILE, 'r') as f:
        return json.load(f)


def write_db(data):
    """Write data to the JSON file."""
    with open(DB_FILE, 'w') as f:
        json.dump(data, f, indent=2)


def ensure_db():
    """Create an empty database file if there is none."""
    directory = os.path.dirname(DB_FILE)
    if directory:
        os.makedirs(directory, exist_ok=True)
    if not os.path.exists(DB_FILE):
        write_db(EMPTY_DB)


def as_param(value):
    """Render a stored value the way it arrives in a query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def matches(item, key, expected):
    for suffix, compare in RANGE_OPERATORS.items():
        if key.endswith(suffix):
            field = key[:-len(suffix)]
            # Range filters compare strings, which orders ISO timestamps correctly
            return item.get(field) is not None and compare(as_param(item[field]), expected)
    return key in item and as_param(item[key]) == expected


def find_index(items, item_id):
    for i, item in enumerate(items):
        if str(item.get('id')) == str(item_id):
            return i
    return None


@app.route('/')
def get_root():
    """Get the entire database."""
    return jsonify(read_db())


@app.route('/<collection>', methods=['GET', 'POST'])
def manage_collection(collection):
    """Get all items or add a new item to a collection."""
    db = read_db()

    if request.method == 'GET':
        if collection not in db:
            return jsonify({"error": f"Collection '{collection}' not found"}), 404
        return jsonify(db[collection])

    new_item = request.get_json(silent=True)
    if not isinstance(new_item, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    new_item.setdefault("id", str(uuid4()))
    items = db.setdefault(collection, [])
    if find_index(items, new_item["id"]) is not None:
        return jsonify({"error": f"Item with ID '{new_item['id']}' already exists in '{collection}'"}), 409

    items.append(new_item)
    write_db(db)
    return jsonify(new_item), 201


@app.route('/<collection>/query', methods=['GET'])
def query_collection(collection):
    """Query items in a collection based on parameters."""
    db = read_db()

    if collection not in db:
        return jsonify({"error": f"Collection '{collection}' not found"}), 404

    params = request.args
    filtered_items = [
        item for item in db[collection]
        if all(matches(item, key, value) for key, value in params.items())
    ]
    return jsonify(filtered_items)


@app.route('/<collection>/<item_id>', methods=['GET', 'PUT', 'PATCH', 'DELETE'])
def manage_item(collection, item_id):
    """Get, replace, merge into or delete a specific item."""
    db = read_db()

    if collection not in db:
        return jsonify({"error": f"Collection '{collection}' not found"}), 404

    item_index = find_index(db[collection], item_id)
    if item_index is None:
        return jsonify({"error": f"Item with ID '{item_id}' not found in '{collection}'"}), 404

    if request.method == 'GET':
        return jsonify(db[collection][item_index])

    if request.method == 'DELETE':
        deleted_item = db[collection].pop(item_index)
        write_db(db)
        return jsonify(deleted_item)

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    if request.method == 'PUT':
        updated_item = body
    else:
        updated_item = dict(db[collection][item_index])
        updated_item.update(body)
    # The id in the URL always wins
    updated_item["id"] = db[collection][item_index]["id"]

    db[collection][item_index] = updated_item
    write_db(db)
    return jsonify(updated_item)


if __name__ == '__main__':
    ensure_db()
    app.run(host='0.0.0.0', port=int(os.getenv("FLEETBOOK_STORE_PORT", "3000")))
