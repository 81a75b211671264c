# IngestAPI.py
import random

from flask import Blueprint, current_app, jsonify, request, session

from void.logger import get_logger
from void.SessionIdentity import SessionError, colour_for, identity_for

log = get_logger("ingest")

ingest_bp = Blueprint('ingest_api', __name__)


def random_position():
    """Pick a screen position (percent) that keeps messages inside the feed."""
    x = round(10 + random.random() * 80, 2)
    y = round(5 + random.random() * 80, 2)
    return x, y


@ingest_bp.route('/message', methods=['POST'])
def post_message():
    """Accept a form submission and drop it into the shared message store"""
    try:
        identity, fresh = identity_for(session)
    except SessionError as e:
        log.error(f"❌ error getting session ID: {e}")
        return jsonify({"error": "Internal Server Error", "message": "Error getting session ID"}), 500

    if fresh:
        log.info(f"🔑 issued session identity {identity:06x}")

    text = request.form.get('message', '')
    if not text:
        log.warning("❌ no message provided")
        return jsonify({"error": "Bad Request", "message": "No message"}), 400

    max_length = current_app.config['MAX_MESSAGE_LENGTH']
    if len(text) > max_length:
        log.warning(f"❌ message too long ({len(text)} > {max_length})")
        return jsonify({"error": "Bad Request", "message": f"Message longer than {max_length} characters"}), 400

    x, y = random_position()
    store = current_app.extensions['void.store']
    msg = store.insert(text, colour_for(identity), x, y)

    log.info(f"✅ message saved: session={identity} message={text!r} colour={msg.colour} x={msg.x} y={msg.y}")
    return '', 200


def init_app(app):
    app.register_blueprint(ingest_bp)
