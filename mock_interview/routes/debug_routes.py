"""Debug and health routes."""
import logging

from flask import Blueprint, current_app, jsonify

from mock_interview.config import settings

logger = logging.getLogger(__name__)

debug_bp = Blueprint('debug', __name__)


@debug_bp.route('/api/debug_gemini', methods=['GET'])
def debug_gemini():
    """Test Gemini connection."""
    gateway = current_app.extensions["interview_service"].gateway
    try:
        txt = gateway.ping()
    except Exception as e:
        logger.exception("[GENAI] debug ping failed")
        return jsonify({"ok": False, "model": gateway.model, "error": str(e)}), 500
    return jsonify({
        "ok": True,
        "model": gateway.model,
        "text": txt,
        "mode": "vertex" if settings.USE_VERTEX == "1" else "aistudio"
    }), 200
