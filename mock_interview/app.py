# app.py
import logging
import os
import socket
import sys

from flask import Flask, jsonify
from flask_cors import CORS

from mock_interview.config import settings
from mock_interview.errors import InterviewError
from mock_interview.models.user_record import db
from mock_interview.routes.chat_routes import chat_bp
from mock_interview.routes.debug_routes import debug_bp
from mock_interview.routes.interview_routes import interview_bp
from mock_interview.services.ai_service import GeminiGateway
from mock_interview.services.chat_service import ChatRegistry
from mock_interview.services.interview_service import InterviewService

logger = logging.getLogger(__name__)


def create_app(config=None, gateway=None, speech=None):
    """Build the Flask app; ``config`` overrides settings-derived values."""
    app = Flask(__name__)
    CORS(app)
    app.config.update(
        SQLALCHEMY_DATABASE_URI=settings.DATABASE_URL,
        THINKING_DELAY_SEC=settings.THINKING_DELAY_SEC,
        AUTO_END_INTERVIEW=settings.AUTO_END_INTERVIEW,
        ENABLE_SPEECH=settings.ENABLE_SPEECH,
    )
    if config:
        app.config.update(config)

    db.init_app(app)
    with app.app_context():
        db.create_all()

    if speech is None and app.config["ENABLE_SPEECH"]:
        from mock_interview.services.speech_service import SpeechService
        speech = SpeechService()

    app.extensions["interview_service"] = InterviewService(gateway or GeminiGateway())
    app.extensions["chat_registry"] = ChatRegistry()
    app.extensions["speech"] = speech

    # Register blueprints
    app.register_blueprint(interview_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(debug_bp)

    @app.errorhandler(InterviewError)
    def handle_interview_error(e):
        if e.status_code >= 500:
            logger.error("[API] %s: %s", type(e).__name__, e)
        return jsonify({"ok": False, "error": e.public_message}), e.status_code

    @app.route("/")
    def root():
        return jsonify({"status": "running", "service": "Mock Interview", "model": settings.GEMINI_MODEL})

    return app


def _pick_port(default_port: int) -> int:
    base = default_port
    for a in sys.argv[1:]:
        if a.startswith("--port="):
            try:
                base = int(a.split("=", 1)[1])
            except ValueError:
                pass
    for p in range(base, base + 20):
        s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            s.bind(("0.0.0.0", p))
            return p
        except OSError:
            continue
        finally:
            s.close()
    return base


def main():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    port = _pick_port(settings.PORT)
    logger.info("Serving on port %d (pid %d)", port, os.getpid())
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
