"""Interview chat API routes: one chat per uploaded user record."""
import logging

from flask import Blueprint, current_app, jsonify, request

from mock_interview.errors import InterviewError, RecordNotFoundError
from mock_interview.services import persistence
from mock_interview.services.chat_service import ChatService

logger = logging.getLogger(__name__)

chat_bp = Blueprint('chat', __name__)


def _registry():
    return current_app.extensions["chat_registry"]


def _speech():
    return current_app.extensions.get("speech")


def _require_chat(user_id: int) -> ChatService:
    service = _registry().get(user_id)
    if service is None:
        raise RecordNotFoundError(f"No interview in progress for user {user_id}")
    return service


def _chat_payload(service: ChatService, messages, **extra):
    body = {
        "ok": True,
        "messages": [m.to_dict() for m in messages],
        "state": service.snapshot(),
    }
    body.update(extra)
    return jsonify(body)


@chat_bp.route('/api/sessions/<int:user_id>/start', methods=['POST'])
def start_session(user_id):
    """Generate the initial questions and open a fresh chat."""
    resume, job_description = persistence.get_resume_data(user_id)
    cfg = current_app.config
    service = ChatService(
        user_id=user_id,
        resume=resume,
        job_description=job_description,
        interview_service=current_app.extensions["interview_service"],
        thinking_delay=cfg["THINKING_DELAY_SEC"],
        auto_end=cfg["AUTO_END_INTERVIEW"],
        speech=_speech(),
    )
    messages = service.start()
    _registry().put(service)
    return _chat_payload(service, messages), 200


@chat_bp.route('/api/sessions/<int:user_id>', methods=['GET'])
def session_state(user_id):
    service = _require_chat(user_id)
    return _chat_payload(service, service.messages), 200


@chat_bp.route('/api/sessions/<int:user_id>/answer', methods=['POST'])
def answer(user_id):
    service = _require_chat(user_id)
    data = request.get_json(silent=True) or {}
    messages = service.submit_answer(str(data.get("answer") or ""))
    return _chat_payload(service, messages), 200


@chat_bp.route('/api/sessions/<int:user_id>/voice_answer', methods=['POST'])
def voice_answer(user_id):
    """Transcribe an uploaded recording and submit it as the answer."""
    service = _require_chat(user_id)
    if "audio" not in request.files:
        return jsonify({"ok": False, "error": "No audio file"}), 400
    blob = request.files["audio"]
    audio_bytes = blob.read() or b""
    if not audio_bytes:
        return jsonify({"ok": False, "error": "Empty audio upload"}), 400
    try:
        transcript, messages = service.submit_voice_answer(audio_bytes, filename_hint=blob.filename or blob.mimetype)
    except ValueError as e:
        # No speech detected, oversized upload and the like
        return jsonify({"ok": False, "error": str(e)}), 400
    return _chat_payload(service, messages, transcript=transcript), 200


@chat_bp.route('/api/sessions/<int:user_id>/end', methods=['POST'])
def end_session(user_id):
    service = _require_chat(user_id)
    try:
        redirect = service.end_interview()
    except InterviewError:
        raise
    except Exception:
        return jsonify({
            "ok": False,
            "error": "There was an error saving your interview data. Please try again.",
            "messages": [m.to_dict() for m in service.messages[-2:]],
        }), 500
    # Saved; results are served from the store from here on.
    _registry().discard(user_id)
    return jsonify({"ok": True, "redirect": redirect, "results": service.results}), 200


@chat_bp.route('/api/voices', methods=['GET'])
def list_voices():
    """List available Google Studio voices (names only)."""
    speech = _speech()
    if speech is None:
        return jsonify({"ok": False, "error": "Speech is not enabled"}), 400
    return jsonify({"ok": True, "voices": speech.list_studio_voice_names()}), 200
