"""Upload, question/result generation and results API routes."""
import logging

from flask import Blueprint, current_app, jsonify, request

from mock_interview.errors import InterviewError, ValidationError
from mock_interview.models.schemas import InterviewContext, QuestionAnswer, ResumeData
from mock_interview.services import persistence
from mock_interview.services.document_parser import extract_resume, validate_upload

logger = logging.getLogger(__name__)

interview_bp = Blueprint('interview', __name__)


def get_interview_service():
    return current_app.extensions["interview_service"]


def _context_from_body(data: dict) -> InterviewContext:
    if data.get("resume") is None:
        raise ValidationError("Missing resume")
    if data.get("jobDescription") is None:
        raise ValidationError("Missing job description")
    try:
        resume = ResumeData.from_payload(data["resume"])
        previous = [QuestionAnswer.from_payload(qa) for qa in (data.get("previousQAs") or [])]
    except (TypeError, ValueError, AttributeError) as e:
        raise ValidationError(f"Malformed request body: {e}") from e
    return InterviewContext(
        resume=resume,
        job_description=str(data["jobDescription"]),
        initial_qas=previous,
    )


@interview_bp.route('/api/interview', methods=['POST'])
def interview():
    """Generate questions, or with action=generateResult, the evaluation."""
    data = request.get_json(silent=True) or {}
    try:
        context = _context_from_body(data)
        service = get_interview_service()
        if data.get("action") == "generateResult":
            result = service.generate_interview_result(context)
            return jsonify(result.to_dict()), 200
        questions = service.generate_questions(context)
        return jsonify({"questions": [q.to_dict() for q in questions]}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        logger.exception("[InterviewAPI] Error")
        return jsonify({"error": "Failed to process interview request"}), 500


@interview_bp.route('/api/upload', methods=['POST'])
def upload():
    """Store an uploaded résumé PDF with its job description."""
    resume_file = request.files.get("resume")
    job_description = request.form.get("jobDescription", "")
    try:
        validate_upload(resume_file, job_description)
        resume = extract_resume(resume_file.read())
        user_id = persistence.create_user_record(resume, job_description.strip())
    except InterviewError as e:
        if e.status_code >= 500:
            logger.exception("[Upload] error processing resume")
        return jsonify({"ok": False, "error": e.public_message}), e.status_code
    logger.info("[Upload] %s (%d pages) -> user %s", resume_file.filename, resume.page_count, user_id)
    return jsonify({"ok": True, "userId": user_id}), 201


@interview_bp.route('/api/users/<int:user_id>', methods=['GET'])
def user_data(user_id):
    resume, job_description = persistence.get_resume_data(user_id)
    return jsonify({"id": user_id, "resume": resume.to_dict(), "jobDescription": job_description}), 200


@interview_bp.route('/api/results/<int:user_id>', methods=['GET'])
def results(user_id):
    return jsonify({"ok": True, "results": persistence.get_interview_results(user_id)}), 200
