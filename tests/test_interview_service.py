import pytest

from mock_interview.errors import GatewayError, ValidationError
from mock_interview.models.schemas import InterviewContext, InterviewStatus, Question, QuestionAnswer
from tests.conftest import INITIAL_REPLY, RESULT_REPLY


def test_initial_questions(gateway, interview_service, context):
    gateway.replies.append(INITIAL_REPLY)
    questions = interview_service.generate_questions(context)
    assert questions == [
        Question(1, "Tell me about your Go experience"),
        Question(2, "Describe a scaling challenge"),
    ]
    assert "Generate 4-6" in gateway.prompts[0]


def test_follow_up_numbering_continues_after_prior_questions(gateway, interview_service, resume):
    gateway.replies.append("1. Why Go?\n2. Why Postgres?")
    context = InterviewContext(
        resume=resume,
        job_description="Senior backend engineer",
        initial_qas=[QuestionAnswer("a", "1"), QuestionAnswer("b", "2"), QuestionAnswer("c", "3")],
        followup_qas=[QuestionAnswer("d", "4")],
    )
    questions = interview_service.generate_questions(context)
    assert [q.number for q in questions] == [5, 6]
    assert "Previous Interview Responses" in gateway.prompts[0]


def test_empty_prior_lists_use_initial_prompt(gateway, interview_service, resume):
    gateway.replies.append(INITIAL_REPLY)
    context = InterviewContext(resume=resume, job_description="x", initial_qas=[], followup_qas=[])
    questions = interview_service.generate_questions(context)
    assert questions[0].number == 1
    assert "Previous Interview Responses" not in gateway.prompts[0]


def test_unparseable_reply_gives_no_questions(gateway, interview_service, context):
    gateway.replies.append("I'd rather not.")
    assert interview_service.generate_questions(context) == []


def test_missing_job_description_is_rejected(interview_service, resume):
    with pytest.raises(ValidationError):
        interview_service.generate_questions(InterviewContext(resume=resume, job_description=None))


def test_gateway_error_propagates(gateway, interview_service, context):
    gateway.replies.append(GatewayError("Gemini API error: UNAVAILABLE"))
    with pytest.raises(GatewayError):
        interview_service.generate_questions(context)


def test_result_requires_answers(gateway, interview_service, context):
    with pytest.raises(ValidationError):
        interview_service.generate_interview_result(context)
    assert gateway.prompts == []


def test_result_with_single_follow_up_pair(gateway, interview_service, resume):
    gateway.replies.append("nonsense")
    context = InterviewContext(
        resume=resume,
        job_description="x",
        followup_qas=[QuestionAnswer("only?", "")],
    )
    result = interview_service.generate_interview_result(context)
    assert result.status == InterviewStatus.ON_HOLD
    assert result.score == 0


def test_result_end_to_end(gateway, interview_service, answered_context):
    gateway.replies.append(RESULT_REPLY)
    result = interview_service.generate_interview_result(answered_context)
    assert result.to_dict() == {
        "description": "Strong candidate.",
        "score": 82,
        "status": "Qualified Candidate",
    }
    assert "DESCRIPTION:" in gateway.prompts[0]
