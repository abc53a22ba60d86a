"""Question generation and interview scoring on top of the Gemini gateway."""
import logging
from typing import List, Optional

from mock_interview.errors import ValidationError
from mock_interview.models.schemas import InterviewContext, InterviewResult, Question
from mock_interview.prompts.interview_prompts import (
    build_follow_up_prompt,
    build_initial_prompt,
    build_result_prompt,
)
from mock_interview.services.ai_service import GeminiGateway
from mock_interview.services.response_parser import parse_interview_result, parse_questions

logger = logging.getLogger(__name__)


class InterviewService:
    """Sequences prompt building, the gateway call and response parsing."""

    def __init__(self, gateway: Optional[GeminiGateway] = None):
        self.gateway = gateway or GeminiGateway()

    @staticmethod
    def _require_context(context: InterviewContext):
        if context is None or context.resume is None:
            raise ValidationError("Resume is required")
        if context.job_description is None:
            raise ValidationError("Job description is required")

    def generate_questions(self, context: InterviewContext) -> List[Question]:
        """Initial questions, or follow-ups once any Q&A pair exists.

        Follow-up numbering continues after every prior question.
        """
        self._require_context(context)
        prior = context.all_qas()
        is_follow_up = len(prior) > 0

        prompt = build_follow_up_prompt(context) if is_follow_up else build_initial_prompt(context)
        generated = self.gateway.send(prompt)

        start_number = 1 + len(prior) if is_follow_up else 1
        questions = parse_questions(generated, start_number)
        logger.info(
            "[Interview] generated %d %s question(s)",
            len(questions),
            "follow-up" if is_follow_up else "initial",
        )
        return questions

    def generate_interview_result(self, context: InterviewContext) -> InterviewResult:
        self._require_context(context)
        if not context.all_qas():
            raise ValidationError("Cannot generate results without interview responses")

        result_text = self.gateway.send(build_result_prompt(context))
        result = parse_interview_result(result_text)
        logger.info("[Interview] result score=%d status=%s", result.score, result.status.value)
        return result
