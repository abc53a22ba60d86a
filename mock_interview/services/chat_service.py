"""Runs one candidate's interview chat on top of the session reducer."""
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from mock_interview.errors import ValidationError
from mock_interview.models import interview_state as chat
from mock_interview.models.schemas import InterviewContext, QuestionAnswer, ResumeData
from mock_interview.services import persistence
from mock_interview.services.interview_service import InterviewService

logger = logging.getLogger(__name__)

ENDING_MESSAGE = "Ending interview and saving your responses..."
SAVE_ERROR_MESSAGE = "There was an error saving your interview data. Please try again."


@dataclass
class ChatMessage:
    sender: str
    text: str
    id: str = field(default="")
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    audio: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            self.id = f"{self.sender}-{uuid.uuid4().hex[:12]}"

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "sender": self.sender,
            "text": self.text,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.audio:
            out["audio"] = self.audio
        return out


def _qas_record(qas: List[QuestionAnswer]) -> Dict[str, dict]:
    return {str(i): qa.to_dict() for i, qa in enumerate(qas)}


class ChatService:
    """Interview chat controller for a single user id."""

    def __init__(
        self,
        user_id: int,
        resume: ResumeData,
        job_description: str,
        interview_service: InterviewService,
        thinking_delay: float = 1.0,
        auto_end: bool = False,
        speech=None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.user_id = user_id
        self.resume = resume
        self.job_description = job_description
        self.interview_service = interview_service
        self.thinking_delay = thinking_delay
        self.auto_end = auto_end
        self.speech = speech
        self._sleep = sleep
        self.session = chat.InterviewSession.begin([])
        self.messages: List[ChatMessage] = []
        self.is_ending = False
        self.results: Optional[dict] = None
        # Serialises answer turns and the end-of-interview save.
        self._lock = threading.Lock()

    # -- transcript -----------------------------------------------------

    def _say(self, text: str) -> ChatMessage:
        msg = ChatMessage(sender="interviewer", text=text)
        if self.speech is not None:
            try:
                msg.audio = self.speech.synthesize_speech(text)
            except Exception as e:
                logger.warning("[TTS] no audio for interviewer message: %s", e)
        self.messages.append(msg)
        return msg

    def _apply(self, event) -> chat.Transition:
        transition = chat.reduce(self.session, event)
        self.session = transition.session
        for text in transition.messages:
            self._say(text)
        return transition

    def _context(self, initial_qas, followup_qas=None) -> InterviewContext:
        return InterviewContext(
            resume=self.resume,
            job_description=self.job_description,
            initial_qas=initial_qas,
            followup_qas=followup_qas,
        )

    # -- flow -----------------------------------------------------------

    def start(self) -> List[ChatMessage]:
        """Generate the initial questions and open the chat."""
        try:
            questions = self.interview_service.generate_questions(self._context(None))
        except Exception:
            logger.exception("[Chat] initial question generation failed for user %s", self.user_id)
            questions = []

        self.session = chat.InterviewSession.begin(questions)
        self.messages = []
        self._say(chat.WELCOME_MESSAGE)
        if self.session.current_question is not None:
            self._say(self.session.current_question.question)
        return list(self.messages)

    def submit_answer(self, text: str) -> List[ChatMessage]:
        """Record an answer and move on; returns the messages it produced.

        Concurrent calls queue up and are answered strictly in arrival order.
        """
        with self._lock:
            return self._take_turn(text)

    def _take_turn(self, text: str) -> List[ChatMessage]:
        if not (text or "").strip():
            raise ValidationError("Answer must not be empty")
        if self.session.is_generating_follow_up:
            raise ValidationError("Follow-up questions are still being generated")
        if self.session.is_complete:
            raise ValidationError("The interview is already complete")

        logger.info(
            "[Chat] answer for index %d of %d",
            self.session.current_index, len(self.session.questions),
        )
        start = len(self.messages)
        self.messages.append(ChatMessage(sender="user", text=text))
        self._apply(chat.AnswerSubmitted(text))

        self._sleep(self.thinking_delay)
        transition = self._apply(chat.Advance())
        if transition.request_follow_ups:
            self._generate_follow_ups()

        if self.session.is_complete and self.auto_end:
            try:
                self._end_interview()
            except Exception as e:
                # The save error is already in the transcript; ending stays retryable.
                logger.warning("[Chat] automatic end failed: %s", e)
        return self.messages[start:]

    def submit_voice_answer(self, audio_bytes: bytes, filename_hint: Optional[str] = None):
        if self.speech is None:
            raise ValidationError("Speech input is not enabled")
        transcript = self.speech.transcribe_audio(audio_bytes, filename_hint=filename_hint)
        return transcript, self.submit_answer(transcript)

    def _generate_follow_ups(self):
        logger.info("[Chat] reached end of initial questions, generating follow-ups")
        context = self._context(chat.answered_pairs(self.session))
        try:
            follow_ups = self.interview_service.generate_questions(context)
        except Exception as e:
            logger.exception("[Chat] follow-up generation failed for user %s", self.user_id)
            self._apply(chat.FollowUpsFailed(str(e)))
            return
        logger.info("[Chat] received %d follow-up question(s)", len(follow_ups))
        self._apply(chat.FollowUpsReceived(tuple(follow_ups)))

    def end_interview(self) -> str:
        """Score, persist and return where the results can be read."""
        with self._lock:
            return self._end_interview()

    def _end_interview(self) -> str:
        if self.results is not None:
            raise ValidationError("The interview has already been saved")
        if self.is_ending:
            raise ValidationError("The interview is already being saved")
        self.is_ending = True
        self._say(ENDING_MESSAGE)

        try:
            initial_qas, followup_qas = chat.partition_qas(self.session)
            result = self.interview_service.generate_interview_result(
                self._context(initial_qas + followup_qas)
            )
            results = result.to_dict()
            persistence.update_interview_data(
                self.user_id,
                _qas_record(initial_qas),
                _qas_record(followup_qas),
                results,
            )
        except Exception:
            logger.exception("[Chat] error saving interview data for user %s", self.user_id)
            self._say(SAVE_ERROR_MESSAGE)
            self.is_ending = False
            raise

        self.results = results
        return f"/result/{self.user_id}"

    def snapshot(self) -> dict:
        state = self.session.to_dict()
        state["isEnding"] = self.is_ending
        return state


class ChatRegistry:
    """In-process map of user id -> ChatService."""

    def __init__(self):
        self._sessions: Dict[int, ChatService] = {}
        self._lock = threading.Lock()

    def get(self, user_id: int) -> Optional[ChatService]:
        with self._lock:
            return self._sessions.get(user_id)

    def put(self, service: ChatService):
        with self._lock:
            self._sessions[service.user_id] = service

    def discard(self, user_id: int):
        with self._lock:
            self._sessions.pop(user_id, None)
