"""Interview chat session and its transition function.

A session is immutable; ``reduce`` returns the next session together with
the interviewer messages to show and whether follow-up generation must run.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from mock_interview.models.schemas import Question, QuestionAnswer

WELCOME_MESSAGE = (
    "Welcome to your interview! I'll be asking you some questions based on your "
    "resume and the job description. Let's get started."
)
PROCESSING_MESSAGE = "Processing your answers and generating follow-up questions..."
CLOSING_MESSAGE = (
    "Thank you for completing the interview! We'll review your responses and get back to you soon."
)


class Phase(str, Enum):
    ASKING_INITIAL = "asking_initial"
    ASKING_FOLLOW_UP = "asking_follow_up"
    AWAITING_FOLLOW_UP_GENERATION = "awaiting_follow_up_generation"
    COMPLETE = "complete"


@dataclass(frozen=True)
class InterviewSession:
    questions: Tuple[Question, ...]
    initial_count: int
    answers: Dict[int, str] = field(default_factory=dict)
    current_index: int = 0
    is_complete: bool = False
    is_generating_follow_up: bool = False
    has_generated_follow_ups: bool = False

    @classmethod
    def begin(cls, questions: List[Question]) -> "InterviewSession":
        return cls(questions=tuple(questions), initial_count=len(questions))

    @property
    def phase(self) -> Phase:
        if self.is_complete:
            return Phase.COMPLETE
        if self.is_generating_follow_up:
            return Phase.AWAITING_FOLLOW_UP_GENERATION
        if self.current_index >= self.initial_count and self.has_generated_follow_ups:
            return Phase.ASKING_FOLLOW_UP
        return Phase.ASKING_INITIAL

    @property
    def current_question(self) -> Optional[Question]:
        if self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    @property
    def accepts_answers(self) -> bool:
        return not (self.is_complete or self.is_generating_follow_up)

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "questions": [q.to_dict() for q in self.questions],
            "answers": {str(i): a for i, a in sorted(self.answers.items())},
            "currentIndex": self.current_index,
            "isComplete": self.is_complete,
            "isGeneratingFollowUp": self.is_generating_follow_up,
            "hasGeneratedFollowUps": self.has_generated_follow_ups,
        }


# Events

@dataclass(frozen=True)
class AnswerSubmitted:
    text: str


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class FollowUpsReceived:
    questions: Tuple[Question, ...]


@dataclass(frozen=True)
class FollowUpsFailed:
    reason: str = ""


@dataclass(frozen=True)
class Transition:
    session: InterviewSession
    messages: Tuple[str, ...] = ()
    request_follow_ups: bool = False


def _complete(session: InterviewSession) -> Transition:
    done = replace(session, is_complete=True, is_generating_follow_up=False)
    return Transition(done, (CLOSING_MESSAGE,))


def reduce(session: InterviewSession, event) -> Transition:
    if isinstance(event, AnswerSubmitted):
        if not event.text.strip() or not session.accepts_answers:
            return Transition(session)
        # Nothing has been asked yet, so there is no question to pair it with.
        if session.current_question is None:
            return Transition(session)
        answers = dict(session.answers)
        answers[session.current_index] = event.text
        return Transition(replace(session, answers=answers))

    if isinstance(event, Advance):
        if session.is_complete or session.is_generating_follow_up:
            return Transition(session)
        next_index = session.current_index + 1
        if next_index < len(session.questions):
            return Transition(
                replace(session, current_index=next_index),
                (session.questions[next_index].question,),
            )
        if not session.has_generated_follow_ups:
            waiting = replace(session, is_generating_follow_up=True, has_generated_follow_ups=True)
            return Transition(waiting, (PROCESSING_MESSAGE,), request_follow_ups=True)
        return _complete(session)

    if isinstance(event, FollowUpsReceived):
        if not session.is_generating_follow_up:
            return Transition(session)
        if not event.questions:
            return _complete(session)
        questions = session.questions + tuple(event.questions)
        next_index = min(session.current_index + 1, len(session.questions))
        resumed = replace(
            session,
            questions=questions,
            current_index=next_index,
            is_generating_follow_up=False,
        )
        return Transition(resumed, (questions[next_index].question,))

    if isinstance(event, FollowUpsFailed):
        if not session.is_generating_follow_up:
            return Transition(session)
        return _complete(session)

    raise TypeError(f"Unknown interview event: {type(event).__name__}")


def answered_pairs(session: InterviewSession) -> List[QuestionAnswer]:
    """Answered questions in index order."""
    return [
        QuestionAnswer(question=session.questions[i].question, answer=answer)
        for i, answer in sorted(session.answers.items())
        if i < len(session.questions)
    ]


def partition_qas(session: InterviewSession) -> Tuple[List[QuestionAnswer], List[QuestionAnswer]]:
    """Split into initial and follow-up Q&A; unanswered questions get ''."""
    pairs = [
        QuestionAnswer(question=q.question, answer=session.answers.get(i, ""))
        for i, q in enumerate(session.questions)
    ]
    return pairs[:session.initial_count], pairs[session.initial_count:]
