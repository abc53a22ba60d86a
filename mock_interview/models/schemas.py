"""Value types exchanged between the interview services and the API."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class InterviewStatus(str, Enum):
    PROMISING_CANDIDATE = "Promising Candidate"
    QUALIFIED_CANDIDATE = "Qualified Candidate"
    ON_HOLD = "On Hold"
    SCHEDULE_ANOTHER_INTERVIEW = "Schedule Another Interview"
    BAD_CANDIDATE = "Bad Candidate"


@dataclass(frozen=True)
class ResumeData:
    """Text extracted from an uploaded résumé."""
    text: str
    page_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "numPages": self.page_count, "info": dict(self.metadata)}

    @classmethod
    def from_payload(cls, payload) -> "ResumeData":
        """Accept the stored/wire shape ({text, numPages, info}) or a bare string."""
        if isinstance(payload, ResumeData):
            return payload
        if isinstance(payload, str):
            return cls(text=payload)
        if isinstance(payload, dict):
            return cls(
                text=str(payload.get("text") or ""),
                page_count=int(payload.get("numPages") or payload.get("page_count") or 0),
                metadata=dict(payload.get("info") or payload.get("metadata") or {}),
            )
        raise TypeError(f"Unsupported resume payload: {type(payload).__name__}")


@dataclass(frozen=True)
class Question:
    number: int
    question: str

    def to_dict(self) -> Dict[str, Any]:
        return {"number": self.number, "question": self.question}


@dataclass(frozen=True)
class QuestionAnswer:
    question: str
    answer: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "QuestionAnswer":
        return cls(question=str(payload.get("question") or ""), answer=str(payload.get("answer") or ""))


@dataclass(frozen=True)
class InterviewResult:
    description: str = ""
    score: int = 0
    status: InterviewStatus = InterviewStatus.ON_HOLD

    def to_dict(self) -> Dict[str, Any]:
        return {"description": self.description, "score": self.score, "status": self.status.value}


@dataclass(frozen=True)
class InterviewContext:
    """Everything the prompts need: résumé, job description and prior Q&A."""
    resume: ResumeData
    job_description: str
    initial_qas: Optional[List[QuestionAnswer]] = None
    followup_qas: Optional[List[QuestionAnswer]] = None

    def all_qas(self) -> List[QuestionAnswer]:
        return list(self.initial_qas or []) + list(self.followup_qas or [])
