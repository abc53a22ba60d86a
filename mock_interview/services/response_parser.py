"""Best-effort decoding of Gemini free text into questions and results.

Neither parser raises: unexpected text yields empty or default fields.
"""
import re
from typing import List

from mock_interview.models.schemas import InterviewResult, InterviewStatus, Question

QUESTION_LINE_RE = re.compile(r"^(\d+)[.)]\s*(.+)$")
DESCRIPTION_RE = re.compile(r"DESCRIPTION:\s*(.*?)(?=SCORE:|\Z)", re.IGNORECASE | re.DOTALL)
SCORE_RE = re.compile(r"SCORE:\s*(\d+)", re.IGNORECASE)
STATUS_RE = re.compile(r"STATUS:\s*(.+)$", re.IGNORECASE | re.MULTILINE)

# Evaluated in order; first keyword found wins.
STATUS_KEYWORDS = [
    ("promising", InterviewStatus.PROMISING_CANDIDATE),
    ("qualified", InterviewStatus.QUALIFIED_CANDIDATE),
    ("on hold", InterviewStatus.ON_HOLD),
    ("schedule", InterviewStatus.SCHEDULE_ANOTHER_INTERVIEW),
    ("another interview", InterviewStatus.SCHEDULE_ANOTHER_INTERVIEW),
    ("bad", InterviewStatus.BAD_CANDIDATE),
]


def parse_questions(text: str, start_number: int = 1) -> List[Question]:
    """Collect numbered lines, renumbering them from ``start_number``."""
    questions = []
    number = start_number
    for line in (text or "").split("\n"):
        if not line.strip():
            continue
        m = QUESTION_LINE_RE.match(line)
        if not m:
            continue
        questions.append(Question(number=number, question=m.group(2).strip()))
        number += 1
    return questions


def resolve_status(status_text: str) -> InterviewStatus:
    lowered = status_text.lower()
    for keyword, status in STATUS_KEYWORDS:
        if keyword in lowered:
            return status
    return InterviewStatus.ON_HOLD


def parse_interview_result(text: str) -> InterviewResult:
    text = text or ""
    description = ""
    score = 0
    status = InterviewStatus.ON_HOLD

    m = DESCRIPTION_RE.search(text)
    if m:
        description = m.group(1).strip()

    m = SCORE_RE.search(text)
    if m:
        score = min(100, max(0, int(m.group(1))))

    m = STATUS_RE.search(text)
    if m:
        status = resolve_status(m.group(1).strip())

    return InterviewResult(description=description, score=score, status=status)
