import io

import pytest
from PyPDF2 import PdfWriter

from mock_interview.app import create_app
from mock_interview.models.schemas import InterviewContext, QuestionAnswer, ResumeData
from mock_interview.services.interview_service import InterviewService


class FakeGateway:
    """Returns scripted replies in order and remembers every prompt."""

    model = "fake-gemini"

    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def send(self, prompt, temperature=None, max_tokens=None):
        self.prompts.append(prompt)
        if not self.replies:
            raise AssertionError("unexpected gateway call")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def ping(self):
        return "OK"


class FakeSpeech:
    def __init__(self, transcript="I have built Go services for five years"):
        self.transcript = transcript
        self.spoken = []

    def synthesize_speech(self, text):
        self.spoken.append(text)
        return "data:audio/mp3;base64,AAAA"

    def transcribe_audio(self, audio_bytes, filename_hint=None):
        return self.transcript

    def list_studio_voice_names(self):
        return ["en-US-Studio-O", "en-US-Studio-Q"]


INITIAL_REPLY = "1. Tell me about your Go experience\n2. Describe a scaling challenge"
FOLLOW_UP_REPLY = "1. How did you profile the service?"
RESULT_REPLY = "DESCRIPTION: Strong candidate.\nSCORE: 82\nSTATUS: Qualified Candidate"


def make_pdf(metadata=None, pages=1) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    if metadata:
        writer.add_metadata(metadata)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture
def resume():
    return ResumeData(text="5 years Go backend", page_count=1)


@pytest.fixture
def context(resume):
    return InterviewContext(resume=resume, job_description="Senior backend engineer")


@pytest.fixture
def answered_context(resume):
    return InterviewContext(
        resume=resume,
        job_description="Senior backend engineer",
        initial_qas=[
            QuestionAnswer("Tell me about your Go experience", "Five years of services"),
            QuestionAnswer("Describe a scaling challenge", "Sharded a Postgres cluster"),
        ],
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def interview_service(gateway):
    return InterviewService(gateway)


@pytest.fixture
def app(gateway):
    app = create_app(
        config={
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "THINKING_DELAY_SEC": 0,
            "AUTO_END_INTERVIEW": False,
            "ENABLE_SPEECH": False,
        },
        gateway=gateway,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
