"""HTTP API tests through the Flask test client."""
import io

import pytest

from mock_interview.app import create_app
from mock_interview.errors import GatewayError
from mock_interview.models.interview_state import CLOSING_MESSAGE, WELCOME_MESSAGE
from tests.conftest import FOLLOW_UP_REPLY, INITIAL_REPLY, RESULT_REPLY, FakeGateway, FakeSpeech, make_pdf

RESUME = {"text": "5 years Go backend", "numPages": 1, "info": {}}


def upload(client, job="Senior backend engineer", data=None, filename="resume.pdf"):
    form = {"jobDescription": job}
    if data is not None:
        form["resume"] = (io.BytesIO(data), filename)
    return client.post("/api/upload", data=form, content_type="multipart/form-data")


class TestInterviewEndpoint:
    def test_generate_questions(self, client, gateway):
        gateway.replies.append(INITIAL_REPLY)
        resp = client.post("/api/interview", json={"resume": RESUME, "jobDescription": "Senior backend engineer"})
        assert resp.status_code == 200
        assert resp.get_json() == {
            "questions": [
                {"number": 1, "question": "Tell me about your Go experience"},
                {"number": 2, "question": "Describe a scaling challenge"},
            ]
        }

    def test_follow_up_questions_continue_numbering(self, client, gateway):
        gateway.replies.append("1. Why Go?")
        resp = client.post("/api/interview", json={
            "resume": "plain text resume",
            "jobDescription": "Senior backend engineer",
            "previousQAs": [{"question": "a", "answer": "b"}, {"question": "c", "answer": "d"}],
        })
        assert resp.get_json()["questions"] == [{"number": 3, "question": "Why Go?"}]

    def test_generate_result(self, client, gateway):
        gateway.replies.append(RESULT_REPLY)
        resp = client.post("/api/interview", json={
            "resume": RESUME,
            "jobDescription": "Senior backend engineer",
            "previousQAs": [{"question": "Tell me about Go", "answer": "Five years"}],
            "action": "generateResult",
        })
        assert resp.status_code == 200
        assert resp.get_json() == {"description": "Strong candidate.", "score": 82, "status": "Qualified Candidate"}

    def test_result_without_answers_is_400(self, client, gateway):
        resp = client.post("/api/interview", json={
            "resume": RESUME,
            "jobDescription": "x",
            "previousQAs": [],
            "action": "generateResult",
        })
        assert resp.status_code == 400
        assert "without interview responses" in resp.get_json()["error"]
        assert gateway.prompts == []

    def test_missing_fields_are_400(self, client):
        assert client.post("/api/interview", json={"jobDescription": "x"}).status_code == 400
        assert client.post("/api/interview", json={"resume": RESUME}).status_code == 400

    def test_gateway_failure_is_generic_500(self, client, gateway):
        gateway.replies.append(GatewayError("Gemini API error: PERMISSION_DENIED"))
        resp = client.post("/api/interview", json={"resume": RESUME, "jobDescription": "x"})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Failed to process interview request"}


class TestUpload:
    def test_upload_creates_user(self, client):
        resp = upload(client, data=make_pdf({"/Author": "Sam"}))
        assert resp.status_code == 201
        user_id = resp.get_json()["userId"]

        data = client.get(f"/api/users/{user_id}").get_json()
        assert data["jobDescription"] == "Senior backend engineer"
        assert data["resume"]["numPages"] == 1
        assert data["resume"]["info"]["Author"] == "Sam"

    def test_upload_requires_job_description(self, client):
        resp = upload(client, job="", data=make_pdf())
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Please enter a job description"

    def test_upload_requires_resume(self, client):
        resp = upload(client)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Please upload a PDF resume"

    def test_upload_rejects_non_pdf(self, client):
        resp = upload(client, data=b"hello", filename="resume.txt")
        assert resp.get_json()["error"] == "Please upload a PDF document only"

    def test_unknown_user_is_404(self, client):
        resp = client.get("/api/users/999")
        assert resp.status_code == 404
        assert resp.get_json()["ok"] is False


class TestChatFlow:
    @pytest.fixture
    def user_id(self, client):
        return upload(client, data=make_pdf()).get_json()["userId"]

    def test_full_interview(self, client, gateway, user_id):
        gateway.replies.extend([INITIAL_REPLY, FOLLOW_UP_REPLY, RESULT_REPLY])

        body = client.post(f"/api/sessions/{user_id}/start").get_json()
        assert [m["text"] for m in body["messages"]] == [WELCOME_MESSAGE, "Tell me about your Go experience"]
        assert body["state"]["phase"] == "asking_initial"

        client.post(f"/api/sessions/{user_id}/answer", json={"answer": "Five years"})
        body = client.post(f"/api/sessions/{user_id}/answer", json={"answer": "Sharding"}).get_json()
        assert body["messages"][-1]["text"] == "How did you profile the service?"
        assert body["state"]["phase"] == "asking_follow_up"

        body = client.post(f"/api/sessions/{user_id}/answer", json={"answer": "pprof"}).get_json()
        assert body["messages"][-1]["text"] == CLOSING_MESSAGE
        assert body["state"]["isComplete"] is True

        resp = client.post(f"/api/sessions/{user_id}/answer", json={"answer": "late"})
        assert resp.status_code == 400

        body = client.post(f"/api/sessions/{user_id}/end").get_json()
        assert body["redirect"] == f"/result/{user_id}"
        assert body["results"]["score"] == 82

        results = client.get(f"/api/results/{user_id}").get_json()
        assert results["results"]["status"] == "Qualified Candidate"

        # The finished chat is dropped once its results are stored.
        assert client.get(f"/api/sessions/{user_id}").status_code == 404

    def test_state_and_unknown_session(self, client, gateway, user_id):
        assert client.get(f"/api/sessions/{user_id}").status_code == 404
        gateway.replies.append(INITIAL_REPLY)
        client.post(f"/api/sessions/{user_id}/start")
        body = client.get(f"/api/sessions/{user_id}").get_json()
        assert len(body["messages"]) == 2
        assert body["state"]["isEnding"] is False

    def test_end_failure_reports_error(self, client, gateway, user_id):
        gateway.replies.extend([INITIAL_REPLY, GatewayError("quota")])
        client.post(f"/api/sessions/{user_id}/start")
        client.post(f"/api/sessions/{user_id}/answer", json={"answer": "Five years"})
        resp = client.post(f"/api/sessions/{user_id}/end")
        assert resp.status_code == 500
        assert resp.get_json()["ok"] is False

    def test_results_not_ready(self, client, user_id):
        assert client.get(f"/api/results/{user_id}").status_code == 404

    def test_voice_answer_disabled(self, client, gateway, user_id):
        gateway.replies.append(INITIAL_REPLY)
        client.post(f"/api/sessions/{user_id}/start")
        resp = client.post(
            f"/api/sessions/{user_id}/voice_answer",
            data={"audio": (io.BytesIO(b"RIFF0000WAVE"), "answer.wav")},
            content_type="multipart/form-data",
        )
        assert resp.status_code == 400
        assert client.get("/api/voices").status_code == 400


def test_voice_answer_with_speech():
    gateway = FakeGateway(INITIAL_REPLY)
    app = create_app(
        config={"TESTING": True, "SQLALCHEMY_DATABASE_URI": "sqlite://", "THINKING_DELAY_SEC": 0},
        gateway=gateway,
        speech=FakeSpeech(transcript="Mostly Go and gRPC"),
    )
    client = app.test_client()
    user_id = upload(client, data=make_pdf()).get_json()["userId"]
    client.post(f"/api/sessions/{user_id}/start")

    resp = client.post(
        f"/api/sessions/{user_id}/voice_answer",
        data={"audio": (io.BytesIO(b"RIFF0000WAVE"), "answer.wav")},
        content_type="multipart/form-data",
    )
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["transcript"] == "Mostly Go and gRPC"
    assert body["messages"][-1]["audio"].startswith("data:audio/mp3")
    assert client.get("/api/voices").get_json()["voices"] == ["en-US-Studio-O", "en-US-Studio-Q"]


def test_debug_gemini(client):
    body = client.get("/api/debug_gemini").get_json()
    assert body == {"ok": True, "model": "fake-gemini", "text": "OK", "mode": "aistudio"}
