"""Prompt templates for question generation and interview scoring."""
from typing import Iterable

from mock_interview.models.schemas import InterviewContext, QuestionAnswer

INITIAL_QUESTIONS_PROMPT = """Based on the following resume and job description, generate relevant interview questions.
Format each question with a number and the question text. Focus on technical skills, experience, and how the candidate's background aligns with the job requirements.

Resume:
{resume}

Job Description:
{job_description}

Generate 4-6 specific technical and experience-based interview questions."""


FOLLOW_UP_QUESTIONS_PROMPT = """Based on the following resume, job description, and interview responses, generate relevant follow-up interview questions.
Format each question with a number and the question text. Focus on areas that need more clarification or deeper exploration.

Resume:
{resume}

Job Description:
{job_description}

Previous Interview Responses:
{qas}

Generate specific follow-up questions that would help clarify or expand on the candidate's responses."""


RESULT_PROMPT = """Based on the following interview details, analyze the candidate's performance and provide a comprehensive evaluation.

Resume:
{resume}

Job Description:
{job_description}

Interview Questions and Responses:
{qas}

Please provide the following in your response:

1) DESCRIPTION: A short description (2-3 paragraphs) analyzing the overall interview performance, highlighting strengths, weaknesses, and alignment with the job requirements.

2) SCORE: A numerical score from 0 to 100 representing the candidate's fit for the position, where:
   - 90-100: Exceptional match, exceeding requirements
   - 75-89: Strong match, meeting most requirements
   - 60-74: Adequate match with some gaps
   - 40-59: Partial match with significant gaps
   - 0-39: Poor match with major deficiencies

3) STATUS: Assign one of the following statuses:
   - Promising Candidate: Excellent fit, recommend proceeding
   - Qualified Candidate: Good fit, shows potential
   - On Hold: Not enough information or could be either good or bad
   - Schedule Another Interview: Needs further assessment
   - Bad Candidate: Not suitable for the position

Format your response as:
DESCRIPTION: [your analysis]
SCORE: [number]
STATUS: [one of the five statuses]"""


def format_qas(qas: Iterable[QuestionAnswer]) -> str:
    return "\n\n".join(f"Q: {qa.question}\nA: {qa.answer}" for qa in qas)


def build_initial_prompt(context: InterviewContext) -> str:
    return INITIAL_QUESTIONS_PROMPT.format(
        resume=context.resume.text,
        job_description=context.job_description,
    )


def build_follow_up_prompt(context: InterviewContext) -> str:
    return FOLLOW_UP_QUESTIONS_PROMPT.format(
        resume=context.resume.text,
        job_description=context.job_description,
        qas=format_qas(context.all_qas()),
    )


def build_result_prompt(context: InterviewContext) -> str:
    return RESULT_PROMPT.format(
        resume=context.resume.text,
        job_description=context.job_description,
        qas=format_qas(context.all_qas()),
    )
