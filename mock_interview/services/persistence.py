"""User record store: résumé upload, Q&A and results, keyed by user id."""
import logging
from typing import Any, Dict, Tuple

from sqlalchemy.exc import SQLAlchemyError

from mock_interview.errors import PersistenceError, RecordNotFoundError
from mock_interview.models.schemas import ResumeData
from mock_interview.models.user_record import User, db

logger = logging.getLogger(__name__)


def _get_user(user_id: int) -> User:
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError as e:
        logger.exception("[DB] lookup of user %s failed", user_id)
        raise PersistenceError(f"Failed to read user {user_id}") from e
    if user is None:
        raise RecordNotFoundError(f"No data found for user {user_id}")
    return user


def _commit(action: str):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("[DB] %s failed", action)
        raise PersistenceError(f"Failed to {action}") from e


def create_user_record(resume: ResumeData, job_description: str) -> int:
    user = User(resume=resume.to_dict(), job_description=job_description)
    db.session.add(user)
    _commit("create user record")
    logger.info("[DB] created user %s", user.id)
    return user.id


def get_resume_data(user_id: int) -> Tuple[ResumeData, str]:
    user = _get_user(user_id)
    return ResumeData.from_payload(user.resume), user.job_description


def update_interview_data(
    user_id: int,
    qas: Dict[str, Any],
    followup_qas: Dict[str, Any],
    results: Dict[str, Any],
):
    user = _get_user(user_id)
    user.qas = qas
    user.followup_qas = followup_qas
    user.results = results
    _commit(f"update interview data for user {user_id}")
    logger.info("[DB] stored interview data for user %s", user_id)


def get_interview_results(user_id: int) -> Dict[str, Any]:
    user = _get_user(user_id)
    if not user.results:
        raise RecordNotFoundError(f"No results found for user {user_id}")
    return user.results
