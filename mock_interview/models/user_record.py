from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class User(db.Model):
    """One candidate's upload plus, once finished, their interview data."""
    __tablename__ = "User"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    resume = db.Column(db.JSON, nullable=False)
    job_description = db.Column(db.Text, nullable=False, default="")
    qas = db.Column(db.JSON, nullable=True)
    followup_qas = db.Column(db.JSON, nullable=True)
    results = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
