"""Résumé upload handling: PDF text, page count and document info."""
import io
import logging

import PyPDF2
from PyPDF2.errors import PdfReadError

from mock_interview.errors import ValidationError
from mock_interview.models.schemas import ResumeData

logger = logging.getLogger(__name__)


def is_pdf(data: bytes, filename: str = "", mimetype: str = "") -> bool:
    if mimetype == "application/pdf" or (filename or "").lower().endswith(".pdf"):
        return True
    return data[:5] == b"%PDF-"


def extract_resume(data: bytes) -> ResumeData:
    try:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        pages = [p.extract_text() or "" for p in reader.pages]
        meta = reader.metadata
    except PdfReadError as e:
        logger.warning("[PDF] unreadable upload: %s", e)
        raise ValidationError("Could not read the uploaded PDF") from e

    info = {}
    if meta:
        # Keys look like "/Author"; values may be PDF objects.
        info = {str(k).lstrip("/"): str(v) for k, v in meta.items()}
    return ResumeData(text="\n".join(pages).strip(), page_count=len(pages), metadata=info)


def validate_upload(resume_file, job_description: str):
    """Same checks, same wording, as the upload form."""
    if not (job_description or "").strip():
        raise ValidationError("Please enter a job description")
    if resume_file is None or not getattr(resume_file, "filename", ""):
        raise ValidationError("Please upload a PDF resume")
    head = resume_file.stream.read(5)
    resume_file.stream.seek(0)
    if not is_pdf(head, resume_file.filename, resume_file.mimetype):
        raise ValidationError("Please upload a PDF document only")
