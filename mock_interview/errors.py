"""Error taxonomy shared by the services and the HTTP layer."""


class InterviewError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    public_message = "Failed to process interview request"


class ValidationError(InterviewError):
    """Input the caller can correct and resubmit."""

    status_code = 400

    @property
    def public_message(self):
        return str(self)


class GatewayError(InterviewError):
    """The language-model API failed or answered in an unexpected shape."""


class PersistenceError(InterviewError):
    """The user record store rejected a read or write."""

    public_message = "Failed to access interview data"


class RecordNotFoundError(PersistenceError):
    status_code = 404

    @property
    def public_message(self):
        return str(self)
