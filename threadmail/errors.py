"""Error taxonomy shared by repositories, the compose session and the HTTP layer."""


class ThreadmailError(Exception):
    """Base class for all application errors."""

    status_code = 500
    public_message = "Something went wrong."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(ThreadmailError):
    """Bad or missing required input. The message is safe to show inline to the operator."""

    status_code = 400
    public_message = "Invalid input."


class SendDisabledError(ValidationError):
    """Send was requested outside single-recipient mode or in production."""

    status_code = 403
    public_message = "Only works on localhost for now"


class NotFoundError(ThreadmailError):
    """No row matches the id (and owner). Never says whether the row exists for someone else."""

    status_code = 404
    public_message = "Not found."


class StoreError(ThreadmailError):
    """Persistence or connection failure."""

    status_code = 500
    public_message = "Failed to access the database."


class NotConfiguredError(ThreadmailError):
    """Required reference data (e.g. the Sent folder) is missing."""

    status_code = 500
    public_message = "Mailbox is not configured."
