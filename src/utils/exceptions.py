"""Custom exception classes."""


class ValidationError(Exception):
    """Raised when a record fails validation at a boundary that cannot report inline."""

    def __init__(self, errors):
        self.errors = dict(errors)
        first = next(iter(self.errors.items()), ("", ""))
        super().__init__(f"{len(self.errors)} field(s) invalid, first: {first[0]}: {first[1]}")


class RecordNotFoundError(Exception):
    """Raised when a secret link doesn't resolve to a registration record."""
    pass


class SubmissionError(Exception):
    """Raised when the registration backend rejects or never receives a submission."""
    pass


class AttachmentTooLargeError(Exception):
    """Raised when an attachment exceeds the configured size cap."""
    pass


class InvalidTransitionError(Exception):
    """Raised when the wizard is asked for a phase change it doesn't allow."""
    pass
