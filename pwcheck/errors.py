class PasswordEvaluationError(Exception):
    """Base error for the evaluation engine.

    ``code`` is a stable identifier for callers; ``message`` is safe to show
    to end users and never contains the submitted password.
    """

    code = "PROCESSING_ERROR"
    message = "Password could not be evaluated"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class InvalidType(PasswordEvaluationError):
    code = "INVALID_TYPE"
    message = "Password must be a text string"


class EmptyInput(PasswordEvaluationError):
    code = "EMPTY_INPUT"
    message = "Password must not be empty"


class TooLong(PasswordEvaluationError):
    code = "TOO_LONG"
    message = "Password must be at most 1000 characters"


class SecurityInvariantViolation(PasswordEvaluationError):
    """Raised when output would echo the submitted password.

    This always indicates a defect and aborts the response.
    """

    code = "SECURITY_INVARIANT_VIOLATION"
    message = "Response withheld: output failed the password echo check"
