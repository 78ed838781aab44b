class KStudyError(Exception):
    """Base error for the service. ``status_code`` is what the API layer returns."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(KStudyError):
    status_code = 400


class ConfigurationError(KStudyError):
    status_code = 500


class UpstreamError(KStudyError):
    status_code = 502

    def __init__(self, status=None):
        self.status = status
        super().__init__(f"KRDict error: {status if status is not None else 'unreachable'}")


class InsufficientDataError(KStudyError):
    status_code = 422


class SessionError(KStudyError):
    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class StateNotLoadedError(KStudyError):
    """Raised when a persistent value is written before it was ever read."""
