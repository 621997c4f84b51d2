class TutorError(Exception):
    """Base exception for all tutor errors"""
    pass

class ValidationError(TutorError):
    """Raised when an inbound chat message fails validation"""
    pass

class ConfigurationError(TutorError):
    """Raised when configuration is invalid"""
    pass

class AnalysisError(TutorError):
    """Raised when heuristic speech analysis fails"""
    pass

class APIError(TutorError):
    """Raised when a completion API attempt fails"""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code

class RateLimitedError(APIError):
    """Raised when the completion API answers 429"""

    def __init__(self, message, retry_after=None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after
