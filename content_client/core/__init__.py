"""
Core 모듈
설정, 상수, 예외 등 핵심 컴포넌트
"""
from content_client.core.settings import settings, get_settings, validate_required_settings
from content_client.core.constants import (
    WorkerEndpoints,
    ExamTypes,
    QuestionRules,
    QuestionDefaults,
    ResponseFields,
    ErrorCodes,
    ErrorMessages,
    HTTPHeaders,
    Timeouts
)
from content_client.core.exceptions import (
    AppException,
    ConfigurationError,
    ExternalServiceError,
    RequestFailed,
    RateLimitError,
    EmptyResponse,
    MalformedJson,
    InvalidResponseShape,
    ValidationFailed,
    InsufficientValidQuestions,
    ContentGenerationError,
    ExploreContentError,
    PracticeQuestionError,
    ExamQuestionsError,
    StreamContentError
)

__all__ = [
    # Settings
    "settings",
    "get_settings",
    "validate_required_settings",

    # Constants
    "WorkerEndpoints",
    "ExamTypes",
    "QuestionRules",
    "QuestionDefaults",
    "ResponseFields",
    "ErrorCodes",
    "ErrorMessages",
    "HTTPHeaders",
    "Timeouts",

    # Exceptions
    "AppException",
    "ConfigurationError",
    "ExternalServiceError",
    "RequestFailed",
    "RateLimitError",
    "EmptyResponse",
    "MalformedJson",
    "InvalidResponseShape",
    "ValidationFailed",
    "InsufficientValidQuestions",
    "ContentGenerationError",
    "ExploreContentError",
    "PracticeQuestionError",
    "ExamQuestionsError",
    "StreamContentError",
]
