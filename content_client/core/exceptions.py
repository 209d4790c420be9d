"""
커스텀 예외 클래스 정의
일관된 에러 처리를 위한 예외 계층 구조
"""
from typing import Any, Dict, Optional

from content_client.core.constants import ErrorCodes, ErrorMessages


class AppException(Exception):
    """
    기본 애플리케이션 예외
    모든 커스텀 예외의 베이스 클래스
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(AppException):
    """설정 누락/오류"""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(
            code=ErrorCodes.CONFIGURATION_ERROR,
            message=message,
            details={"missing": missing} if missing else None
        )


# ===========================================
# 외부 서비스 관련 예외
# ===========================================

class ExternalServiceError(AppException):
    """외부 서비스 호출 실패 (연결 오류, 타임아웃 등)"""

    def __init__(
        self,
        service: str,
        message: str,
        original_error: Optional[Exception] = None,
        code: str = ErrorCodes.EXTERNAL_SERVICE_ERROR
    ):
        msg = f"{service} service error: {message}"
        details = {"service": service}
        if original_error:
            details["original_error"] = str(original_error)

        super().__init__(code=code, message=msg, details=details)


class RequestFailed(ExternalServiceError):
    """2xx 이외의 HTTP 응답"""

    def __init__(
        self,
        status_code: int,
        endpoint: Optional[str] = None,
        code: str = ErrorCodes.REQUEST_FAILED
    ):
        super().__init__(
            service="Worker",
            message=f"API request failed: {status_code}",
            code=code
        )
        self.status_code = status_code
        self.details["status_code"] = status_code
        if endpoint:
            self.details["endpoint"] = endpoint


class RateLimitError(RequestFailed):
    """요청 제한 초과 (429)"""

    def __init__(
        self,
        retry_after: Optional[int] = None,
        endpoint: Optional[str] = None
    ):
        super().__init__(
            status_code=429,
            endpoint=endpoint,
            code=ErrorCodes.RATE_LIMIT_EXCEEDED
        )
        self.retry_after = retry_after
        if retry_after is not None:
            self.details["retry_after"] = retry_after


# ===========================================
# 응답 해석 관련 예외
# ===========================================

class EmptyResponse(AppException):
    """응답 본문이 비어 있음"""

    def __init__(self, message: str = ErrorMessages.EMPTY_RESPONSE):
        super().__init__(code=ErrorCodes.EMPTY_RESPONSE, message=message)


class MalformedJson(AppException):
    """JSON 파싱 실패"""

    def __init__(
        self,
        message: str = ErrorMessages.MALFORMED_JSON,
        raw_text: Optional[str] = None
    ):
        details = {}
        if raw_text:
            details["raw_text"] = raw_text[:300]
        super().__init__(code=ErrorCodes.MALFORMED_JSON, message=message, details=details)
        self.raw_text = raw_text


class InvalidResponseShape(AppException):
    """필수 필드 누락"""

    def __init__(
        self,
        message: str = ErrorMessages.INVALID_RESPONSE_SHAPE,
        missing: Optional[str] = None
    ):
        super().__init__(
            code=ErrorCodes.INVALID_RESPONSE_SHAPE,
            message=message,
            details={"missing": missing} if missing else None
        )


# ===========================================
# 문항 검증 관련 예외
# ===========================================

class ValidationFailed(AppException):
    """문항 형식 검증 실패"""

    def __init__(
        self,
        message: str = ErrorMessages.VALIDATION_FAILED,
        details: Optional[Dict[str, Any]] = None,
        code: str = ErrorCodes.VALIDATION_FAILED
    ):
        super().__init__(code=code, message=message, details=details)


class InsufficientValidQuestions(ValidationFailed):
    """배치 내 유효 문항 수 부족"""

    def __init__(self, count: int):
        super().__init__(
            message=f"Only {count} valid questions generated",
            details={"valid_count": count},
            code=ErrorCodes.INSUFFICIENT_VALID_QUESTIONS
        )
        self.count = count


# ===========================================
# 공개 작업 단위 예외
# ===========================================

class ContentGenerationError(AppException):
    """콘텐츠 생성 실패 (작업 단위 최상위 예외)"""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if isinstance(original_error, AppException):
            details["cause_code"] = original_error.code

        super().__init__(
            code=ErrorCodes.CONTENT_GENERATION_FAILED,
            message=message,
            details=details
        )


class ExploreContentError(ContentGenerationError):
    """탐색 콘텐츠 생성 실패"""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__(
            message=ErrorMessages.EXPLORE_FAILED,
            operation="explore",
            original_error=original_error
        )


class PracticeQuestionError(ContentGenerationError):
    """연습 문항 생성 실패"""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__(
            message=ErrorMessages.PLAYGROUND_FAILED,
            operation="playground",
            original_error=original_error
        )


class ExamQuestionsError(ContentGenerationError):
    """시험 문항 배치 생성 실패 (원인 메시지를 함께 노출)"""

    def __init__(self, original_error: Optional[Exception] = None):
        reason = str(original_error) if original_error else "Unknown error"
        super().__init__(
            message=f"{ErrorMessages.TEST_FAILED}: {reason}",
            operation="test",
            original_error=original_error
        )
        if isinstance(original_error, InsufficientValidQuestions):
            self.details["valid_count"] = original_error.count


class StreamContentError(ContentGenerationError):
    """스트리밍 탐색 콘텐츠 실패"""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__(
            message=ErrorMessages.STREAM_FAILED,
            operation="streamExplore",
            original_error=original_error
        )
