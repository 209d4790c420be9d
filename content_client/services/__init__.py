"""
서비스 레이어
워커 호출과 응답 후처리를 담당하는 모듈들
"""
from content_client.services.async_http_client import (
    AsyncHttpClient,
    read_json_response
)
from content_client.services.worker_client import (
    WorkerClient,
    log_rate_limit_notice
)
from content_client.services.question_format import (
    validate_with_model,
    validate_question_format,
    build_question,
    shuffle_options,
    shuffle_question
)
from content_client.services.content_client import ContentClient

__all__ = [
    # HTTP Clients
    "AsyncHttpClient",
    "read_json_response",
    "WorkerClient",
    "log_rate_limit_notice",

    # Question format
    "validate_with_model",
    "validate_question_format",
    "build_question",
    "shuffle_options",
    "shuffle_question",

    # Client
    "ContentClient",
]
