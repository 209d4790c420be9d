"""
워커 API 클라이언트
{endpoint, payload} 봉투 요청과 요청 제한(429) 알림 처리
"""
import inspect
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from content_client.core.constants import ErrorMessages, HTTPHeaders, Timeouts
from content_client.core.exceptions import (
    AppException,
    ConfigurationError,
    RateLimitError,
    RequestFailed,
)
from content_client.core.logging import log_request
from content_client.services.async_http_client import AsyncHttpClient, read_json_response

logger = logging.getLogger(__name__)

RateLimitNotifier = Callable[[Optional[int]], Any]


async def maybe_await(value: Any) -> Any:
    """동기/비동기 콜백 결과를 모두 허용"""
    if inspect.isawaitable(value):
        return await value
    return value


def log_rate_limit_notice(retry_after: Optional[int]) -> None:
    """기본 요청 제한 알림: 경고 로그"""
    logger.warning(
        ErrorMessages.RATE_LIMITED.format(seconds=retry_after),
        extra={"retry_after": retry_after}
    )


class WorkerClient:
    """
    워커 전용 클라이언트
    모든 요청은 단일 URL로 POST 되며 본문은 {"endpoint": ..., "payload": ...}
    """

    def __init__(
        self,
        worker_url: str,
        timeout: float = Timeouts.WORKER_API,
        verify_ssl: bool = True,
        on_rate_limit: Optional[RateLimitNotifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not worker_url:
            raise ConfigurationError("worker URL is required", missing=["WORKER_URL"])
        self.worker_url = worker_url
        self.timeout = timeout
        self.on_rate_limit = on_rate_limit or log_rate_limit_notice
        self._client = AsyncHttpClient(
            timeout=timeout,
            verify_ssl=verify_ssl,
            transport=transport
        )

    def _get_headers(self) -> Dict[str, str]:
        """공통 헤더 반환"""
        return {HTTPHeaders.CONTENT_TYPE: HTTPHeaders.JSON_CONTENT}

    async def request(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        """
        워커 POST 요청

        Args:
            endpoint: 워커 endpoint 이름 (예: "explore")
            payload: 요청 payload (JSON 직렬화 가능)

        Returns:
            파싱된 JSON 응답

        Raises:
            RateLimitError: 429 (알림 후 발생)
            RequestFailed: 그 외 2xx 이외 상태
            EmptyResponse / MalformedJson: 본문 해석 실패
            ExternalServiceError: 전송 오류
        """
        envelope = {"endpoint": endpoint, "payload": payload}
        start = time.perf_counter()
        status: Optional[int] = None

        try:
            logger.debug(f"워커 요청: {endpoint}")
            response = await self._client.post_raw(
                self.worker_url,
                json=envelope,
                headers=self._get_headers()
            )
            status = response.status_code
            data = read_json_response(response)
        except RateLimitError as e:
            e.details["endpoint"] = endpoint
            log_request(logger, endpoint, status, self._elapsed_ms(start), error=e.code)
            await maybe_await(self.on_rate_limit(e.retry_after))
            raise
        except RequestFailed as e:
            e.details["endpoint"] = endpoint
            log_request(logger, endpoint, status, self._elapsed_ms(start), error=e.code)
            raise
        except AppException as e:
            log_request(logger, endpoint, status, self._elapsed_ms(start), error=e.code)
            raise

        log_request(logger, endpoint, status, self._elapsed_ms(start))
        return data

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.perf_counter() - start) * 1000)

    async def close(self):
        """클라이언트 종료"""
        await self._client.close()
