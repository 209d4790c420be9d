"""
비동기 HTTP 클라이언트
워커 호출을 위한 httpx 기반 클라이언트 및 응답 상태 해석
"""
import logging
import math
from typing import Any, Dict, Optional

import httpx

from content_client.core.constants import ResponseFields, Timeouts
from content_client.core.exceptions import (
    EmptyResponse,
    ExternalServiceError,
    MalformedJson,
    RateLimitError,
    RequestFailed,
)

logger = logging.getLogger(__name__)


def _parse_retry_after(response: httpx.Response) -> Optional[int]:
    """429 응답에서 재시도 대기 시간(초, 올림) 추출. 본문 retryAfter 우선, 없으면 Retry-After 헤더."""
    raw: Any = None
    try:
        body = response.json()
        if isinstance(body, dict):
            raw = body.get(ResponseFields.RETRY_AFTER)
    except ValueError:
        logger.debug("429 응답 본문이 JSON이 아님")

    if raw is None:
        raw = response.headers.get("Retry-After")
    if raw is None:
        return None

    try:
        return math.ceil(float(raw))
    except (TypeError, ValueError):
        logger.warning(f"retryAfter 값 해석 불가: {raw!r}")
        return None


def read_json_response(response: httpx.Response) -> Any:
    """
    응답 상태를 하나의 분기로 해석

    - 2xx: JSON 본문 반환 (빈 본문 → EmptyResponse, 파싱 실패 → MalformedJson)
    - 429: RateLimitError (retry_after 포함)
    - 그 외: RequestFailed

    Raises:
        EmptyResponse, MalformedJson, RateLimitError, RequestFailed
    """
    status = response.status_code

    if response.is_success:
        if not response.content or not response.content.strip():
            raise EmptyResponse()
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"JSON 파싱 오류: {e}")
            raise MalformedJson(raw_text=response.text) from e

    if status == httpx.codes.TOO_MANY_REQUESTS:
        raise RateLimitError(retry_after=_parse_retry_after(response))

    logger.error(f"HTTP 오류: {status}")
    raise RequestFailed(status_code=status)


class AsyncHttpClient:
    """
    비동기 HTTP 클라이언트
    httpx 기반으로 비동기 HTTP 요청 처리
    """

    def __init__(
        self,
        timeout: float = Timeouts.WORKER_API,
        verify_ssl: bool = True,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.base_url = base_url
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """클라이언트 인스턴스 반환 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                verify=self.verify_ssl,
                base_url=self.base_url or "",
                transport=self.transport
            )
        return self._client

    async def close(self):
        """클라이언트 연결 종료"""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def post_raw(
        self,
        url: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> httpx.Response:
        """
        POST 요청 (상태 코드 해석 없이 응답 그대로 반환)

        Raises:
            ExternalServiceError: 연결 실패, 타임아웃 등 전송 오류
        """
        client = await self._get_client()
        try:
            return await client.post(
                url,
                json=json,
                headers=headers,
                **kwargs
            )
        except httpx.RequestError as e:
            logger.error(f"요청 오류: {e}")
            raise ExternalServiceError(
                service="HTTP",
                message="request failed",
                original_error=e
            ) from e

    async def post(
        self,
        url: str,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs
    ) -> Any:
        """
        POST 요청

        Args:
            url: 요청 URL
            json: JSON 바디
            headers: HTTP 헤더

        Returns:
            JSON 응답
        """
        response = await self.post_raw(url, json=json, headers=headers, **kwargs)
        return read_json_response(response)
