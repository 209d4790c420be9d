"""
WorkerClient / AsyncHttpClient 테스트
봉투 요청, 상태 코드 해석, 요청 제한 알림
"""
import json
import pytest
import httpx
from unittest.mock import AsyncMock, Mock

from content_client.core.exceptions import (
    ConfigurationError,
    EmptyResponse,
    ExternalServiceError,
    MalformedJson,
    RateLimitError,
    RequestFailed,
)
from content_client.services.async_http_client import AsyncHttpClient, read_json_response
from content_client.services.worker_client import WorkerClient


def _response(status_code, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", "https://worker"), **kwargs)


class TestReadJsonResponse:
    """응답 상태 해석 테스트"""

    def test_success_returns_json(self):
        """2xx 는 JSON 반환"""
        assert read_json_response(_response(200, json={"ok": True})) == {"ok": True}

    def test_success_any_2xx(self):
        """201 도 성공"""
        assert read_json_response(_response(201, json=[1, 2])) == [1, 2]

    def test_empty_body(self):
        """빈 본문"""
        with pytest.raises(EmptyResponse):
            read_json_response(_response(200, content=b""))

    def test_whitespace_body(self):
        """공백만 있는 본문"""
        with pytest.raises(EmptyResponse):
            read_json_response(_response(200, content=b"   \n"))

    def test_malformed_json(self):
        """JSON 이 아닌 본문"""
        with pytest.raises(MalformedJson) as exc_info:
            read_json_response(_response(200, content=b"<html>oops</html>"))
        assert exc_info.value.raw_text == "<html>oops</html>"

    @pytest.mark.parametrize("status", [400, 401, 404, 500, 502, 503])
    def test_non_success_status(self, status):
        """2xx 이외는 RequestFailed"""
        with pytest.raises(RequestFailed) as exc_info:
            read_json_response(_response(status, json={"error": "x"}))
        assert exc_info.value.status_code == status
        assert not isinstance(exc_info.value, RateLimitError)

    def test_rate_limited_rounds_up(self):
        """429: retryAfter 올림"""
        with pytest.raises(RateLimitError) as exc_info:
            read_json_response(_response(429, json={"retryAfter": 12.2}))
        assert exc_info.value.retry_after == 13
        assert exc_info.value.status_code == 429
        assert isinstance(exc_info.value, RequestFailed)

    def test_rate_limited_header_fallback(self):
        """본문에 값이 없으면 Retry-After 헤더"""
        with pytest.raises(RateLimitError) as exc_info:
            read_json_response(_response(429, content=b"slow down", headers={"Retry-After": "4"}))
        assert exc_info.value.retry_after == 4

    def test_rate_limited_without_hint(self):
        """대기 시간 정보가 없으면 None"""
        with pytest.raises(RateLimitError) as exc_info:
            read_json_response(_response(429, json={"error": "limit"}))
        assert exc_info.value.retry_after is None


class TestAsyncHttpClient:
    """AsyncHttpClient 테스트"""

    @pytest.mark.anyio
    async def test_post_returns_json(self):
        """POST 성공"""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"value": 1}))
        client = AsyncHttpClient(transport=transport)
        try:
            assert await client.post("https://worker", json={"a": 1}) == {"value": 1}
        finally:
            await client.close()

    @pytest.mark.anyio
    async def test_transport_error(self):
        """연결 실패는 ExternalServiceError"""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = AsyncHttpClient(transport=httpx.MockTransport(handler))
        try:
            with pytest.raises(ExternalServiceError) as exc_info:
                await client.post("https://worker", json={})
            assert "connection refused" in exc_info.value.details["original_error"]
        finally:
            await client.close()

    @pytest.mark.anyio
    async def test_client_recreated_after_close(self):
        """close 후 재사용 시 새 클라이언트"""
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={}))
        client = AsyncHttpClient(transport=transport)
        first = await client._get_client()
        await client.close()
        second = await client._get_client()
        assert first is not second
        await client.close()


class TestWorkerClientInit:
    """WorkerClient 초기화 테스트"""

    def test_requires_url(self):
        """URL 누락 시 ConfigurationError"""
        with pytest.raises(ConfigurationError) as exc_info:
            WorkerClient("")
        assert exc_info.value.details["missing"] == ["WORKER_URL"]


class TestWorkerRequest:
    """봉투 요청 테스트"""

    @pytest.mark.anyio
    async def test_envelope_shape(self, worker_stub, worker_url):
        """{endpoint, payload} POST + JSON 헤더"""
        worker_stub.respond(200, {"result": "ok"})
        client = WorkerClient(worker_url, transport=worker_stub.transport)

        result = await client.request("explore", {"query": "gravity"})
        await client.close()

        assert result == {"result": "ok"}
        request = worker_stub.requests[0]
        assert request.method == "POST"
        assert str(request.url) == worker_url
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {
            "endpoint": "explore",
            "payload": {"query": "gravity"},
        }

    @pytest.mark.anyio
    async def test_request_failed_carries_status(self, worker_stub, worker_url):
        """500 → RequestFailed(endpoint 포함)"""
        worker_stub.respond(500, {"error": "boom"})
        client = WorkerClient(worker_url, transport=worker_stub.transport)

        with pytest.raises(RequestFailed) as exc_info:
            await client.request("test", {})
        await client.close()

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["endpoint"] == "test"

    @pytest.mark.anyio
    async def test_rate_limit_notifies_then_raises(self, worker_stub, worker_url):
        """429 → 알림 호출 후 RateLimitError"""
        worker_stub.respond(429, {"retryAfter": 29.1})
        notifier = Mock()
        client = WorkerClient(worker_url, transport=worker_stub.transport, on_rate_limit=notifier)

        with pytest.raises(RateLimitError) as exc_info:
            await client.request("playground", {})
        await client.close()

        notifier.assert_called_once_with(30)
        assert exc_info.value.retry_after == 30
        assert exc_info.value.details["endpoint"] == "playground"

    @pytest.mark.anyio
    async def test_async_rate_limit_notifier(self, worker_stub, worker_url):
        """비동기 알림 콜백도 await"""
        worker_stub.respond(429, {"retryAfter": 1})
        notifier = AsyncMock()
        client = WorkerClient(worker_url, transport=worker_stub.transport, on_rate_limit=notifier)

        with pytest.raises(RateLimitError):
            await client.request("explore", {})
        await client.close()

        notifier.assert_awaited_once_with(1)

    @pytest.mark.anyio
    async def test_default_notifier_logs_warning(self, worker_stub, worker_url, capture_logs):
        """기본 알림은 경고 로그"""
        worker_stub.respond(429, {"retryAfter": 5})
        client = WorkerClient(worker_url, transport=worker_stub.transport)

        with pytest.raises(RateLimitError):
            await client.request("explore", {})
        await client.close()

        assert "Too many requests. Please try again in 5 seconds" in capture_logs.get_messages()

    @pytest.mark.anyio
    async def test_no_notification_on_other_errors(self, worker_stub, worker_url):
        """429 이외의 실패에는 알림 없음"""
        worker_stub.respond(503, {})
        notifier = Mock()
        client = WorkerClient(worker_url, transport=worker_stub.transport, on_rate_limit=notifier)

        with pytest.raises(RequestFailed):
            await client.request("explore", {})
        await client.close()

        notifier.assert_not_called()

    @pytest.mark.anyio
    async def test_request_logged(self, worker_stub, worker_url, capture_logs):
        """요청 1건당 로그 1줄"""
        worker_stub.respond(200, {"x": 1})
        client = WorkerClient(worker_url, transport=worker_stub.transport)

        await client.request("explore", {})
        await client.close()

        records = [r for r in capture_logs.records if getattr(r, "endpoint", None) == "explore"]
        assert len(records) == 1
        assert records[0].status == 200
