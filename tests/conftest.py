"""
테스트 공통 설정 및 Fixtures
pytest의 conftest.py는 모든 테스트에서 공유되는 fixture를 정의
"""
import os
import sys
import json
import random
import pytest
from typing import Any, Callable, Dict, List, Optional

import httpx

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

WORKER_URL = "https://worker.test.local/api"


# ===========================================
# 환경 설정
# ===========================================

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """테스트 환경 설정"""
    os.environ["ENV"] = "test"
    os.environ["WORKER_URL"] = WORKER_URL
    yield


@pytest.fixture
def worker_url() -> str:
    return WORKER_URL


# ===========================================
# 사용자/문항 샘플
# ===========================================

@pytest.fixture
def user_context() -> Dict[str, Any]:
    """모의 사용자 프로필"""
    return {
        "age": 17,
        "studyingFor": "JEE",
        "interests": ["physics", "astronomy"],
    }


def make_question_payload(index: int = 0, **overrides) -> Dict[str, Any]:
    """워커가 돌려주는 문항 1개 (유효한 형식)"""
    payload = {
        "text": f"Which quantity is conserved in collision number {index}?",
        "options": [
            f"Linear momentum {index}",
            f"Kinetic energy {index}",
            f"Velocity {index}",
            f"Acceleration {index}",
        ],
        "correctAnswer": 0,
        "explanation": {
            "correct": "Momentum is conserved when no external force acts.",
            "key_point": "Isolated systems conserve momentum.",
        },
        "subtopic": "Collisions",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def question_payload() -> Dict[str, Any]:
    return make_question_payload()


@pytest.fixture
def explore_payload() -> Dict[str, Any]:
    """explore 응답 샘플"""
    return {
        "domain": "Physics",
        "content": {
            "paragraph1": "Light bends when it changes medium.",
            "paragraph2": "This is called refraction.",
            "paragraph3": "Snell's law describes the angle.",
        },
        "relatedTopics": ["Snell's law", "Total internal reflection"],
        "relatedQuestions": ["Why is the sky blue?"],
    }


def make_stream_envelope(text: str) -> Dict[str, Any]:
    """streamExplore 응답 봉투"""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


# ===========================================
# 워커 모킹 (httpx.MockTransport)
# ===========================================

class WorkerStub:
    """
    요청을 기록하고 미리 정한 응답을 돌려주는 워커 대역
    """

    def __init__(self, status_code: int = 200, json_body: Any = None, content: Optional[bytes] = None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.requests: List[httpx.Request] = []
        self.raise_error: Optional[Exception] = None

    def respond(self, status_code: int = 200, json_body: Any = None, content: Optional[bytes] = None):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_error is not None:
            raise self.raise_error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_body(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def worker_stub() -> WorkerStub:
    return WorkerStub()


@pytest.fixture
def make_client(worker_stub, worker_url) -> Callable[..., Any]:
    """ContentClient 생성기 (워커 대역 연결, 시드 고정 rng)"""
    from content_client.services.content_client import ContentClient

    def _make(**kwargs):
        kwargs.setdefault("rng", random.Random(1234))
        kwargs.setdefault("transport", worker_stub.transport)
        return ContentClient(worker_url, **kwargs)

    return _make


# ===========================================
# 유틸리티 Fixtures
# ===========================================

@pytest.fixture
def capture_logs():
    """로그 캡처"""
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

        def get_messages(self):
            return [r.getMessage() for r in self.records]

    handler = LogCapture()
    logger = logging.getLogger()
    logger.addHandler(handler)
    old_level = logger.level
    logger.setLevel(logging.DEBUG)
    yield handler
    logger.setLevel(old_level)
    logger.removeHandler(handler)


# ===========================================
# 비동기 테스트 지원
# ===========================================

@pytest.fixture
def anyio_backend():
    """anyio 백엔드 설정"""
    return "asyncio"


@pytest.fixture
def question_factory() -> Callable[..., Dict[str, Any]]:
    return make_question_payload


@pytest.fixture
def stream_envelope() -> Callable[[str], Dict[str, Any]]:
    return make_stream_envelope
