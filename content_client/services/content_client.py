"""
콘텐츠 생성 클라이언트
워커를 통해 탐색 콘텐츠/연습 문항/시험 문항을 요청하고 응답을 도메인 객체로 변환
"""
import logging
import random
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Union

import httpx

from content_client.core.constants import ExamTypes, QuestionRules, Timeouts, WorkerEndpoints
from content_client.core.exceptions import (
    ConfigurationError,
    ExamQuestionsError,
    ExploreContentError,
    InsufficientValidQuestions,
    PracticeQuestionError,
    StreamContentError,
    ValidationFailed,
)
from content_client.core.settings import BaseConfig, settings as default_settings
from content_client.schemas.context import ChatMessage, ChatMessageLike, UserContext, UserContextLike
from content_client.schemas.explore import ExploreResponse, StreamChunk
from content_client.schemas.question import ExamType, Question
from content_client.services.question_format import build_question, validate_with_model
from content_client.services.response_parsers import (
    build_playground_candidate,
    coerce_json_content,
    map_test_questions,
    parse_explore_response,
    parse_stream_envelope,
)
from content_client.services.worker_client import RateLimitNotifier, WorkerClient, maybe_await

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[StreamChunk], Union[None, Awaitable[None]]]


class ContentClient:
    """
    콘텐츠 생성 클라이언트

    사용 예:
        async with ContentClient("https://worker.example.dev") as client:
            question = await client.get_playground_question("Optics", 2, {"age": 17})

    - 모든 공개 메서드는 내부 오류를 잡아 작업 단위 예외로 다시 발생시킨다 (원인은 __cause__).
    - rng를 주면 보기 셔플을 재현할 수 있다.
    """

    def __init__(
        self,
        worker_url: str,
        *,
        timeout: float = Timeouts.WORKER_API,
        verify_ssl: bool = True,
        rng: Optional[random.Random] = None,
        on_rate_limit: Optional[RateLimitNotifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self._worker = WorkerClient(
            worker_url,
            timeout=timeout,
            verify_ssl=verify_ssl,
            on_rate_limit=on_rate_limit,
            transport=transport
        )
        self._rng = rng or random.Random()

    @classmethod
    def from_settings(cls, config: Optional[BaseConfig] = None, **kwargs) -> "ContentClient":
        """설정(WORKER_URL, REQUEST_TIMEOUT_MS, VERIFY_SSL)으로 생성"""
        config = config or default_settings
        if not config.WORKER_URL:
            raise ConfigurationError("WORKER_URL is not configured", missing=["WORKER_URL"])
        return cls(
            config.WORKER_URL,
            timeout=config.request_timeout_s,
            verify_ssl=config.VERIFY_SSL,
            **kwargs
        )

    @property
    def worker_url(self) -> str:
        return self._worker.worker_url

    async def close(self):
        await self._worker.close()

    async def __aenter__(self) -> "ContentClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # ===========================================
    # 탐색 콘텐츠
    # ===========================================

    async def get_explore_content(self, query: str, user_context: UserContextLike) -> ExploreResponse:
        try:
            context = _as_user_context(user_context)
            content = await self._worker.request(
                WorkerEndpoints.EXPLORE,
                {"query": query, "userContext": context.to_payload()}
            )
            return parse_explore_response(coerce_json_content(content))
        except Exception as e:
            logger.error(f"Explore content error: {e}", exc_info=True)
            raise ExploreContentError(original_error=e) from e

    # ===========================================
    # 연습 문항 (1개)
    # ===========================================

    async def get_playground_question(
        self,
        topic: str,
        level: int,
        user_context: UserContextLike
    ) -> Question:
        try:
            context = _as_user_context(user_context)
            content = await self._worker.request(
                WorkerEndpoints.PLAYGROUND,
                {"topic": topic, "level": level, "userContext": context.to_payload()}
            )
            candidate = build_playground_candidate(
                coerce_json_content(content),
                topic=topic,
                level=level,
                age_group=context.age_group,
                rng=self._rng
            )

            question = build_question(candidate)
            if question is not None:
                return question

            _, errors = validate_with_model(Question, candidate)
            raise ValidationFailed(details={"errors": errors})
        except Exception as e:
            logger.error(f"Question generation error: {e}", exc_info=True)
            raise PracticeQuestionError(original_error=e) from e

    # ===========================================
    # 시험 문항 (배치)
    # ===========================================

    async def get_test_questions(self, topic: str, exam_type: ExamType) -> List[Question]:
        """
        시험 문항 5~15개 반환
        - i번째 문항 난이도 = i // 5 + 1
        - 형식 검증을 통과하지 못한 문항은 버림
        - 유효 문항이 5개 미만이면 실패 (원인 메시지 노출)
        """
        try:
            if exam_type not in ExamTypes.ALL:
                raise ValidationFailed(
                    message=f"Unsupported exam type: {exam_type}",
                    details={"exam_type": exam_type}
                )

            content = await self._worker.request(
                WorkerEndpoints.TEST,
                {"topic": topic, "examType": exam_type}
            )
            candidates = map_test_questions(
                coerce_json_content(content),
                topic=topic,
                exam_type=exam_type
            )
            valid = [q for q in (build_question(c) for c in candidates) if q is not None]
            logger.info(f"시험 문항 검증: {len(valid)}/{len(candidates)} 유효")

            if len(valid) >= QuestionRules.MIN_VALID_QUESTIONS:
                return valid[:QuestionRules.MAX_TEST_QUESTIONS]

            raise InsufficientValidQuestions(len(valid))
        except Exception as e:
            logger.error(f"Test generation error: {e}", exc_info=True)
            raise ExamQuestionsError(original_error=e) from e

    # ===========================================
    # 스트리밍 탐색 (단일 응답)
    # ===========================================

    async def stream_explore_content(
        self,
        query: str,
        user_context: UserContextLike,
        chat_history: Sequence[ChatMessageLike],
        on_chunk: ChunkCallback
    ) -> None:
        """
        응답은 한 번에 도착하며 on_chunk는 최대 1회 호출된다.
        candidates 봉투가 없으면 콜백 없이 정상 종료한다.
        """
        try:
            context = _as_user_context(user_context)
            data = await self._worker.request(
                WorkerEndpoints.STREAM_EXPLORE,
                {
                    "query": query,
                    "userContext": context.to_payload(),
                    "chatHistory": [_as_chat_message(m).to_payload() for m in chat_history],
                }
            )

            chunk = parse_stream_envelope(data)
            if chunk is not None:
                await maybe_await(on_chunk(chunk))
        except Exception as e:
            logger.error(f"Stream error: {e}", exc_info=True)
            raise StreamContentError(original_error=e) from e


def _as_user_context(value: Any) -> UserContext:
    if isinstance(value, UserContext):
        return value
    return UserContext.model_validate(value)


def _as_chat_message(value: Any) -> ChatMessage:
    if isinstance(value, ChatMessage):
        return value
    return ChatMessage.model_validate(value)
