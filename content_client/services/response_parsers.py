# content_client/services/response_parsers.py
from __future__ import annotations

import json
import logging
import math
import random
from typing import Any, Dict, List, Optional

from content_client.core.constants import QuestionDefaults, QuestionRules, ResponseFields
from content_client.core.exceptions import EmptyResponse, InvalidResponseShape, MalformedJson
from content_client.schemas.context import to_text
from content_client.schemas.explore import ExploreResponse, RelatedQuestion, RelatedTopic, StreamChunk
from content_client.services.question_format import shuffle_options

logger = logging.getLogger(__name__)


def is_present(value: Any) -> bool:
    """
    워커 JSON 필드의 "값 있음" 판정.
    None / False / "" / 0 / NaN 만 비어 있는 값으로 본다 (빈 dict/list 는 값 있음).
    """
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def _or(value: Any, default: Any) -> Any:
    return value if is_present(value) else default


def _text_or(value: Any, default: str) -> str:
    """비어 있지 않은 문자열만 채택"""
    return value if isinstance(value, str) and value else default


def coerce_json_content(content: Any) -> Any:
    """
    워커 응답 본문 정규화
    - 비어 있으면 EmptyResponse
    - 문자열이면 한 번 더 JSON 파싱 (실패 시 MalformedJson)
    """
    if not is_present(content):
        raise EmptyResponse()
    if isinstance(content, str):
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"JSON Parse Error: {e}")
            raise MalformedJson(raw_text=content) from e
    return content


# ===========================================
# explore
# ===========================================

def parse_explore_response(data: Any) -> ExploreResponse:
    """domain + content.paragraph1~3 필수. 문단은 빈 줄로 연결, 관련 항목은 최대 5개."""
    if not isinstance(data, dict) or not is_present(data.get(ResponseFields.DOMAIN)):
        raise InvalidResponseShape(missing=ResponseFields.DOMAIN)

    content = data.get(ResponseFields.CONTENT)
    if not isinstance(content, dict):
        raise InvalidResponseShape(missing=ResponseFields.CONTENT)

    paragraphs = []
    for key in ResponseFields.PARAGRAPHS:
        value = content.get(key)
        if not is_present(value):
            raise InvalidResponseShape(missing=f"{ResponseFields.CONTENT}.{key}")
        paragraphs.append(to_text(value))

    return ExploreResponse(
        content=ResponseFields.PARAGRAPH_JOINER.join(paragraphs),
        related_topics=_take_list(data.get(ResponseFields.RELATED_TOPICS)),
        related_questions=_take_list(data.get(ResponseFields.RELATED_QUESTIONS)),
    )


def _take_list(value: Any, limit: int = QuestionRules.MAX_RELATED_ITEMS) -> List[Any]:
    return list(value[:limit]) if isinstance(value, list) else []


# ===========================================
# playground
# ===========================================

def build_playground_candidate(
    data: Any,
    *,
    topic: str,
    level: int,
    age_group: str,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """
    연습 문항 후보(dict) 생성
    1) 보기 셔플 + 정답 인덱스 보정
    2) 누락 필드 기본값 채움 (검증은 호출 측에서)
    """
    if not isinstance(data, dict):
        raise InvalidResponseShape(missing="question")
    raw_options = data.get("options")
    if not isinstance(raw_options, list):
        raise InvalidResponseShape(missing="options")

    options, correct = shuffle_options(raw_options, data.get("correctAnswer"), rng=rng)

    explanation = data.get("explanation")
    if not isinstance(explanation, dict):
        explanation = {}

    return {
        "text": _or(data.get("text"), ""),
        "options": options,
        "correctAnswer": correct,
        "explanation": {
            "correct": _or(explanation.get("correct"), QuestionDefaults.EXPLANATION_CORRECT),
            "key_point": _or(explanation.get("key_point"), QuestionDefaults.EXPLANATION_KEY_POINT),
        },
        "difficulty": level,
        "topic": topic,
        "subtopic": _text_or(data.get("subtopic"), topic),
        "questionType": QuestionDefaults.QUESTION_TYPE,
        "ageGroup": age_group,
    }


# ===========================================
# test (시험 문항 배치)
# ===========================================

def _coerce_correct_answer(value: Any) -> Any:
    """숫자면 그대로(정수형 실수는 int), 숫자가 아니면 0"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def difficulty_for_index(index: int) -> int:
    return index // QuestionRules.QUESTIONS_PER_DIFFICULTY + 1


def map_test_questions(data: Any, *, topic: str, exam_type: str) -> List[Dict[str, Any]]:
    """questions 배열의 각 항목을 문항 후보(dict)로 변환. 순서 유지."""
    questions = data.get(ResponseFields.QUESTIONS) if isinstance(data, dict) else None
    if not isinstance(questions, list):
        logger.error(f"Invalid response structure: {str(data)[:300]}")
        raise InvalidResponseShape(missing=ResponseFields.QUESTIONS)

    candidates = []
    for index, q in enumerate(questions):
        if not isinstance(q, dict):
            q = {}
        options = q.get("options")
        candidates.append({
            "text": _or(q.get("text"), ""),
            "options": options if isinstance(options, list) else [],
            "correctAnswer": _coerce_correct_answer(q.get("correctAnswer")),
            "explanation": _or(q.get("explanation"), ""),
            "difficulty": difficulty_for_index(index),
            "topic": topic,
            "subtopic": _text_or(q.get("subtopic"), QuestionDefaults.subtopic(topic, index)),
            "examType": exam_type,
            "questionType": QuestionDefaults.QUESTION_TYPE,
            "ageGroup": QuestionDefaults.EXAM_AGE_GROUP,
        })
    return candidates


# ===========================================
# streamExplore
# ===========================================

def _extract_candidate_text(data: Any) -> Optional[str]:
    """
    candidates[0].content.parts[0].text 추출
    - 봉투 모양이 다르면 None (콜백 없이 정상 종료)
    - parts는 있는데 텍스트가 없으면 InvalidResponseShape
    """
    if not isinstance(data, dict):
        return None
    candidates = data.get(ResponseFields.CANDIDATES)
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not is_present(parts):
        return None

    part = parts[0] if isinstance(parts, list) and parts else None
    text = part.get("text") if isinstance(part, dict) else None
    if not isinstance(text, str):
        raise InvalidResponseShape(missing="candidates[0].content.parts[0].text")
    return text


def _field(item: Any, key: str) -> Any:
    # null 항목은 목록 전체를 무효로 만든다
    if item is None:
        raise TypeError(f"Cannot read '{key}' of null entry")
    return item.get(key) if isinstance(item, dict) else None


def parse_stream_text(content: str) -> StreamChunk:
    """
    "본문---{json}" 형식 분리
    JSON 부분 파싱 실패는 로그만 남기고 무시한다.
    topics 에 null 항목이 있으면 topics/questions 모두 비우고,
    questions 에만 있으면 questions 만 비운다.
    """
    pieces = [part.strip() for part in content.split(ResponseFields.STREAM_SEPARATOR)]
    text = pieces[0]
    json_str = pieces[1] if len(pieces) > 1 else ""

    topics: List[RelatedTopic] = []
    questions: List[RelatedQuestion] = []

    if json_str:
        try:
            parsed = json.loads(json_str)

            if isinstance(parsed, dict):
                if isinstance(parsed.get("topics"), list):
                    topics = [
                        RelatedTopic(
                            topic=_field(t, "name"),
                            type=_field(t, "type"),
                            reason=_field(t, "detail"),
                        )
                        for t in parsed["topics"]
                    ]
                if isinstance(parsed.get("questions"), list):
                    questions = [
                        RelatedQuestion(
                            question=_field(q, "text"),
                            type=_field(q, "type"),
                            context=_field(q, "detail"),
                        )
                        for q in parsed["questions"]
                    ]
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"JSON parse error: {e}")

    return StreamChunk(
        text=text,
        topics=topics or None,
        questions=questions or None,
    )


def parse_stream_envelope(data: Any) -> Optional[StreamChunk]:
    """봉투 모양이 예상과 다르면 None"""
    content = _extract_candidate_text(data)
    if content is None:
        logger.warning("streamExplore 응답에 candidates 없음: 콜백 생략")
        return None
    return parse_stream_text(content)
