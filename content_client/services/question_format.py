# content_client/services/question_format.py
from __future__ import annotations

import logging
import random
from typing import Any, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ValidationError

from content_client.schemas.question import Question, QuestionFormat

logger = logging.getLogger(__name__)


def validate_with_model(model_cls, data):
    try:
        model_cls.model_validate(data)  # pydantic v2
        return True, None
    except ValidationError as e:
        return False, e.errors()


def validate_question_format(question: Any) -> bool:
    """
    문항 형식 검증 (예외 없이 True/False만 반환).
    Question 인스턴스, dict 후보 모두 허용.
    """
    try:
        data = question
        if isinstance(question, BaseModel):
            data = question.model_dump(by_alias=True)
        ok, errors = validate_with_model(QuestionFormat, data)
        if not ok:
            logger.debug(f"문항 형식 검증 실패: {errors}")
        return ok
    except Exception as e:
        logger.error(f"Validation error: {e}")
        return False


def build_question(candidate: Any) -> Optional[Question]:
    """
    형식 검증을 통과한 후보로 Question 생성.
    형식 또는 메타데이터(subtopic 등)가 맞지 않으면 None.
    """
    if not validate_question_format(candidate):
        return None
    try:
        return Question.model_validate(candidate)
    except ValidationError as e:
        logger.debug(f"문항 메타데이터 검증 실패: {e.errors()}")
        return None


def shuffle_options(
    options: Sequence[Any],
    correct_answer: Any,
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[List[Any], int]:
    """
    보기 순서를 Fisher-Yates로 섞고 정답 인덱스를 다시 계산한다.
    - 입력 시퀀스는 변경하지 않는다.
    - 정답 표시가 어느 보기에도 해당하지 않으면 -1 을 돌려준다.
    - rng를 주면 재현 가능한 셔플(시드 고정)이 가능하다.
    """
    r = rng or random
    if isinstance(correct_answer, bool):
        correct_answer = None
    tagged = [(opt, idx == correct_answer) for idx, opt in enumerate(options)]

    for i in range(len(tagged) - 1, 0, -1):
        j = r.randrange(i + 1)
        tagged[i], tagged[j] = tagged[j], tagged[i]

    new_correct = next((pos for pos, (_, is_correct) in enumerate(tagged) if is_correct), -1)
    return [opt for opt, _ in tagged], new_correct


def shuffle_question(question: Question, *, rng: Optional[random.Random] = None) -> Question:
    options, correct = shuffle_options(question.options, question.correct_answer, rng=rng)
    return question.model_copy(update={"options": options, "correct_answer": correct})
