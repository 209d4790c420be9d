# content_client/schemas/question.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from content_client.core.constants import QuestionRules, QuestionDefaults

ExamType = Literal["JEE", "NEET"]
QuestionType = Literal["conceptual"]


class Explanation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    correct: StrictStr
    key_point: StrictStr

    @field_validator("correct", "key_point")
    @classmethod
    def _check_explanation(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("explanation field must not be blank")
        if len(v) < QuestionRules.MIN_EXPLANATION_LENGTH:
            raise ValueError(
                f"explanation field must be at least {QuestionRules.MIN_EXPLANATION_LENGTH} characters"
            )
        return v


class QuestionFormat(BaseModel):
    """
    객관식 문항의 형식 부분만 검증하는 모델.
    - text: 공백 제거 후 비어 있지 않고, 원문 길이 10자 이상
    - options: 정확히 4개, 모두 공백이 아닌 문자열, 서로 중복 없음
    - correctAnswer: 0~3 정수 (bool/문자열 불가)
    - explanation: correct/key_point 모두 5자 이상
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: StrictStr
    options: List[StrictStr]
    correct_answer: StrictInt = Field(alias="correctAnswer", ge=0, le=QuestionRules.OPTION_COUNT - 1)
    explanation: Explanation

    @field_validator("text")
    @classmethod
    def _check_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("text must not be blank")
        if len(v) < QuestionRules.MIN_TEXT_LENGTH:
            raise ValueError(f"text must be at least {QuestionRules.MIN_TEXT_LENGTH} characters")
        return v

    @field_validator("options")
    @classmethod
    def _check_options(cls, v: List[str]) -> List[str]:
        if len(v) != QuestionRules.OPTION_COUNT:
            raise ValueError(f"options must have exactly {QuestionRules.OPTION_COUNT} entries")
        if any(not opt.strip() for opt in v):
            raise ValueError("options must not be blank")
        if len(set(v)) != len(v):
            raise ValueError("options must be distinct")
        return v


class Question(QuestionFormat):
    difficulty: int
    topic: str
    subtopic: str
    exam_type: Optional[ExamType] = Field(default=None, alias="examType")
    question_type: QuestionType = Field(default=QuestionDefaults.QUESTION_TYPE, alias="questionType")
    age_group: str = Field(alias="ageGroup")

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer]
