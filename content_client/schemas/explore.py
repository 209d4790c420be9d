# content_client/schemas/explore.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExploreResponse(BaseModel):
    """탐색 콘텐츠: 3개 문단을 합친 본문 + 관련 토픽/질문(각 최대 5개)"""
    model_config = ConfigDict(populate_by_name=True)

    content: str
    # 항목은 문자열 또는 객체 그대로 전달
    related_topics: List[Any] = Field(default_factory=list, alias="relatedTopics", max_length=5)
    related_questions: List[Any] = Field(default_factory=list, alias="relatedQuestions", max_length=5)


class RelatedTopic(BaseModel):
    topic: Any = None
    type: Any = None
    reason: Any = None


class RelatedQuestion(BaseModel):
    question: Any = None
    type: Any = None
    context: Any = None


class StreamChunk(BaseModel):
    """streamExplore 콜백으로 전달되는 단위. 빈 목록은 None."""
    text: str
    topics: Optional[List[RelatedTopic]] = None
    questions: Optional[List[RelatedQuestion]] = None
