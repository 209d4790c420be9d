# content_client/schemas/context.py
import math
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


def to_text(value: Any) -> str:
    """
    워커/사용자 값을 표시용 문자열로 변환.
    bool 은 "true"/"false", 정수형 실수는 소수점 없이 (17.0 → "17").
    """
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


class UserContext(BaseModel):
    """
    사용자 프로필. 워커로 그대로 전달되며 로컬에서는 age만 읽는다.
    정의되지 않은 필드도 보존한다.
    """
    model_config = ConfigDict(extra="allow")

    age: Union[int, float, str]

    @property
    def age_group(self) -> str:
        return to_text(self.age)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ChatMessage(BaseModel):
    """이전 대화 1턴. 워커로 그대로 전달 (필드 타입 검사 없음)."""
    model_config = ConfigDict(extra="allow")

    type: Optional[Any] = None
    content: Optional[Any] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


UserContextLike = Union[UserContext, Dict[str, Any]]
ChatMessageLike = Union[ChatMessage, Dict[str, Any]]
