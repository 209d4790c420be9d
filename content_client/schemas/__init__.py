from content_client.schemas.question import ExamType, Explanation, Question, QuestionFormat
from content_client.schemas.explore import ExploreResponse, RelatedQuestion, RelatedTopic, StreamChunk
from content_client.schemas.context import ChatMessage, UserContext, to_text

__all__ = [
    "ExamType",
    "Explanation",
    "Question",
    "QuestionFormat",
    "ExploreResponse",
    "RelatedQuestion",
    "RelatedTopic",
    "StreamChunk",
    "ChatMessage",
    "UserContext",
    "to_text",
]
