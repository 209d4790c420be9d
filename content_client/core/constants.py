"""
상수 정의 모듈
매직 스트링을 상수로 관리하여 유지보수성 향상
"""


class WorkerEndpoints:
    """워커가 인식하는 endpoint 이름"""
    EXPLORE = "explore"
    PLAYGROUND = "playground"
    TEST = "test"
    STREAM_EXPLORE = "streamExplore"


class ExamTypes:
    """시험 유형"""
    JEE = "JEE"
    NEET = "NEET"

    ALL = [JEE, NEET]


class QuestionRules:
    """문항 형식 규칙"""
    OPTION_COUNT = 4
    MIN_TEXT_LENGTH = 10
    MIN_EXPLANATION_LENGTH = 5

    # 시험 문항 배치
    MIN_VALID_QUESTIONS = 5
    MAX_TEST_QUESTIONS = 15
    QUESTIONS_PER_DIFFICULTY = 5

    # 탐색 콘텐츠
    MAX_RELATED_ITEMS = 5


class QuestionDefaults:
    """응답 필드 누락 시 기본값"""
    QUESTION_TYPE = "conceptual"
    EXAM_AGE_GROUP = "16-18"
    EXPLANATION_CORRECT = "Correct answer explanation"
    EXPLANATION_KEY_POINT = "Key learning point"
    SUBTOPIC_TEMPLATE = "{topic} Concept {number}"

    @classmethod
    def subtopic(cls, topic: str, index: int) -> str:
        return cls.SUBTOPIC_TEMPLATE.format(topic=topic, number=index + 1)


class ResponseFields:
    """워커 응답 필드명"""
    DOMAIN = "domain"
    CONTENT = "content"
    PARAGRAPHS = ("paragraph1", "paragraph2", "paragraph3")
    RELATED_TOPICS = "relatedTopics"
    RELATED_QUESTIONS = "relatedQuestions"
    QUESTIONS = "questions"
    RETRY_AFTER = "retryAfter"
    CANDIDATES = "candidates"
    STREAM_SEPARATOR = "---"
    PARAGRAPH_JOINER = "\n\n"


class ErrorCodes:
    """에러 코드"""
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    REQUEST_FAILED = "REQUEST_FAILED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    MALFORMED_JSON = "MALFORMED_JSON"
    INVALID_RESPONSE_SHAPE = "INVALID_RESPONSE_SHAPE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INSUFFICIENT_VALID_QUESTIONS = "INSUFFICIENT_VALID_QUESTIONS"
    CONTENT_GENERATION_FAILED = "CONTENT_GENERATION_FAILED"


class ErrorMessages:
    """호출자에게 노출되는 에러 메시지"""
    API_REQUEST_FAILED = "Failed to make API request"
    EMPTY_RESPONSE = "Empty response from API"
    MALFORMED_JSON = "Invalid JSON response from API"
    INVALID_RESPONSE_SHAPE = "Invalid response structure"
    VALIDATION_FAILED = "Generated question failed validation"
    EXPLORE_FAILED = "Failed to generate explore content"
    PLAYGROUND_FAILED = "Failed to generate valid question"
    TEST_FAILED = "Failed to generate test questions"
    STREAM_FAILED = "Failed to stream content"
    RATE_LIMITED = "Too many requests. Please try again in {seconds} seconds"


class HTTPHeaders:
    """HTTP 헤더 상수"""
    CONTENT_TYPE = "Content-Type"
    JSON_CONTENT = "application/json"


class Timeouts:
    """타임아웃 설정 (초)"""
    WORKER_API = 15
