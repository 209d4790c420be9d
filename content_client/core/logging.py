# content_client/core/logging.py
import logging
import json
import sys
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from content_client.core.settings import settings

# --- 민감정보 레드액션 ---
REDACT_PATTERNS = [
    re.compile(r"(Authorization:\s*)(Basic|Bearer)\s+[A-Za-z0-9\-\._~\+\/]+=*", re.IGNORECASE),
    re.compile(r"([?&](?:key|token|api_key)=)[^&\s]+", re.IGNORECASE),
]

def _redact(text: str) -> str:
    if not isinstance(text, str):
        return text
    out = text
    for pat in REDACT_PATTERNS:
        out = pat.sub(r"\1***REDACTED***", out)
    return out

SAFE_ATTR_BLOCKLIST = {
    "args","asctime","created","exc_info","exc_text","filename",
    "funcName","levelname","levelno","lineno","module","msecs",
    "message","msg","name","pathname","process","processName",
    "relativeCreated","stack_info","thread","threadName","taskName",
}

class JsonFormatter(logging.Formatter):
    """
    표준 JSON 로그 포맷:
    {
      "ts": "2025-10-24T01:23:45.678Z",
      "ts_ms": 1698101025678,
      "level": "INFO",
      "logger": "content_client.services.worker_client",
      "msg": "[WORKER] endpoint=explore status=200 elapsed=123ms",
      "endpoint": "explore",
      "status": 200,
      "elapsed_ms": 123,
      ... (extra)
    }
    """
    def format(self, record: logging.LogRecord) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "ts": now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "ts_ms": int(now.timestamp() * 1000),
            "level": record.levelname,
            "logger": record.name,
        }

        payload["msg"] = _redact(record.getMessage())

        # extra 필드
        for k, v in record.__dict__.items():
            if k in SAFE_ATTR_BLOCKLIST:
                continue
            payload[k] = _redact(v)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        try:
            return json.dumps(payload, ensure_ascii=False, default=str)
        except TypeError:
            safe = {k: (str(v) if not isinstance(v, (str, int, float, bool, type(None), dict, list)) else v)
                    for k, v in payload.items()}
            return json.dumps(safe, ensure_ascii=False)

def configure_logging(level: Optional[str] = None) -> None:
    """
    - 루트 로거를 JSON 포맷으로 교체
    - 콘솔(stdout) 출력
    - level 생략 시 settings.LOG_LEVEL
    """
    if level is None:
        level = settings.LOG_LEVEL

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    # httpx 요청 로그는 WARNING 이상만
    logging.getLogger("httpx").setLevel(logging.WARNING)

# 편의 함수: 워커 호출 1건당 1줄
def log_request(logger, endpoint: str, status: Optional[int], elapsed_ms: int, error: Optional[str] = None):
    level = logging.INFO if status is not None and 200 <= status < 300 else logging.WARNING
    logger.log(
        level,
        f"[WORKER] endpoint={endpoint} status={status} elapsed={elapsed_ms}ms error={error}",
        extra={"endpoint": endpoint, "status": status, "elapsed_ms": elapsed_ms},
    )
