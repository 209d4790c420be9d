"""
content_client
콘텐츠 생성 워커용 비동기 클라이언트
"""
from content_client.services.content_client import ContentClient

__all__ = ["ContentClient"]
