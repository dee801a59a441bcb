"""
Shared utility functions for routers and services
"""
import json
import logging
import time
import uuid
from typing import Optional

logger = logging.getLogger(__name__)


def merged_filename(now: Optional[float] = None) -> str:
    """Server-side download name: merged-<unix-ms>.mp3"""
    if now is None:
        now = time.time()
    return f"merged-{int(now * 1000)}.mp3"


def new_request_id() -> str:
    return uuid.uuid4().hex[:12]


def log_endpoint_event(endpoint: str, request_id: Optional[str] = None, result: str = "success", details: Optional[dict] = None):
    """Log endpoint execution to app.log"""
    logger.info(f"{endpoint} | request={request_id or 'none'} | {result} | {json.dumps(details or {})}")
