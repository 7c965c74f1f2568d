# client.py
import html
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import requests

from extractor import extract_content

LOGGER = logging.getLogger(__name__)

TAG_PAT = re.compile(r"<[^>]*>")

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class QuizServiceError(Exception):
    pass


def build_api_url(base_endpoint: str, endpoint: str) -> str:
    """
    base_endpoint 可能带 HTML 实体（&amp;）或残留标签，先清理；
    结果为 scheme://host + 原路径（去掉末尾 /）+ /endpoint，查询串丢弃。
    """
    if not base_endpoint or not base_endpoint.strip():
        raise QuizServiceError("基础 URL 不能为空")
    clean = TAG_PAT.sub("", html.unescape(base_endpoint.strip()))
    if not clean.startswith(("http://", "https://")):
        raise QuizServiceError(f"URL 格式不正确: {clean}")
    parts = urlsplit(clean)
    path = parts.path.rstrip("/")
    return f"{parts.scheme}://{parts.netloc}{path}/{endpoint}"


class QuizServiceClient:
    def __init__(self, base_endpoint: str, timeout: float = 60.0,
                 session: Optional[requests.Session] = None):
        self.base_endpoint = base_endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    # -------------------------------------------------
    def generate(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """POST /chat；任何失败都合并成一个 QuizServiceError"""
        try:
            url = build_api_url(self.base_endpoint, "chat")
            LOGGER.info("generate: POST %s params=%s", url, params)
            resp = self.session.post(url, json=params, headers=DEFAULT_HEADERS, timeout=self.timeout)
            if not resp.ok:
                raise QuizServiceError(f"服务返回错误状态：{resp.status_code}")
            payload = resp.json()
            if not isinstance(payload, dict):
                raise QuizServiceError("返回格式不正确")
            if not payload.get("success"):
                raise QuizServiceError(payload.get("message") or "生成失败")
            return payload
        except (QuizServiceError, requests.RequestException, ValueError) as e:
            LOGGER.error("generate failed: %s", e)
            raise QuizServiceError(f"请求失败: {e}") from e

    @staticmethod
    def generated_content(payload: Dict[str, Any]) -> str:
        content = extract_content(payload.get("data"))
        if not content:
            raise QuizServiceError("后端未返回考题内容")
        return content

    # -------------------------------------------------
    def save(self, content: str, difficulty: str, count: str,
             page_url: str, page_title: str = "") -> Dict[str, Any]:
        url = build_api_url(self.base_endpoint, "save")
        body = {
            "content": content,
            "metadata": {
                "difficulty": difficulty,
                "count": count,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "pageUrl": page_url,
                "pageTitle": page_title,
            },
        }
        LOGGER.info("save: POST %s", url)
        resp = self.session.post(url, json=body, headers=DEFAULT_HEADERS, timeout=self.timeout)
        if not resp.ok:
            raise QuizServiceError(f"保存失败: {resp.status_code}")
        return resp.json()

    def load(self, page_url: str) -> Optional[str]:
        """没有保存过返回 None；404 不算错误"""
        url = build_api_url(self.base_endpoint, "load")
        LOGGER.info("load: GET %s pageUrl=%s", url, page_url)
        resp = self.session.get(
            url, params={"pageUrl": page_url},
            headers={"Accept": "application/json"}, timeout=self.timeout,
        )
        if resp.status_code == 404:
            LOGGER.info("load: nothing saved for %s", page_url)
            return None
        if not resp.ok:
            raise QuizServiceError(f"加载失败: {resp.status_code}")
        result = resp.json()
        if isinstance(result, dict) and result.get("success"):
            data = result.get("data")
            content = extract_content(data.get("content")) if isinstance(data, dict) else ""
            return content or None
        return None
