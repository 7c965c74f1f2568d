# extractor.py
import json
from typing import Any, Mapping

# content 作为字符串叶子优先，其余按顺序逐层往下找
WRAPPER_KEYS = ("message", "delta", "result", "output", "choices", "answer", "data")


def extract_content(raw: Any) -> str:
    """
    从生成服务返回的各种包装结构里取出正文。

    深度优先，第一个非空结果即返回；取不到时返回空串，从不抛异常。
    """
    if not raw:
        return ""
    if isinstance(raw, str):
        return raw.strip()

    if isinstance(raw, (list, tuple)):
        for item in raw:
            found = extract_content(item)
            if found:
                return found
        return ""

    if isinstance(raw, Mapping):
        direct = raw.get("content")
        if isinstance(direct, str) and direct.strip():
            return direct.strip()
        for key in WRAPPER_KEYS:
            value = raw.get(key)
            if not value:
                continue
            found = extract_content(value)
            if found:
                return found

    return ""


def stringify_safe(value: Any) -> str:
    """兜底显示用：字符串原样返回，其余尽量转成 JSON"""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, indent=2)
    except (TypeError, ValueError):
        return str(value)
