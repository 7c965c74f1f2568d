# models.py
from dataclasses import dataclass, field
from typing import List

UNTITLED_QUESTION = "未命名题目"


@dataclass
class QuizOption:
    """单个选项"""
    value: str                  # 选项标识，如 "A"；与正确答案逐字比较
    explanation: str = ""       # 解析，可为空
    content: str = ""           # 选项正文（可含行内标记，不做转义）


@dataclass
class Quiz:
    """一道选择题：题干 + 有序选项 + 正确选项的 value"""
    id: str                     # 为空时由渲染器生成
    question: str = ""
    correct: str = ""
    options: List[QuizOption] = field(default_factory=list)

    @property
    def title(self) -> str:
        return self.question or UNTITLED_QUESTION
