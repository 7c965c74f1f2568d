# host.py
import logging
from typing import Any, List, Optional, Protocol

from PyQt5 import sip
from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QFrame, QLabel, QLayout, QVBoxLayout, QWidget

from extractor import extract_content, stringify_safe
from markup import is_prerendered, lift_quiz_containers
from models import Quiz
from parser import parse_quiz_shortcodes
from renderer import ROLE_PROP, QuizRenderer

LOGGER = logging.getLogger(__name__)


class WidgetActivator(Protocol):
    """新控件插入界面后由它接上交互，通常是 QuizController"""

    def bind(self, widget: QWidget) -> bool:
        ...


def build_quizzes(text: str) -> List[Quiz]:
    """
    HTML 里已有 .quiz-container 就直接取出来用；
    否则（或一个都没取到）按短代码解析。
    """
    if is_prerendered(text):
        lifted = lift_quiz_containers(text.strip())
        if lifted:
            return lifted
    return parse_quiz_shortcodes(text)


class QuizHost:
    def __init__(self, surface: QLayout, activator: WidgetActivator,
                 renderer: Optional[QuizRenderer] = None):
        self.surface = surface
        self.activator = activator
        self.renderer = renderer or QuizRenderer()
        self.detached = False

    def detach(self):
        """界面已关闭，之后到达的内容一律丢弃"""
        self.detached = True

    def is_attached(self) -> bool:
        if self.detached or sip.isdeleted(self.surface):
            return False
        owner = self.surface.parentWidget()
        return owner is not None and not sip.isdeleted(owner)

    def append_content(self, raw: Any) -> List[QWidget]:
        if not self.is_attached():
            LOGGER.info("append_content: surface detached, dropping content")
            return []

        if not raw:
            return []

        normalized = raw.strip() if isinstance(raw, str) else extract_content(raw)
        quizzes = build_quizzes(normalized) if normalized else []

        items: List[QWidget] = []
        for quiz in quizzes:
            item = QFrame()
            item.setProperty(ROLE_PROP, "item")
            layout = QVBoxLayout()
            layout.setContentsMargins(0, 0, 0, 0)
            item.setLayout(layout)
            container = self.renderer.render(quiz)
            layout.addWidget(container)
            self.surface.addWidget(item)
            self.activator.bind(container)
            items.append(item)

        if items:
            LOGGER.info("append_content: appended %d quizzes", len(items))
            return items

        fallback_text = normalized or stringify_safe(raw)
        if not fallback_text.strip():
            return []
        # 既不是题目也不是 HTML：原样显示，不让内容丢失
        fallback = QLabel()
        fallback.setProperty(ROLE_PROP, "item")
        fallback.setTextFormat(Qt.PlainText)
        fallback.setWordWrap(True)
        fallback.setText(fallback_text)
        self.surface.addWidget(fallback)
        LOGGER.info("append_content: no quiz found, showing raw text")
        return [fallback]
