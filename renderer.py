# renderer.py
import logging
from typing import List, Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QButtonGroup, QFrame, QHBoxLayout, QLabel, QPushButton, QRadioButton,
    QVBoxLayout, QWidget
)

from markup import RESET_TEXT, SHOW_ANSWER_TEXT, SUBMIT_TEXT
from models import Quiz, QuizOption
from utils import new_quiz_id

LOGGER = logging.getLogger(__name__)

ROLE_PROP = "quizRole"
BOUND_PROP = "quizBound"

QUIZ_STYLE = """
    QFrame[quizRole="container"] {
        border: 1px solid #444;
        border-radius: 8px;
        padding: 8px;
    }
    QLabel[quizRole="question"] { font-size: 18px; font-weight: 600; }
    QRadioButton[mark="correct"] { color: #27ae60; font-weight: bold; }
    QRadioButton[mark="incorrect"] { color: #d9534f; font-weight: bold; }
    QLabel[quizRole="result"][state="correct"] { color: #5cb85c; }
    QLabel[quizRole="result"][state="incorrect"] { color: #d9534f; }
    QLabel[quizRole="explanation"] { padding: 6px; }
"""


def role_of(widget: QWidget) -> str:
    return widget.property(ROLE_PROP) or ""


def find_role(container: QWidget, role: str) -> Optional[QWidget]:
    for w in container.findChildren(QWidget):
        if role_of(w) == role:
            return w
    return None


def option_buttons(container: QWidget) -> List[QRadioButton]:
    return [rb for rb in container.findChildren(QRadioButton) if role_of(rb) == "option"]


def read_options(container: QWidget) -> List[QuizOption]:
    """从控件属性反推选项列表（不重新解析任何文本）"""
    options = []
    for rb in option_buttons(container):
        text_label = container.findChild(QLabel, f"{rb.objectName()}-text")
        options.append(QuizOption(
            value=rb.property("value") or "",
            explanation=rb.property("explanation") or "",
            content=text_label.text() if text_label is not None else "",
        ))
    return options


def repolish(widget: QWidget) -> None:
    # 动态属性变了之后样式表不会自己刷新
    widget.style().unpolish(widget)
    widget.style().polish(widget)


class QuizRenderer:
    """Quiz → 未挂载的 QFrame；插入界面由调用方负责"""

    def render(self, quiz: Quiz) -> QFrame:
        qid = quiz.id or new_quiz_id()

        container = QFrame()
        container.setObjectName(qid)
        container.setProperty(ROLE_PROP, "container")
        container.setStyleSheet(QUIZ_STYLE)
        layout = QVBoxLayout()
        layout.setSpacing(10)
        container.setLayout(layout)

        # ---------- 题干 ----------
        question = QLabel()
        question.setObjectName(f"{qid}-question")
        question.setProperty(ROLE_PROP, "question")
        question.setTextFormat(Qt.PlainText)   # 题干按纯文本显示
        question.setText(quiz.title)
        question.setWordWrap(True)
        layout.addWidget(question)

        # ---------- 选项 ----------
        group = QButtonGroup(container)
        group.setExclusive(True)
        for i, opt in enumerate(quiz.options):
            layout.addLayout(self._option_row(qid, i, opt, group))

        # ---------- 按钮区 ----------
        actions = QHBoxLayout()
        actions.setSpacing(12)
        for role, name, text in (
            ("submit", f"{qid}-submit", SUBMIT_TEXT),
            ("reveal", f"{qid}-show-answer", SHOW_ANSWER_TEXT),
            ("reset", f"{qid}-reset", RESET_TEXT),
        ):
            btn = QPushButton(text)
            btn.setObjectName(name)
            btn.setProperty(ROLE_PROP, role)
            if role != "reset":
                # 两个按钮各存一份，互不依赖
                btn.setProperty("correct", quiz.correct)
            actions.addWidget(btn)
        actions.addStretch(1)
        layout.addLayout(actions)

        # ---------- 结果 / 解析 ----------
        for role in ("result", "explanation"):
            slot = QLabel("")
            slot.setObjectName(f"{qid}-{role}")
            slot.setProperty(ROLE_PROP, role)
            slot.setTextFormat(Qt.RichText)
            slot.setWordWrap(True)
            slot.hide()
            layout.addWidget(slot)

        LOGGER.debug("rendered quiz %s with %d options", qid, len(quiz.options))
        return container

    def _option_row(self, qid: str, index: int, opt: QuizOption, group: QButtonGroup) -> QHBoxLayout:
        row = QHBoxLayout()
        rb = QRadioButton(f"{opt.value}.")
        # 按序号命名，value 重复时也能各自找到正文
        rb.setObjectName(f"{qid}-opt-{index + 1}")
        rb.setProperty(ROLE_PROP, "option")
        rb.setProperty("value", opt.value)
        rb.setProperty("explanation", opt.explanation)
        rb.setProperty("mark", "")
        group.addButton(rb, index)

        text = QLabel()
        text.setObjectName(f"{rb.objectName()}-text")
        text.setProperty(ROLE_PROP, "option-text")
        text.setTextFormat(Qt.RichText)   # 选项正文可带行内标记
        text.setWordWrap(True)
        text.setText(opt.content)

        row.addWidget(rb)
        row.addWidget(text, 1)
        return row
