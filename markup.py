# markup.py
import logging
from html import escape
from html.parser import HTMLParser
from typing import Dict, List, Optional, Tuple

from models import Quiz, QuizOption
from utils import new_quiz_id

LOGGER = logging.getLogger(__name__)

VOID_TAGS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}

SUBMIT_TEXT = "提交答案"
SHOW_ANSWER_TEXT = "查看答案"
RESET_TEXT = "重置"


def is_prerendered(text: str) -> bool:
    """去掉首尾空白后以 '<' 开头即视为 HTML"""
    return bool(text) and text.strip().startswith("<")


class _QuizMarkupParser(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.quizzes: List[Quiz] = []
        self._stack: List[Tuple[str, str]] = []     # (tag, role)
        self._quiz: Optional[Quiz] = None
        self._correct_from_submit = False
        self._option: Optional[QuizOption] = None
        self._has_text = False                      # 当前选项里有没有 .quiz-option-text
        self._title: List[str] = []
        self._question: List[str] = []              # 没有 .quiz-title 时用 .quiz-question 的文字
        self._text: Optional[List[str]] = None      # 正在收集的 .quiz-option-text 正文
        self._raw: Optional[List[str]] = None       # 整个 .quiz-option 的内部标记

    # ---------- 开始标签 ----------
    def handle_starttag(self, tag, attrs):
        attr: Dict[str, str] = {k: (v or "") for k, v in attrs}
        classes = set(attr.get("class", "").split())
        role = ""

        if self._quiz is None:
            if "quiz-container" in classes:
                self._quiz = Quiz(id=attr.get("id", ""))
                self._correct_from_submit = False
                self._title = []
                self._question = []
                role = "container"
        elif self._text is not None:
            self._text.append(self.get_starttag_text())
        elif "quiz-title" in classes:
            role = "title"
        elif "quiz-question" in classes:
            role = "question"
        elif "quiz-option" in classes:
            self._option = QuizOption(
                value=attr.get("data-value", ""),
                explanation=attr.get("data-explanation", ""),
            )
            self._quiz.options.append(self._option)
            self._has_text = False
            self._raw = []
            role = "option"
        elif "quiz-option-text" in classes and self._option is not None:
            self._text = []
            self._has_text = True
            role = "option-text"
        elif "quiz-option-label" in classes and self._option is not None:
            role = "skip"
        elif "quiz-submit" in classes and "data-correct" in attr:
            self._quiz.correct = attr["data-correct"]
            self._correct_from_submit = True
        elif "quiz-show-answer" in classes and "data-correct" in attr:
            if not self._correct_from_submit:
                self._quiz.correct = attr["data-correct"]
        elif self._keeps_raw(tag):
            self._raw.append(self.get_starttag_text())
            role = "raw"

        if tag not in VOID_TAGS:
            self._stack.append((tag, role))

    def handle_startendtag(self, tag, attrs):
        if self._text is not None:
            self._text.append(self.get_starttag_text())
        elif self._keeps_raw(tag):
            self._raw.append(self.get_starttag_text())

    def _keeps_raw(self, tag):
        # 选项里的单选框和 "A." 标签不算正文
        return self._raw is not None and tag != "input" and not self._in_role("skip")

    # ---------- 结束标签 ----------
    def handle_endtag(self, tag):
        if not any(t == tag for t, _ in self._stack):
            return
        while self._stack:
            open_tag, role = self._stack.pop()
            self._close(open_tag, role)
            if open_tag == tag:
                break

    def _close(self, tag, role):
        if role == "option-text":
            self._option.content = "".join(self._text).strip()
            self._text = None
        elif role == "option":
            if not self._has_text:
                self._option.content = "".join(self._raw).strip()
            self._option = None
            self._raw = None
        elif role == "title":
            self._quiz.question = "".join(self._title).strip()
        elif role == "container":
            self._finish()
        elif self._text is not None:
            self._text.append(f"</{tag}>")
        elif role == "raw":
            self._raw.append(f"</{tag}>")

    def _finish(self):
        if not self._quiz.question:
            self._quiz.question = " ".join("".join(self._question).split())
        self.quizzes.append(self._quiz)
        self._quiz = None
        self._option = None
        self._text = None
        self._raw = None

    def handle_data(self, data):
        if self._text is not None:
            self._text.append(escape(data, quote=False))
        elif self._in_role("title"):
            self._title.append(data)
        elif self._in_role("skip"):
            return
        elif self._raw is not None:
            self._raw.append(escape(data, quote=False))
        elif self._in_role("question"):
            self._question.append(data)

    def _in_role(self, role):
        return any(r == role for _, r in self._stack)

    def close(self):
        super().close()
        # 没有闭合的容器按浏览器的习惯自动收尾
        while self._stack:
            tag, role = self._stack.pop()
            self._close(tag, role)


def lift_quiz_containers(html_text: str) -> List[Quiz]:
    """读出 HTML 中每个 .quiz-container 的题目结构；格式有问题时尽量取，不报错"""
    if not html_text:
        return []
    p = _QuizMarkupParser()
    p.feed(html_text)
    p.close()
    LOGGER.debug("lifted %d quiz containers from markup", len(p.quizzes))
    return p.quizzes


def render_quiz_html(quiz: Quiz) -> str:
    """把 Quiz 导出成静态 HTML，结构与 lift_quiz_containers 读取的一致"""
    qid = escape(quiz.id or new_quiz_id())
    parts = [
        f'<div class="quiz-container" id="{qid}">',
        f'<div class="quiz-question"><h3 class="quiz-title">{escape(quiz.title, quote=False)}</h3></div>',
        '<div class="quiz-options">',
    ]
    for i, opt in enumerate(quiz.options):
        value = escape(opt.value)
        input_id = f"{qid}-{value}" if opt.value else f"{qid}-opt-{i + 1}"
        parts.append(
            f'<div class="quiz-option" data-value="{value}" data-explanation="{escape(opt.explanation)}">'
            f'<input type="radio" name="{qid}" id="{input_id}" value="{value}">'
            f'<label for="{input_id}"><span class="quiz-option-label">{value}.</span>'
            f'<span class="quiz-option-text">{opt.content}</span></label>'
            '</div>'
        )
    correct = escape(quiz.correct)
    parts.extend([
        '</div>',
        '<div class="quiz-actions">',
        f'<button class="quiz-btn quiz-submit" data-correct="{correct}">{SUBMIT_TEXT}</button>',
        f'<button class="quiz-btn quiz-show-answer" data-correct="{correct}">{SHOW_ANSWER_TEXT}</button>',
        f'<button class="quiz-btn quiz-reset">{RESET_TEXT}</button>',
        '</div>',
        f'<div class="quiz-result" id="{qid}-result"></div>',
        f'<div class="quiz-explanation" id="{qid}-explanation"></div>',
        '</div>',
    ])
    return "\n".join(parts)
