# controller.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Callable, Dict, List, Optional, Sequence

from PyQt5.QtWidgets import QButtonGroup, QFrame, QMessageBox, QPushButton, QWidget

from models import QuizOption
from renderer import (
    BOUND_PROP, find_role, option_buttons, read_options, repolish, role_of
)

LOGGER = logging.getLogger(__name__)

NO_SELECTION_MSG = "请先选择一个答案！"


class QuizError(Exception):
    pass


class NoSelectionError(QuizError):
    def __init__(self, message: str = NO_SELECTION_MSG):
        super().__init__(message)


class QuizLockedError(QuizError):
    pass


class QuizState(Enum):
    UNANSWERED = "unanswered"
    SELECTED = "selected"
    SUBMITTED = "submitted"
    REVEALED = "revealed"


@dataclass(frozen=True)
class Verdict:
    state: QuizState
    correct: str
    selected: Optional[str]
    is_correct: bool
    style: str                              # "correct" / "incorrect"
    message: str
    marks: Dict[str, str] = field(default_factory=dict)
    explanation_html: str = ""


EXPLANATION_TITLE = "<div><b>📖 解析：</b></div>"


def _explanation_panel(entries: List[str]) -> str:
    if not entries:
        return ""
    return EXPLANATION_TITLE + "".join(f"<div>{e}</div>" for e in entries)


class QuizSession:
    """
    单道题的答题状态（不依赖 Qt）。

    UNANSWERED -> SELECTED -> SUBMITTED；未提交前可随时 reveal 到 REVEALED；
    reset 从任意状态回到 UNANSWERED。
    """

    def __init__(self, options: Sequence[QuizOption]):
        self.options: List[QuizOption] = list(options)
        self.state = QuizState.UNANSWERED
        self.selected: Optional[str] = None

    @property
    def locked(self) -> bool:
        return self.state in (QuizState.SUBMITTED, QuizState.REVEALED)

    def _option(self, value: Optional[str]) -> Optional[QuizOption]:
        for opt in self.options:
            if opt.value == value:
                return opt
        return None

    # -------------------------------------------------
    def select(self, value: str) -> bool:
        """单选：后选的覆盖先选的；提交或查看答案之后忽略"""
        if self.locked:
            return False
        self.selected = value
        self.state = QuizState.SELECTED
        return True

    # -------------------------------------------------
    def submit(self, correct: str) -> Verdict:
        if self.locked:
            raise QuizLockedError(f"quiz already {self.state.value}")
        if self.state is not QuizState.SELECTED or self.selected is None:
            raise NoSelectionError()

        selected = self.selected
        is_correct = selected == correct

        marks: Dict[str, str] = {}
        for opt in self.options:
            if opt.value == correct:
                marks[opt.value] = "correct"
            elif opt.value == selected:
                marks[opt.value] = "incorrect"

        selected_opt = self._option(selected)
        correct_opt = self._option(correct)
        selected_exp = selected_opt.explanation if selected_opt else ""
        correct_exp = correct_opt.explanation if correct_opt else ""

        entries = []
        if is_correct:
            message = "✓ 回答正确！"
            if selected_exp:
                entries.append(selected_exp)
        else:
            message = f"✗ 回答错误！正确答案是：{correct}"
            if selected_exp:
                entries.append(f"<b>您选择的选项：</b>{selected_exp}")
            if correct_exp:
                entries.append(f"<b>正确答案：</b>{correct_exp}")

        self.state = QuizState.SUBMITTED
        return Verdict(
            state=self.state,
            correct=correct,
            selected=selected,
            is_correct=is_correct,
            style="correct" if is_correct else "incorrect",
            message=message,
            marks=marks,
            explanation_html=_explanation_panel(entries),
        )

    # -------------------------------------------------
    def reveal(self, correct: str) -> Verdict:
        """直接显示答案，不评判已选项"""
        if self.locked:
            raise QuizLockedError(f"quiz already {self.state.value}")

        marks = {opt.value: "correct" for opt in self.options if opt.value == correct}
        entries = []
        for opt in self.options:
            if not opt.explanation:
                continue
            if opt.value == correct:
                prefix = f'<b style="color: #27ae60;">✓ {opt.value}（正确答案）：</b>'
            else:
                prefix = f"<b>{opt.value}：</b>"
            entries.append(prefix + opt.explanation)

        self.state = QuizState.REVEALED
        return Verdict(
            state=self.state,
            correct=correct,
            selected=self.selected,
            is_correct=True,
            style="correct",
            message=f"✓ 正确答案是：{correct}",
            marks=marks,
            explanation_html=_explanation_panel(entries),
        )

    # -------------------------------------------------
    def reset(self) -> None:
        self.selected = None
        self.state = QuizState.UNANSWERED


# =====================================================
Reporter = Callable[[QWidget, str], None]


def warn_box(container: QWidget, message: str) -> None:
    QMessageBox.warning(container.window(), "提示", message)


class QuizController:
    """把渲染出的题目控件绑定到 QuizSession；同一个控件只绑定一次"""

    def __init__(self, reporter: Optional[Reporter] = None):
        self.reporter = reporter or warn_box
        self._sessions: Dict[int, QuizSession] = {}

    def session(self, container: QWidget) -> Optional[QuizSession]:
        return self._sessions.get(id(container))

    def init(self, root: Optional[QWidget]) -> int:
        """绑定 root 本身或其下所有题目容器，返回新绑定的数量"""
        if root is None:
            return 0
        if role_of(root) == "container":
            containers = [root]
        else:
            containers = [w for w in root.findChildren(QFrame) if role_of(w) == "container"]
        bound = sum(1 for c in containers if self.bind(c))
        LOGGER.info("init: found %d quiz containers, bound %d", len(containers), bound)
        return bound

    def bind(self, container: Optional[QWidget]) -> bool:
        if container is None:
            LOGGER.warning("bind: container is None")
            return False
        if container.property(BOUND_PROP):
            LOGGER.debug("bind: %s already bound", container.objectName())
            return False
        container.setProperty(BOUND_PROP, True)

        session = QuizSession(read_options(container))
        key = id(container)
        self._sessions[key] = session
        container.destroyed.connect(partial(self._forget, key))

        radios = option_buttons(container)
        submit = find_role(container, "submit")
        reveal = find_role(container, "reveal")
        reset = find_role(container, "reset")

        LOGGER.debug(
            "bind: %s submit=%s reveal=%s reset=%s options=%d",
            container.objectName(), submit is not None, reveal is not None,
            reset is not None, len(radios),
        )

        for rb in radios:
            rb.clicked.connect(partial(self._on_select, session, rb))
        if submit is not None:
            submit.clicked.connect(partial(self._on_submit, container, session, submit))
        if reveal is not None:
            reveal.clicked.connect(partial(self._on_reveal, container, session, reveal))
        if reset is not None:
            reset.clicked.connect(partial(self._on_reset, container, session))
        return True

    def _forget(self, key, *args):
        self._sessions.pop(key, None)

    # ---------- 事件 ----------
    def _on_select(self, session, rb, checked=False):
        session.select(rb.property("value") or "")

    def _on_submit(self, container, session, button, checked=False):
        try:
            verdict = session.submit(button.property("correct") or "")
        except NoSelectionError as e:
            self.reporter(container, str(e))
            return
        except QuizLockedError:
            return
        self._apply(container, verdict)

    def _on_reveal(self, container, session, button, checked=False):
        try:
            verdict = session.reveal(button.property("correct") or "")
        except QuizLockedError:
            return
        self._apply(container, verdict)

    def _on_reset(self, container, session, checked=False):
        session.reset()
        group = container.findChild(QButtonGroup)
        if group is not None:
            group.setExclusive(False)
        for rb in option_buttons(container):
            rb.setChecked(False)
            rb.setEnabled(True)
            _set_mark(rb, "")
        if group is not None:
            group.setExclusive(True)

        for role in ("result", "explanation"):
            slot = find_role(container, role)
            if slot is not None:
                slot.clear()
                slot.setProperty("state", "")
                repolish(slot)
                slot.hide()
        self._lock(container, False)

    # ---------- 界面更新 ----------
    def _apply(self, container, verdict: Verdict):
        for rb in option_buttons(container):
            _set_mark(rb, verdict.marks.get(rb.property("value") or "", ""))
            rb.setEnabled(False)

        result = find_role(container, "result")
        if result is not None:
            result.setText(verdict.message)
            result.setProperty("state", verdict.style)
            repolish(result)
            result.show()

        explanation = find_role(container, "explanation")
        if explanation is not None:
            if verdict.explanation_html:
                explanation.setText(verdict.explanation_html)
                explanation.show()
            else:
                explanation.clear()
                explanation.hide()

        self._lock(container, True)
        LOGGER.info("quiz %s -> %s", container.objectName(), verdict.state.value)

    def _lock(self, container, locked: bool):
        for role in ("submit", "reveal"):
            btn = find_role(container, role)
            if isinstance(btn, QPushButton):
                btn.setEnabled(not locked)


def _set_mark(rb, mark: str):
    rb.setProperty("mark", mark)
    repolish(rb)
