import pytest

pytest.importorskip("PyQt5")

from PyQt5.QtWidgets import QLabel, QVBoxLayout, QWidget

from controller import QuizController
from host import QuizHost, build_quizzes
from markup import render_quiz_html
from models import Quiz, QuizOption
from renderer import ROLE_PROP, find_role


class RecordingActivator:
    def __init__(self):
        self.bound = []

    def bind(self, widget):
        self.bound.append(widget.objectName())
        return True


def _items(layout):
    return [layout.itemAt(i).widget() for i in range(layout.count())]


def test_build_quizzes_prefers_prerendered_markup(sample_text):
    quiz = Quiz(id="html-1", question="Q", correct="A", options=[QuizOption("A", "e", "a")])
    html = render_quiz_html(quiz)
    assert build_quizzes("\n  " + html) == [quiz]


def test_build_quizzes_falls_back_to_shortcodes_inside_html(sample_text):
    quizzes = build_quizzes("<p>intro</p>\n" + sample_text)
    assert [q.id for q in quizzes] == ["q1"]


def test_build_quizzes_from_shortcodes(sample_text):
    assert [q.id for q in build_quizzes(sample_text)] == ["q1"]
    assert build_quizzes("just words") == []


def test_append_shortcode_content_binds_each_widget(surface, sample_text):
    activator = RecordingActivator()
    host = QuizHost(surface, activator)

    items = host.append_content(sample_text + sample_text.replace("q1", "q2"))

    assert len(items) == 2
    assert _items(surface) == items
    assert all(item.property(ROLE_PROP) == "item" for item in items)
    assert activator.bound == ["q1", "q2"]


def test_append_envelope_is_extracted_first(surface, sample_text):
    activator = RecordingActivator()
    host = QuizHost(surface, activator)

    items = host.append_content({"choices": [{"message": {"content": sample_text}}]})
    assert len(items) == 1
    assert activator.bound == ["q1"]


def test_append_prerendered_reuses_container_ids(surface):
    quiz = Quiz(id="kept-id", question="Q", correct="B",
                options=[QuizOption("A", "no", "a"), QuizOption("B", "yes", "b")])
    activator = RecordingActivator()
    host = QuizHost(surface, activator)

    items = host.append_content(render_quiz_html(quiz))
    assert activator.bound == ["kept-id"]
    assert items[0].findChild(QWidget, "kept-id-submit").property("correct") == "B"


def test_append_without_quizzes_shows_raw_text(surface):
    activator = RecordingActivator()
    host = QuizHost(surface, activator)

    items = host.append_content("  the service replied with prose  ")
    assert len(items) == 1
    assert isinstance(items[0], QLabel)
    assert items[0].text() == "the service replied with prose"
    assert activator.bound == []


def test_append_unextractable_envelope_shows_json(surface):
    host = QuizHost(surface, RecordingActivator())
    items = host.append_content({"status": "odd"})
    assert '"status": "odd"' in items[0].text()


def test_append_empty_content_adds_nothing(surface):
    host = QuizHost(surface, RecordingActivator())
    assert host.append_content("") == []
    assert host.append_content(None) == []
    assert surface.count() == 0


def test_detached_host_drops_late_content(surface, sample_text):
    activator = RecordingActivator()
    host = QuizHost(surface, activator)
    host.detach()

    assert host.append_content(sample_text) == []
    assert surface.count() == 0
    assert activator.bound == []


def test_deleted_surface_counts_as_detached(qapp, sample_text):
    from PyQt5 import sip

    owner = QWidget()
    layout = QVBoxLayout()
    owner.setLayout(layout)
    host = QuizHost(layout, RecordingActivator())
    sip.delete(owner)

    assert not host.is_attached()
    assert host.append_content(sample_text) == []


def test_end_to_end_with_controller(surface, collector, sample_text):
    controller = QuizController(reporter=collector)
    host = QuizHost(surface, controller)
    item = host.append_content(sample_text)[0]
    container = item.findChild(QWidget, "q1")

    radio = container.findChild(QWidget, "q1-opt-1")
    radio.click()
    find_role(container, "submit").click()

    result = find_role(container, "result").text()
    assert "回答错误" in result and "B" in result
    explanation = find_role(container, "explanation").text()
    assert "wrong" in explanation and "right" in explanation

    # 重复扫描不会重复绑定
    assert controller.init(surface.parentWidget()) == 0
