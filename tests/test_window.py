import pytest

pytest.importorskip("PyQt5")

from client import QuizServiceError
from config import DEFAULT_CONFIG
from controller import QuizController
from main import QuizPageWindow


class FakeClient:
    def __init__(self, content="", generate_error=None, save_error=None, load_result=None, load_error=None):
        self.content = content
        self.generate_error = generate_error
        self.save_error = save_error
        self.load_result = load_result
        self.load_error = load_error
        self.generated = []
        self.saved = []

    def generate(self, params):
        self.generated.append(params)
        if self.generate_error:
            raise self.generate_error
        return {"success": True, "data": {"choices": [{"message": {"content": self.content}}]}}

    generated_content = staticmethod(lambda payload: payload["data"]["choices"][0]["message"]["content"])

    def save(self, content, difficulty, count, page_url, page_title=""):
        self.saved.append((content, difficulty, count, page_url, page_title))
        if self.save_error:
            raise self.save_error
        return {"success": True}

    def load(self, page_url):
        if self.load_error:
            raise self.load_error
        return self.load_result


@pytest.fixture
def page(tmp_path, sample_text):
    p = tmp_path / "page.md"
    p.write_text(sample_text, encoding="utf-8")
    return p


def _window(qapp, page, client, collector):
    return QuizPageWindow(page, DEFAULT_CONFIG, client=client, controller=QuizController(reporter=collector))


def test_page_quizzes_are_shown_and_bound(qapp, page, collector):
    w = _window(qapp, page, None, collector)
    assert w.page_layout.count() == 1
    assert not w.ai_box.isVisibleTo(w)
    assert w.controller.init(w.centralWidget()) == 0
    w.close()


def test_generate_appends_and_saves(qapp, page, collector, sample_text):
    client = FakeClient(content=sample_text.replace("q1", "gen-1"))
    w = _window(qapp, page, client, collector)

    w.btn_generate.click()

    assert client.generated[0] == {"mode": "exam", "query": "", "difficulty": "中等", "count": "3"}
    assert w.results_layout.count() == 1
    assert "生成成功" in w.lbl_status.text()
    assert client.saved[0][0].startswith("{{<quiz")
    assert client.saved[0][3] == w.page_url
    assert w.btn_generate.isEnabled()
    w.close()


def test_save_failure_is_not_shown(qapp, page, collector, sample_text):
    client = FakeClient(content=sample_text, save_error=QuizServiceError("保存失败: 500"))
    w = _window(qapp, page, client, collector)

    w.btn_generate.click()
    assert "生成成功" in w.lbl_status.text()
    w.close()


def test_generate_failure_shows_single_message(qapp, page, collector):
    client = FakeClient(generate_error=QuizServiceError("请求失败: down"))
    w = _window(qapp, page, client, collector)

    w.btn_generate.click()
    assert w.lbl_status.text() == "生成失败：请求失败: down"
    assert w.results_layout.count() == 0
    assert client.saved == []
    assert w.btn_generate.isEnabled()
    w.close()


def test_saved_content_loaded_on_start(qapp, page, collector, sample_text):
    client = FakeClient(load_result=sample_text.replace("q1", "saved-1"))
    w = _window(qapp, page, client, collector)
    assert w.results_layout.count() == 1
    w.close()


def test_load_failure_is_ignored(qapp, page, collector):
    client = FakeClient(load_error=QuizServiceError("加载失败: 500"))
    w = _window(qapp, page, client, collector)
    assert w.results_layout.count() == 0
    w.close()


def test_results_after_close_are_dropped(qapp, page, collector, sample_text):
    client = FakeClient(content=sample_text.replace("q1", "late"))
    w = _window(qapp, page, client, collector)
    w.close()

    assert w.ai_host.append_content(sample_text) == []
    assert w.results_layout.count() == 0
