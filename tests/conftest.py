"""Test configuration helpers."""

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# 无显示器环境下跑 Qt
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

SAMPLE = (
    '{{<quiz id="q1" question="2+2?" correct="B">}}'
    '{{<quizoption value="A" explanation="wrong">}}3{{</quizoption>}}'
    '{{<quizoption value="B" explanation="right">}}4{{</quizoption>}}'
    '{{</quiz>}}'
)


@pytest.fixture(scope="session")
def qapp():
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def sample_text():
    return SAMPLE


@pytest.fixture
def surface(qapp):
    from PyQt5.QtWidgets import QVBoxLayout, QWidget

    owner = QWidget()
    layout = QVBoxLayout()
    owner.setLayout(layout)
    yield layout
    owner.deleteLater()


class Collector:
    """收集控制器上报的提示，代替弹窗"""

    def __init__(self):
        self.messages = []

    def __call__(self, container, message):
        self.messages.append((container.objectName(), message))


@pytest.fixture
def collector():
    return Collector()
