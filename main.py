# main.py
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt5.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QComboBox, QGroupBox, QScrollArea
)

from client import QuizServiceClient, QuizServiceError
from config import load_config
from controller import QuizController
from host import QuizHost, build_quizzes
from markup import render_quiz_html
from utils import setup_logging

LOGGER = logging.getLogger("quizmark")


class QuizPageWindow(QMainWindow):
    """显示一个内容页里的题目，并可按需向生成服务要新题"""

    def __init__(self, page_path: Path, cfg: dict,
                 client: Optional[QuizServiceClient] = None,
                 controller: Optional[QuizController] = None):
        super().__init__()
        self.cfg = cfg
        self.page_path = page_path
        self.page_url = page_path.resolve().as_uri()
        self.client = client
        self.controller = controller or QuizController()

        ui = cfg["ui"]
        self.setWindowTitle(f"{ui['title']} - {page_path.name}")
        self.resize(ui["width"], ui["height"])

        # ----------------- UI -----------------
        self._init_ui()
        self._apply_style()

        # 页面自带的题目
        self.page_host = QuizHost(self.page_layout, self.controller)
        self.page_host.append_content(page_path.read_text(encoding="utf-8"))

        # AI 出题区
        self.ai_host = QuizHost(self.results_layout, self.controller)
        if self.client is not None:
            self.load_saved()

    # -------------------------------------------------
    def _init_ui(self):
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.setCentralWidget(scroll)

        central = QWidget()
        scroll.setWidget(central)
        main_layout = QVBoxLayout()
        main_layout.setContentsMargins(32, 24, 32, 24)
        main_layout.setSpacing(18)
        central.setLayout(main_layout)

        # ---------- 页面题目 ----------
        page_box = QWidget()
        self.page_layout = QVBoxLayout()
        self.page_layout.setSpacing(16)
        page_box.setLayout(self.page_layout)
        main_layout.addWidget(page_box)

        # ---------- AI 出题 ----------
        self.ai_box = QGroupBox("AI 出题")
        ai_layout = QVBoxLayout()
        self.ai_box.setLayout(ai_layout)
        main_layout.addWidget(self.ai_box)

        top_layout = QHBoxLayout()
        top_layout.setSpacing(12)
        ai_layout.addLayout(top_layout)

        quiz_cfg = self.cfg["quiz"]
        self.cb_difficulty = QComboBox()
        self.cb_difficulty.addItems(quiz_cfg["difficulties"])
        self.cb_difficulty.setCurrentText(quiz_cfg["default_difficulty"])
        top_layout.addWidget(self.cb_difficulty)

        self.cb_count = QComboBox()
        self.cb_count.addItems([str(c) for c in quiz_cfg["counts"]])
        self.cb_count.setCurrentText(str(quiz_cfg["default_count"]))
        top_layout.addWidget(self.cb_count)

        self.btn_generate = QPushButton("生成考题")
        self.btn_generate.setMinimumWidth(120)
        self.btn_generate.clicked.connect(self.generate)
        top_layout.addWidget(self.btn_generate)
        top_layout.addStretch(1)

        self.lbl_status = QLabel("")
        self.lbl_status.setWordWrap(True)
        ai_layout.addWidget(self.lbl_status)

        results = QWidget()
        self.results_layout = QVBoxLayout()
        self.results_layout.setSpacing(16)
        results.setLayout(self.results_layout)
        ai_layout.addWidget(results)

        main_layout.addStretch(1)
        self.ai_box.setVisible(self.client is not None)

    def _apply_style(self):
        QApplication.setStyle("Fusion")
        self.setStyleSheet("""
            QLabel { font-size: 16px; }
            QPushButton {
                background-color: #5a9bd4;
                color: #fff;
                border: none;
                padding: 8px 18px;
                border-radius: 8px;
                font-size: 15px;
            }
            QPushButton:hover { background-color: #7fb0e2; }
            QPushButton:disabled { background-color: #444; color: #aaa; }
        """)

    # -------------------------------------------------
    def closeEvent(self, event):
        # 关窗后迟到的结果不再往界面里塞
        self.page_host.detach()
        self.ai_host.detach()
        super().closeEvent(event)

    def set_status(self, text: str):
        self.lbl_status.setText(text)

    # ---- 加载已保存的题目 ----
    def load_saved(self):
        try:
            content = self.client.load(self.page_url)
        except (QuizServiceError, OSError, ValueError) as e:
            LOGGER.warning("加载已保存内容失败（不影响使用）: %s", e)
            return
        if content:
            self.ai_host.append_content(content)

    # ---- 生成考题 ----
    def generate(self):
        difficulty = self.cb_difficulty.currentText()
        count = self.cb_count.currentText()
        params = {"mode": "exam", "query": "", "difficulty": difficulty, "count": count}

        self.btn_generate.setEnabled(False)
        self.set_status("正在生成考题，请稍候…")
        QApplication.processEvents()
        try:
            payload = self.client.generate(params)
            content = self.client.generated_content(payload)
            self.ai_host.append_content(content)
            self.set_status(f"生成成功，已生成 {count} 道{difficulty}难度的题目。")
            self._save(content, difficulty, count)
        except QuizServiceError as e:
            LOGGER.error("generate: %s", e)
            self.set_status(f"生成失败：{e}")
        finally:
            self.btn_generate.setEnabled(True)

    def _save(self, content: str, difficulty: str, count: str):
        try:
            self.client.save(content, difficulty, count, self.page_url, self.page_path.stem)
            LOGGER.info("内容已保存到服务器")
        except (QuizServiceError, OSError, ValueError) as e:
            LOGGER.warning("保存失败（不影响使用）: %s", e)


# -------------------------------------------------
def export_html(page_path: Path, out_path: Path) -> int:
    quizzes = build_quizzes(page_path.read_text(encoding="utf-8"))
    out_path.write_text("\n\n".join(render_quiz_html(q) for q in quizzes) + "\n", encoding="utf-8")
    LOGGER.info("exported %d quizzes to %s", len(quizzes), out_path)
    return len(quizzes)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Show shortcode quizzes from a content page")
    p.add_argument("page", help="Page file (shortcode text or HTML)")
    p.add_argument("--config", default="config.yaml", help="Config file path")
    p.add_argument("--endpoint", default="", help="Quiz service base URL")
    p.add_argument("--log-level", default="INFO")
    p.add_argument("--export-html", default="", help="Write quizzes as static HTML and exit")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    cfg = load_config(args.config)
    if args.endpoint:
        cfg["service"]["endpoint"] = args.endpoint

    page = Path(args.page)
    if not page.exists():
        LOGGER.error("Page not found: %s", page)
        return 2

    if args.export_html:
        export_html(page, Path(args.export_html))
        return 0

    endpoint = cfg["service"]["endpoint"]
    client = QuizServiceClient(endpoint, timeout=float(cfg["service"]["timeout_sec"])) if endpoint else None

    app = QApplication(sys.argv[:1])
    window = QuizPageWindow(page, cfg, client=client)
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
