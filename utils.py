# utils.py
import itertools
import logging
import sys
import time

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# 进程内单调递增，保证同一毫秒内生成的 id 也不重复
_id_counter = itertools.count(1)


def new_quiz_id() -> str:
    """为没有 id 的题目生成页面内唯一的 id"""
    return f"quiz-{int(time.time() * 1000)}-{next(_id_counter)}"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
