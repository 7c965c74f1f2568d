# parser.py
import re
from typing import Dict, List

from models import Quiz, QuizOption

# name="value"；值里不允许出现双引号，也不处理转义
ATTR_PAT = re.compile(r'([a-zA-Z0-9_-]+)\s*=\s*"([^"]*)"')

# {{< quiz ... >}} ... {{< /quiz >}}，非贪婪、不嵌套
QUIZ_PAT = re.compile(r'{{<\s*quiz(?!option)([^>]*)>}}([\s\S]*?){{<\s*/quiz\s*>}}')

OPTION_PAT = re.compile(r'{{<\s*quizoption([^>]*)>}}([\s\S]*?){{<\s*/quizoption\s*>}}')


def parse_attributes(raw: str) -> Dict[str, str]:
    """
    从短代码标签的属性区解析 key="value"。
    不匹配的片段直接跳过；同名属性后者覆盖前者。
    """
    attrs: Dict[str, str] = {}
    if not raw:
        return attrs
    for m in ATTR_PAT.finditer(raw):
        attrs[m.group(1)] = m.group(2)
    return attrs


def parse_quiz_shortcodes(content: str) -> List[Quiz]:
    """
    扫描文本中的 quiz / quizoption 短代码，按出现顺序返回 Quiz 列表。

    残缺的标签（只有开没有闭、或闭合在前）不会报错，只是被忽略。
    """
    quizzes: List[Quiz] = []
    if not content:
        return quizzes

    for m_quiz in QUIZ_PAT.finditer(content):
        attrs = parse_attributes(m_quiz.group(1))
        body = m_quiz.group(2)

        options = []
        for m_opt in OPTION_PAT.finditer(body):
            opt_attrs = parse_attributes(m_opt.group(1))
            options.append(QuizOption(
                value=opt_attrs.get("value", ""),
                explanation=opt_attrs.get("explanation", ""),
                content=m_opt.group(2).strip(),
            ))

        quizzes.append(Quiz(
            id=attrs.get("id", ""),
            question=attrs.get("question", ""),
            correct=attrs.get("correct", ""),
            options=options,
        ))

    return quizzes
