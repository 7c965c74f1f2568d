from extractor import extract_content, stringify_safe


def test_plain_string_is_trimmed():
    assert extract_content("  hello \n") == "hello"


def test_openai_style_envelope():
    assert extract_content({"choices": [{"message": {"content": "X"}}]}) == "X"


def test_direct_content_wins_over_wrappers():
    assert extract_content({"content": "direct", "message": {"content": "nested"}}) == "direct"


def test_blank_direct_content_falls_through():
    assert extract_content({"content": "   ", "message": {"content": "nested"}}) == "nested"


def test_empty_and_unknown_shapes():
    assert extract_content({}) == ""
    assert extract_content(None) == ""
    assert extract_content([]) == ""
    assert extract_content(42) == ""
    assert extract_content({"unrelated": "value"}) == ""


def test_wrapper_priority_order():
    raw = {"data": "from data", "result": "from result", "delta": {"content": "from delta"}}
    assert extract_content(raw) == "from delta"
    assert extract_content({"answer": "a", "data": "d"}) == "a"


def test_sequence_returns_first_non_empty():
    raw = [{}, {"delta": {"content": ""}}, {"output": [" ", "second"]}, "third"]
    assert extract_content(raw) == "second"


def test_deeply_nested_envelope():
    raw = {"success": True, "data": {"result": {"output": [{"choices": [{"delta": {"content": " deep "}}]}]}}}
    assert extract_content(raw) == "deep"


def test_stringify_safe():
    assert stringify_safe("x") == "x"
    assert stringify_safe({"a": "中"}) == '{\n  "a": "中"\n}'
    assert stringify_safe({1, 2}).startswith("{")
