from __future__ import annotations

from cmdnav.log_manager import CATEGORIES, LogManager


def test_default_categories_exist() -> None:
    logs = LogManager()
    for name in CATEGORIES:
        assert logs.text(name) == ""


def test_add_splits_lines_and_bounds_buffer() -> None:
    logs = LogManager(max_lines=3)
    logs.add("events", "a\nb")
    logs.add("events", "c")
    logs.add("events", "d")
    assert logs.text("events") == "b\nc\nd"


def test_logger_callback() -> None:
    logs = LogManager()
    log = logs.logger("debug")
    log("hello")
    assert logs.text("debug") == "hello"


def test_unknown_category_created_on_add() -> None:
    logs = LogManager()
    logs.add("custom", "x")
    assert logs.text("custom") == "x"


def test_dump_writes_non_empty_sections(tmp_path) -> None:
    logs = LogManager()
    logs.add("events", "enter → run")
    logs.add("debug", "key='q'")
    path = logs.dump(tmp_path / "session.log")
    content = path.read_text(encoding="utf-8")
    assert "[events]\nenter → run" in content
    assert "[debug]\nkey='q'" in content
    assert "[errors]" not in content
