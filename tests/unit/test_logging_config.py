"""
Unit tests for logging setup.
"""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from legalsearch.logging_config import SESSION_LOGS_KEPT, level_from_name, setup_logging


class TestLevelFromName:
    @pytest.mark.parametrize("name,expected", [
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("Warning", logging.WARNING),
        (logging.ERROR, logging.ERROR),
    ])
    def test_known_levels(self, name, expected):
        assert level_from_name(name) == expected

    def test_unknown_level_falls_back(self):
        assert level_from_name("chatty") == logging.INFO
        assert level_from_name("chatty", default=logging.DEBUG) == logging.DEBUG


class TestSetupLogging:
    """Test console and session file handlers"""

    def test_console_only(self, restore_root_logger):
        session_log = setup_logging(None, console_level="warning")

        assert session_log is None
        assert len(restore_root_logger.handlers) == 1
        handler = restore_root_logger.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.level == logging.WARNING

    def test_session_file(self, restore_root_logger, tmp_path):
        session_log = setup_logging(str(tmp_path / "logs" / "search.log"))

        assert session_log.parent == tmp_path / "logs"
        assert session_log.name.startswith("search_")
        assert session_log.suffix == ".log"

        file_handlers = [h for h in restore_root_logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG

        logging.getLogger("legalsearch.test").debug("detail line")
        file_handlers[0].flush()
        assert "detail line" in session_log.read_text(encoding="utf-8")

    def test_repeated_setup_replaces_handlers(self, restore_root_logger):
        setup_logging(None)
        setup_logging(None)
        assert len(restore_root_logger.handlers) == 1

    def test_old_sessions_pruned(self, restore_root_logger, tmp_path):
        for day in range(1, 9):
            (tmp_path / f"search_202501{day:02d}_120000.log").write_text("old", encoding="utf-8")

        session_log = setup_logging(str(tmp_path / "search.log"))

        remaining = sorted(tmp_path.glob("search_*.log"))
        assert len(remaining) == SESSION_LOGS_KEPT
        assert session_log in remaining
        assert tmp_path / "search_20250108_120000.log" in remaining
        assert tmp_path / "search_20250101_120000.log" not in remaining
