"""Tests for loguru sink setup."""

from loguru import logger

from src.utils.logger import setup_logger


class TestSetupLogger:
    def test_file_sink_captures_debug(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        log_file = tmp_path / "launchpad.log"
        setup_logger(level="WARNING", log_file=str(log_file))

        logger.debug("[CURVE] BUY test")
        logger.remove()

        assert "[CURVE] BUY test" in log_file.read_text()

    def test_no_file_sink_by_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        setup_logger()
        logger.info("console only")
        logger.remove()
        assert list(tmp_path.iterdir()) == []
