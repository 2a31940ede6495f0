import json
import logging
import sys

import pytest

from shortener.logging_config import LOGGER_NAME, JsonFormatter, setup_logging


def _record(msg, *args, exc_info=None):
    return logging.LogRecord(
        name="shortener.api",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )


@pytest.fixture
def restore_logging():
    yield
    setup_logging()


def test_json_line_survives_quotes_in_message():
    url = 'https://example.com/"q"\\path'
    line = JsonFormatter().format(_record("handlers.url.save: request body decoded url=%s", url))

    payload = json.loads(line)

    assert payload["message"] == f"handlers.url.save: request body decoded url={url}"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "shortener.api"
    assert "\n" not in line


def test_json_line_includes_exception():
    try:
        raise RuntimeError("db down")
    except RuntimeError:
        line = JsonFormatter().format(_record("failed", exc_info=sys.exc_info()))

    payload = json.loads(line)
    assert "RuntimeError: db down" in payload["exception"]


def test_setup_logging_installs_one_handler(restore_logging):
    setup_logging(level="debug", json_format=True)
    setup_logging(level="debug", json_format=True)

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)


def test_setup_logging_text_format_by_default(restore_logging):
    logger = setup_logging(level="nonsense")
    assert logger.level == logging.INFO
    assert not isinstance(logger.handlers[0].formatter, JsonFormatter)
