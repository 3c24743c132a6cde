"""Tests for logging configuration and client log output."""

import io
import logging
import sys

import pytest

from conftest import FakeTransport

from s3kit import Client, DeleteBucketTagsArgs, StaticProvider, TransportError, configure_logging
from s3kit.logging_config import PACKAGE_LOGGER, TextFormatter


@pytest.fixture(autouse=True)
def restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def test_configure_logging_levels(monkeypatch):
    monkeypatch.delenv("S3KIT_LOG_LEVEL", raising=False)
    assert configure_logging().level == logging.WARNING
    assert configure_logging("debug").level == logging.DEBUG

    monkeypatch.setenv("S3KIT_LOG_LEVEL", "INFO")
    assert configure_logging().level == logging.INFO
    assert configure_logging("error").level == logging.ERROR

    monkeypatch.setenv("S3KIT_LOG_LEVEL", "chatty")
    assert configure_logging().level == logging.WARNING


def test_configure_logging_replaces_handlers():
    configure_logging("INFO")
    logger = configure_logging("INFO")
    assert len(logger.handlers) == 1


def test_text_formatter_appends_extras():
    stream = io.StringIO()
    logger = configure_logging("INFO", stream=stream)
    logger.info("bucket tags removed", extra={"bucket": "my-bucket"})

    line = stream.getvalue().strip()
    assert " INFO s3kit bucket tags removed" in line
    assert line.endswith("bucket='my-bucket'")


def test_text_formatter_includes_exception():
    record = logging.LogRecord("s3kit", logging.ERROR, __file__, 1, "boom", None, None)
    try:
        raise RuntimeError("inner")
    except RuntimeError:
        record.exc_info = sys.exc_info()
    assert "RuntimeError: inner" in TextFormatter().format(record)


def test_transport_failure_logged_at_warning(endpoint, caplog):
    transport = FakeTransport(error=TransportError("connection refused"))
    client = Client(endpoint, StaticProvider("AKIAEXAMPLE", "very-secret"), transport=transport)

    with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
        client.delete_bucket_tags(DeleteBucketTagsArgs(bucket="my-bucket"))

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "DeleteBucketTags failed" in warnings[0].getMessage()
    assert "connection refused" in warnings[0].getMessage()


def test_secrets_never_logged(endpoint, caplog):
    transport = FakeTransport()
    client = Client(endpoint, StaticProvider("AKIAEXAMPLE", "very-secret"), transport=transport)

    with caplog.at_level(logging.DEBUG, logger=PACKAGE_LOGGER):
        client.delete_bucket_tags(DeleteBucketTagsArgs(bucket="my-bucket"))

    text = caplog.text
    assert "very-secret" not in text
    assert "AKIAEXAMPLE" not in text
    assert "AKIA****" in text
