"""
Logging setup tests.
"""

import json
import logging

from abcretailers.core.config import LoggingSettings
from abcretailers.core.structured_logger import (
    JSONFormatter,
    ROOT_LOGGER_NAME,
    configure_logging,
    get_logger,
)


def _handlers(logger):
    return [h for h in logger.handlers if getattr(h, "_abcretailers_handler", False)]


def test_configure_logging_is_idempotent():
    logger = configure_logging(LoggingSettings(level="DEBUG", format="json"))
    configure_logging(LoggingSettings(level="WARNING", format="text"))

    handlers = _handlers(logger)
    assert logger.name == ROOT_LOGGER_NAME
    assert len(handlers) == 1
    assert logger.level == logging.WARNING
    assert not isinstance(handlers[0].formatter, JSONFormatter)


def test_json_formatter_includes_structured_fields():
    record = logging.LogRecord(
        name="abcretailers.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Order placed",
        args=(),
        exc_info=None,
    )
    record.extra_data = {"order_id": "o-1", "quantity": 2}

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "Order placed"
    assert payload["level"] == "INFO"
    assert payload["order_id"] == "o-1"
    assert payload["quantity"] == 2


def test_structured_logger_passes_fields_as_extra(caplog):
    logger = get_logger("abcretailers.tests.structured")
    with caplog.at_level(logging.INFO, logger="abcretailers.tests.structured"):
        logger.info("Payment proof uploaded", order_id="o-1")

    record = caplog.records[-1]
    assert record.getMessage() == "Payment proof uploaded"
    assert record.extra_data == {"order_id": "o-1"}
