import json
import logging
import sys

from userdb.logsetup import JsonFormatter, setup_logging


def test_json_formatter_includes_error_block():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("userdb.store", logging.ERROR, __file__, 1, "failed %s", ("op",), sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert payload["message"] == "failed op"
    assert payload["error"]["type"] == "RuntimeError"
    assert payload["error"]["message"] == "boom"


def test_setup_logging_sets_root_level():
    setup_logging("warning", "json")
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert isinstance(root.handlers[0].formatter, JsonFormatter)

    setup_logging("INFO", "plain")
    assert logging.getLogger().level == logging.INFO
