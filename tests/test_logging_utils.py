import json
import logging

from openlabel.core.logging_utils import JsonFormatter


def test_json_formatter_includes_extra_fields():
    record = logging.makeLogRecord({
        "name": "openlabel.test",
        "levelname": "ERROR",
        "levelno": logging.ERROR,
        "msg": "provider said %s",
        "args": ("no",),
        "endpoint": "/generate-lyrics",
        "payload": object(),
    })

    line = json.loads(JsonFormatter().format(record))

    assert line["level"] == "ERROR"
    assert line["logger"] == "openlabel.test"
    assert line["message"] == "provider said no"
    assert line["endpoint"] == "/generate-lyrics"
    assert isinstance(line["payload"], str)
    assert "msg" not in line
