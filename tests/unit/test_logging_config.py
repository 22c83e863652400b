"""
Unit Tests for Logging Configuration
"""

import json
import logging
import sys

import pytest

from rkode.common.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def logger_name(request):
    """Unique logger per test, handlers removed afterwards"""
    name = f"rkode.test.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestJSONFormatter:
    """Tests for structured log records"""

    def _record(self, **extra):
        record = logging.LogRecord(
            name="rkode.integrators.base",
            level=logging.INFO,
            pathname=__file__,
            lineno=42,
            msg="Finished %s",
            args=("IRK4",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_required_fields(self):
        data = json.loads(JSONFormatter().format(self._record()))

        assert data['level'] == 'INFO'
        assert data['logger'] == 'rkode.integrators.base'
        assert data['message'] == 'Finished IRK4'
        assert data['line'] == 42
        assert data['timestamp'].endswith('Z')
        assert 'method' not in data

    def test_extra_fields(self):
        data = json.loads(JSONFormatter().format(self._record(method='IRK4', component='stepper')))

        assert data['method'] == 'IRK4'
        assert data['component'] == 'stepper'

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("rkode", logging.ERROR, __file__, 1, "failed", None,
                                       exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data['exception']


class TestSetupLogging:
    """Tests for handler configuration"""

    def test_console_handler(self, logger_name):
        logger = setup_logging(name=logger_name, log_level="DEBUG", json_format=False)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_json_format(self, logger_name):
        logger = setup_logging(name=logger_name, json_format=True)
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_repeated_setup_replaces_handlers(self, logger_name):
        setup_logging(name=logger_name)
        logger = setup_logging(name=logger_name)
        assert len(logger.handlers) == 1

    def test_file_handler(self, logger_name, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logging(name=logger_name, log_file=str(log_file), json_format=True)
        logger.info("integration finished")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        line = log_file.read_text().strip().splitlines()[-1]
        assert json.loads(line)['message'] == "integration finished"

    def test_invalid_level(self, logger_name):
        with pytest.raises(ValueError, match="Unknown log level"):
            setup_logging(name=logger_name, log_level="LOUD")
