"""Tests for observability/logger.py and observability/metrics.py"""
import io
import json
import logging
import sys


class TestStructuredFormatter:
    def _get_record(
        self,
        msg,
        level=logging.INFO,
        exc_info=None,
        stack_info=None,
        extra_fields=None,
    ):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        if stack_info is not None:
            record.stack_info = stack_info
        return record

    def test_basic_format(self):
        from imguploader.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        result = json.loads(fmt.format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        from imguploader.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", extra_fields={"op": "batch", "size": 3})
        result = json.loads(fmt.format(record))
        assert result["op"] == "batch"
        assert result["size"] == 3

    def test_non_json_values_stringified(self):
        from imguploader.models import OutcomeStatus
        from imguploader.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", extra_fields={"raw": b"\x00", "status": OutcomeStatus.FAILED})
        result = json.loads(fmt.format(record))
        assert result["status"] == "failed"
        assert isinstance(result["raw"], str)

    def test_exception_info_included(self):
        from imguploader.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(fmt.format(self._get_record("error msg", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_stack_info_included(self):
        from imguploader.observability.logger import StructuredFormatter

        fmt = StructuredFormatter()
        record = self._get_record("msg", stack_info="Stack Trace Here")
        result = json.loads(fmt.format(record))
        assert result["stack_info"] == "Stack Trace Here"


class TestGetLogger:
    def test_returns_logger_with_handler(self):
        from imguploader.observability.logger import get_logger

        logger = get_logger("test.imguploader.unique1")
        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_string_level(self):
        from imguploader.observability.logger import get_logger

        logger = get_logger("test.imguploader.unique2", level="warning")
        assert logger.level == logging.WARNING

    def test_idempotent_no_duplicate_handlers(self):
        from imguploader.observability.logger import get_logger

        name = "test.imguploader.unique3"
        first = get_logger(name)
        count = len(first.handlers)
        second = get_logger(name, level="ERROR")
        assert second is first
        assert len(second.handlers) == count

    def test_custom_stream_receives_json_lines(self):
        from imguploader.observability.logger import get_logger

        stream = io.StringIO()
        logger = get_logger("test.imguploader.stream_unique", stream=stream)
        logger.info("Image uploaded", extra={"extra_fields": {"url": "http://x.test/a.png"}})
        line = json.loads(stream.getvalue().strip())
        assert line["message"] == "Image uploaded"
        assert line["url"] == "http://x.test/a.png"


class TestMetricsHook:
    def test_noop_methods_return_none(self):
        from imguploader.observability.metrics import NoopMetricsHook

        hook = NoopMetricsHook()
        assert hook.increment("imguploader.requests_total") is None
        assert hook.timing("imguploader.request_duration_ms", 12.5) is None
        assert hook.gauge("imguploader.batch_in_flight", 2, tags={"env": "test"}) is None

    def test_noop_satisfies_protocol(self):
        from imguploader.observability.metrics import MetricsHook, NoopMetricsHook

        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_custom_hook_satisfies_protocol(self):
        from imguploader.observability.metrics import MetricsHook

        class Recorder:
            def increment(self, name, value=1, tags=None):
                pass

            def timing(self, name, ms, tags=None):
                pass

            def gauge(self, name, value, tags=None):
                pass

        assert isinstance(Recorder(), MetricsHook)

    def test_object_missing_methods_does_not(self):
        from imguploader.observability.metrics import MetricsHook

        class Partial:
            def increment(self, name, value=1, tags=None):
                pass

        assert not isinstance(Partial(), MetricsHook)
