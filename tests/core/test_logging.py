"""Tests for structlog configuration.

Records emitted by the bundler's stdlib loggers must come out through the
structlog processor chain, carrying the bound bundle_id.
"""

import io
import json
import logging

import pytest
import structlog

from ptbundler.core.logging import (
    _inject_context_vars,
    bind_bundle_id,
    configure_structlog,
    get_bundle_id,
)
from ptbundler.pipeline import deny_list_pipeline
from ptbundler.vcs import StaticVersionSource


@pytest.fixture
def log_stream():
    root = logging.getLogger()
    level = root.level
    stream = io.StringIO()
    yield stream
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


def _json_records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def _run_bundle(make_spec, settings, **spec_overrides):
    pipeline = deny_list_pipeline(
        make_spec(**spec_overrides),
        version_source=StaticVersionSource("1.2.3"),
        settings=settings,
        output=io.StringIO(),
    )
    return pipeline.create_zip_archive()


class TestConfigureStructlog:
    def test_pipeline_records_rendered_as_json_with_bundle_id(
        self, log_stream, make_spec, settings,
    ) -> None:
        configure_structlog(debug=False, stream=log_stream)

        _run_bundle(make_spec, settings)

        records = _json_records(log_stream)
        resolved = [r for r in records if r["event"] == "Resolved version 1.2.3 for test_plugin"]
        assert len(resolved) == 1
        assert resolved[0]["bundle_id"] == "test_plugin"
        assert resolved[0]["level"] == "info"
        assert resolved[0]["logger"] == "ptbundler.pipeline.bundler"
        assert "timestamp" in resolved[0]

    def test_failure_traceback_included(self, log_stream, make_spec, settings) -> None:
        configure_structlog(debug=False, stream=log_stream)

        def build():
            raise RuntimeError("compiler exploded")

        result = _run_bundle(make_spec, settings, build=build)

        assert result.is_success is False
        errors = [r for r in _json_records(log_stream) if r["level"] == "error"]
        assert errors[0]["bundle_id"] == "test_plugin"
        assert "RuntimeError: compiler exploded" in errors[0]["exception"]

    def test_no_bundle_id_outside_run(self, log_stream) -> None:
        configure_structlog(debug=False, stream=log_stream)

        logging.getLogger("ptbundler.tests").info("outside any bundle")

        record = _json_records(log_stream)[-1]
        assert record["event"] == "outside any bundle"
        assert "bundle_id" not in record

    def test_console_renderer_in_debug(self, log_stream, make_spec, settings) -> None:
        configure_structlog(debug=True, stream=log_stream)

        _run_bundle(make_spec, settings)

        output = log_stream.getvalue()
        assert "Resolved version 1.2.3 for test_plugin" in output
        assert "bundle_id=test_plugin" in output
        assert not output.lstrip().startswith("{")

    def test_debug_defaults_from_settings(self, log_stream, monkeypatch) -> None:
        monkeypatch.setenv("PTBUNDLER_DEBUG", "true")
        configure_structlog(stream=log_stream)
        assert logging.getLogger().level == logging.DEBUG

        monkeypatch.setenv("PTBUNDLER_DEBUG", "false")
        configure_structlog(stream=log_stream)
        assert logging.getLogger().level == logging.INFO

    def test_reconfigure_replaces_handler(self, log_stream) -> None:
        configure_structlog(debug=True, stream=log_stream)
        handler = configure_structlog(debug=False, stream=log_stream)

        installed = [
            h for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert installed == [handler]


class TestBundleIdContext:
    def test_bound_only_inside_block(self) -> None:
        assert get_bundle_id() == ""
        with bind_bundle_id("my-plugin"):
            assert get_bundle_id() == "my-plugin"
        assert get_bundle_id() == ""

    def test_processor_injects_bundle_id(self) -> None:
        with bind_bundle_id("my-plugin"):
            event = _inject_context_vars(None, "info", {"event": "x"})
        assert event["bundle_id"] == "my-plugin"

    def test_processor_omits_empty_bundle_id(self) -> None:
        event = _inject_context_vars(None, "info", {"event": "x"})
        assert "bundle_id" not in event
