"""
Tests for otel2zipkin.cli module.

This module contains tests for the CLI interface including argument parsing,
span loading, output generation, and end-to-end flows.
"""

import json
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from otel2zipkin.cli import (
    build_ip_supplier,
    convert_spans,
    generate_json_output,
    load_spans,
    main,
    parse_args,
    write_output,
)
from otel2zipkin.core.model import SpanRecord


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sample_trace_path() -> Path:
    """Return path to the sample OTLP fixture."""
    return Path(__file__).parent / "fixtures" / "otlp_trace.json"


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def simple_spans() -> list:
    """Create span records for testing."""
    return [
        SpanRecord(
            trace_id="5b8efff798038103d269b633813fc60c",
            span_id="eee19b7ec3c1b174",
            name="root",
            start_time_unix_nano=1_000_000,
            end_time_unix_nano=3_000_000,
            resource={"service.name": "api"},
        )
    ]


# =============================================================================
# Argument parsing
# =============================================================================


class TestParseArgs:
    """Tests for parse_args."""

    def test_defaults(self) -> None:
        """Test default option values."""
        args = parse_args(["trace.json"])

        assert args.input_file == "trace.json"
        assert args.output is None
        assert args.local_ip is None
        assert args.detect_local_ip is False
        assert args.indent is None
        assert args.verbose is False

    def test_all_options(self) -> None:
        """Test every option is parsed."""
        args = parse_args(
            ["trace.json", "-o", "out.json", "--local-ip", "10.0.0.7", "--indent", "2", "-v"]
        )

        assert args.output == "out.json"
        assert args.local_ip == "10.0.0.7"
        assert args.indent == 2
        assert args.verbose is True

    def test_invalid_ip_is_rejected(self) -> None:
        """Test a malformed --local-ip exits with a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["trace.json", "--local-ip", "not-an-ip"])
        assert exc_info.value.code == 2

    def test_ip_options_are_exclusive(self) -> None:
        """Test --local-ip and --detect-local-ip cannot be combined."""
        with pytest.raises(SystemExit):
            parse_args(["trace.json", "--local-ip", "10.0.0.7", "--detect-local-ip"])

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test --version prints the package version."""
        with pytest.raises(SystemExit):
            parse_args(["--version"])
        assert "0.1.0" in capsys.readouterr().out


# =============================================================================
# Building blocks
# =============================================================================


class TestLoadSpans:
    """Tests for load_spans."""

    def test_loads_fixture(self, sample_trace_path: Path) -> None:
        """Test the fixture file loads into span records."""
        spans = load_spans(str(sample_trace_path))
        assert len(spans) == 3

    def test_missing_file(self) -> None:
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_spans("/nonexistent/trace.json")


class TestBuildIpSupplier:
    """Tests for build_ip_supplier."""

    def test_fixed_address(self) -> None:
        """Test --local-ip yields a constant supplier."""
        supplier = build_ip_supplier(parse_args(["t.json", "--local-ip", "10.0.0.7"]))
        assert supplier() == "10.0.0.7"

    def test_no_address(self) -> None:
        """Test no option yields a supplier returning None."""
        assert build_ip_supplier(parse_args(["t.json"]))() is None

    def test_detected_address(self) -> None:
        """Test --detect-local-ip uses the local address lookup."""
        with patch("otel2zipkin.cli.LocalIpAddressSupplier") as supplier_cls:
            supplier = build_ip_supplier(parse_args(["t.json", "--detect-local-ip"]))
        assert supplier is supplier_cls.return_value


class TestOutput:
    """Tests for convert_spans, generate_json_output and write_output."""

    def test_convert_and_render(self, simple_spans: list) -> None:
        """Test spans are converted into Zipkin JSON."""
        zipkin_spans = convert_spans(simple_spans, lambda: "10.0.0.7")
        output = json.loads(generate_json_output(zipkin_spans))

        assert output == [
            {
                "traceId": "5b8efff798038103d269b633813fc60c",
                "id": "eee19b7ec3c1b174",
                "name": "root",
                "timestamp": 1000,
                "duration": 2000,
                "localEndpoint": {"serviceName": "api", "ipv4": "10.0.0.7"},
            }
        ]

    def test_compact_by_default(self, simple_spans: list) -> None:
        """Test output has no whitespace unless indented."""
        output = generate_json_output(convert_spans(simple_spans, lambda: None))
        assert " " not in output
        assert "\n" not in output

    def test_indented(self, simple_spans: list) -> None:
        """Test --indent produces multi-line output."""
        output = generate_json_output(convert_spans(simple_spans, lambda: None), indent=2)
        assert "\n  " in output

    def test_write_to_stdout(self, capsys: pytest.CaptureFixture) -> None:
        """Test content goes to stdout without an output path."""
        write_output("[]", None)
        assert capsys.readouterr().out == "[]\n"

    def test_write_to_file(self, temp_dir: Path) -> None:
        """Test content is written and parent directories are created."""
        path = temp_dir / "nested" / "out.json"
        write_output("[]", str(path))
        assert path.read_text(encoding="utf-8") == "[]"


# =============================================================================
# End to end
# =============================================================================


class TestMain:
    """Tests for main."""

    def test_success(self, sample_trace_path: Path, temp_dir: Path) -> None:
        """Test a full conversion writes Zipkin spans."""
        output_path = temp_dir / "zipkin.json"

        exit_code = main([str(sample_trace_path), "-o", str(output_path), "--local-ip", "10.0.0.7"])

        assert exit_code == 0
        spans = json.loads(output_path.read_text(encoding="utf-8"))
        assert len(spans) == 3

        checkout, charge, cache = spans
        assert checkout["kind"] == "SERVER"
        assert "parentId" not in checkout
        assert checkout["localEndpoint"] == {"serviceName": "checkout", "ipv4": "10.0.0.7"}
        assert checkout["tags"]["http.status_code"] == "500"
        assert checkout["tags"]["tags"] == "a,b"
        assert checkout["tags"]["error"] == "payment declined"
        assert checkout["tags"]["otel.status_code"] == "ERROR"
        assert checkout["tags"]["otel.dropped_attributes_count"] == "2"
        assert checkout["tags"]["otel.dropped_events_count"] == "1"
        assert checkout["tags"]["otel.scope.name"] == "io.opentelemetry.auto"
        assert checkout["tags"]["otel.library.name"] == "io.opentelemetry.auto"
        assert checkout["duration"] == 1000000

        assert charge["kind"] == "CLIENT"
        assert charge["duration"] == 1
        assert charge["parentId"] == "eee19b7ec3c1b174"

        assert "kind" not in cache
        assert cache["duration"] == 0
        assert cache["localEndpoint"]["serviceName"] == "unknown_service"
        assert cache["tags"] == {
            "otel.scope.name": "legacy.lib",
            "otel.library.name": "legacy.lib",
        }

    def test_stdout(self, sample_trace_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test output goes to stdout by default."""
        assert main([str(sample_trace_path)]) == 0
        assert len(json.loads(capsys.readouterr().out)) == 3

    def test_verbose(self, sample_trace_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test verbose progress goes to stderr."""
        main([str(sample_trace_path), "-v"])
        assert "Parsed 3 spans" in capsys.readouterr().err

    def test_missing_file_exit_code(self, capsys: pytest.CaptureFixture) -> None:
        """Test a missing input file exits with 1."""
        assert main(["/nonexistent/trace.json"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_json_exit_code(self, temp_dir: Path) -> None:
        """Test invalid JSON exits with 2."""
        path = temp_dir / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 2

    def test_invalid_format_exit_code(self, temp_dir: Path) -> None:
        """Test a non-OTLP document exits with 3."""
        path = temp_dir / "other.json"
        path.write_text(json.dumps({"spans": []}), encoding="utf-8")
        assert main([str(path)]) == 3

    def test_unexpected_error_exit_code(self, sample_trace_path: Path) -> None:
        """Test unexpected errors exit with 4."""
        with patch("otel2zipkin.cli.convert_spans", side_effect=RuntimeError("boom")):
            assert main([str(sample_trace_path)]) == 4
