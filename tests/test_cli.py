"""Tests for the CLI implementation."""

import json
import logging

import pytest
from typer.testing import CliRunner
from werkzeug import Request, Response

from lazyhttp.cli import app

DATA = b"0123456789" * 100  # 1000 bytes


def _range_handler(request: Request) -> Response:
    if request.method == "HEAD":
        return Response(status=200, headers={"Content-Length": str(len(DATA)), "Accept-Ranges": "bytes"})
    if "Range" in request.headers:
        start, end = map(int, request.headers["Range"].replace("bytes=", "").split("-"))
        return Response(DATA[start:end+1], status=206,
                        headers={"Content-Range": f"bytes {start}-{end}/{len(DATA)}"})
    return Response(DATA, status=200)


class TestCLI:
    """Test the CLI functionality against a local origin."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def origin(self, httpserver):
        httpserver.expect_request("/data.bin").respond_with_handler(_range_handler)
        httpserver.expect_request("/plain.bin").respond_with_data(DATA)
        return httpserver

    def test_probe(self, runner, origin):
        result = runner.invoke(app, ["probe", origin.url_for("/data.bin")])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["supports_range"] is True
        assert payload["content_length"] == 1000

    def test_probe_multiple_jsonl(self, runner, origin):
        result = runner.invoke(app, ["probe", origin.url_for("/data.bin"), origin.url_for("/plain.bin")])

        assert result.exit_code == 0
        lines = [json.loads(ln) for ln in result.stdout.strip().splitlines()]
        assert [obj["supports_range"] for obj in lines] == [True, False]

    def test_fetch_to_file(self, runner, origin, tmp_path):
        out = tmp_path / "chunk.bin"
        result = runner.invoke(app, ["fetch", origin.url_for("/data.bin"),
                                     "--offset", "200", "--length", "300", "-o", str(out)])

        assert result.exit_code == 0
        assert out.read_bytes() == DATA[200:500]

    def test_fetch_to_stdout(self, runner, origin):
        result = runner.invoke(app, ["fetch", origin.url_for("/data.bin"), "--length", "10"])

        assert result.exit_code == 0
        assert result.stdout_bytes == DATA[:10]

    def test_fetch_without_range_support_fails(self, runner, origin):
        result = runner.invoke(app, ["fetch", origin.url_for("/plain.bin"), "--length", "10"])
        assert result.exit_code == 1

    def test_import(self, runner, origin):
        result = runner.invoke(app, ["import", origin.url_for("/data.bin"), origin.url_for("/plain.bin")])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["files"] == [origin.url_for("/data.bin"), origin.url_for("/plain.bin")]
        assert payload["fails"] == []
        assert payload["lazy"] == 1
        assert payload["eager"] == 1

    def test_import_no_lazy(self, runner, origin):
        result = runner.invoke(app, ["import", "--no-lazy", origin.url_for("/data.bin")])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["eager"] == 1

    def test_import_failure_exit_code(self, runner, origin):
        result = runner.invoke(app, ["import", "http://127.0.0.1:1/gone.bin"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["fails"] == ["http://127.0.0.1:1/gone.bin"]

    def test_no_input(self, runner):
        result = runner.invoke(app, ["import"])
        assert result.exit_code == 1

    def test_quiet_limits_package_logging(self, runner, origin):
        pkg_logger = logging.getLogger("lazyhttp")
        try:
            result = runner.invoke(app, ["--quiet", "probe", origin.url_for("/data.bin")])
            assert result.exit_code == 0
            assert pkg_logger.level == logging.ERROR
        finally:
            pkg_logger.setLevel(logging.NOTSET)

    def test_verbose_and_quiet_conflict(self, runner, origin):
        result = runner.invoke(app, ["--verbose", "--quiet", "probe", origin.url_for("/data.bin")])
        assert result.exit_code != 0
