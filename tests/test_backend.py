"""Tests for the HTTP storage backend."""

import pytest
from pytest_httpserver import HTTPServer
from werkzeug import Request, Response

from lazyhttp.backend import Capability, HTTPBackend
from lazyhttp.core.config import Settings
from lazyhttp.core.keys import file_key
from lazyhttp.core.model import ChunkHandle, ProtocolError, UnsupportedOperationError
from lazyhttp.core.registry import VirtualFileRegistry


class TestUnsupportedOperations:
    """Write-side operations must fail loudly."""

    def setup_method(self):
        self.backend = HTTPBackend(settings=Settings())
        self.handle = ChunkHandle(file_key("http://host/data.bin"))

    def test_capabilities(self):
        assert self.backend.supports(Capability.READ)
        assert self.backend.supports(Capability.IMPORT)
        for cap in (Capability.WRITE, Capability.DELETE, Capability.CLEAN_UP,
                    Capability.RESOLVE, Capability.LIST):
            assert not self.backend.supports(cap)

    @pytest.mark.parametrize("operation,call", [
        ("store", lambda b, h: b.store(h, b"data")),
        ("delete", lambda b, h: b.delete(h)),
        ("clean_up", lambda b, h: b.clean_up()),
        ("uri_to_key", lambda b, h: b.uri_to_key("http://host/data.bin")),
        ("typeahead", lambda b, h: b.typeahead("http://host/")),
    ])
    def test_raises_distinct_error(self, operation, call):
        with pytest.raises(UnsupportedOperationError) as excinfo:
            call(self.backend, self.handle)
        assert excinfo.value.operation == operation
        assert excinfo.value.backend == "http"
        assert isinstance(excinfo.value, NotImplementedError)

    def test_store_for_remote_owner_is_noop(self):
        assert self.backend.store(self.handle, b"data", home=False) is None


class TestBackendReads:
    """Chunk reads through the backend."""

    def setup_method(self):
        self.test_data = bytes(range(200)) * 5  # 1000 bytes
        self.server = HTTPServer(host="127.0.0.1", port=0)
        self.server.expect_request("/data.bin").respond_with_handler(self._handle_request)
        self.server.start()
        self.url = f"http://127.0.0.1:{self.server.port}/data.bin"
        self.backend = HTTPBackend(registry=VirtualFileRegistry(chunk_size=300), settings=Settings())

    def teardown_method(self):
        self.server.stop()

    def _handle_request(self, request: Request) -> Response:
        if request.method == "HEAD":
            return Response(status=200, headers={
                "Content-Length": str(len(self.test_data)),
                "Accept-Ranges": "bytes",
            })
        start, end = map(int, request.headers["Range"].replace("bytes=", "").split("-"))
        return Response(
            self.test_data[start:end+1],
            status=206,
            headers={"Content-Range": f"bytes {start}-{end}/{len(self.test_data)}"},
        )

    def test_import_then_read_chunks(self):
        report = self.backend.import_files([self.url])
        assert report.files == [self.url]
        assert report.fails == []

        key = file_key(self.url)
        chunks = [self.backend.read_chunk(key, i) for i in range(4)]
        assert [len(c) for c in chunks] == [300, 300, 300, 100]
        assert b"".join(chunks) == self.test_data

    def test_load_handle(self):
        data = self.backend.load(ChunkHandle(file_key(self.url), offset=200), 300)
        assert data == self.test_data[200:500]

    def test_load_into(self):
        buffer = bytearray(50)
        self.backend.load_into(ChunkHandle(file_key(self.url), offset=950), buffer)
        assert bytes(buffer) == self.test_data[950:]

    def test_load_past_end(self):
        # origin answers with only the bytes that exist
        with pytest.raises(ProtocolError):
            self.backend.load(ChunkHandle(file_key(self.url), offset=900), 300)
