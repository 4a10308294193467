"""Unit tests for the raw NDJSON renderer."""

import io
import json

from a2acli.render.raw import RawRenderer
from tests.fakes.fake_transport import status_event, text_artifact_event


class TestRawRenderer:
    """Tests for RawRenderer."""

    def test_one_json_line_per_event(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        renderer = RawRenderer(out, err)

        renderer.event(status_event("working"))
        renderer.event(text_artifact_event("r.txt", "hello"))

        lines = out.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["kind"] == "status-update"
        assert json.loads(lines[1])["artifact"]["parts"] == [{"kind": "text", "text": "hello"}]
        assert err.getvalue() == ""

    def test_error_goes_to_stderr(self) -> None:
        out, err = io.StringIO(), io.StringIO()

        RawRenderer(out, err).error("connection reset")

        assert out.getvalue() == ""
        assert json.loads(err.getvalue()) == {"error": "connection reset"}

    def test_document_is_indented_json(self) -> None:
        out = io.StringIO()

        RawRenderer(out, io.StringIO()).document({"id": "t1"})

        assert out.getvalue() == '{\n  "id": "t1"\n}\n'
