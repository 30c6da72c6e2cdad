# tests/test_render_json.py
from dataclasses import dataclass
from pathlib import Path

import pytest

from renderkit import Options, Render, ResponseRecorder
from renderkit.core.engine import marshal_json
from renderkit.exceptions import RenderError


@dataclass
class Greeting:
    one: str
    two: str


@pytest.fixture
def make_render(template_dir: Path):
    def factory(**kwargs) -> Render:
        return Render(Options(directory=str(template_dir), **kwargs))
    return factory


class TestJSON:
    def test_compact_output(self, make_render, recorder: ResponseRecorder):
        err = make_render().json(recorder, 200, {"hello": "json"})

        assert err is None
        assert recorder.code == 200
        assert recorder.headers["Content-Type"] == "application/json; charset=UTF-8"
        assert recorder.text == '{"hello":"json"}'

    def test_dataclass_value(self, make_render, recorder: ResponseRecorder):
        make_render().json(recorder, 299, Greeting("hello", "world"))
        assert recorder.code == 299
        assert recorder.text == '{"one":"hello","two":"world"}'

    def test_indent_adds_trailing_newline(self, make_render, recorder: ResponseRecorder):
        make_render(indent_json=True).json(recorder, 200, {"one": "hello", "two": "world"})
        assert recorder.text == '{\n  "one": "hello",\n  "two": "world"\n}\n'

    def test_prefix_precedes_body(self, make_render, recorder: ResponseRecorder):
        make_render(prefix_json=b")]}',\n").json(recorder, 200, {"hello": "json"})
        assert recorder.text == ')]}\',\n{"hello":"json"}'

    def test_html_characters_are_escaped(self, make_render, recorder: ResponseRecorder):
        make_render().json(recorder, 200, {"html": "<b>Tom & Jerry</b>"})
        assert recorder.text == '{"html":"\\u003cb\\u003eTom \\u0026 Jerry\\u003c/b\\u003e"}'

    def test_unescape_html(self, make_render, recorder: ResponseRecorder):
        make_render(unescape_html=True).json(recorder, 200, {"html": "<b>Tom & Jerry</b>"})
        assert recorder.text == '{"html":"<b>Tom & Jerry</b>"}'

    def test_non_ascii_is_written_as_utf8(self, make_render, recorder: ResponseRecorder):
        make_render().json(recorder, 200, {"name": "Zoë"})
        assert recorder.body == '{"name":"Zoë"}'.encode("utf-8")

    def test_nan_writes_500(self, make_render, recorder: ResponseRecorder):
        err = make_render().json(recorder, 200, {"value": float("nan")})

        assert isinstance(err, RenderError)
        assert recorder.code == 500
        assert recorder.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert recorder.headers["X-Content-Type-Options"] == "nosniff"
        assert recorder.text.startswith("json: unsupported value")

    def test_unserializable_value_writes_500(self, make_render, recorder: ResponseRecorder):
        err = make_render().json(recorder, 200, {"value": object()})
        assert isinstance(err, RenderError)
        assert recorder.code == 500

    def test_errors_not_rendered_when_disabled(self, make_render, recorder: ResponseRecorder):
        err = make_render(disable_http_error_rendering=True).json(recorder, 200, float("inf"))
        assert isinstance(err, RenderError)
        assert not recorder.wrote_header
        assert len(recorder.body) == 0

    def test_custom_content_type(self, make_render, recorder: ResponseRecorder):
        make_render(json_content_type="application/vnd.api+json").json(recorder, 200, [])
        assert recorder.headers["Content-Type"] == "application/vnd.api+json; charset=UTF-8"

    def test_custom_charset(self, make_render, recorder: ResponseRecorder):
        make_render(charset="ISO-8859-1").json(recorder, 200, [])
        assert recorder.headers["Content-Type"] == "application/json; charset=ISO-8859-1"

    def test_disable_charset(self, make_render, recorder: ResponseRecorder):
        make_render(disable_charset=True).json(recorder, 200, [])
        assert recorder.headers["Content-Type"] == "application/json"


class TestJSONP:
    def test_wraps_in_callback(self, make_render, recorder: ResponseRecorder):
        err = make_render().jsonp(recorder, 200, "helloCallback", {"one": "hello", "two": "world"})

        assert err is None
        assert recorder.headers["Content-Type"] == "application/javascript; charset=UTF-8"
        assert recorder.text == 'helloCallback({"one":"hello","two":"world"});'

    def test_indent(self, make_render, recorder: ResponseRecorder):
        make_render(indent_json=True).jsonp(recorder, 200, "cb", {"one": "hello"})
        assert recorder.text == 'cb({\n  "one": "hello"\n});\n'

    def test_always_escapes_html(self, make_render, recorder: ResponseRecorder):
        make_render(unescape_html=True).jsonp(recorder, 200, "cb", "<x>")
        assert recorder.text == 'cb("\\u003cx\\u003e");'

    def test_marshal_failure_writes_500(self, make_render, recorder: ResponseRecorder):
        err = make_render().jsonp(recorder, 200, "cb", float("nan"))
        assert isinstance(err, RenderError)
        assert recorder.code == 500
        assert not recorder.text.startswith("cb(")


def test_marshal_json_serializes_sets():
    assert marshal_json({"tags": {"a"}}) == '{"tags":["a"]}'
