# tests/test_render_xml.py
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from renderkit import Options, Render, ResponseRecorder
from renderkit.exceptions import RenderError


class Greeting:
    def __init__(self, one: str, two: str):
        self.one = one
        self.two = two

    def __xml__(self) -> ET.Element:
        root = ET.Element("greeting", {"one": self.one})
        ET.SubElement(root, "two").text = self.two
        return root


@pytest.fixture
def make_render(template_dir: Path):
    def factory(**kwargs) -> Render:
        return Render(Options(directory=str(template_dir), **kwargs))
    return factory


def test_element_value(make_render, recorder: ResponseRecorder):
    root = ET.Element("greeting", {"one": "hello"})
    ET.SubElement(root, "two").text = "world"

    err = make_render().xml(recorder, 200, root)

    assert err is None
    assert recorder.headers["Content-Type"] == "text/xml; charset=UTF-8"
    assert recorder.text == '<greeting one="hello"><two>world</two></greeting>'


def test_object_with_xml_hook(make_render, recorder: ResponseRecorder):
    make_render().xml(recorder, 300, Greeting("hello", "world"))
    assert recorder.code == 300
    assert recorder.text == '<greeting one="hello"><two>world</two></greeting>'


def test_empty_elements_are_not_self_closed(make_render, recorder: ResponseRecorder):
    make_render().xml(recorder, 200, ET.Element("empty"))
    assert recorder.text == "<empty></empty>"


def test_indent(make_render, recorder: ResponseRecorder):
    root = ET.Element("greeting", {"one": "hello"})
    ET.SubElement(root, "two").text = "world"

    make_render(indent_xml=True).xml(recorder, 200, root)

    assert recorder.text == '<greeting one="hello">\n  <two>world</two>\n</greeting>\n'
    # the caller's element is left untouched.
    assert root.text is None


def test_prefix(make_render, recorder: ResponseRecorder):
    header = b'<?xml version="1.0" encoding="UTF-8"?>\n'
    make_render(prefix_xml=header).xml(recorder, 200, ET.Element("a"))
    assert recorder.body == header + b"<a></a>"


def test_text_is_escaped(make_render, recorder: ResponseRecorder):
    root = ET.Element("note")
    root.text = "a < b & c"
    make_render().xml(recorder, 200, root)
    assert recorder.text == "<note>a &lt; b &amp; c</note>"


def test_unsupported_value_writes_500(make_render, recorder: ResponseRecorder):
    err = make_render().xml(recorder, 200, {"not": "xml"})

    assert isinstance(err, RenderError)
    assert recorder.code == 500
    assert recorder.text == "xml: unsupported type: dict\n"


def test_hook_returning_non_element_writes_500(make_render, recorder: ResponseRecorder):
    class Bad:
        def __xml__(self):
            return "<nope/>"

    err = make_render().xml(recorder, 200, Bad())
    assert isinstance(err, RenderError)
    assert recorder.code == 500


def test_non_string_text_writes_500(make_render, recorder: ResponseRecorder):
    root = ET.Element("a")
    root.text = 5

    err = make_render().xml(recorder, 200, root)

    assert isinstance(err, RenderError)
    assert recorder.code == 500
    assert recorder.text.startswith("xml: unsupported value")


def test_non_string_attribute_writes_500(make_render, recorder: ResponseRecorder):
    err = make_render(indent_xml=True).xml(recorder, 200, ET.Element("a", {"n": 1}))
    assert isinstance(err, RenderError)
    assert recorder.code == 500


def test_failing_hook_writes_500(make_render, recorder: ResponseRecorder):
    class Broken:
        def __xml__(self):
            raise KeyError("missing field")

    err = make_render().xml(recorder, 200, Broken())

    assert isinstance(err, RenderError)
    assert recorder.code == 500
    assert recorder.text.startswith("xml: __xml__ of Broken failed")


def test_custom_content_type(make_render, recorder: ResponseRecorder):
    make_render(xml_content_type="application/xml", disable_charset=True).xml(recorder, 200, ET.Element("a"))
    assert recorder.headers["Content-Type"] == "application/xml"
