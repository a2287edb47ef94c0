from __future__ import annotations

import pytest

from application.ports.http_client import HttpResponse
from application.services.response_reader import (
    ResponseFormatError,
    decode_body,
    describe_failure,
    parse_json_object,
)


def _resp(status=200, text="", headers=None, content=None) -> HttpResponse:
    return HttpResponse(status=status, url="http://demo/api.php?x", text=text, headers=headers or {}, content=content)


class TestDecodeBody:
    def test_falls_back_to_text_without_content(self):
        assert decode_body(_resp(text="hello")) == "hello"

    def test_utf8_by_default(self):
        raw = "处理完成".encode("utf-8")
        assert decode_body(_resp(text="mojibake", content=raw)) == "处理完成"

    def test_charset_from_content_type(self):
        raw = "证书".encode("gbk")
        resp = _resp(content=raw, headers={"Content-Type": "text/plain; charset=GBK"})
        assert decode_body(resp) == "证书"

    def test_unknown_charset_uses_utf8(self):
        resp = _resp(content=b"ok", headers={"content-type": "text/plain; charset=x-unknown"})
        assert decode_body(resp) == "ok"


class TestParseJsonObject:
    def test_object(self):
        assert parse_json_object('{"lines": "abc", "tx": "deadbeef"}') == {"lines": "abc", "tx": "deadbeef"}

    def test_malformed(self):
        with pytest.raises(ResponseFormatError, match="Malformed JSON response"):
            parse_json_object("<br />\n<b>Warning</b>")

    def test_not_an_object(self):
        with pytest.raises(ResponseFormatError, match="got list"):
            parse_json_object("[]")


class TestDescribeFailure:
    def test_html_title_is_used(self):
        html = "<html><head><title>404 Not Found</title></head><body><h1>Not Found</h1></body></html>"
        assert describe_failure(_resp(status=404, text=html)) == "HTTP 404: 404 Not Found"

    def test_plain_text_first_line(self):
        assert describe_failure(_resp(status=500, text="\nfatal error\nstack")) == "HTTP 500: fatal error"

    def test_empty_body(self):
        assert describe_failure(_resp(status=503, text="")) == "HTTP 503"

    def test_html_without_title_uses_first_line(self):
        assert describe_failure(_resp(status=500, text="<p>oops</p>")) == "HTTP 500: <p>oops</p>"
