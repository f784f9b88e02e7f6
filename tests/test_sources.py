import http.client
import io

import pytest

from crumbjar.cookiejar import CookieJar
from crumbjar.sources import (CookieSource, ResponseCookieSource,
                              StaticCookieSource)


RAW_HEADERS = (b"Content-Type: text/html\r\n"
               b"Set-Cookie: a=1; path=/\r\n"
               b"Set-Cookie: list=x,y,z\r\n"
               b"Set-Cookie2: b=2; Version=1; Discard\r\n"
               b"\r\n")


class FakeUrllibResponse:

    def __init__(self, url, raw_headers):
        self._url = url
        self._headers = http.client.parse_headers(io.BytesIO(raw_headers))

    def info(self):
        return self._headers

    def geturl(self):
        return self._url


class MultiDict:

    def __init__(self, items):
        self._items = items

    def getall(self, key, default):
        found = [v for k, v in self._items if k.lower() == key.lower()]
        return found or default


class FakeClientResponse:

    def __init__(self, items):
        self.headers = MultiDict(items)


def test_base_source_is_abstract():
    source = CookieSource()
    with pytest.raises(NotImplementedError):
        source.url()
    with pytest.raises(NotImplementedError):
        source.header_fields("Set-Cookie")


def test_static_source():
    source = StaticCookieSource("http://www.example.com/", ["a=1", "b=2"],
                                "c=3")
    assert source.url() == "http://www.example.com/"
    assert source.header_fields("Set-Cookie") == ["a=1", "b=2"]
    assert source.header_fields("set-cookie2") == ["c=3"]
    assert source.header_fields("Content-Type") == []


def test_static_source_returns_copies():
    source = StaticCookieSource("http://www.example.com/", ["a=1"])
    source.header_fields("Set-Cookie").append("b=2")
    assert source.header_fields("Set-Cookie") == ["a=1"]


def test_urllib_response_source():
    response = FakeUrllibResponse("http://www.example.com/shop/cart",
                                  RAW_HEADERS)
    source = ResponseCookieSource(response)
    assert source.url() == "http://www.example.com/shop/cart"
    assert source.header_fields("Set-Cookie") == ["a=1; path=/",
                                                  "list=x,y,z"]
    assert source.header_fields("Set-Cookie2") == [
        "b=2; Version=1; Discard"]

    jar = CookieJar(source)
    assert jar.cookie_names() == ["a", "list", "b"]
    assert jar.cookie_value("list") == "x,y,z"
    assert jar.cookie("list").path == "/shop"
    assert jar.cookie("b").get_attribute("version") == "1"


def test_multidict_response_source():
    response = FakeClientResponse([("Set-Cookie", "a=1"),
                                   ("Set-Cookie", "b=2")])
    source = ResponseCookieSource(response, url="http://www.example.com/")
    assert source.header_fields("set-cookie") == ["a=1", "b=2"]
    assert source.header_fields("Set-Cookie2") == []
    assert CookieJar(source).cookie_header_value(
        "http://www.example.com/") == "a=1;b=2"


def test_cookie_policy_follows_command_line(request, cookie_policy,
                                            jar_from_headers):
    strict = request.config.getoption("cookie_policy") == 'strict'
    assert cookie_policy.strict_domain is strict
    assert cookie_policy.strict_path is strict
    jar = jar_from_headers("http://www.example.com/a/b", "x=1")
    assert (jar.cookie_header_value("http://www.example.com/z") is None) \
        is strict


def test_cookie_source_fixture(cookie_source):
    source = cookie_source("http://x.org/", "a=1", "b=2",
                           set_cookie2=["c=3"])
    assert isinstance(source, StaticCookieSource)
    assert source.header_fields("Set-Cookie") == ["a=1", "b=2"]
    assert source.header_fields("Set-Cookie2") == ["c=3"]
