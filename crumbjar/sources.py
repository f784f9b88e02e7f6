"""Places cookies come from.

A cookie source is anything that can report the url a response was fetched
from and the raw values of its Set-Cookie and Set-Cookie2 header fields.

"""

__all__ = ['CookieSource', 'StaticCookieSource', 'ResponseCookieSource']


class CookieSource:
    """Defines where a CookieJar reads Set-Cookie headers from."""

    def url(self):
        """Return the url of the response the headers came with."""
        raise NotImplementedError()

    def header_fields(self, name):
        """Return the values of header field name, in order.

        An absent field gives an empty list.

        """
        raise NotImplementedError()


def _header_list(headers):
    if isinstance(headers, str):
        return [headers]
    return list(headers)


class StaticCookieSource(CookieSource):
    """Cookie source holding a url and header values in memory."""

    def __init__(self, url, set_cookie=(), set_cookie2=()):
        self._url = url
        self._fields = {
            "set-cookie": _header_list(set_cookie),
            "set-cookie2": _header_list(set_cookie2),
        }

    def url(self):
        return self._url

    def header_fields(self, name):
        return list(self._fields.get(name.lower(), []))

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, self._url)


class ResponseCookieSource(CookieSource):
    """Adapts an HTTP response object.

    Works with urllib.request responses (headers from response.info(), url
    from response.geturl()) and with any response whose .headers offers
    get_all() or getall().

    """

    def __init__(self, response, url=None):
        if url is None:
            url = response.geturl()
        self._url = url
        if hasattr(response, "info"):
            headers = response.info()
        else:
            headers = response.headers
        self._headers = headers

    def url(self):
        return self._url

    def header_fields(self, name):
        get_all = getattr(self._headers, "get_all", None)
        if get_all is None:
            get_all = self._headers.getall
        return list(get_all(name, []))
