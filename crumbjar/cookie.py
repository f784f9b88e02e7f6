"""Cookie value type and the URL helpers used to scope it.

"""

import copy
import re
import time
import urllib.parse
from http.cookiejar import http2time

from .log import cookies_logger

__all__ = ['Cookie', 'domain_matches', 'path_matches', 'parent_path',
           'request_host', 'request_path', 'source_path']


cut_port_re = re.compile(r":\d+$", re.ASCII)


def request_host(url):
    """Return the host of url, without user info or port.

    Variation from RFC 2965: the host is not lowercased.  A defaulted cookie
    domain is the host exactly as it appeared in the url.

    """
    netloc = urllib.parse.urlsplit(str(url)).netloc
    host = netloc.rpartition("@")[2]
    return cut_port_re.sub("", host, 1)


def source_path(url):
    """Path component of url, as given (may be empty)."""
    return urllib.parse.urlsplit(str(url)).path


def request_path(url):
    """Path component of url, always starting with a slash."""
    path = source_path(url)
    if not path.startswith("/"):
        path = "/" + path
    return path


def parent_path(path):
    i = path.rfind("/")
    if i < 0:
        return "/"
    return path[:i]


def domain_matches(domain, host):
    """Return True if a cookie scoped to domain may be sent to host."""
    domain = domain.lower()
    host = host.lower()
    if domain == host:
        return True
    return domain.startswith(".") and host.endswith(domain)


def path_matches(path, target_path):
    return target_path.startswith(path)


def _expiry_time(attributes, now):
    # Prefer max-age to expires (like Mozilla)
    max_age = attributes.get("max-age")
    if max_age is not None:
        try:
            return int(now) + int(max_age)
        except ValueError:
            cookies_logger.debug("invalid max-age %r, trying expires",
                                 max_age)
    expires = attributes.get("expires")
    if expires:
        return http2time(expires)
    return None


class Cookie:
    """HTTP Cookie.

    This is deliberately a very simple class.  It holds a name, a value, the
    scope the cookie is sent to (domain and path) and the remaining
    cookie-attributes in the order the server listed them.  CookieJar builds
    Cookie instances from Set-Cookie and Set-Cookie2 headers and supplies the
    default scope; a cookie whose domain is None is unscoped and is sent with
    every request.

    Cookies are not modified once built: with_scope() returns a copy.

    """

    def __init__(self, name, value, attributes=None,
                 domain=None, path=None, now=None):
        if name is None:
            raise ValueError("a cookie must have a name")
        if attributes is None:
            attributes = {}
        if now is None:
            now = time.time()

        self.name = name
        self.value = value
        self._attributes = dict(attributes)
        if domain is None:
            domain = self._attributes.get("domain")
        if path is None:
            path = self._attributes.get("path")
        self.domain = domain
        self.path = path
        # seconds since epoch, or None for a session cookie
        self.expires = _expiry_time(self._attributes, now)

    @property
    def attributes(self):
        return dict(self._attributes)

    def has_attribute(self, name):
        return name in self._attributes

    def get_attribute(self, name, default=None):
        return self._attributes.get(name, default)

    @property
    def unscoped(self):
        return self.domain is None

    def with_scope(self, domain, path):
        cookie = copy.copy(self)
        cookie._attributes = dict(self._attributes)
        cookie.domain = domain
        cookie.path = path
        return cookie

    def is_expired(self, now=None):
        if now is None:
            now = time.time()
        if (self.expires is not None) and (self.expires <= now):
            return True
        return False

    def may_be_sent_to(self, url):
        """Return True if this cookie belongs in a request for url."""
        if self.unscoped:
            return True
        if not domain_matches(self.domain, request_host(url)):
            return False
        return path_matches(self.path or "/", request_path(url))

    def __str__(self):
        namevalue = "%s=%s" % (self.name, self.value)
        if self.unscoped:
            return "<Cookie %s>" % namevalue
        return "<Cookie %s for %s%s>" % (namevalue, self.domain,
                                         self.path or "")

    def __repr__(self):
        args = []
        for name in ("name", "value", "domain", "path", "expires"):
            attr = getattr(self, name)
            args.append("%s=%s" % (name, repr(attr)))
        args.append("attributes=%s" % repr(self._attributes))
        return "Cookie(%s)" % ", ".join(args)
