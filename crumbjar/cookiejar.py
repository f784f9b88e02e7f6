"""HTTP cookie handling for web clients.

Cookies are read from the Set-Cookie (RFC 2109 grammar) and Set-Cookie2
(RFC 2965 grammar) headers of a CookieSource, checked against the url they
came from by a CookiePolicy and kept in a CookieJar, one cookie per name.

"""

import enum
import time

from .cookie import (Cookie, domain_matches, parent_path, path_matches,
                     request_host, request_path, source_path)
from .headers import assemble_cookies, grammar_for, split_cookie_tokens
from .log import cookies_logger

__all__ = ['CookieJar', 'CookiePolicy', 'DefaultCookiePolicy',
           'RejectionReason']


COOKIE_HEADERS = ("Set-Cookie", "Set-Cookie2")


class RejectionReason(enum.IntEnum):
    ACCEPTED = 0
    DOMAIN_NO_LEADING_DOT = 1
    DOMAIN_ONE_DOT = 2
    DOMAIN_NOT_SOURCE_SUFFIX = 3
    DOMAIN_TOO_MANY_LEVELS = 4
    PATH_NOT_PREFIX = 5


def _dotted(domain):
    if domain.startswith("."):
        return domain
    return "." + domain


class CookiePolicy:
    """Defines which cookies get accepted from and returned to server.

    The subclass DefaultCookiePolicy defines the standard rules -- override
    that if you want a customised policy.

    """
    def set_ok(self, cookie, url):
        """Return true if (and only if) cookie, sent with a response from url,
        should be accepted.

        Only the domain and path the server specified are checked; missing
        ones are filled in by the CookieJar afterwards.

        """
        raise NotImplementedError()

    def return_ok(self, cookie, url):
        """Return true if (and only if) cookie should be sent to url."""
        raise NotImplementedError()


class DefaultCookiePolicy(CookiePolicy):
    """Implements the standard rules for accepting and returning cookies.

    With strict_domain false, a domain equal to the host is accepted as is,
    a domain without its leading dot is treated as if it had one, and hosts
    may sit more than one level below the cookie domain.  With
    strict_path false, no path is ever rejected or required to match.

    Every listener is called as listener(cookie_name, reason, attribute)
    when a cookie is rejected.

    """

    def __init__(self,
                 strict_domain=True,
                 strict_path=True,
                 listeners=(),
                 ):
        """Constructor arguments should be passed as keyword arguments only."""
        self.strict_domain = strict_domain
        self.strict_path = strict_path
        self._listeners = list(listeners)

    def listeners(self):
        """Return the sequence of rejection listeners (as a tuple)."""
        return tuple(self._listeners)

    def add_listener(self, listener):
        self._listeners.append(listener)

    def _reject(self, cookie, reason, attribute):
        cookies_logger.debug("rejected cookie %s: %s (%s)",
                             cookie.name, reason.name, attribute)
        for listener in list(self._listeners):
            listener(cookie.name, reason, attribute)
        return False

    def set_ok(self, cookie, url):
        """
        If you override .set_ok(), be sure to call this method.  If it returns
        false, so should your subclass.

        """
        for n in "path", "domain":
            fn_name = "set_ok_"+n
            fn = getattr(self, fn_name)
            if not fn(cookie, url):
                return False
        return True

    def set_ok_path(self, cookie, url):
        if cookie.path is not None and self.strict_path:
            req_path = source_path(url)
            if req_path and not req_path.startswith(cookie.path):
                return self._reject(cookie, RejectionReason.PATH_NOT_PREFIX,
                                    cookie.path)
        return True

    def set_ok_domain(self, cookie, url):
        domain = cookie.domain
        if domain is None:
            return True
        req_host = request_host(url)
        if not self.strict_domain:
            if domain.lower() == req_host.lower():
                return True
            # some servers (Yahoo among them) leave out the leading dot
            domain = _dotted(domain)
        if not domain.startswith("."):
            return self._reject(
                cookie, RejectionReason.DOMAIN_NO_LEADING_DOT, cookie.domain)
        if domain.rfind(".") == 0:
            # domain like .com
            return self._reject(cookie, RejectionReason.DOMAIN_ONE_DOT,
                                cookie.domain)
        if not req_host.endswith(domain):
            return self._reject(
                cookie, RejectionReason.DOMAIN_NOT_SOURCE_SUFFIX,
                cookie.domain)
        if self.strict_domain and req_host.rfind(domain) > req_host.find("."):
            # host like www.some.example.com for domain .example.com
            return self._reject(
                cookie, RejectionReason.DOMAIN_TOO_MANY_LEVELS, cookie.domain)
        return True

    def return_ok(self, cookie, url):
        """
        If you override .return_ok(), be sure to call this method.  If it
        returns false, so should your subclass.

        """
        if cookie.unscoped:
            return True
        for n in "domain", "path":
            fn_name = "return_ok_"+n
            fn = getattr(self, fn_name)
            if not fn(cookie, url):
                return False
        return True

    def return_ok_domain(self, cookie, url):
        req_host = request_host(url)
        if domain_matches(cookie.domain, req_host):
            return True
        if not self.strict_domain:
            return domain_matches(_dotted(cookie.domain), req_host)
        return False

    def return_ok_path(self, cookie, url):
        if not self.strict_path:
            return True
        return path_matches(cookie.path or "/", request_path(url))


class CookieJar:
    """Collection of HTTP cookies, at most one per name.

    Cookies keep the order they were added in; replacing a cookie moves it to
    the end.  Parsing deliberately imitates popular browsers rather than the
    RFCs: in particular, cookie values may contain unquoted commas.

    """

    def __init__(self, source=None, policy=None):
        if policy is None:
            policy = DefaultCookiePolicy()
        self._policy = policy
        self._cookies = {}
        if source is not None:
            self.extract_cookies(source)

    def set_policy(self, policy):
        self._policy = policy

    def _accepted_cookie(self, cookie, url):
        if not self._policy.set_ok(cookie, url):
            return None
        domain = cookie.domain
        if domain is None:
            domain = request_host(url)
        path = cookie.path
        if path is None:
            path = parent_path(source_path(url))
        cookies_logger.debug("accepted cookie %s for %s%s",
                             cookie.name, domain, path)
        return cookie.with_scope(domain, path)

    def make_cookies(self, source):
        """Return the cookies in source that the policy accepts.

        Set-Cookie headers are read before Set-Cookie2 headers, each header
        value on its own and in order.

        """
        url = source.url()
        cookies = []

        def accept(candidate):
            cookie = self._accepted_cookie(candidate, url)
            if cookie is not None:
                cookies.append(cookie)

        for header_name in COOKIE_HEADERS:
            grammar = grammar_for(header_name)
            for header in source.header_fields(header_name):
                assemble_cookies(split_cookie_tokens(header), grammar, accept)
        return cookies

    def extract_cookies(self, source):
        """Extract cookies from source, where allowable given its url."""
        for cookie in self.make_cookies(source):
            self.add_unique_cookie(cookie)

    def add_unique_cookie(self, cookie):
        """Add cookie, replacing any cookie with the same name."""
        self._cookies.pop(cookie.name, None)
        self._cookies[cookie.name] = cookie

    def add_cookie(self, name, value):
        """Define a cookie to be sent on every request, whatever its url."""
        self.add_unique_cookie(Cookie(name, value))

    def put_single_use_cookie(self, name, value, domain, path):
        """Add a cookie for domain and path, without checking either."""
        self.add_unique_cookie(Cookie(name, value, domain=domain, path=path))

    def update_cookies(self, jar):
        """Copy every cookie in jar into this one.

        Cookies from jar replace those with the same name here.

        """
        for cookie in list(jar):
            self.add_unique_cookie(cookie)

    def cookie_names(self):
        return list(self._cookies)

    def cookies(self):
        """Return a list of the cookies in this jar."""
        return list(self._cookies.values())

    def cookie(self, name):
        """Return the cookie called name, or None."""
        if name is None:
            raise ValueError("cookie: no name specified")
        return self._cookies.get(name)

    def cookie_value(self, name):
        cookie = self.cookie(name)
        if cookie is None:
            return None
        return cookie.value

    def cookie_header_value(self, url):
        """Return the value of the Cookie header for a request to url.

        Returns None (rather than an empty string) if no cookie should be
        sent.

        """
        attrs = []
        for cookie in self._cookies.values():
            if not self._policy.return_ok(cookie, url):
                continue
            attrs.append("%s=%s" % (cookie.name, cookie.value))
        if not attrs:
            return None
        return ";".join(attrs)

    def clear(self):
        """Discard all cookies."""
        self._cookies = {}

    def clear_expired_cookies(self, now=None):
        """Discard all expired cookies.

        Expired cookies are still sent back unless this is called: the jar
        never sweeps them on its own.

        """
        if now is None:
            now = time.time()
        for cookie in self.cookies():
            if cookie.is_expired(now):
                cookies_logger.debug("expiring cookie %s", cookie.name)
                del self._cookies[cookie.name]

    def __iter__(self):
        return iter(self.cookies())

    def __len__(self):
        """Return number of contained cookies."""
        return len(self._cookies)

    def __contains__(self, name):
        return name in self._cookies

    def __repr__(self):
        r = []
        for cookie in self:
            r.append(repr(cookie))
        return "<%s[%s]>" % (self.__class__.__name__, ", ".join(r))

    def __str__(self):
        r = []
        for cookie in self:
            r.append(str(cookie))
        return "<%s[%s]>" % (self.__class__.__name__, ", ".join(r))
