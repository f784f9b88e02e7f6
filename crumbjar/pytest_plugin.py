import pytest

from .cookiejar import CookieJar, DefaultCookiePolicy
from .headers import RFC2109, RFC2965
from .sources import StaticCookieSource


class RejectionLog:
    """Cookie rejections reported to a policy listener, in order."""

    def __init__(self):
        self.records = []

    def __call__(self, name, reason, attribute):
        self.records.append((name, reason, attribute))

    @property
    def reasons(self):
        return [reason for _, reason, _ in self.records]

    def __len__(self):
        return len(self.records)


def pytest_addoption(parser):
    parser.addoption("--cookie_policy", choices=['strict', 'lenient'],
                     default='strict',
                     help=("Domain and path matching used by the "
                           "cookie_policy fixture.\n"
                           "strict by default."))


def pytest_generate_tests(metafunc):
    if 'grammar' in metafunc.fixturenames:
        metafunc.parametrize("grammar", [RFC2109, RFC2965],
                             ids=['rfc2109', 'rfc2965'])


@pytest.fixture
def cookie_policy(request):
    """Cookie policy selected by --cookie_policy"""
    strict = request.config.getoption("cookie_policy") == 'strict'
    return DefaultCookiePolicy(strict_domain=strict, strict_path=strict)


@pytest.fixture
def rejections(cookie_policy):
    """Rejections reported by cookie_policy"""
    log = RejectionLog()
    cookie_policy.add_listener(log)
    return log


@pytest.fixture
def cookie_source():
    """Factory for in-memory cookie sources"""

    def _create(url, *set_cookie, set_cookie2=()):
        return StaticCookieSource(url, set_cookie, set_cookie2)

    return _create


@pytest.fixture
def jar_from_headers(cookie_source, cookie_policy):
    """Factory for cookie jars filled from Set-Cookie headers"""

    def _create(url, *set_cookie, set_cookie2=(), policy=None):
        if policy is None:
            policy = cookie_policy
        source = cookie_source(url, *set_cookie, set_cookie2=set_cookie2)
        return CookieJar(source, policy=policy)

    return _create
