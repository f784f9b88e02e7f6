"""Set-Cookie and Set-Cookie2 header parsing.

Servers rarely follow either cookie grammar to the letter: values carry
unquoted commas, Base64 padding and stray attribute fragments.  Parsing
imitates popular browsers rather than the RFCs.  A header is split on every
unquoted ';' and ',' and the tokens are then reassembled from the last one
backwards, since cookie-attributes trail the name=value pair they belong to.

"""

import collections
import enum

from .cookie import Cookie
from .log import headers_logger

__all__ = ['HeaderKind', 'Grammar', 'RFC2109', 'RFC2965', 'grammar_for',
           'split_cookie_tokens', 'assignment_index', 'assemble_cookies']


SEPARATORS = ";,"
QUOTES = "\"'"


class HeaderKind(enum.Enum):
    RFC2109 = "Set-Cookie"
    RFC2965 = "Set-Cookie2"


class Grammar(collections.namedtuple(
        "Grammar", "kind attributes reserved_words")):
    """Attribute names and reserved words of one cookie header grammar."""

    __slots__ = ()

    def is_attribute(self, name):
        """name must already be lowercased."""
        return name in self.attributes

    def is_reserved_word(self, token):
        return token.lower() in self.reserved_words


RFC2109 = Grammar(
    HeaderKind.RFC2109,
    frozenset(("path", "domain", "expires", "comment", "max-age",
               "version")),
    frozenset(("secure",)))

RFC2965 = Grammar(
    HeaderKind.RFC2965,
    frozenset(("path", "domain", "comment", "commenturl", "max-age",
               "version", "$version", "port")),
    frozenset(("secure", "discard")))

_GRAMMARS = {RFC2109.kind: RFC2109, RFC2965.kind: RFC2965}


def grammar_for(header_name):
    """Return the grammar for a Set-Cookie or Set-Cookie2 header name."""
    for kind, grammar in _GRAMMARS.items():
        if kind.value.lower() == header_name.lower():
            return grammar
    raise ValueError("not a cookie header: %r" % header_name)


def split_cookie_tokens(header):
    """Split a header value on unquoted ';' and ','.

    Single and double quotes both protect separators up to the matching
    close quote and are dropped from the token text.  An unterminated quote
    runs to the end of the header.  Tokens are stripped; empty tokens
    between adjacent separators are kept.

    """
    tokens = []
    chars = []
    quote = None
    started = False
    for ch in header:
        if quote is not None:
            if ch == quote:
                quote = None
            else:
                chars.append(ch)
        elif ch in QUOTES:
            quote = ch
            started = True
        elif ch in SEPARATORS:
            tokens.append("".join(chars).strip())
            chars = []
            started = False
        else:
            chars.append(ch)
            if not ch.isspace():
                started = True
    if started:
        tokens.append("".join(chars).strip())
    return tokens


def assignment_index(token):
    """Return the index of the '=' separating a name from its value, or -1.

    Trailing '==' pairs are ignored, since they may be the padding of a
    Base64-encoded value.

    """
    while token.endswith("=="):
        token = token[:-2]
    return token.find("=")


def _in_header_order(attributes):
    # attributes are collected back to front, each at its latest slot
    return dict(reversed(list(attributes.items())))


def assemble_cookies(tokens, grammar, sink=None):
    """Rebuild the cookies described by the tokens of one header.

    Every candidate Cookie is passed to sink (if given) as soon as its name
    is found, and the list of candidates is returned.  A reserved word
    discards whatever fragments were pending; so does reaching the start of
    the header without finding a cookie name.

    """
    tokens = [token for token in tokens if token]
    candidates = []
    value = collections.deque()
    attributes = {}

    for i in range(len(tokens) - 1, -1, -1):
        token = tokens[i]
        index = assignment_index(token)
        if index != -1:
            name = token[:index].strip()
            value.appendleft(token[index + 1:].strip())
            if grammar.is_attribute(name.lower()):
                # the occurrence nearest the start of the header wins
                attributes.pop(name.lower(), None)
                attributes[name.lower()] = "".join(value)
            else:
                cookie = Cookie(name, "".join(value),
                                _in_header_order(attributes))
                candidates.append(cookie)
                if sink is not None:
                    sink(cookie)
                attributes = {}
            value.clear()
        elif grammar.is_reserved_word(token):
            if value or attributes:
                headers_logger.debug("%s discards pending %r %r", token,
                                     "".join(value), attributes)
            value.clear()
            attributes = {}
        else:
            value.appendleft(token)
            previous = tokens[i - 1] if i > 0 else ""
            if not previous.endswith("="):
                value.appendleft(",")

    if value or attributes:
        headers_logger.debug("no cookie name for %r %r", "".join(value),
                             attributes)
    return candidates
