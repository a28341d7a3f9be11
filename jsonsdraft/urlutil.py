"""
URL and JSON Pointer helpers for JSON Schema identifier handling.
"""

import re
from typing import Optional, Tuple
from urllib.parse import SplitResult, quote, unquote_to_bytes, urlsplit, urlunsplit

import jsonpointer

DEFAULT_PORTS = {'http': 80, 'https': 443, 'ws': 80, 'wss': 443, 'ftp': 21}

# characters left as they are when percent-encoding (RFC 3986, section 3)
_USERINFO_SAFE = "!$&'()*+,;=:%-._~"
_PATH_SAFE = "/:@!$&'()*+,;=%-._~"
_QUERY_SAFE = _PATH_SAFE + '?'
_REG_NAME = re.compile(r"[a-z0-9\-._~!$&'()*+,;=%]*")
_IP_LITERAL = re.compile(r'[0-9a-f:.]+')


class UrlError(ValueError):
    """Raised when a URL reference cannot be parsed or resolved."""


class InvalidAnchorError(Exception):
    """
    Raised when a legacy anchor fragment is not valid percent-encoded UTF-8.

    Attributes:
        fragment: The raw fragment that failed to decode.
    """

    def __init__(self, fragment: str) -> None:
        self.fragment = fragment
        super().__init__(f"invalid anchor fragment {fragment!r}: not percent-encoded UTF-8")


def split(url: str) -> Tuple[str, str]:
    """Split a reference into the part before the first '#' and the fragment."""
    before, _, fragment = url.partition('#')
    return before, fragment


def escape(token: str) -> str:
    """Escape a token for use as a JSON Pointer segment."""
    return jsonpointer.escape(token)


def unescape(token: str) -> str:
    """Reverse JSON Pointer segment escaping."""
    return jsonpointer.unescape(token)


def path_unescape(s: str) -> str:
    """
    Percent-decode a string, requiring the decoded bytes to be UTF-8.

    Raises:
        UrlError: If the decoded bytes are not valid UTF-8.
    """
    try:
        return unquote_to_bytes(s).decode('utf-8')
    except UnicodeDecodeError as e:
        raise UrlError(f"{s!r} does not decode to UTF-8") from e


def fragment_to_anchor(fragment: str) -> Optional[str]:
    """
    Convert a raw URI fragment to the anchor name it declares.

    Returns None for an empty fragment or a JSON Pointer fragment, neither of
    which names an anchor.

    Raises:
        InvalidAnchorError: If the fragment is not percent-encoded UTF-8.
    """
    try:
        anchor = unquote_to_bytes(fragment).decode('utf-8')
    except UnicodeDecodeError as e:
        raise InvalidAnchorError(fragment) from e
    if not anchor or anchor.startswith('/'):
        return None
    return anchor


def remove_dot_segments(path: str) -> str:
    """Remove '.' and '..' segments from a path (RFC 3986, section 5.2.4)."""
    output: list[str] = []
    while path:
        if path.startswith('../'):
            path = path[3:]
        elif path.startswith('./'):
            path = path[2:]
        elif path.startswith('/./'):
            path = path[2:]
        elif path == '/.':
            path = '/'
        elif path.startswith('/../'):
            path = path[3:]
            if output:
                output.pop()
        elif path == '/..':
            path = '/'
            if output:
                output.pop()
        elif path in ('.', '..'):
            path = ''
        else:
            start = 1 if path.startswith('/') else 0
            end = path.find('/', start)
            if end == -1:
                end = len(path)
            output.append(path[:end])
            path = path[end:]
    return ''.join(output)


def _quote(s: str, safe: str) -> str:
    try:
        return quote(s, safe=safe)
    except UnicodeEncodeError as e:
        raise UrlError(f"{s!r} cannot be encoded as UTF-8") from e


def _canonical_host(url: str, parts: SplitResult) -> Optional[str]:
    """Return the lowercased ASCII host of a URL, or None when it has none."""
    host = parts.hostname
    if not host:
        return host
    if '[' in parts.netloc:
        if not _IP_LITERAL.fullmatch(host):
            raise UrlError(f"invalid IP literal {host!r} in {url!r}")
        return host
    if not host.isascii():
        try:
            host = host.encode('idna').decode('ascii')
        except UnicodeError as e:
            raise UrlError(f"invalid host {host!r} in {url!r}") from e
    if not _REG_NAME.fullmatch(host):
        raise UrlError(f"invalid host {host!r} in {url!r}")
    return host


def _parse(url: str) -> SplitResult:
    try:
        parts = urlsplit(url)
        # accessing the port validates it
        parts.port  # pylint: disable=pointless-statement
    except ValueError as e:
        raise UrlError(f"malformed URL {url!r}: {e}") from e
    _canonical_host(url, parts)
    return parts


def normalize_url(url: str) -> str:
    """
    Normalize an absolute URL.

    Lowercases the scheme and host, drops the default port of the scheme,
    gives web URLs with an authority an empty path of '/', removes dot
    segments from the path and percent-encodes characters a URI may not
    contain. An empty query or fragment is kept.
    """
    parts = _parse(url)
    if not parts.scheme:
        raise UrlError(f"{url!r} is not an absolute URL")
    scheme = parts.scheme.lower()
    netloc = parts.netloc
    has_authority = url[len(parts.scheme) + 1:].startswith('//')
    if netloc:
        userinfo, at, hostport = netloc.rpartition('@')
        host = _canonical_host(url, parts) or ''
        if ':' in host:
            host = f'[{host}]'
        if parts.port is not None and DEFAULT_PORTS.get(scheme) != parts.port:
            host = f'{host}:{parts.port}'
        netloc = f'{_quote(userinfo, _USERINFO_SAFE)}{at}{host}' if hostport else netloc
    path = parts.path
    if path.startswith('/'):
        path = remove_dot_segments(path)
    elif not path and has_authority and scheme in ('http', 'https', 'ws', 'wss', 'ftp'):
        path = '/'
    normalized = urlunsplit((scheme, netloc, _quote(path, _PATH_SAFE), '', ''))
    if has_authority and not normalized.startswith(f'{scheme}://'):
        # urlunsplit drops an empty authority for schemes it does not know
        normalized = f'{scheme}://{normalized[len(scheme) + 1:]}'
    before, hash_mark, _ = url.partition('#')
    if '?' in before:
        normalized += '?' + _quote(parts.query, _QUERY_SAFE)
    if hash_mark:
        normalized += '#' + _quote(parts.fragment, _QUERY_SAFE)
    return normalized


def join_url(base: str, ref: str) -> str:
    """
    Resolve a URI reference against an absolute base URI (RFC 3986, section 5.2).

    Args:
        base: The absolute base URI.
        ref: The reference to resolve; may be absolute, scheme-relative,
            path-relative or a same-document reference.

    Returns:
        The resolved, normalized absolute URI.

    Raises:
        UrlError: If either value is malformed or the reference cannot be
            resolved against the base.
    """
    r = _parse(ref)
    if r.scheme:
        return normalize_url(ref)

    b = _parse(base)
    if not b.scheme:
        raise UrlError(f"base {base!r} is not an absolute URL")
    base_has_authority = base[len(b.scheme) + 1:].startswith('//')

    if ref.startswith('//'):
        return normalize_url(f'{b.scheme}:{ref}')

    ref_before, hash_mark, fragment = ref.partition('#')
    _, query_mark, query = ref_before.partition('?')
    if not base_has_authority and not b.path.startswith('/') and (r.path or query_mark):
        raise UrlError(f"cannot resolve {ref!r} against opaque base {base!r}")

    if not r.path:
        path = b.path
        if not query_mark:
            _, query_mark, query = split(base)[0].partition('?')
    elif r.path.startswith('/'):
        path = remove_dot_segments(r.path)
    elif base_has_authority and not b.path:
        path = remove_dot_segments('/' + r.path)
    else:
        path = remove_dot_segments(b.path[:b.path.rfind('/') + 1] + r.path)

    joined = urlunsplit((b.scheme, b.netloc, path, '', ''))
    if base_has_authority and not joined.startswith(f'{b.scheme}://'):
        joined = f'{b.scheme}://{joined[len(b.scheme) + 1:]}'
    return normalize_url(joined + query_mark + query + hash_mark + fragment)
