"""
URL validation, normalization and private-network classification.

The private check is pattern based: it looks at the literal hostname or
IP only and never resolves DNS. A public name that resolves to a private
address is NOT blocked (known limitation, no DNS-rebinding protection).

Numeric IPv4 spellings such as "127.1", "2130706433" or "0x7f.0.0.1" are
rewritten to dotted-quad form first, the same way browsers and the
fetcher read them.

Only the submitted URL is checked. The fetcher follows redirects without
re-checking them, so a public page that redirects to a private or
loopback address IS fetched (known limitation).
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from .errors import ValidationError

SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*$')
IPV4_LABEL_PATTERN = re.compile(r'^(0x[0-9a-f]*|[0-9]+)$')

DEFAULT_PORTS = {'http': 80, 'https': 443}
LOCAL_HOSTNAMES = {'localhost', '0.0.0.0', '::1'}
INTERNAL_SUFFIXES = ('.local', '.internal')


def _parse_ipv4_label(label: str) -> int:
    if label.startswith('0x'):
        return int(label[2:] or '0', 16)
    if len(label) > 1 and label.startswith('0'):
        return int(label, 8)
    return int(label)


def canonical_ipv4(host: str) -> Optional[str]:
    """
    Return the dotted-quad form of a numeric IPv4 host, or None for a name.

    Accepts the shorthand forms resolvers and browsers accept: fewer than
    four labels, plain integers, 0x hex and leading-zero octal labels.

    Raises:
        ValueError: the last label is numeric but the host is not a valid address

    Examples:
        >>> canonical_ipv4("0x7f.1")
        '127.0.0.1'

        >>> canonical_ipv4("example.com") is None
        True
    """
    labels = host.lower().split('.')
    if len(labels) > 1 and labels[-1] == '':
        labels = labels[:-1]
    if not IPV4_LABEL_PATTERN.match(labels[-1]):
        return None

    if len(labels) > 4 or not all(IPV4_LABEL_PATTERN.match(label) for label in labels):
        raise ValueError(f'Invalid IPv4 address: {host}')
    numbers = [_parse_ipv4_label(label) for label in labels]

    # The last label fills every byte the earlier ones left over
    if any(number > 255 for number in numbers[:-1]) or numbers[-1] >= 256 ** (5 - len(numbers)):
        raise ValueError(f'Invalid IPv4 address: {host}')

    value = numbers[-1]
    for index, number in enumerate(numbers[:-1]):
        value += number << (8 * (3 - index))
    return '.'.join(str((value >> shift) & 0xFF) for shift in (24, 16, 8, 0))


def normalize_url(raw: str) -> str:
    """
    Validate a candidate URL and return its canonical form.

    - Scheme and host are lowercased
    - Numeric IPv4 hosts are rewritten as dotted quads ("127.1" -> "127.0.0.1")
    - Default ports (80/443) are dropped
    - A root path of exactly "/" becomes empty

    Raises:
        ValidationError: if the input is not an absolute URL with a scheme and host

    Examples:
        >>> normalize_url("HTTPS://Example.com/")
        'https://example.com'

        >>> normalize_url("https://example.com:443/about?x=1")
        'https://example.com/about?x=1'
    """
    if not isinstance(raw, str):
        raise ValidationError('URL must be a string')

    candidate = raw.strip()
    if not candidate:
        raise ValidationError('URL is missing or empty')
    if re.search(r'\s', candidate):
        raise ValidationError(f'Invalid URL: {candidate!r}')

    try:
        parts = urlsplit(candidate)
        port = parts.port
    except ValueError as e:
        raise ValidationError(f'Invalid URL: {e}') from e

    if not parts.scheme or not SCHEME_PATTERN.match(parts.scheme):
        raise ValidationError(f'Invalid URL (missing scheme): {candidate!r}')
    if not parts.netloc or not parts.hostname:
        raise ValidationError(f'Invalid URL (missing host): {candidate!r}')

    scheme = parts.scheme.lower()
    host = parts.hostname  # already lowercased, brackets stripped
    if ':' in host:
        host = f'[{host}]'
    else:
        try:
            host = canonical_ipv4(host) or host
        except ValueError as e:
            raise ValidationError(f'Invalid URL: {e}') from e

    netloc = host
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        netloc = f'{netloc}:{port}'
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo = f'{userinfo}:{parts.password}'
        netloc = f'{userinfo}@{netloc}'

    path = '' if parts.path == '/' else parts.path

    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def _is_private_ipv4(host: str) -> bool:
    octets = [int(part) for part in host.split('.')]
    first, second = octets[0], octets[1]

    if first in (10, 127):
        return True
    if first == 192 and second == 168:
        return True
    if first == 172 and 16 <= second <= 31:
        return True
    return False


def is_private_or_local(url: str) -> bool:
    """
    Best-effort SSRF guard. Returns True if the URL targets a local,
    loopback or RFC1918 host. Unparseable input is treated as private.
    """
    try:
        host = urlsplit(url).hostname
    except (ValueError, TypeError, AttributeError):
        return True

    if not host:
        return True

    if host in LOCAL_HOSTNAMES:
        return True

    try:
        ipv4 = canonical_ipv4(host)
    except ValueError:
        return True
    if ipv4 and (ipv4 in LOCAL_HOSTNAMES or _is_private_ipv4(ipv4)):
        return True

    if host.endswith(INTERNAL_SUFFIXES):
        return True

    return False
