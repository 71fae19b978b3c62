"""Built-in string formats for the ``format=<name>`` rule.

Each format is a plain ``str -> bool`` check. Most are regular
expressions; network and identifier formats lean on :mod:`ipaddress`,
:mod:`urllib.parse` and checksum arithmetic.

Formats never touch the filesystem or the network, so evaluation stays
free of I/O.
"""

from __future__ import annotations

import hashlib
import ipaddress
import re
from collections.abc import Callable
from urllib.parse import urlsplit

FormatFn = Callable[[str], bool]

# ---------------------------------------------------------------------------
# Patterns (matched with fullmatch unless noted)
# ---------------------------------------------------------------------------

_ALPHA = re.compile(r"[a-zA-Z]+")
_ALPHANUM = re.compile(r"[a-zA-Z0-9]+")
_NUMERIC = re.compile(r"[-+]?[0-9]+(?:\.[0-9]+)?")
_NUMBER = re.compile(r"[0-9]+")
_HEXADECIMAL = re.compile(r"(?:0[xX])?[0-9a-fA-F]+")
_HEXCOLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})")

_BYTE = r"(?:0|[1-9]\d?|1\d\d|2[0-4]\d|25[0-5])"
_PERCENT = r"(?:0|[1-9]\d?|100)%"
_ALPHA_CHANNEL = r"(?:0?\.\d+|[01](?:\.0+)?)"
_HUE = r"(?:0|[1-9]\d?|[12]\d\d|3[0-5]\d|360)"
_RGB = re.compile(
    rf"rgb\(\s*(?:{_BYTE}\s*,\s*{_BYTE}\s*,\s*{_BYTE}"
    rf"|{_PERCENT}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT})\s*\)"
)
_RGBA = re.compile(
    rf"rgba\(\s*(?:{_BYTE}\s*,\s*{_BYTE}\s*,\s*{_BYTE}"
    rf"|{_PERCENT}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT})\s*,\s*{_ALPHA_CHANNEL}\s*\)"
)
_HSL = re.compile(rf"hsl\(\s*{_HUE}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT}\s*\)")
_HSLA = re.compile(
    rf"hsla\(\s*{_HUE}\s*,\s*{_PERCENT}\s*,\s*{_PERCENT}\s*,\s*{_ALPHA_CHANNEL}\s*\)"
)

# WHATWG HTML "valid e-mail address".
_EMAIL = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)
_URN = re.compile(
    r"[uU][rR][nN]:(?![uU][rR][nN]:)[a-zA-Z0-9][a-zA-Z0-9-]{0,31}:"
    r"(?:[a-zA-Z0-9()+,\-.:=@;$_!*']|%[0-9a-fA-F]{2})+"
)
_BASE64 = re.compile(
    r"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{4})"
)
_BASE64URL = re.compile(
    r"(?:[A-Za-z0-9_-]{4})*(?:[A-Za-z0-9_-]{2}==|[A-Za-z0-9_-]{3}=|[A-Za-z0-9_-]{4})"
)
_ISBN10 = re.compile(r"[0-9]{9}[0-9X]")
_ISBN13 = re.compile(r"97[89][0-9]{10}")
_ETH_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")
_BTC_ADDRESS = re.compile(r"[13][a-km-zA-HJ-NP-Z1-9]{25,34}")
_BTC_BECH32_LOWER = re.compile(r"bc1[02-9ac-hj-np-z]{7,76}")
_BTC_BECH32_UPPER = re.compile(r"BC1[02-9AC-HJ-NP-Z]{7,76}")

_UUID = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")
_UUID3 = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-3[0-9a-f]{3}-[0-9a-f]{4}-[0-9a-f]{12}")
_UUID4 = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}")
_UUID5 = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-5[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}")
_UUID_RFC4122 = re.compile(_UUID.pattern, re.IGNORECASE)
_UUID3_RFC4122 = re.compile(_UUID3.pattern, re.IGNORECASE)
_UUID4_RFC4122 = re.compile(_UUID4.pattern, re.IGNORECASE)
_UUID5_RFC4122 = re.compile(_UUID5.pattern, re.IGNORECASE)

_ASCII = re.compile(r"[\x00-\x7F]*")
_PRINTABLE_ASCII = re.compile(r"[\x20-\x7E]*")
_MULTIBYTE = re.compile(r"[^\x00-\x7F]")  # search
_DATA_URI_HEADER = re.compile(r"data:(?:[\w.+-]+/[\w.+-]+)?(?:;[\w.+-]+=[\w.+-]+)*;base64")
_LATITUDE = re.compile(r"[-+]?(?:[1-8]?\d(?:\.\d+)?|90(?:\.0+)?)")
_LONGITUDE = re.compile(r"[-+]?(?:180(?:\.0+)?|(?:1[0-7]\d|[1-9]?\d)(?:\.\d+)?)")
_SSN = re.compile(
    r"[0-9]{3}[ -]?(?:0[1-9]|[1-9][0-9])[ -]?"
    r"(?:[1-9][0-9]{3}|[0-9][1-9][0-9]{2}|[0-9]{2}[1-9][0-9]|[0-9]{3}[1-9])"
)
_MAC_SEPARATED = re.compile(
    r"[0-9A-Fa-f]{2}([:-])[0-9A-Fa-f]{2}"
    r"(?:(?:\1[0-9A-Fa-f]{2}){4}|(?:\1[0-9A-Fa-f]{2}){6}|(?:\1[0-9A-Fa-f]{2}){18})"
)
_MAC_DOTTED = re.compile(
    r"[0-9A-Fa-f]{4}(?:(?:\.[0-9A-Fa-f]{4}){2}|(?:\.[0-9A-Fa-f]{4}){3}|(?:\.[0-9A-Fa-f]{4}){9})"
)
_HOSTNAME_RFC952 = re.compile(r"[a-zA-Z](?:[a-zA-Z0-9\-]+\.?)*[a-zA-Z0-9]")
_HOSTNAME_RFC1123 = re.compile(
    r"[a-zA-Z0-9][a-zA-Z0-9_-]{0,62}(?:\.[a-zA-Z0-9_][a-zA-Z0-9_-]{0,62})*"
)
_FQDN = re.compile(
    r"[a-zA-Z0-9][a-zA-Z0-9_-]{0,62}(?:\.[a-zA-Z0-9_][a-zA-Z0-9_-]{0,62})*"
    r"\.[a-zA-Z][a-zA-Z0-9]{0,62}\.?"
)
# search
_HTML = re.compile(r"<[/]?([a-zA-Z]+).*?>")
_HTML_ENCODED = re.compile(r"&#[x]?([0-9a-fA-F]{2})|(&gt)|(&lt)|(&quot)|(&amp)+[;]?")
_URL_ENCODED = re.compile(r"%[A-Fa-f0-9]{2}")

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BECH32_ALPHABET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_BECH32_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


def _matcher(pattern: re.Pattern[str]) -> FormatFn:
    def check(value: str) -> bool:
        return pattern.fullmatch(value) is not None

    return check


def _searcher(pattern: re.Pattern[str]) -> FormatFn:
    def check(value: str) -> bool:
        return pattern.search(value) is not None

    return check


# ---------------------------------------------------------------------------
# Checks that need more than a pattern
# ---------------------------------------------------------------------------


def is_url(value: str) -> bool:
    """Absolute URL with a scheme; the fragment is ignored."""
    value = value.split("#", 1)[0]
    if not value:
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc or parts.path)


def is_uri(value: str) -> bool:
    """Absolute URI or absolute path; the fragment is ignored."""
    value = value.split("#", 1)[0]
    if not value or any(char.isspace() for char in value):
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) or value.startswith("/")


def is_isbn10(value: str) -> bool:
    digits = value.replace("-", "").replace(" ", "")
    if not _ISBN10.fullmatch(digits):
        return False
    checksum = sum((i + 1) * int(char) for i, char in enumerate(digits[:9]))
    checksum += 10 * (10 if digits[9] == "X" else int(digits[9]))
    return checksum % 11 == 0


def is_isbn13(value: str) -> bool:
    digits = value.replace("-", "").replace(" ", "")
    if not _ISBN13.fullmatch(digits):
        return False
    checksum = sum((1, 3)[i % 2] * int(char) for i, char in enumerate(digits[:12]))
    return int(digits[12]) == (10 - checksum % 10) % 10


def is_isbn(value: str) -> bool:
    return is_isbn10(value) or is_isbn13(value)


def is_btc_address(value: str) -> bool:
    """Base58Check pay-to-pubkey-hash / pay-to-script-hash address."""
    if not _BTC_ADDRESS.fullmatch(value):
        return False
    number = 0
    for char in value:
        number = number * 58 + _BASE58_ALPHABET.index(char)
    try:
        decoded = number.to_bytes(25, "big")
    except OverflowError:
        return False
    digest = hashlib.sha256(hashlib.sha256(decoded[:21]).digest()).digest()
    return digest[:4] == decoded[21:]


def is_btc_bech32_address(value: str) -> bool:
    """Segwit (bech32) address on the ``bc`` human-readable part."""
    if not (_BTC_BECH32_LOWER.fullmatch(value) or _BTC_BECH32_UPPER.fullmatch(value)):
        return False
    if len(value) % 8 in (0, 3, 5):
        return False

    data = [_BECH32_ALPHABET.index(char) for char in value.lower()[3:]]
    version = data[0]
    if version > 16:
        return False
    if version == 0 and len(value) not in (42, 62):
        return False

    checksum = 1
    for item in [3, 3, 0, 2, 3, *data]:  # expanded human-readable part "bc"
        top = checksum >> 25
        checksum = (checksum & 0x1FFFFFF) << 5 ^ item
        for i, generator in enumerate(_BECH32_GENERATOR):
            if (top >> i) & 1:
                checksum ^= generator
    if checksum != 1:
        return False

    bits = 0
    accumulator = 0
    program: list[int] = []
    for item in data[1:-6]:
        accumulator = (accumulator << 5) | item
        bits += 5
        while bits >= 8:
            bits -= 8
            program.append((accumulator >> bits) & 0xFF)
    return 2 <= len(program) <= 40


def _ip(value: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


def is_ipv4(value: str) -> bool:
    address = _ip(value)
    if isinstance(address, ipaddress.IPv6Address):
        return address.ipv4_mapped is not None
    return address is not None


def is_ipv6(value: str) -> bool:
    address = _ip(value)
    return isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is None


def is_ip(value: str) -> bool:
    return _ip(value) is not None


def _network(value: str) -> ipaddress.IPv4Network | ipaddress.IPv6Network | None:
    if "/" not in value:
        return None
    try:
        return ipaddress.ip_network(value, strict=False)
    except ValueError:
        return None


def is_cidrv4(value: str) -> bool:
    return isinstance(_network(value), ipaddress.IPv4Network)


def is_cidrv6(value: str) -> bool:
    return isinstance(_network(value), ipaddress.IPv6Network)


def is_cidr(value: str) -> bool:
    return _network(value) is not None


def is_mac(value: str) -> bool:
    return bool(_MAC_SEPARATED.fullmatch(value) or _MAC_DOTTED.fullmatch(value))


def is_data_uri(value: str) -> bool:
    header, sep, payload = value.partition(",")
    if not sep or not _DATA_URI_HEADER.fullmatch(header):
        return False
    return _BASE64.fullmatch(payload) is not None


def is_ssn(value: str) -> bool:
    return len(value) == 11 and _SSN.fullmatch(value) is not None


def is_multibyte(value: str) -> bool:
    return not value or _MULTIBYTE.search(value) is not None


def is_fqdn(value: str) -> bool:
    return bool(value) and _FQDN.fullmatch(value) is not None


BUILTIN_FORMATS: dict[str, FormatFn] = {
    "alpha": _matcher(_ALPHA),
    "alphanum": _matcher(_ALPHANUM),
    "alphaunicode": str.isalpha,
    "alphanumunicode": str.isalnum,
    "numeric": _matcher(_NUMERIC),
    "number": _matcher(_NUMBER),
    "hexadecimal": _matcher(_HEXADECIMAL),
    "hexcolor": _matcher(_HEXCOLOR),
    "rgb": _matcher(_RGB),
    "rgba": _matcher(_RGBA),
    "hsl": _matcher(_HSL),
    "hsla": _matcher(_HSLA),
    "email": _matcher(_EMAIL),
    "url": is_url,
    "uri": is_uri,
    "urn_rfc2141": _matcher(_URN),
    "base64": _matcher(_BASE64),
    "base64url": _matcher(_BASE64URL),
    "isbn": is_isbn,
    "isbn10": is_isbn10,
    "isbn13": is_isbn13,
    "eth_addr": _matcher(_ETH_ADDRESS),
    "btc_addr": is_btc_address,
    "btc_addr_bech32": is_btc_bech32_address,
    "uuid": _matcher(_UUID),
    "uuid3": _matcher(_UUID3),
    "uuid4": _matcher(_UUID4),
    "uuid5": _matcher(_UUID5),
    "uuid_rfc4122": _matcher(_UUID_RFC4122),
    "uuid3_rfc4122": _matcher(_UUID3_RFC4122),
    "uuid4_rfc4122": _matcher(_UUID4_RFC4122),
    "uuid5_rfc4122": _matcher(_UUID5_RFC4122),
    "ascii": _matcher(_ASCII),
    "printascii": _matcher(_PRINTABLE_ASCII),
    "multibyte": is_multibyte,
    "datauri": is_data_uri,
    "latitude": _matcher(_LATITUDE),
    "longitude": _matcher(_LONGITUDE),
    "ssn": is_ssn,
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "ip": is_ip,
    "cidrv4": is_cidrv4,
    "cidrv6": is_cidrv6,
    "cidr": is_cidr,
    "mac": is_mac,
    "hostname": _matcher(_HOSTNAME_RFC952),
    "hostname_rfc1123": _matcher(_HOSTNAME_RFC1123),
    "fqdn": is_fqdn,
    "html": _searcher(_HTML),
    "html_encoded": _searcher(_HTML_ENCODED),
    "url_encoded": _searcher(_URL_ENCODED),
}
