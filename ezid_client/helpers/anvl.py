"""ANVL serialization used by EZID for request and response bodies.

Each metadata element is written on its own line as ``key: value``. The characters ``%``,
newline, carriage return and ``:`` are percent-encoded in both keys and values. Every
response that is not a metadata record starts with a status, either ``success: ...`` or
``error: <message>``.
"""

import re
import string
from typing import Mapping

from ..exceptions import ProtocolError, ServiceError
from ..profiles import InternalProfile

_LINE_BREAKS = re.compile(r"[\r\n]+")
_HEX_DIGITS = frozenset(string.hexdigits)


def escape(text: str) -> str:
    """Percent-encode the characters that have a meaning in ANVL.

    :param text: Raw key or value
    :returns: Escaped text
    """
    return text.replace("%", "%25").replace("\n", "%0A").replace("\r", "%0D").replace(":", "%3A")


def unescape(text: str) -> str:
    """Decode all percent-encoded sequences in a string.

    Consecutive escapes are decoded together as UTF-8 bytes.

    :param text: Escaped text
    :raises ProtocolError: if an escape is truncated, not hexadecimal, or not valid UTF-8
    :returns: Decoded text
    """
    parts: list[str] = []
    pending = bytearray()
    position = 0
    while True:
        index = text.find("%", position)
        if index < 0:
            break
        if index > position:
            parts.append(_decode_bytes(pending, text))
            parts.append(text[position:index])
        code = text[index + 1 : index + 3]
        if len(code) != 2 or not _HEX_DIGITS.issuperset(code):
            raise ProtocolError(f"Malformed escape sequence at position {index} in {text!r}")
        pending.append(int(code, 16))
        position = index + 3
    parts.append(_decode_bytes(pending, text))
    parts.append(text[position:])
    return "".join(parts)


def _decode_bytes(pending: bytearray, text: str) -> str:
    """Decode and clear collected escaped bytes."""
    if not pending:
        return ""
    try:
        return pending.decode("utf-8")
    except UnicodeDecodeError as error:
        raise ProtocolError(f"Escaped bytes are not valid UTF-8 in {text!r}") from error
    finally:
        pending.clear()


def encode(metadata: Mapping[str, str] | None) -> str | None:
    """Serialize a metadata record as ANVL.

    :param metadata: Metadata field names mapped to their values
    :returns: ANVL text, or None when there is nothing to send
    """
    if not metadata:
        return None
    return "".join(f"{escape(key)}: {escape(value)}\n" for key, value in metadata.items())


def decode_metadata(text: str) -> dict[str, str]:
    """Parse an ANVL metadata record returned by EZID.

    :param text: Response body
    :raises ServiceError: if the body reports an error
    :raises ProtocolError: if a line is not a ``key: value`` pair
    :returns: Metadata field names mapped to their values
    """
    metadata: dict[str, str] = {}
    for line in _LINE_BREAKS.split(text):
        if not line:
            continue
        key, separator, value = line.partition(":")
        if not separator:
            raise ProtocolError(f"Metadata line is not a 'key: value' pair: {line!r}")
        key = unescape(key).strip()
        value = unescape(value).strip()
        if key == InternalProfile.ERROR:
            raise ServiceError(value)
        metadata[key] = value
    return metadata


def parse_result(text: str) -> str:
    """Extract the identifier from an EZID status response.

    The identifier is the first ``|``-separated element after ``success:``.

    :param text: Response body
    :raises ServiceError: if the status is not a success, with the service message
    :raises ProtocolError: if the body has no status
    :returns: The identifier, or for login and logout the rest of the message
    """
    status, separator, remainder = text.partition(":")
    if not separator:
        raise ProtocolError(f"Response has no status: {text!r}")
    if unescape(status).strip() == InternalProfile.SUCCESS:
        return unescape(remainder.split("|", 1)[0]).strip()
    raise ServiceError(unescape(remainder).strip())
