"""
Device tags and serials for hot-plugged block devices.

The node name only has to be unique inside the VM, so it is random. The
serial is what the guest reads back to find the disk, so it must be a pure
function of the request.
"""

import base64
import hashlib
import secrets
import string


def random_device_tag(length: int = 16) -> str:
    """Random lowercase name used as both node-name and device id."""
    return "".join(secrets.choice(string.ascii_lowercase) for _ in range(length))


def identifier_bytes(identifier: str) -> bytes:
    """
    Raw bytes of an identifier with dashes stripped.

    Hex identifiers (UUIDs) decode to their 16 bytes; anything else falls
    back to its UTF-8 encoding.
    """
    stripped = identifier.replace("-", "")
    try:
        return bytes.fromhex(stripped)
    except ValueError:
        return stripped.encode("utf-8")


def ascii85(data: bytes) -> str:
    return base64.a85encode(data).decode("ascii")


def serial_for_identifier(identifier: str) -> str:
    """Ascii85 of the identifier bytes, a UUID becomes at most 20 characters."""
    return ascii85(identifier_bytes(identifier))


def serial_for_path(file_path: str) -> str:
    """Ascii85 of the MD5 digest of an auxiliary file path."""
    return ascii85(hashlib.md5(file_path.encode("utf-8")).digest())
