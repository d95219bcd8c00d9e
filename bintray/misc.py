import datetime as dt
from functools import cmp_to_key
from pathlib import PurePosixPath
from typing import Optional, Union


def clean_path(path: Union[str, PurePosixPath]) -> PurePosixPath:
    """Strip leading root, current and parent directory components from a path.

    Remote paths are always relative to the repository, so something like
    `/../pool/foo.deb` becomes `pool/foo.deb`.
    """
    parts = PurePosixPath(str(path).replace("\\", "/")).parts
    index = 0
    for index, part in enumerate(parts):
        if part not in ("/", ".", ".."):
            break
    else:
        return PurePosixPath()
    return PurePosixPath(*parts[index:])


def split_evr(value: str) -> tuple[str, str, Optional[str]]:
    """Split a version name of the form `[epoch:]version[-release]`."""
    epoch, sep, rest = value.partition(":")
    if not sep or not epoch.isdigit():
        epoch, rest = "0", value
    version, sep, release = rest.rpartition("-")
    if not sep:
        return epoch, rest, None
    return epoch, version, release


def vercmp(a: str, b: str) -> int:
    """Compare two version names the way RPM compares EVRs.

    :return: -1, 0 or 1 if a is older than, equal to or newer than b
    """
    from rpm import labelCompare

    return labelCompare(split_evr(a), split_evr(b))


version_key = cmp_to_key(vercmp)


def parse_datetime(value: Optional[str]) -> Optional[dt.datetime]:
    """Parse a timestamp as returned by Bintray, e.g. `2018-07-26T09:14:22.417Z`.

    Returns None for empty or unparseable values.
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = dt.datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed


def format_datetime(value: Optional[dt.datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.isoformat()


def checksum_to_hex(checksum: bytes) -> str:
    return checksum.hex()


def checksum_from_hex(value: str) -> Optional[bytes]:
    try:
        return bytes.fromhex(value.strip())
    except ValueError:
        return None


def bool_to_flag(flag: bool) -> str:
    return "1" if flag else "0"
