"""
Read package indexes published by Bintray: Debian `Packages` lists and YUM
`repomd.xml`/`primary.xml.gz` metadata.
"""

import gzip
import xml.etree.ElementTree as ElementTree
from collections import namedtuple
from typing import Iterator, Optional, Union

from .exc import RepodataError

PrimaryPackage = namedtuple(
    "PrimaryPackage", ("name", "arch", "epoch", "ver", "rel", "checksum_type", "checksum")
)


def _parse_xml(data: Union[bytes, str]) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(data)
    except ElementTree.ParseError as exc:
        raise RepodataError(f"Can’t parse repository metadata: {exc}") from exc


def primary_location(repomd_xml: Union[bytes, str]) -> Optional[str]:
    """Find where the primary metadata lives, relative to the repository root.

    :return: The `href` of the `primary` data entry, or None if it isn’t listed (yet)
    """
    root = _parse_xml(repomd_xml)
    for data in root.iterfind("{*}data"):
        if data.get("type") != "primary":
            continue
        location = data.find("{*}location")
        if location is not None and location.get("href"):
            return location.get("href")
    return None


def decompress(data: bytes) -> bytes:
    if data[:2] != b"\x1f\x8b":
        return data
    try:
        return gzip.decompress(data)
    except (OSError, EOFError) as exc:
        raise RepodataError(f"Can’t decompress repository metadata: {exc}") from exc


def primary_packages(primary_xml: Union[bytes, str]) -> Iterator[PrimaryPackage]:
    """Iterate over the packages listed in (uncompressed) primary metadata."""
    root = _parse_xml(primary_xml)
    for package in root.iterfind("{*}package"):
        version = package.find("{*}version")
        checksum = package.find("{*}checksum")
        if version is None or checksum is None:
            continue
        yield PrimaryPackage(
            name=package.findtext("{*}name", default=""),
            arch=package.findtext("{*}arch", default=""),
            epoch=version.get("epoch") or "0",
            ver=version.get("ver", ""),
            rel=version.get("rel", ""),
            checksum_type=checksum.get("type", ""),
            checksum=(checksum.text or "").strip(),
        )


def rpm_filename(package: PrimaryPackage) -> str:
    """File name of an indexed package, as uploaded."""
    filename = f"{package.name}-{package.ver}-{package.rel}.{package.arch}.rpm"
    if package.epoch != "0":
        filename = f"{package.epoch}:{filename}"
    return filename


def debian_packages_list_sha256(packages_list: str, checksum_hex: str) -> bool:
    """Check whether a Debian `Packages` file lists a file with this SHA-256."""
    wanted = f"SHA256: {checksum_hex}"
    return any(line.strip() == wanted for line in packages_list.splitlines())
