import json
from http import HTTPStatus
from pathlib import Path
from typing import Any, Optional

import requests

__HERE__ = Path(__file__).parent
TEST_DATA = __HERE__ / "data"
MYAPP_SPEC = TEST_DATA / "rpm-package" / "myapp.spec"

SHA256_HEX = "0f" * 32
SHA1_HEX = "ab" * 20
OTHER_SHA1_HEX = "cd" * 20


def make_response(
    status_code: int = 200,
    *,
    json_data: Any = None,
    content: bytes = b"",
    headers: Optional[dict[str, str]] = None,
    url: str = "https://api.bintray.com/",
) -> requests.Response:
    """Build a complete response object as if received from the network."""
    response = requests.Response()
    response.status_code = status_code
    try:
        response.reason = HTTPStatus(status_code).phrase
    except ValueError:
        response.reason = ""
    if json_data is not None:
        content = json.dumps(json_data).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    response.headers.update(headers or {})
    response._content = content
    response._content_consumed = True
    response.encoding = "utf-8"
    response.url = url
    return response


REPOMD_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<repomd xmlns="http://linux.duke.edu/metadata/repo" xmlns:rpm="http://linux.duke.edu/metadata/rpm">
  <revision>1532596462</revision>
  <data type="filelists">
    <location href="repodata/0123-filelists.xml.gz"/>
  </data>
  <data type="primary">
    <checksum type="sha256">4567</checksum>
    <location href="repodata/4567-primary.xml.gz"/>
  </data>
</repomd>
"""


def primary_xml(
    *, checksum: str = SHA1_HEX, checksum_type: str = "sha", epoch: str = "0"
) -> bytes:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<metadata xmlns="http://linux.duke.edu/metadata/common"
    xmlns:rpm="http://linux.duke.edu/metadata/rpm" packages="2">
<package type="rpm">
  <name>otherapp</name>
  <arch>x86_64</arch>
  <version epoch="0" ver="2.0" rel="3"/>
  <checksum type="sha" pkgid="YES">{OTHER_SHA1_HEX}</checksum>
</package>
<package type="rpm">
  <name>myapp</name>
  <arch>noarch</arch>
  <version epoch="{epoch}" ver="1.0" rel="1"/>
  <checksum type="{checksum_type}" pkgid="YES">{checksum}</checksum>
  <summary>Sample RPM package</summary>
</package>
</metadata>
""".encode(
        "utf-8"
    )


def debian_packages_list(*checksums: str) -> str:
    return "\n".join(
        f"Package: myapp\nVersion: 1.0-1\nArchitecture: all\nFilename: pool/m/myapp_1.0-1_all.deb"
        + f"\nSHA256: {checksum}\n"
        for checksum in checksums
    )


class Router:
    """Answer requests on a mocked session by method and URL.

    Each route has a list of responses or exceptions, used one after the
    other; the last one is repeated.
    """

    def __init__(self, routes: dict[tuple[str, str], list]):
        self.routes = {key: list(value) for key, value in routes.items()}
        self.calls = []

    def __call__(self, method: str, url: str, **kwargs):
        self.calls.append((method, url))
        answers = self.routes[(method, url)]
        answer = answers.pop(0) if len(answers) > 1 else answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer
