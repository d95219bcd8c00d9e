import logging
from typing import TYPE_CHECKING, Any, Optional
from urllib.parse import quote, urljoin

import requests

from .exc import BintrayApiError
from .misc import checksum_from_hex
from .util import get_bintray_message, get_bintray_warning, prettify_json

if TYPE_CHECKING:
    from .subject import Subject

log = logging.getLogger(__name__)

API_BASE_URL = "https://api.bintray.com/"
DL_BASE_URL = "https://dl.bintray.com/"

CHECKSUM_HEADER = "X-Checksum-Sha2"

# characters left alone when quoting remote paths
URL_PATH_SAFE = "/:@+~"


def _normalize_base_url(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def format_status_line(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".rstrip()


class Client:
    """Entry point to Bintray's API.

    Holds the HTTP session, the API and download base URLs and, optionally,
    credentials. Anonymous clients can query public resources and download
    published content.
    """

    def __init__(
        self,
        api_base_url: str = API_BASE_URL,
        dl_base_url: str = DL_BASE_URL,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.api_base_url = _normalize_base_url(api_base_url)
        self.dl_base_url = _normalize_base_url(dl_base_url)
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.username = None

    def __repr__(self):
        user = f" user={self.username!r}" if self.username else ""
        return f"<{self.__class__.__name__} {self.api_base_url}{user}>"

    def user(self, username: str, api_key: str) -> "Client":
        """Authenticate further requests with a username and API key."""
        self.username = username
        self.session.auth = (username, api_key)
        return self

    @staticmethod
    def _join(base_url: str, path: str) -> str:
        return urljoin(base_url, quote(path.lstrip("/"), safe=URL_PATH_SAFE))

    def api_url(self, path: str) -> str:
        return self._join(self.api_base_url, path)

    def dl_url(self, path: str) -> str:
        return self._join(self.dl_base_url, path)

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        log.debug("%s %s", method, url)
        response = self.session.request(method, url, **kwargs)
        log.debug("%s %s: %s", method, url, format_status_line(response))
        return response

    def get(self, url: str, **kwargs) -> requests.Response:
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        return self.request("HEAD", url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        return self.request("DELETE", url, **kwargs)

    def check_response(self, response: requests.Response, what: Any = None) -> Any:
        """Turn error responses into exceptions, return the decoded body otherwise.

        :param response: The response to check
        :param what: The object the request was about, used in log messages
        :return: The JSON payload of the response, or None if it's empty
        """
        text = response.text
        what = what if what is not None else response.url

        if not response.ok:
            status_line = format_status_line(response)
            log.debug("%s: %s\n%s", what, status_line, prettify_json(text))
            message = get_bintray_message(
                text, default_message=f"Unexpected status from Bintray: {status_line}"
            )
            raise BintrayApiError(message, status_code=response.status_code)

        warning = get_bintray_warning(text)
        if warning:
            log.warning("%s: %s", what, warning)

        if not text.strip():
            return None

        return response.json()

    def check_exists(self, response: requests.Response, what: Any = None) -> bool:
        """Interpret the response to a HEAD request probing for a resource."""
        if response.ok:
            return True
        if response.status_code in (401, 404):
            log.debug("%s: %s", what, format_status_line(response))
            return False
        raise BintrayApiError(
            f"Unexpected status from Bintray: {format_status_line(response)}",
            status_code=response.status_code,
        )

    def subject(self, name: str) -> "Subject":
        from .subject import Subject

        return Subject(self, name)


def checksum_from_response(response: requests.Response) -> Optional[bytes]:
    """Return the SHA-256 checksum the download server sent along, if any."""
    value = response.headers.get(CHECKSUM_HEADER)
    if not value:
        return None
    return checksum_from_hex(value)


def content_size_from_response(response: requests.Response) -> Optional[int]:
    value = response.headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None
