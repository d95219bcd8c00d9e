import hashlib
import logging
import time
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, BinaryIO, Callable, Iterable, Optional, Union
from urllib.parse import urljoin

import requests

from .client import checksum_from_response, content_size_from_response
from .exc import (
    ContentChecksumNotReturned,
    ContentChecksumRequired,
    ContentNotAvailable,
    OnlyForIndexedPackages,
    RpmRepoChecksumUnsupported,
)
from .misc import bool_to_flag, checksum_to_hex, clean_path
from .repodata import (
    debian_packages_list_sha256,
    decompress,
    primary_location,
    primary_packages,
    rpm_filename,
)
from .types import RepositoryType

if TYPE_CHECKING:
    from .client import Client

log = logging.getLogger(__name__)

# returned by condition checks to ask for another attempt
TRY_AGAIN = object()

# statuses meaning "not there (yet)" when polling the download server
NOT_AVAILABLE_STATUSES = (401, 404)

# checksum types denoting SHA-1 in YUM metadata
RPM_SHA1_CHECKSUM_TYPES = ("sha", "sha1")

CHUNK_SIZE = 64 * 1024


class Content:
    """A file belonging to a version of a package.

    The repository type determines the upload URL and which headers are
    sent: Maven uploads go to a dedicated endpoint and only support the
    publish flag, Debian uploads carry the distributions, components and
    architectures to index the file in.
    """

    availability_check_interval = 1
    indexation_check_interval = 30

    def __init__(
        self,
        client: "Client",
        subject: str,
        repository: str,
        package: str,
        version: str,
        path: Union[str, PurePosixPath],
        *,
        repo_type: Union[RepositoryType, str] = RepositoryType.generic,
    ):
        self.client = client
        self.subject = subject
        self.repository = repository
        self.package = package
        self.version = version
        self.path = clean_path(path)
        self.repo_type = RepositoryType(repo_type)

        self.publish: Optional[bool] = None
        self.override: Optional[bool] = None
        self.explode: Optional[bool] = None

        self.sha1: Optional[bytes] = None
        self.sha256: Optional[bytes] = None

        self.debian_distributions = ()
        self.debian_components = ()
        self.debian_architectures = ()

    def __str__(self):
        return (
            f"bintray::Content({self.subject}:{self.repository}:{self.package}:{self.version}:"
            + f"{self.path})"
        )

    @property
    def debian_distributions(self) -> list[str]:
        return self._debian_distributions

    @debian_distributions.setter
    def debian_distributions(self, values: Iterable[str]) -> None:
        self._debian_distributions = sorted(values or ())

    @property
    def debian_components(self) -> list[str]:
        return self._debian_components

    @debian_components.setter
    def debian_components(self, values: Iterable[str]) -> None:
        self._debian_components = sorted(values or ())

    @property
    def debian_architectures(self) -> list[str]:
        return self._debian_architectures

    @debian_architectures.setter
    def debian_architectures(self, values: Iterable[str]) -> None:
        self._debian_architectures = sorted(values or ())

    @property
    def download_url(self) -> str:
        return self.client.dl_url(f"/{self.subject}/{self.repository}/{self.path}")

    @property
    def upload_url(self) -> str:
        if self.repo_type == RepositoryType.maven:
            return self.client.api_url(
                f"/maven/{self.subject}/{self.repository}/{self.package}/{self.path}"
            )
        return self.client.api_url(
            f"/content/{self.subject}/{self.repository}/{self.package}/{self.version}/{self.path}"
        )

    def checksum_from_file(self, filename: Union[str, Path]) -> "Content":
        """Compute SHA-1 and SHA-256 checksums of the local file to be uploaded."""
        sha1 = hashlib.sha1()
        sha256 = hashlib.sha256()

        with open(filename, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                sha1.update(chunk)
                sha256.update(chunk)

        self.sha1 = sha1.digest()
        self.sha256 = sha256.digest()
        log.debug("%s: sha256 of %s: %s", self, filename, sha256.hexdigest())
        return self

    def upload_headers(self) -> dict[str, str]:
        headers = {}

        # According to the documentation, Maven uploads only support the publish flag.
        if self.publish is not None:
            headers["X-Bintray-Publish"] = bool_to_flag(self.publish)

        if self.repo_type != RepositoryType.maven:
            if self.override is not None:
                headers["X-Bintray-Override"] = bool_to_flag(self.override)
            if self.explode is not None:
                headers["X-Bintray-Explode"] = bool_to_flag(self.explode)

        if self.sha256 is not None:
            headers["X-Checksum-Sha2"] = checksum_to_hex(self.sha256)

        if self.repo_type == RepositoryType.debian:
            headers["X-Bintray-Debian-Distribution"] = ",".join(self.debian_distributions)
            headers["X-Bintray-Debian-Component"] = ",".join(self.debian_components)
            headers["X-Bintray-Debian-Architecture"] = ",".join(self.debian_architectures)

        return headers

    def upload_from_file(self, filename: Union[str, Path]) -> "Content":
        with open(filename, "rb") as f:
            return self.upload_from_reader(f)

    def upload_from_reader(self, reader: Union[BinaryIO, Iterable[bytes]]) -> "Content":
        url = self.upload_url
        headers = self.upload_headers()
        log.debug("%s: uploading to %s, headers: %s", self, url, headers)

        response = self.client.put(url, data=reader, headers=headers)
        self.client.check_response(response, self)

        log.info("Uploaded %s", self.path)
        return self

    def download(self) -> requests.Response:
        """Start downloading the file.

        The returned response is streamed, HTTP errors are raised as
        `requests.HTTPError`.
        """
        url = self.download_url
        log.debug("%s: downloading from %s", self, url)
        response = self.client.get(url, stream=True)
        response.raise_for_status()
        return response

    def download_to_writer(self, writer: BinaryIO) -> int:
        size = 0
        with self.download() as response:
            expected = content_size_from_response(response)
            log.debug(
                "%s: expecting %s bytes", self, expected if expected is not None else "unknown"
            )
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                writer.write(chunk)
                size += len(chunk)
        log.debug("%s: downloaded %d bytes", self, size)
        return size

    def download_to_file(self, filename: Union[str, Path]) -> int:
        with open(filename, "wb") as f:
            return self.download_to_writer(f)

    def exists(self) -> bool:
        """Check if the file can be downloaded.

        If a SHA-256 checksum is known, the remote file must match it.
        Otherwise, the remote checksum is recorded.
        """
        response = self.client.head(self.download_url)
        if not self.client.check_exists(response, self):
            return False

        checksum = checksum_from_response(response)
        if self.sha256 is not None:
            return checksum == self.sha256

        self.sha256 = checksum
        return True

    def delete(self) -> None:
        url = self.client.api_url(f"/content/{self.subject}/{self.repository}/{self.path}")
        self.client.check_response(self.client.delete(url), self)
        log.info("Deleted %s", self.path)

    def _retry_or_fail(self, response: requests.Response) -> Any:
        if response.status_code in NOT_AVAILABLE_STATUSES:
            return TRY_AGAIN
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise ContentNotAvailable(exc) from exc
        return TRY_AGAIN

    def _wait_for_condition(
        self,
        method: str,
        url: str,
        check: Callable[[requests.Response], Any],
        interval: float,
        timeout: float,
    ) -> Any:
        """Poll a URL until `check` returns something else than TRY_AGAIN.

        :return: The result of `check`
        :raises ContentNotAvailable: On timeout (without cause) or when a
            request fails (with the error as cause)
        """
        deadline = time.monotonic() + timeout

        while True:
            try:
                response = self.client.request(method, url)
            except requests.RequestException as exc:
                raise ContentNotAvailable(exc) from exc

            result = check(response)
            if result is not TRY_AGAIN:
                return result

            remaining = deadline - time.monotonic()
            if remaining <= interval:
                log.debug("%s: gave up waiting for %s", self, url)
                raise ContentNotAvailable()

            log.debug("%s: %s not ready, checking again in %s s", self, url, interval)
            time.sleep(interval)

    def wait_for_availability(self, timeout: float) -> "Content":
        """Wait until the file can be downloaded.

        If a SHA-256 checksum is known, wait until the download server
        serves a file with this checksum, otherwise record the checksum it
        reports.
        """
        url = self.download_url
        known_checksum = self.sha256

        def check(response: requests.Response) -> Any:
            if not response.ok:
                return self._retry_or_fail(response)

            checksum = checksum_from_response(response)
            if known_checksum is not None and checksum != known_checksum:
                # an older upload is still being served
                return TRY_AGAIN
            return checksum

        checksum = self._wait_for_condition(
            "HEAD", url, check, self.availability_check_interval, timeout
        )
        if checksum is None:
            raise ContentChecksumNotReturned()

        self.sha256 = checksum
        log.info("%s is available", self.path)
        return self

    def wait_for_indexation(self, timeout: float) -> "Content":
        """Wait until the file is listed in the repository index.

        Only Debian and RPM repositories are indexed. The timeout applies
        to all checks together.
        """
        if not self.repo_type.is_indexed:
            raise OnlyForIndexedPackages()

        deadline = time.monotonic() + timeout

        if self.repo_type == RepositoryType.debian:
            for distribution in self.debian_distributions:
                for component in self.debian_components:
                    for architecture in self.debian_architectures:
                        self._wait_for_debian_indexation_in(
                            distribution,
                            component,
                            architecture,
                            timeout=deadline - time.monotonic(),
                        )
        else:  # self.repo_type == RepositoryType.rpm
            repository = self.client.subject(self.subject).repository(self.repository).get()
            self._wait_for_rpm_indexation_in(
                repository.yum_metadata_depth or 0, timeout=deadline - time.monotonic()
            )

        log.info("%s is indexed", self.path)
        return self

    def _wait_for_debian_indexation_in(
        self, distribution: str, component: str, architecture: str, timeout: float
    ) -> None:
        if self.sha256 is None:
            raise ContentChecksumRequired()

        url = self.client.dl_url(
            f"/{self.subject}/{self.repository}/dists/{distribution}/{component}"
            + f"/binary-{architecture}/Packages"
        )
        checksum = checksum_to_hex(self.sha256)
        log.debug("%s: looking for SHA256 %s in %s", self, checksum, url)

        def check(response: requests.Response) -> Any:
            if not response.ok:
                return self._retry_or_fail(response)
            if debian_packages_list_sha256(response.text, checksum):
                return True
            return TRY_AGAIN

        self._wait_for_condition("GET", url, check, self.indexation_check_interval, timeout)

    def _repodata_url(self, yum_metadata_depth: int) -> str:
        if yum_metadata_depth > 0:
            metadata_root = PurePosixPath(*self.path.parts[:yum_metadata_depth])
            return self.client.dl_url(f"/{self.subject}/{self.repository}/{metadata_root}/")
        return self.client.dl_url(f"/{self.subject}/{self.repository}/")

    def _wait_for_rpm_indexation_in(self, yum_metadata_depth: int, timeout: float) -> None:
        if self.sha1 is None:
            raise ContentChecksumRequired()

        repodata_url = self._repodata_url(yum_metadata_depth)
        repomd_url = urljoin(repodata_url, "repodata/repomd.xml")
        checksum = checksum_to_hex(self.sha1)
        filename = self.path.name
        log.debug("%s: looking for %s (SHA-1 %s) via %s", self, filename, checksum, repomd_url)

        def check(response: requests.Response) -> Any:
            if not response.ok:
                return self._retry_or_fail(response)

            href = primary_location(response.content)
            if not href:
                return TRY_AGAIN

            primary_url = urljoin(repodata_url, href)
            log.debug("%s: primary metadata at %s", self, primary_url)
            try:
                primary_response = self.client.get(primary_url)
            except requests.RequestException as exc:
                log.debug("%s: fetching %s failed: %s", self, primary_url, exc)
                return TRY_AGAIN
            if not primary_response.ok:
                return TRY_AGAIN

            for package in primary_packages(decompress(primary_response.content)):
                if rpm_filename(package) != filename:
                    continue
                log.debug(
                    "%s: %s listed with checksum %s/%s",
                    self,
                    filename,
                    package.checksum_type,
                    package.checksum,
                )
                if package.checksum_type not in RPM_SHA1_CHECKSUM_TYPES:
                    raise RpmRepoChecksumUnsupported()
                if package.checksum == checksum:
                    return True
                return TRY_AGAIN

            return TRY_AGAIN

        self._wait_for_condition("GET", repomd_url, check, self.indexation_check_interval, timeout)
