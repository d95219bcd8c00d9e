import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from ..client import Client
from ..content import Content
from ..types import RepositoryType

log = logging.getLogger(__name__)

DEFAULT_AVAILABILITY_TIMEOUT = 30
DEFAULT_INDEXATION_TIMEOUT = 20 * 60


def do_upload(
    client: Client,
    subject: str,
    repository: str,
    package: str,
    version: str,
    local_path: Union[str, Path],
    remote_path: Optional[str] = None,
    *,
    repo_type: Optional[Union[RepositoryType, str]] = None,
    publish: Optional[bool] = None,
    override: Optional[bool] = None,
    explode: Optional[bool] = None,
    debian_distributions: Iterable[str] = (),
    debian_components: Iterable[str] = (),
    debian_architectures: Iterable[str] = (),
    wait: bool = False,
    availability_timeout: float = DEFAULT_AVAILABILITY_TIMEOUT,
    indexation_timeout: float = DEFAULT_INDEXATION_TIMEOUT,
) -> Content:
    """Upload a local file to a version of a package.

    :param remote_path: Where to put the file, defaults to the local file name
    :param repo_type: The type of the repository, queried if omitted
    :param wait: Whether to wait until the file can be downloaded and, in
        indexed repositories, is listed in the repository index
    :return: The uploaded content
    """
    local_path = Path(local_path)
    remote_path = remote_path or local_path.name

    content = client.subject(subject).repository(repository).package(package).version(
        version
    ).file(remote_path, repo_type=repo_type)

    content.publish = publish
    content.override = override
    content.explode = explode
    content.debian_distributions = debian_distributions
    content.debian_components = debian_components
    content.debian_architectures = debian_architectures

    content.checksum_from_file(local_path)
    content.upload_from_file(local_path)

    if wait:
        wait_for_content(content, availability_timeout, indexation_timeout)

    return content


def wait_for_content(content: Content, availability_timeout: float, indexation_timeout: float):
    log.info("Waiting for %s to become available…", content.path)
    content.wait_for_availability(availability_timeout)
    if content.repo_type.is_indexed:
        log.info("Waiting for %s to be indexed…", content.path)
        content.wait_for_indexation(indexation_timeout)


def do_download(
    client: Client,
    subject: str,
    repository: str,
    remote_path: str,
    local_path: Optional[Union[str, Path]] = None,
) -> int:
    """Download a file from a repository.

    Downloads don’t need package or version, the file is addressed by its
    path in the repository. A local path of `-` writes to standard output.

    :return: The number of bytes written
    """
    content = Content(client, subject, repository, "", "", remote_path)
    if str(local_path) == "-":
        size = content.download_to_writer(sys.stdout.buffer)
        sys.stdout.buffer.flush()
        return size

    if local_path is None:
        local_path = content.path.name
    size = content.download_to_file(local_path)
    log.info("Downloaded %s to %s (%d bytes)", content.path, local_path, size)
    return size


def do_delete_file(client: Client, subject: str, repository: str, remote_path: str) -> None:
    Content(client, subject, repository, "", "", remote_path).delete()
