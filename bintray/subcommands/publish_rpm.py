import logging
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..client import Client
from ..content import Content
from ..specfile import SpecFile
from ..types import RepositoryType
from .transfer import DEFAULT_AVAILABILITY_TIMEOUT, DEFAULT_INDEXATION_TIMEOUT, wait_for_content

log = logging.getLogger(__name__)


def rpm_remote_path(specfile: SpecFile, rpmfile: Union[str, Path], remote_dir: str = "") -> str:
    """Compute where a binary package goes in the repository.

    Packages are stored below a directory named like the package, e.g.
    `myapp/el/7/noarch/myapp-1.0-1.noarch.rpm`.
    """
    return str(PurePosixPath(specfile.name, *remote_dir.split("/"), Path(rpmfile).name))


def do_publish_rpm(
    client: Client,
    subject: str,
    repository: str,
    specfile: Union[str, Path, SpecFile],
    rpmfile: Union[str, Path],
    *,
    remote_dir: str = "",
    publish: bool = True,
    override: Optional[bool] = None,
    wait: bool = True,
    availability_timeout: float = DEFAULT_AVAILABILITY_TIMEOUT,
    indexation_timeout: float = DEFAULT_INDEXATION_TIMEOUT,
) -> Content:
    """Publish a binary RPM package built from a spec file.

    Package and version are named after the `Name`, `Version` and `Release`
    tags and created if they don’t exist yet, with metadata taken from the
    spec file.

    :param specfile: The spec file the package was built from, or its path
    :param rpmfile: The binary package to upload
    :param remote_dir: Directory below the package directory to upload to
    :param wait: Whether to wait for the package to show up in the
        repository metadata
    :return: The uploaded content
    """
    if not isinstance(specfile, SpecFile):
        specfile = SpecFile.from_path(specfile)

    version_name = f"{specfile.version}-{specfile.release}"

    package = client.subject(subject).repository(repository).package(specfile.name)
    if package.exists():
        log.debug("%s exists", package)
    else:
        package.desc = specfile.summary
        package.licenses = [specfile.license] if specfile.license else []
        package.vcs_url = specfile.url
        package.website_url = specfile.url
        package.create()

    version = package.version(version_name)
    if version.exists():
        log.debug("%s exists", version)
    else:
        version.desc = specfile.summary
        version.create()

    remote_path = rpm_remote_path(specfile, rpmfile, remote_dir)
    content = version.file(remote_path, repo_type=RepositoryType.rpm)
    content.publish = publish
    content.override = override
    content.checksum_from_file(rpmfile)
    content.upload_from_file(rpmfile)

    if wait:
        wait_for_content(content, availability_timeout, indexation_timeout)

    log.info("Published %s as %s", Path(rpmfile).name, content)
    return content
