import datetime as dt
import logging
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from .content import Content
from .misc import format_datetime, parse_datetime
from .types import RepositoryType

if TYPE_CHECKING:
    from .client import Client

log = logging.getLogger(__name__)


class Version:
    """A version of a package, which files are uploaded to."""

    def __init__(
        self,
        client: "Client",
        subject: str,
        repository: str,
        package: str,
        name: str,
        *,
        desc: str = "",
        labels: Iterable[str] = (),
        released: Optional[dt.datetime] = None,
        vcs_tag: Optional[str] = None,
        github_use_tag_release_notes: bool = False,
        github_release_notes_file: Optional[str] = None,
    ):
        self.client = client
        self.subject = subject
        self.repository = repository
        self.package = package
        self.name = name

        self.desc = desc
        self.labels = labels
        self.released = released
        self.vcs_tag = vcs_tag
        self.github_use_tag_release_notes = github_use_tag_release_notes
        self.github_release_notes_file = github_release_notes_file

        self.published = False
        self.created: Optional[dt.datetime] = None
        self.updated: Optional[dt.datetime] = None

    def __str__(self):
        return f"bintray::Version({self.subject}:{self.repository}:{self.package}:{self.name})"

    @property
    def labels(self) -> list[str]:
        return self._labels

    @labels.setter
    def labels(self, labels: Iterable[str]) -> None:
        self._labels = sorted(labels or ())

    @property
    def url(self) -> str:
        return self.client.api_url(
            f"/packages/{self.subject}/{self.repository}/{self.package}/versions/{self.name}"
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "owner": self.subject,
            "repo": self.repository,
            "package": self.package,
            "name": self.name,
            "desc": self.desc,
            "labels": self.labels,
            "released": format_datetime(self.released),
            "vcs_tag": self.vcs_tag,
            "github_use_tag_release_notes": self.github_use_tag_release_notes,
            "github_release_notes_file": self.github_release_notes_file,
            "published": self.published,
            "created": format_datetime(self.created),
            "updated": format_datetime(self.updated),
        }

    def _payload(self) -> dict[str, Any]:
        payload = {
            "desc": self.desc,
            "labels": self.labels,
            "github_use_tag_release_notes": self.github_use_tag_release_notes,
        }
        if self.released is not None:
            payload["released"] = format_datetime(self.released)
        if self.vcs_tag is not None:
            payload["vcs_tag"] = self.vcs_tag
        if self.github_release_notes_file is not None:
            payload["github_release_notes_file"] = self.github_release_notes_file
        return payload

    def _update_from(self, data: dict[str, Any], keep_released: bool = False) -> None:
        self.desc = data.get("desc") or ""
        self.labels = data.get("labels") or ()
        if not keep_released or self.released is None:
            self.released = parse_datetime(data.get("released"))
        self.vcs_tag = data.get("vcs_tag")
        self.github_use_tag_release_notes = bool(data.get("github_use_tag_release_notes"))
        self.github_release_notes_file = data.get("github_release_notes_file")
        self.published = bool(data.get("published"))
        self.created = parse_datetime(data.get("created"))
        self.updated = parse_datetime(data.get("updated"))

    def create(self) -> "Version":
        url = self.client.api_url(
            f"/packages/{self.subject}/{self.repository}/{self.package}/versions"
        )
        payload = {"name": self.name} | self._payload()
        log.info("Creating version %s of %s", self.name, self.package)

        data = self.client.check_response(self.client.post(url, json=payload), self)
        if data:
            self._update_from(data, keep_released=True)
        return self

    def exists(self) -> bool:
        return self.client.check_exists(self.client.head(self.url), self)

    def get(self) -> "Version":
        data = self.client.check_response(self.client.get(self.url), self) or {}
        self._update_from(data)
        return self

    def update(self) -> "Version":
        self.client.check_response(self.client.patch(self.url, json=self._payload()), self)
        return self

    def delete(self) -> None:
        log.info("Deleting version %s of %s", self.name, self.package)
        self.client.check_response(self.client.delete(self.url), self)

    def file(
        self,
        path: Union[str, PurePosixPath],
        repo_type: Optional[Union[RepositoryType, str]] = None,
    ) -> Content:
        """Return the content object for a file of this version.

        :param path: The path of the file, relative to the repository
        :param repo_type: The type of the repository, queried from Bintray if omitted
        """
        if repo_type is None:
            repo_type = self.client.subject(self.subject).repository(self.repository).get().type

        return Content(
            self.client,
            self.subject,
            self.repository,
            self.package,
            self.name,
            path,
            repo_type=repo_type,
        )
