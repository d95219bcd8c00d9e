import datetime as dt
import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from .exc import CallGetFirst
from .misc import parse_datetime, version_key
from .types import PackageMaturity
from .version import Version

if TYPE_CHECKING:
    from .client import Client

log = logging.getLogger(__name__)


class Package:
    """A package within a repository.

    Versions are only listed after `get()`.
    """

    string_attrs = (
        "desc",
        "website_url",
        "vcs_url",
        "issue_tracker_url",
        "github_repo",
        "github_release_notes_file",
    )

    def __init__(
        self,
        client: "Client",
        subject: str,
        repository: str,
        name: str,
        *,
        desc: str = "",
        labels: Iterable[str] = (),
        licenses: Iterable[str] = (),
        website_url: str = "",
        vcs_url: str = "",
        issue_tracker_url: str = "",
        github_repo: str = "",
        github_release_notes_file: str = "",
        maturity: Union[PackageMaturity, str] = PackageMaturity.unset,
    ):
        self.client = client
        self.subject = subject
        self.repository = repository
        self.name = name

        self.desc = desc
        self.labels = labels
        self.licenses = licenses
        self.website_url = website_url
        self.vcs_url = vcs_url
        self.issue_tracker_url = issue_tracker_url
        self.github_repo = github_repo
        self.github_release_notes_file = github_release_notes_file
        self.maturity = PackageMaturity(maturity)

        self.created: Optional[dt.datetime] = None
        self.updated: Optional[dt.datetime] = None
        self._versions: Optional[list[str]] = None

    def __str__(self):
        return f"bintray::Package({self.subject}:{self.repository}:{self.name})"

    @property
    def labels(self) -> list[str]:
        return self._labels

    @labels.setter
    def labels(self, labels: Iterable[str]) -> None:
        self._labels = sorted(labels or ())

    @property
    def licenses(self) -> list[str]:
        return self._licenses

    @licenses.setter
    def licenses(self, licenses: Iterable[str]) -> None:
        self._licenses = sorted(licenses or ())

    @property
    def versions(self) -> list[str]:
        """Version names, oldest first."""
        if self._versions is None:
            raise CallGetFirst()
        return list(self._versions)

    @property
    def url(self) -> str:
        return self.client.api_url(f"/packages/{self.subject}/{self.repository}/{self.name}")

    def as_dict(self) -> dict[str, Any]:
        return {
            "owner": self.subject,
            "repo": self.repository,
            "name": self.name,
            "labels": self.labels,
            "licenses": self.licenses,
            "maturity": str(self.maturity),
            "created": self.created.isoformat() if self.created else None,
            "updated": self.updated.isoformat() if self.updated else None,
            "versions": self._versions,
            **{attr: getattr(self, attr) for attr in self.string_attrs},
        }

    def _payload(self) -> dict[str, Any]:
        return {
            "labels": self.labels,
            "licenses": self.licenses,
            "maturity": str(self.maturity),
            **{attr: getattr(self, attr) for attr in self.string_attrs},
        }

    def _update_from(self, data: dict[str, Any]) -> None:
        for attr in self.string_attrs:
            # github_* come back as null when unset
            setattr(self, attr, data.get(attr) or "")
        self.labels = data.get("labels") or ()
        self.licenses = data.get("licenses") or ()
        self.maturity = PackageMaturity(data.get("maturity") or "")
        self.created = parse_datetime(data.get("created"))
        self.updated = parse_datetime(data.get("updated"))
        if "versions" in data:
            self._versions = sorted(data["versions"] or (), key=version_key)

    def create(self) -> "Package":
        url = self.client.api_url(f"/packages/{self.subject}/{self.repository}")
        payload = {"name": self.name} | self._payload()
        log.info("Creating package %s in %s/%s", self.name, self.subject, self.repository)

        data = self.client.check_response(self.client.post(url, json=payload), self)
        if data:
            self._update_from(data)
        return self

    def exists(self) -> bool:
        return self.client.check_exists(self.client.head(self.url), self)

    def get(self) -> "Package":
        data = self.client.check_response(self.client.get(self.url), self) or {}
        self._update_from(data)
        log.debug(
            "%s: labels=%s licenses=%s maturity=%r created=%s updated=%s",
            self,
            self.labels,
            self.licenses,
            str(self.maturity),
            self.created or "(unknown)",
            self.updated or "(unknown)",
        )
        return self

    def update(self) -> "Package":
        self.client.check_response(self.client.patch(self.url, json=self._payload()), self)
        # Bintray doesn’t send back the new modification time.
        self.updated = None
        return self

    def delete(self) -> None:
        log.info("Deleting package %s from %s/%s", self.name, self.subject, self.repository)
        self.client.check_response(self.client.delete(self.url), self)

    def version(self, name: str) -> Version:
        return Version(self.client, self.subject, self.repository, self.name, name)
