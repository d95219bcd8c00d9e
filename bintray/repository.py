"""Bintray repositories

Repositories can be queried, created, updated and deleted, and list the
packages they provide.
"""

import datetime as dt
import json
import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from .misc import parse_datetime
from .package import Package
from .types import RepositoryType

if TYPE_CHECKING:
    from .client import Client

log = logging.getLogger(__name__)


class Repository:
    """A repository owned by a subject.

    Attributes mirror what Bintray reports. `premium`, `created` and
    `package_count` are only known after `get()` or `create()`.
    """

    # attributes which can be set when creating a repository
    create_attrs = (
        "private",
        "business_unit",
        "desc",
        "labels",
        "gpg_sign_metadata",
        "gpg_sign_files",
        "gpg_use_owner_key",
        "default_debian_architecture",
        "default_debian_distribution",
        "default_debian_component",
        "yum_metadata_depth",
        "yum_groups_file",
    )

    # attributes which can be changed later on
    update_attrs = (
        "business_unit",
        "desc",
        "labels",
        "gpg_sign_metadata",
        "gpg_sign_files",
        "gpg_use_owner_key",
    )

    def __init__(
        self,
        client: "Client",
        subject: str,
        name: str,
        *,
        type: Union[RepositoryType, str] = RepositoryType.generic,
        private: bool = False,
        business_unit: Optional[str] = None,
        desc: str = "",
        labels: Iterable[str] = (),
        gpg_sign_metadata: bool = False,
        gpg_sign_files: bool = False,
        gpg_use_owner_key: bool = False,
        default_debian_architecture: Optional[str] = None,
        default_debian_distribution: Optional[str] = None,
        default_debian_component: Optional[str] = None,
        yum_metadata_depth: Optional[int] = None,
        yum_groups_file: Optional[str] = None,
    ):
        self.client = client
        self.subject = subject
        self.name = name

        self.type = RepositoryType(type)
        self.private = private
        self.premium = False
        self.business_unit = business_unit
        self.desc = desc
        self.labels = labels
        self.gpg_sign_metadata = gpg_sign_metadata
        self.gpg_sign_files = gpg_sign_files
        self.gpg_use_owner_key = gpg_use_owner_key

        self.default_debian_architecture = default_debian_architecture
        self.default_debian_distribution = default_debian_distribution
        self.default_debian_component = default_debian_component

        self.yum_metadata_depth = yum_metadata_depth
        self.yum_groups_file = yum_groups_file

        self.created: Optional[dt.datetime] = None
        self.package_count: Optional[int] = None

    def __str__(self):
        return f"bintray::Repository({self.subject}:{self.name})"

    @property
    def labels(self) -> list[str]:
        return self._labels

    @labels.setter
    def labels(self, labels: Iterable[str]) -> None:
        self._labels = sorted(labels or ())

    @property
    def url(self) -> str:
        return self.client.api_url(f"/repos/{self.subject}/{self.name}")

    def as_dict(self) -> dict[str, Any]:
        return {
            "owner": self.subject,
            "name": self.name,
            "type": str(self.type),
            "premium": self.premium,
            "created": self.created.isoformat() if self.created else None,
            "package_count": self.package_count,
            **{attr: getattr(self, attr) for attr in self.create_attrs},
        }

    def _payload(self, attrs: Iterable[str]) -> dict[str, Any]:
        payload = {}
        for attr in attrs:
            value = getattr(self, attr)
            if value is None:
                # unset values are left to Bintray’s defaults
                continue
            payload[attr] = value
        return payload

    def _update_from(self, data: dict[str, Any]) -> None:
        if data.get("type"):
            self.type = RepositoryType(data["type"])
        self.private = data.get("private", self.private)
        self.premium = data.get("premium", self.premium)
        self.business_unit = data.get("business_unit", self.business_unit)
        self.desc = data.get("desc") or ""
        self.labels = data.get("labels") or ()
        for attr in (
            "gpg_sign_metadata",
            "gpg_sign_files",
            "gpg_use_owner_key",
            "default_debian_architecture",
            "default_debian_distribution",
            "default_debian_component",
            "yum_metadata_depth",
            "yum_groups_file",
            "package_count",
        ):
            if attr in data:
                setattr(self, attr, data[attr])
        self.created = parse_datetime(data.get("created"))

    def create(self) -> "Repository":
        payload = {"name": self.name, "type": str(self.type)} | self._payload(self.create_attrs)
        log.info("Creating repository %s/%s (%s)", self.subject, self.name, self.type)
        log.debug("%s: submitting:\n%s", self, json.dumps(payload, indent=2))

        data = self.client.check_response(self.client.post(self.url, json=payload), self)
        if data:
            self._update_from(data)
        return self

    def exists(self) -> bool:
        return self.client.check_exists(self.client.head(self.url), self)

    def get(self) -> "Repository":
        data = self.client.check_response(self.client.get(self.url), self)
        self._update_from(data or {})
        log.debug("%s: type=%s created=%s", self, self.type, self.created)
        return self

    def update(self) -> "Repository":
        payload = self._payload(self.update_attrs)
        log.debug("%s: updating:\n%s", self, json.dumps(payload, indent=2))
        self.client.check_response(self.client.patch(self.url, json=payload), self)
        return self

    def delete(self) -> None:
        log.info("Deleting repository %s/%s", self.subject, self.name)
        self.client.check_response(self.client.delete(self.url), self)
        self.created = None

    def package_names(self) -> list[str]:
        url = self.client.api_url(f"/repos/{self.subject}/{self.name}/packages")
        entries = self.client.check_response(self.client.get(url), self) or []
        return sorted(entry["name"] for entry in entries)

    def package(self, name: str) -> Package:
        return Package(self.client, self.subject, self.name, name)
