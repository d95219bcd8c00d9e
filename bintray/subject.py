import logging
from typing import TYPE_CHECKING

from .repository import Repository

if TYPE_CHECKING:
    from .client import Client

log = logging.getLogger(__name__)


class Subject:
    """A Bintray user or organization, owner of repositories."""

    def __init__(self, client: "Client", name: str):
        self.client = client
        self.name = name

    def __str__(self):
        return f"bintray::Subject({self.name})"

    def repository_names(self) -> list[str]:
        url = self.client.api_url(f"/repos/{self.name}")
        entries = self.client.check_response(self.client.get(url), self) or []
        names = sorted(entry["name"] for entry in entries)
        log.debug("%s: %d repositories", self, len(names))
        return names

    def repository(self, name: str) -> Repository:
        return Repository(self.client, self.name, name)
