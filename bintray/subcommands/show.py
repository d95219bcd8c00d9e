import json
from typing import Any

from ..client import Client


def split_coordinates(coordinates: str) -> list[str]:
    """Split `subject/repository[/package[/version]]` into its parts."""
    parts = [part for part in coordinates.strip("/").split("/") if part]
    if not 2 <= len(parts) <= 4:
        raise ValueError(
            f"Expected SUBJECT/REPOSITORY[/PACKAGE[/VERSION]], got {coordinates!r}"
        )
    return parts


def do_list_repositories(client: Client, subject: str) -> list[str]:
    return client.subject(subject).repository_names()


def do_list_packages(client: Client, subject: str, repository: str) -> list[str]:
    return client.subject(subject).repository(repository).package_names()


def do_list_versions(client: Client, subject: str, repository: str, package: str) -> list[str]:
    """List versions of a package, oldest first."""
    return client.subject(subject).repository(repository).package(package).get().versions


def do_show(client: Client, coordinates: str) -> dict[str, Any]:
    """Query a repository, package or version.

    :param client: The client to use
    :param coordinates: What to show, `subject/repository`,
        `subject/repository/package` or `subject/repository/package/version`
    :return: The attributes of the queried object
    """
    subject, repository, *rest = split_coordinates(coordinates)

    obj = client.subject(subject).repository(repository)
    if rest:
        obj = obj.package(rest[0])
    if len(rest) > 1:
        obj = obj.version(rest[1])

    return obj.get().as_dict()


def format_json(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True)
