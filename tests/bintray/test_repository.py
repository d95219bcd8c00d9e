import datetime as dt

import pytest

from bintray.exc import BintrayApiError
from bintray.package import Package
from bintray.types import RepositoryType

from ..common import make_response

REPO_URL = "https://api.bintray.com/repos/jdoe/rpm"

REPO_DATA = {
    "name": "rpm",
    "owner": "jdoe",
    "type": "rpm",
    "private": False,
    "premium": True,
    "desc": "RPM packages",
    "labels": ["tools", "admin"],
    "created": "2018-07-26T09:14:22.417Z",
    "package_count": 3,
    "gpg_sign_metadata": True,
    "gpg_sign_files": False,
    "gpg_use_owner_key": False,
    "yum_metadata_depth": 3,
}


@pytest.fixture
def repository(client):
    return client.subject("jdoe").repository("rpm")


class TestRepository:
    def test_defaults(self, repository):
        assert repository.type == RepositoryType.generic
        assert repository.labels == []
        assert repository.created is None
        assert repository.url == REPO_URL
        assert str(repository) == "bintray::Repository(jdoe:rpm)"

    def test_labels_sorted(self, repository):
        repository.labels = ["b", "a"]

        assert repository.labels == ["a", "b"]

    def test_create(self, client, repository):
        repository.type = RepositoryType.rpm
        repository.desc = "RPM packages"
        repository.yum_metadata_depth = 3
        client.session.request.return_value = make_response(201, json_data=REPO_DATA)

        assert repository.create() is repository

        method, url = client.session.request.call_args.args
        payload = client.session.request.call_args.kwargs["json"]
        assert (method, url) == ("POST", REPO_URL)
        assert payload["name"] == "rpm"
        assert payload["type"] == "rpm"
        assert payload["yum_metadata_depth"] == 3
        # unset values aren’t sent
        assert "business_unit" not in payload
        assert "default_debian_distribution" not in payload

        assert repository.premium is True
        assert repository.package_count == 3
        assert repository.created == dt.datetime(2018, 7, 26, 9, 14, 22, 417000, dt.timezone.utc)

    def test_get(self, client, repository):
        client.session.request.return_value = make_response(200, json_data=REPO_DATA)

        assert repository.get() is repository

        client.session.request.assert_called_once_with("GET", REPO_URL)
        assert repository.type == RepositoryType.rpm
        assert repository.labels == ["admin", "tools"]
        assert repository.gpg_sign_metadata is True
        assert repository.yum_metadata_depth == 3
        assert repository.as_dict()["type"] == "rpm"
        assert repository.as_dict()["created"] == "2018-07-26T09:14:22.417000+00:00"

    def test_get_missing(self, client, repository):
        client.session.request.return_value = make_response(
            404, json_data={"message": "Repo 'rpm' was not found"}
        )

        with pytest.raises(BintrayApiError, match="Repo 'rpm' was not found"):
            repository.get()

    @pytest.mark.parametrize("status_code, expected", ((200, True), (404, False)))
    def test_exists(self, client, repository, status_code, expected):
        client.session.request.return_value = make_response(status_code)

        assert repository.exists() is expected

        client.session.request.assert_called_once_with("HEAD", REPO_URL)

    def test_update(self, client, repository):
        repository.desc = "New description"
        repository.yum_metadata_depth = 2
        client.session.request.return_value = make_response(
            200, json_data={"message": "success"}
        )

        assert repository.update() is repository

        method, url = client.session.request.call_args.args
        payload = client.session.request.call_args.kwargs["json"]
        assert (method, url) == ("PATCH", REPO_URL)
        assert payload["desc"] == "New description"
        # only mutable attributes are sent
        assert "yum_metadata_depth" not in payload
        assert "private" not in payload

    def test_delete(self, client, repository):
        repository.created = dt.datetime.now(dt.timezone.utc)
        client.session.request.return_value = make_response(
            200, json_data={"message": "success"}
        )

        repository.delete()

        client.session.request.assert_called_once_with("DELETE", REPO_URL)
        assert repository.created is None

    def test_package_names(self, client, repository):
        client.session.request.return_value = make_response(
            200, json_data=[{"name": "zsh", "linked": False}, {"name": "myapp", "linked": False}]
        )

        assert repository.package_names() == ["myapp", "zsh"]

        client.session.request.assert_called_once_with("GET", REPO_URL + "/packages")

    def test_package(self, repository):
        package = repository.package("myapp")

        assert isinstance(package, Package)
        assert (package.subject, package.repository, package.name) == ("jdoe", "rpm", "myapp")
