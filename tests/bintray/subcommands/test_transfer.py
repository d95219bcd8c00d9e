import hashlib
from unittest import mock

import pytest

from bintray.subcommands import transfer
from bintray.types import RepositoryType

from ...common import Router, make_response

UPLOAD_URL = "https://api.bintray.com/content/jdoe/generic/myapp/1.0/dist/myapp-1.0.tar.gz"


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "myapp-1.0.tar.gz"
    path.write_bytes(b"TARBALL")
    return path


@pytest.mark.parametrize("wait", (False, True), ids=("no-wait", "wait"))
def test_do_upload(wait, client, local_file):
    client.session.request.side_effect = router = Router(
        {
            ("GET", "https://api.bintray.com/repos/jdoe/generic"): [
                make_response(200, json_data={"name": "generic", "type": "generic"})
            ],
            ("PUT", UPLOAD_URL): [make_response(201, json_data={"message": "success"})],
        }
    )

    with mock.patch.object(transfer, "wait_for_content") as wait_for_content:
        content = transfer.do_upload(
            client,
            "jdoe",
            "generic",
            "myapp",
            "1.0",
            local_file,
            "dist/myapp-1.0.tar.gz",
            publish=True,
            wait=wait,
        )

    assert router.calls == [
        ("GET", "https://api.bintray.com/repos/jdoe/generic"),
        ("PUT", UPLOAD_URL),
    ]
    assert content.repo_type == RepositoryType.generic
    assert content.sha256 == hashlib.sha256(b"TARBALL").digest()
    headers = client.session.request.call_args.kwargs["headers"]
    assert headers["X-Bintray-Publish"] == "1"
    assert headers["X-Checksum-Sha2"] == hashlib.sha256(b"TARBALL").hexdigest()

    if wait:
        wait_for_content.assert_called_once_with(
            content, transfer.DEFAULT_AVAILABILITY_TIMEOUT, transfer.DEFAULT_INDEXATION_TIMEOUT
        )
    else:
        wait_for_content.assert_not_called()


def test_do_upload_debian_default_remote_path(client, local_file):
    client.session.request.return_value = make_response(201, json_data={"message": "success"})

    content = transfer.do_upload(
        client,
        "jdoe",
        "deb",
        "myapp",
        "1.0",
        local_file,
        repo_type="debian",
        debian_distributions=["stretch"],
        debian_components=["main"],
        debian_architectures=["all"],
    )

    assert str(content.path) == "myapp-1.0.tar.gz"
    method, url = client.session.request.call_args.args
    assert (method, url) == (
        "PUT",
        "https://api.bintray.com/content/jdoe/deb/myapp/1.0/myapp-1.0.tar.gz",
    )
    headers = client.session.request.call_args.kwargs["headers"]
    assert headers["X-Bintray-Debian-Distribution"] == "stretch"
    assert "X-Bintray-Publish" not in headers


@pytest.mark.parametrize("repo_type", (RepositoryType.generic, RepositoryType.rpm))
def test_wait_for_content(repo_type):
    content = mock.Mock(repo_type=repo_type)

    transfer.wait_for_content(content, 30, 600)

    content.wait_for_availability.assert_called_once_with(30)
    if repo_type.is_indexed:
        content.wait_for_indexation.assert_called_once_with(600)
    else:
        content.wait_for_indexation.assert_not_called()


@pytest.mark.parametrize("with_local_path", (False, True), ids=("default-path", "local-path"))
def test_do_download(with_local_path, client, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    client.session.request.return_value = make_response(200, content=b"TARBALL")

    if with_local_path:
        local_path = tmp_path / "downloaded.tar.gz"
        size = transfer.do_download(client, "jdoe", "generic", "/dist/myapp-1.0.tar.gz", local_path)
    else:
        local_path = tmp_path / "myapp-1.0.tar.gz"
        size = transfer.do_download(client, "jdoe", "generic", "/dist/myapp-1.0.tar.gz")

    assert size == 7
    assert local_path.read_bytes() == b"TARBALL"
    client.session.request.assert_called_once_with(
        "GET", "https://dl.bintray.com/jdoe/generic/dist/myapp-1.0.tar.gz", stream=True
    )


def test_do_download_to_stdout(client, tmp_path, monkeypatch, capsysbinary):
    monkeypatch.chdir(tmp_path)
    client.session.request.return_value = make_response(200, content=b"TARBALL")

    size = transfer.do_download(client, "jdoe", "generic", "/dist/myapp-1.0.tar.gz", "-")

    assert size == 7
    assert capsysbinary.readouterr().out == b"TARBALL"
    assert not (tmp_path / "-").exists()


def test_do_delete_file(client):
    client.session.request.return_value = make_response(200, json_data={"message": "success"})

    transfer.do_delete_file(client, "jdoe", "generic", "dist/myapp-1.0.tar.gz")

    client.session.request.assert_called_once_with(
        "DELETE", "https://api.bintray.com/content/jdoe/generic/dist/myapp-1.0.tar.gz"
    )
