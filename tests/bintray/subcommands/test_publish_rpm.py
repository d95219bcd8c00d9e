from unittest import mock

import pytest

from bintray.specfile import SpecFile
from bintray.subcommands import publish_rpm

from ...common import MYAPP_SPEC, Router, make_response

PACKAGE_URL = "https://api.bintray.com/packages/jdoe/rpm/myapp"
VERSION_URL = PACKAGE_URL + "/versions/1.0-1"
UPLOAD_URL = (
    "https://api.bintray.com/content/jdoe/rpm/myapp/1.0-1/myapp/el/7/noarch/myapp-1.0-1.noarch.rpm"
)


@pytest.fixture
def rpmfile(tmp_path):
    path = tmp_path / "myapp-1.0-1.noarch.rpm"
    path.write_bytes(b"RPM")
    return path


@pytest.mark.parametrize(
    "remote_dir, expected",
    (
        ("", "myapp/myapp-1.0-1.noarch.rpm"),
        ("el/7/noarch", "myapp/el/7/noarch/myapp-1.0-1.noarch.rpm"),
        ("/el/7/", "myapp/el/7/myapp-1.0-1.noarch.rpm"),
    ),
)
def test_rpm_remote_path(remote_dir, expected):
    spec = SpecFile.from_path(MYAPP_SPEC)

    assert publish_rpm.rpm_remote_path(spec, "/tmp/myapp-1.0-1.noarch.rpm", remote_dir) == expected


@pytest.mark.parametrize("exists", (False, True), ids=("new", "existing"))
def test_do_publish_rpm(exists, client, rpmfile):
    head_status = 200 if exists else 404
    client.session.request.side_effect = router = Router(
        {
            ("HEAD", PACKAGE_URL): [make_response(head_status)],
            ("POST", "https://api.bintray.com/packages/jdoe/rpm"): [
                make_response(201, json_data={"name": "myapp"})
            ],
            ("HEAD", VERSION_URL): [make_response(head_status)],
            ("POST", PACKAGE_URL + "/versions"): [
                make_response(201, json_data={"name": "1.0-1"})
            ],
            ("PUT", UPLOAD_URL): [make_response(201, json_data={"message": "success"})],
        }
    )

    with mock.patch.object(publish_rpm, "wait_for_content") as wait_for_content:
        content = publish_rpm.do_publish_rpm(
            client, "jdoe", "rpm", MYAPP_SPEC, rpmfile, remote_dir="el/7/noarch"
        )

    methods = [method for method, _ in router.calls]
    if exists:
        assert methods == ["HEAD", "HEAD", "PUT"]
    else:
        assert methods == ["HEAD", "POST", "HEAD", "POST", "PUT"]
        package_payload = client.session.request.call_args_list[1].kwargs["json"]
        assert package_payload["desc"] == "Sample RPM package"
        assert package_payload["licenses"] == ["BSD"]
        assert package_payload["vcs_url"] == "https://github.com/rabbitmq/bintray-rs"

    assert content.publish is True
    assert content.sha1 is not None
    headers = client.session.request.call_args.kwargs["headers"]
    assert headers["X-Bintray-Publish"] == "1"
    assert "X-Bintray-Debian-Distribution" not in headers
    wait_for_content.assert_called_once_with(
        content,
        publish_rpm.DEFAULT_AVAILABILITY_TIMEOUT,
        publish_rpm.DEFAULT_INDEXATION_TIMEOUT,
    )


def test_do_publish_rpm_no_wait(client, rpmfile):
    client.session.request.return_value = make_response(200, json_data={"message": "success"})
    spec = SpecFile.from_path(MYAPP_SPEC)

    with mock.patch.object(publish_rpm, "wait_for_content") as wait_for_content:
        publish_rpm.do_publish_rpm(client, "jdoe", "rpm", spec, rpmfile, wait=False)

    wait_for_content.assert_not_called()
    method, url = client.session.request.call_args.args
    assert (method, url) == (
        "PUT",
        "https://api.bintray.com/content/jdoe/rpm/myapp/1.0-1/myapp/myapp-1.0-1.noarch.rpm",
    )


def test_do_publish_rpm_expands_macros(client, rpmfile, tmp_path):
    specpath = tmp_path / "myapp.spec"
    specpath.write_text(
        "%global srcname myapp\n"
        + "Name: %{srcname}\n"
        + "Version: 1.0\n"
        + "Release: 1%{?dist}\n"
        + "Summary: Sample RPM package\n"
    )
    client.session.request.return_value = make_response(200, json_data={"message": "success"})

    publish_rpm.do_publish_rpm(client, "jdoe", "rpm", specpath, rpmfile, wait=False)

    urls = [call.args[1] for call in client.session.request.call_args_list]
    assert urls == [
        PACKAGE_URL,
        VERSION_URL,
        "https://api.bintray.com/content/jdoe/rpm/myapp/1.0-1/myapp/myapp-1.0-1.noarch.rpm",
    ]
