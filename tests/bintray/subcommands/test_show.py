import pytest

from bintray.subcommands import show

from ...common import make_response


@pytest.mark.parametrize(
    "coordinates, expected",
    (
        ("jdoe/rpm", ["jdoe", "rpm"]),
        ("/jdoe/rpm/myapp/", ["jdoe", "rpm", "myapp"]),
        ("jdoe/rpm/myapp/1.0-1", ["jdoe", "rpm", "myapp", "1.0-1"]),
        ("jdoe", ValueError),
        ("jdoe/rpm/myapp/1.0-1/extra", ValueError),
    ),
)
def test_split_coordinates(coordinates, expected):
    if expected is ValueError:
        with pytest.raises(ValueError):
            show.split_coordinates(coordinates)
    else:
        assert show.split_coordinates(coordinates) == expected


def test_do_list_versions(client):
    client.session.request.return_value = make_response(
        200, json_data={"name": "myapp", "versions": ["1.10-1", "1.9-1"]}
    )

    assert show.do_list_versions(client, "jdoe", "rpm", "myapp") == ["1.9-1", "1.10-1"]


@pytest.mark.parametrize(
    "coordinates, url, data",
    (
        ("jdoe/rpm", "https://api.bintray.com/repos/jdoe/rpm", {"name": "rpm", "type": "rpm"}),
        (
            "jdoe/rpm/myapp",
            "https://api.bintray.com/packages/jdoe/rpm/myapp",
            {"name": "myapp", "versions": []},
        ),
        (
            "jdoe/rpm/myapp/1.0-1",
            "https://api.bintray.com/packages/jdoe/rpm/myapp/versions/1.0-1",
            {"name": "1.0-1", "published": True},
        ),
    ),
    ids=("repository", "package", "version"),
)
def test_do_show(client, coordinates, url, data):
    client.session.request.return_value = make_response(200, json_data=data)

    details = show.do_show(client, coordinates)

    client.session.request.assert_called_once_with("GET", url)
    assert details["name"] == data["name"]
    assert details["owner"] == "jdoe"


def test_format_json():
    assert show.format_json({"b": [1], "a": None}) == '{\n  "a": null,\n  "b": [\n    1\n  ]\n}'
