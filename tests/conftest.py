from unittest import mock

import pytest
import requests
from click.testing import CliRunner

from bintray.client import Client


@pytest.fixture
def cli_runner() -> CliRunner:
    try:
        return CliRunner(mix_stderr=False)  # click < 8.2
    except TypeError:
        return CliRunner()  # click >= 8.2


@pytest.fixture
def client() -> Client:
    """A client whose session doesn’t touch the network."""
    session = mock.Mock(spec=requests.Session)
    return Client(session=session)

