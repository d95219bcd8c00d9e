"""
Configuration of the command line client

Settings are read from the `[bintray]` section of INI files, later files
override earlier ones:

    [bintray]
    username = jdoe
    api_key = 0123456789abcdef
    api_url = https://api.bintray.com/
    dl_url = https://dl.bintray.com/
    timeout = 60

Credentials can also be passed in the environment as $BINTRAY_USERNAME and
$BINTRAY_API_KEY, which take precedence over configuration files.
"""

import configparser
import logging
import os
from pathlib import Path
from typing import Mapping, NamedTuple, Optional, Sequence, Union

from .client import API_BASE_URL, DL_BASE_URL, Client
from .exc import ConfigError

log = logging.getLogger(__name__)

SECTION = "bintray"

SYSTEM_CONFIG_FILE = Path("/etc/bintray.conf")
USER_CONFIG_FILE = Path("~/.config/bintray.conf")

CONFIG_ENV_VAR = "BINTRAY_CONFIG"
USERNAME_ENV_VAR = "BINTRAY_USERNAME"
API_KEY_ENV_VAR = "BINTRAY_API_KEY"


class Config(NamedTuple):
    username: Optional[str] = None
    api_key: Optional[str] = None
    api_url: str = API_BASE_URL
    dl_url: str = DL_BASE_URL
    timeout: Optional[float] = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.api_key)


def default_config_files(environ: Mapping[str, str] = os.environ) -> list[Path]:
    """Configuration files to read if none are given explicitly."""
    if environ.get(CONFIG_ENV_VAR):
        return [Path(environ[CONFIG_ENV_VAR])]
    return [SYSTEM_CONFIG_FILE, USER_CONFIG_FILE.expanduser()]


def load_config(
    paths: Optional[Sequence[Union[str, Path]]] = None,
    environ: Mapping[str, str] = os.environ,
) -> Config:
    """Read configuration from files and the environment.

    :param paths: Configuration files to read, missing ones are skipped
        unless they were given explicitly
    :param environ: The environment to consult for overrides
    :return: The resulting configuration
    """
    explicit = paths is not None
    if not explicit:
        paths = default_config_files(environ)

    parser = configparser.ConfigParser(interpolation=None)
    for path in paths:
        path = Path(path)
        if not path.exists():
            if explicit:
                raise ConfigError(f"Configuration file not found: {path}")
            continue
        log.debug("Reading configuration from %s", path)
        try:
            with path.open("r", encoding="utf-8") as f:
                parser.read_file(f, source=str(path))
        except (OSError, configparser.Error) as exc:
            raise ConfigError(f"Can’t read configuration file {path}", detail=str(exc)) from exc

    settings = dict(parser[SECTION]) if parser.has_section(SECTION) else {}

    if environ.get(USERNAME_ENV_VAR):
        settings["username"] = environ[USERNAME_ENV_VAR]
    if environ.get(API_KEY_ENV_VAR):
        settings["api_key"] = environ[API_KEY_ENV_VAR]

    timeout = settings.get("timeout")
    if timeout:
        try:
            timeout = float(timeout)
        except ValueError as exc:
            raise ConfigError(f"Invalid timeout value: {timeout!r}") from exc
    else:
        timeout = None

    return Config(
        username=settings.get("username") or None,
        api_key=settings.get("api_key") or None,
        api_url=settings.get("api_url") or API_BASE_URL,
        dl_url=settings.get("dl_url") or DL_BASE_URL,
        timeout=timeout,
    )


def client_from_config(config: Config) -> Client:
    """Create a client, authenticated if the configuration has credentials."""
    client = Client(config.api_url, config.dl_url, timeout=config.timeout)
    if config.has_credentials:
        client.user(config.username, config.api_key)
    elif config.username or config.api_key:
        log.warning("Both username and API key are needed for authentication, ignoring them")
    return client
