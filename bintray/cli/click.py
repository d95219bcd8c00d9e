import logging
from typing import Any, Optional

import click

from ..config import client_from_config, load_config
from ..specfile import SpecFile
from ..subcommands.publish_rpm import do_publish_rpm
from ..subcommands.show import (
    do_list_packages,
    do_list_repositories,
    do_list_versions,
    do_show,
    format_json,
)
from ..subcommands.spec_info import do_spec_info
from ..subcommands.transfer import (
    DEFAULT_AVAILABILITY_TIMEOUT,
    DEFAULT_INDEXATION_TIMEOUT,
    do_delete_file,
    do_download,
    do_upload,
)
from ..types import RepositoryType
from ..util import handle_expected_exceptions
from .base import page, setup_logging

log = logging.getLogger(__name__)


def get_client(obj: dict[str, Any]):
    """Create the client from configuration, once per invocation."""
    if "client" not in obj:
        config = load_config(obj["config_files"])
        overrides = {
            key: obj[key] for key in ("username", "api_key") if obj.get(key) is not None
        }
        config = config._replace(**overrides)
        obj["config"] = config
        obj["client"] = client_from_config(config)
    return obj["client"]


@click.group(
    name="bintray",
    epilog="Environment variable $BINTRAY_LESS can specify pager options.",
)
@click.option(
    "--config",
    "-c",
    "config_files",
    type=click.Path(dir_okay=False),
    multiple=True,
    help="Read configuration from this file (can be given several times)",
)
@click.option("--username", "-u", help="Bintray user name, overrides $BINTRAY_USERNAME")
@click.option("--api-key", "-k", help="Bintray API key, overrides $BINTRAY_API_KEY")
@click.option(
    "--pager/--no-pager", help="Start a pager automatically", default=True, show_default=True
)
@click.option("--quiet", "-q", "log_level", flag_value=logging.WARNING, help="Be less talkative")
@click.option(
    "--debug",
    "log_level",
    flag_value=logging.DEBUG,
    help="Enable debugging output",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_files: tuple[str, ...],
    username: Optional[str],
    api_key: Optional[str],
    pager: bool,
    log_level: Optional[int],
):
    """Manage repositories, packages and files on Bintray"""
    ctx.ensure_object(dict)
    ctx.obj["config_files"] = list(config_files) or None
    ctx.obj["username"] = username
    ctx.obj["api_key"] = api_key
    ctx.obj["pager"] = pager
    ctx.obj["log_level"] = log_level

    setup_logging(log_level=log_level or logging.INFO)


# Queries


@cli.command()
@click.argument("subject")
@click.pass_obj
@handle_expected_exceptions
def repos(obj: dict[str, Any], subject: str) -> None:
    """List the repositories of a user or organization"""
    page("\n".join(do_list_repositories(get_client(obj), subject)), enabled=obj["pager"])


@cli.command()
@click.argument("subject")
@click.argument("repository")
@click.pass_obj
@handle_expected_exceptions
def packages(obj: dict[str, Any], subject: str, repository: str) -> None:
    """List the packages in a repository"""
    page(
        "\n".join(do_list_packages(get_client(obj), subject, repository)), enabled=obj["pager"]
    )


@cli.command()
@click.argument("subject")
@click.argument("repository")
@click.argument("package")
@click.pass_obj
@handle_expected_exceptions
def versions(obj: dict[str, Any], subject: str, repository: str, package: str) -> None:
    """List the versions of a package, oldest first"""
    page(
        "\n".join(do_list_versions(get_client(obj), subject, repository, package)),
        enabled=obj["pager"],
    )


@cli.command()
@click.argument("coordinates", metavar="SUBJECT/REPOSITORY[/PACKAGE[/VERSION]]")
@click.pass_obj
@handle_expected_exceptions
def show(obj: dict[str, Any], coordinates: str) -> None:
    """Show the details of a repository, package or version"""
    try:
        details = do_show(get_client(obj), coordinates)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="coordinates") from exc
    page(format_json(details), enabled=obj["pager"])


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print metadata as JSON")
@click.argument("specfile", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_expected_exceptions
def spec_info(obj: dict[str, Any], as_json: bool, specfile: str) -> None:
    """Show the metadata of an RPM spec file"""
    page(do_spec_info(specfile, as_json=as_json), enabled=obj["pager"])


# Files


@cli.command()
@click.option(
    "--repo-type",
    type=click.Choice([str(t) for t in RepositoryType]),
    help="Type of the repository (queried if omitted)",
)
@click.option("--publish/--no-publish", default=None, help="Publish the file right away")
@click.option("--override/--no-override", default=None, help="Replace an existing file")
@click.option("--explode/--no-explode", default=None, help="Unpack an uploaded archive")
@click.option(
    "--debian-distribution", "debian_distributions", multiple=True, help="Debian distribution"
)
@click.option("--debian-component", "debian_components", multiple=True, help="Debian component")
@click.option(
    "--debian-architecture", "debian_architectures", multiple=True, help="Debian architecture"
)
@click.option(
    "--wait/--no-wait",
    default=False,
    help="Wait until the file is available (and indexed)",
    show_default=True,
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_INDEXATION_TIMEOUT,
    help="Seconds to wait for indexation",
    show_default=True,
)
@click.argument("subject")
@click.argument("repository")
@click.argument("package")
@click.argument("version")
@click.argument("local_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("remote_path", required=False)
@click.pass_obj
@handle_expected_exceptions
def upload(
    obj: dict[str, Any],
    repo_type: Optional[str],
    publish: Optional[bool],
    override: Optional[bool],
    explode: Optional[bool],
    debian_distributions: tuple[str, ...],
    debian_components: tuple[str, ...],
    debian_architectures: tuple[str, ...],
    wait: bool,
    timeout: float,
    subject: str,
    repository: str,
    package: str,
    version: str,
    local_file: str,
    remote_path: Optional[str],
) -> None:
    """Upload a file to a version of a package"""
    do_upload(
        get_client(obj),
        subject,
        repository,
        package,
        version,
        local_file,
        remote_path,
        repo_type=repo_type,
        publish=publish,
        override=override,
        explode=explode,
        debian_distributions=debian_distributions,
        debian_components=debian_components,
        debian_architectures=debian_architectures,
        wait=wait,
        availability_timeout=DEFAULT_AVAILABILITY_TIMEOUT,
        indexation_timeout=timeout,
    )


@cli.command()
@click.argument("subject")
@click.argument("repository")
@click.argument("remote_path")
@click.argument("local_file", type=click.Path(dir_okay=False, allow_dash=True), required=False)
@click.pass_obj
@handle_expected_exceptions
def download(
    obj: dict[str, Any],
    subject: str,
    repository: str,
    remote_path: str,
    local_file: Optional[str],
) -> None:
    """Download a file from a repository

    LOCAL_FILE defaults to the file name of REMOTE_PATH, use `-` to write to
    standard output.
    """
    do_download(get_client(obj), subject, repository, remote_path, local_file)


@cli.command()
@click.argument("subject")
@click.argument("repository")
@click.argument("remote_path")
@click.pass_obj
@handle_expected_exceptions
def delete_file(obj: dict[str, Any], subject: str, repository: str, remote_path: str) -> None:
    """Delete a file from a repository"""
    do_delete_file(get_client(obj), subject, repository, remote_path)


@cli.command()
@click.option("--subject", "-s", help="Owner of the repository, defaults to the user name")
@click.option("--repository", "-r", required=True, help="RPM repository to publish to")
@click.option(
    "--remote-dir",
    default="",
    help="Directory below the package directory, e.g. el/7/noarch",
)
@click.option(
    "--publish/--no-publish", default=True, help="Publish the package", show_default=True
)
@click.option("--override/--no-override", default=None, help="Replace an existing file")
@click.option(
    "--wait/--no-wait",
    default=True,
    help="Wait until the package is available and indexed",
    show_default=True,
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_INDEXATION_TIMEOUT,
    help="Seconds to wait for indexation",
    show_default=True,
)
@click.argument("specfile", type=click.Path(exists=True, dir_okay=False))
@click.argument("rpmfile", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_expected_exceptions
def publish_rpm(
    obj: dict[str, Any],
    subject: Optional[str],
    repository: str,
    remote_dir: str,
    publish: bool,
    override: Optional[bool],
    wait: bool,
    timeout: float,
    specfile: str,
    rpmfile: str,
) -> None:
    """Publish an RPM package built from a spec file"""
    client = get_client(obj)
    subject = subject or client.username
    if not subject:
        raise click.UsageError("No subject given and no user name configured")

    do_publish_rpm(
        client,
        subject,
        repository,
        SpecFile.from_path(specfile),
        rpmfile,
        remote_dir=remote_dir,
        publish=publish,
        override=override,
        wait=wait,
        availability_timeout=DEFAULT_AVAILABILITY_TIMEOUT,
        indexation_timeout=timeout,
    )
