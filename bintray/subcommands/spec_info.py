from pathlib import Path
from typing import Union

from ..specfile import SpecFile
from .show import format_json

INFO_FIELDS = (
    ("Name", "name"),
    ("Epoch", "epoch"),
    ("Version", "version"),
    ("Release", "release"),
    ("Summary", "summary"),
    ("License", "license"),
    ("URL", "url"),
    ("Source0", "source0"),
    ("BuildArch", "build_arch"),
)


def do_spec_info(specfile: Union[str, Path], *, as_json: bool = False) -> str:
    """Summarize the metadata of a spec file.

    :param specfile: Path of the spec file
    :param as_json: Whether to return JSON instead of text meant for humans
    :return: The formatted metadata
    """
    spec = SpecFile.from_path(specfile)

    if as_json:
        return format_json(spec.as_dict())

    lines = []
    for label, attr in INFO_FIELDS:
        value = getattr(spec, attr)
        if value:
            lines.append(f"{label + ':':<11}{value}")

    if spec.description:
        lines += ["", "%description", spec.description]

    if spec.changelog:
        lines += ["", "%changelog"]
        lines += [entry.format() for entry in spec.changelog]

    return "\n".join(lines)
