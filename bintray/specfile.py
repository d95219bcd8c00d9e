"""
Read metadata from RPM spec files

Spec files are expanded with norpm: macros are defined and expanded and
conditionals are evaluated, without needing rpm-build. The `%{dist}` macro is
defined empty.
"""

import copy
import datetime as dt
import logging
import re
from functools import cache
from pathlib import Path
from textwrap import TextWrapper
from typing import NamedTuple, Optional, Union

from norpm.macrofile import system_macro_registry
from norpm.specfile import ParserHooks, specfile_expand

from .exc import SpecParseFailure

log = logging.getLogger(__name__)

section_re = re.compile(
    r"^%(?P<name>description|package|prep|build|install|check|clean|files|changelog"
    + r"|pre|post|preun|postun|pretrans|posttrans|verifyscript"
    + r"|triggerin|triggerun|triggerpostun|filetriggerin|filetriggerun)\b(?P<args>.*)$"
)
numbered_tag_re = re.compile(r"^(?P<kind>source|patch)(?P<number>\d*)$")
changelog_header_re = re.compile(
    r"^\*\s+(?P<weekday>[A-Za-z]{3})\s+(?P<month>[A-Za-z]{3})\s+(?P<day>\d{1,2})\s+(?P<year>\d{4})"
    + r"\s+(?P<rest>.*?)\s*$"
)

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

MANDATORY_TAGS = ("name", "version", "release")


class ChangelogEntry(NamedTuple):
    """One entry of the `%changelog` section."""

    date: dt.date
    author: str
    evr: str
    items: list[str]

    linewrapper = TextWrapper(width=75, subsequent_indent="  ")

    def format(self) -> str:
        # not using strftime(), its names depend on the locale
        changelog_date = (
            f"{WEEKDAYS[self.date.weekday()]} {MONTHS[self.date.month - 1]}"
            + f" {self.date.day:02d} {self.date.year}"
        )
        header = f"* {changelog_date} {self.author}"
        if self.evr:
            header += f" - {self.evr}"
        body = "\n".join(self.linewrapper.fill(f"- {item}") for item in self.items)
        return f"{header}\n{body}" if body else header


def _parse_changelog_date(match: re.Match) -> dt.date:
    month = match.group("month").capitalize()
    if month not in MONTHS:
        raise SpecParseFailure(f"Invalid month in changelog entry: {match.group(0)}")
    try:
        return dt.date(int(match.group("year")), MONTHS.index(month) + 1, int(match.group("day")))
    except ValueError as exc:
        raise SpecParseFailure(f"Invalid date in changelog entry: {match.group(0)}") from exc


def parse_changelog(text: str) -> list[ChangelogEntry]:
    """Parse the body of a `%changelog` section, newest entries come first."""
    entries = []
    header = None
    items: list[list[str]] = []

    def finish_entry():
        if header is not None:
            entries.append(
                ChangelogEntry(
                    date=header[0],
                    author=header[1],
                    evr=header[2],
                    items=[" ".join(lines) for lines in items],
                )
            )

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        # entries only start with an asterisk in the first column
        if raw_line.startswith("*"):
            finish_entry()
            match = changelog_header_re.match(line)
            if not match:
                raise SpecParseFailure(f"Malformed changelog entry header: {line}")
            author, sep, evr = match.group("rest").rpartition(" - ")
            if not sep:
                author, evr = match.group("rest"), ""
            header = (_parse_changelog_date(match), author.strip(), evr.strip())
            items = []
            continue

        if header is None:
            log.debug("Ignoring changelog line outside of an entry: %s", line)
            continue

        if line.startswith("-"):
            items.append([line[1:].lstrip()])
        elif items:
            items[-1].append(line)
        else:
            items.append([line])

    finish_entry()
    return entries


class TagCollector(ParserHooks):
    """Gather the tags norpm finds while expanding a spec file."""

    def __init__(self) -> None:
        self.tags: dict[str, str] = {}

    def tag_found(self, name: str, value: str, tag_raw: str) -> None:
        # subpackage tags follow the preamble and don't override it
        self.tags.setdefault(name.lower(), value.strip())


@cache
def macro_registry():
    registry = system_macro_registry()
    registry.known_norpm_hacks()
    registry["dist"] = ""
    return registry


def expand_specfile(text: str) -> tuple[str, dict[str, str]]:
    """Expand macros and conditionals in a spec file.

    :return: The expanded text and the tags found, keyed by lowercase name
    """
    registry = copy.deepcopy(macro_registry())
    hooks = TagCollector()
    try:
        expanded = specfile_expand(text, registry, hooks)
    except Exception as exc:  # pylint: disable=broad-exception-caught
        raise SpecParseFailure(f"Can’t expand spec file: {exc}") from exc
    return expanded, hooks.tags


class SpecFile:
    """Metadata of an RPM spec file.

    Tags as found by norpm are available through `tags` (lowercase names,
    the first value wins) and the attributes below.
    Section bodies are kept in `sections`, keyed by the section line without
    the leading `%`, e.g. `description` or `files -n python3-foo`.
    """

    def __init__(self, tags: dict[str, str], sections: dict[str, str]):
        self.tags = tags
        self.sections = sections

        missing = [tag for tag in MANDATORY_TAGS if not tags.get(tag)]
        if missing:
            raise SpecParseFailure(
                "Missing mandatory tag(s): " + ", ".join(tag.capitalize() for tag in missing)
            )

        self.name = tags["name"]
        self.version = tags["version"]
        self.release = tags["release"]
        self.epoch = tags.get("epoch") or None
        self.summary = tags.get("summary", "")
        self.license = tags.get("license", "")
        self.url = tags.get("url", "")
        self.build_arch = tags.get("buildarch") or None

        self.description = sections.get("description", "")
        self.changelog = parse_changelog(sections.get("changelog", ""))

        self.sources: dict[int, str] = {}
        self.patches: dict[int, str] = {}
        for tag, value in tags.items():
            match = numbered_tag_re.match(tag)
            if not match:
                continue
            numbered = self.sources if match.group("kind") == "source" else self.patches
            # `Source:` is the same as `Source0:`
            numbered[int(match.group("number") or 0)] = value

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.nvr}>"

    @classmethod
    def parse(cls, text: str) -> "SpecFile":
        expanded, tags = expand_specfile(text)

        sections: dict[str, list[str]] = {}
        current: Optional[list[str]] = None

        for line in expanded.splitlines():
            if match := section_re.match(line):
                key = match.group("name")
                args = match.group("args").strip()
                if args:
                    key += f" {args}"
                current = sections.setdefault(key, [])
            elif current is not None:
                current.append(line)

        return cls(
            tags=tags,
            sections={key: "\n".join(lines).strip("\n") for key, lines in sections.items()},
        )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SpecFile":
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise SpecParseFailure(f"Can’t read spec file {path}: {exc}") from exc
        log.debug("Parsing spec file %s", path)
        return cls.parse(text)

    @property
    def source0(self) -> Optional[str]:
        return self.sources.get(0)

    @property
    def evr(self) -> str:
        version_release = f"{self.version}-{self.release}"
        if self.epoch and self.epoch != "0":
            return f"{self.epoch}:{version_release}"
        return version_release

    @property
    def nvr(self) -> str:
        return f"{self.name}-{self.version}-{self.release}"

    def rpm_filename(self, arch: Optional[str] = None) -> str:
        """File name of the binary package built from this spec file.

        :param arch: The architecture to build for, defaults to `BuildArch`
        """
        arch = arch or self.build_arch
        if not arch:
            raise SpecParseFailure(f"No BuildArch in {self.name}, an architecture must be given")
        return f"{self.nvr}.{arch}.rpm"

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "epoch": self.epoch,
            "version": self.version,
            "release": self.release,
            "summary": self.summary,
            "license": self.license,
            "url": self.url,
            "build_arch": self.build_arch,
            "sources": [self.sources[n] for n in sorted(self.sources)],
            "description": self.description,
            "changelog": [entry.format() for entry in self.changelog],
        }
