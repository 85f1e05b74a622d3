"""Hierarchical config file parsing and lookup.

The config format is a small INI dialect:

    # full-line comment
    [General]
    UpdatePackages=true

    [UserLevel.CoreTools]
    git=true          # inline comment

Section, optional subsection and key are dot-joined into one qualified key
(`UserLevel.CoreTools.git`). Values stay plain strings; callers compare
against the literal "true".
"""

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

logger = logging.getLogger("devenv_setup")

HEADER_RE = re.compile(r"^\[(.+)\]$")
ASSIGNMENT_RE = re.compile(r"^([^=]+)=(.+)$")

BOOLEAN_VALUES = ("true", "false")


class ConfigFileNotFoundError(FileNotFoundError):
    """Raised when the config file to load does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


@dataclass(frozen=True)
class Dialect:
    """Section names recognized by one platform's config file."""

    name: str
    flat_sections: tuple[str, ...]
    umbrella_sections: tuple[str, ...]

    def resolve_header(self, full_section: str) -> tuple[str, str] | None:
        """Map header contents to (section, subsection).

        Returns None for headers this dialect does not recognize.
        """
        if full_section in self.flat_sections:
            return full_section, ""

        parent, dot, rest = full_section.partition(".")
        if dot and rest and parent in self.umbrella_sections:
            return parent, rest

        if full_section in self.umbrella_sections:
            return full_section, ""

        return None


# --- Line classification ---


@dataclass(frozen=True)
class BlankLine:
    """Empty line or full-line comment."""


@dataclass(frozen=True)
class SectionHeader:
    name: str


@dataclass(frozen=True)
class Assignment:
    key: str
    value: str


@dataclass(frozen=True)
class UnparsedLine:
    text: str


ConfigLine = BlankLine | SectionHeader | Assignment | UnparsedLine


def strip_inline_comment(value: str) -> str:
    """Drop everything from the first `#` and trim."""
    return value.split("#", 1)[0].strip()


def classify_line(raw: str) -> ConfigLine:
    """Classify a single config line."""
    line = raw.strip()

    if not line or line.startswith("#"):
        return BlankLine()

    header = HEADER_RE.match(line)
    if header:
        return SectionHeader(header.group(1))

    assignment = ASSIGNMENT_RE.match(line)
    if assignment:
        return Assignment(
            key=assignment.group(1).strip(),
            value=strip_inline_comment(assignment.group(2)),
        )

    return UnparsedLine(line)


# --- Store ---


class ConfigStore(Mapping[str, str]):
    """Read-only mapping from qualified key to string value."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConfigStore({dict(self._values)!r})"


def qualify(section: str, subsection: str, key: str) -> str:
    """Join section, optional subsection and key into a qualified key."""
    if subsection:
        return f"{section}.{subsection}.{key}"
    return f"{section}.{key}"


def parse_text(text: str, dialect: Dialect) -> ConfigStore:
    """Parse config text into a ConfigStore."""
    values: dict[str, str] = {}
    section = ""
    subsection = ""

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = classify_line(raw)

        if isinstance(line, SectionHeader):
            resolved = dialect.resolve_header(line.name)
            if resolved is None:
                logger.warning(
                    "Ignoring unrecognized section [%s] on line %d", line.name, lineno
                )
                continue
            section, subsection = resolved

        elif isinstance(line, Assignment):
            if not section:
                logger.debug("Ignoring %s on line %d: no section yet", line.key, lineno)
                continue
            values[qualify(section, subsection, line.key)] = line.value

    return ConfigStore(values)


def parse_config(path: str | Path, dialect: Dialect) -> ConfigStore:
    """Read and parse a config file.

    Errors raised while reading the file propagate to the caller.
    """
    text = Path(path).read_text()
    return parse_text(text, dialect)


def load_config(path: str | Path, dialect: Dialect) -> ConfigStore:
    """Parse a config file, raising ConfigFileNotFoundError if it is missing."""
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigFileNotFoundError(config_path)

    logger.info("Using configuration file: %s", config_path)
    store = parse_text(config_path.read_text(), dialect)
    logger.debug("Loaded %d config values", len(store))
    return store


# --- Lookup ---


def get_config_value(store: Mapping[str, str], key: str, default: str = "false") -> str:
    """Return the value stored for a qualified key, or the default."""
    return store.get(key, default)


def is_enabled(store: Mapping[str, str], key: str, default: str = "false") -> bool:
    """Check whether a qualified key resolves to the literal "true"."""
    return get_config_value(store, key, default) == "true"


# --- Diagnostics ---


@dataclass(frozen=True)
class ConfigIssue:
    """A suspicious line found while checking a config file."""

    lineno: int
    message: str

    def __str__(self) -> str:
        return f"line {self.lineno}: {self.message}"


def find_config_issues(text: str, dialect: Dialect) -> list[ConfigIssue]:
    """Report lines the parser ignores or values that are not true/false."""
    issues: list[ConfigIssue] = []
    has_section = False

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = classify_line(raw)

        if isinstance(line, SectionHeader):
            if dialect.resolve_header(line.name) is None:
                issues.append(ConfigIssue(lineno, f"unrecognized section [{line.name}]"))
            else:
                has_section = True

        elif isinstance(line, Assignment):
            if not has_section:
                issues.append(ConfigIssue(lineno, f"'{line.key}' appears before any section"))
            elif line.value not in BOOLEAN_VALUES:
                issues.append(
                    ConfigIssue(lineno, f"'{line.key}' has non-boolean value '{line.value}'")
                )

        elif isinstance(line, UnparsedLine):
            issues.append(ConfigIssue(lineno, f"unparseable line '{line.text}'"))

    return issues
