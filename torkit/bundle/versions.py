"""
Tor Expert Bundle version selection and resolution.

A VersionSelection names which release to use: an explicit pin, the newest
published release, or the newest release without a pre-release marker.
VersionResolver turns a selection into a concrete version string, consulting
the remote archive index only for the latter two.

Usage:
    from torkit.bundle.versions import VersionResolver, VersionSelection

    resolver = VersionResolver()
    version = resolver.resolve(VersionSelection.stable())
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from html.parser import HTMLParser
from typing import Callable, List, Optional

from packaging.version import InvalidVersion, Version

from torkit.core.download import FetchError, fetch_text
from torkit.core.exceptions import IndexUnavailableError, NoVersionsFoundError

logger = logging.getLogger(__name__)

# Fallback release that works without access to the index
DEFAULT_VERSION = "14.0.4"

INDEX_URL = "https://archive.torproject.org/tor-package-archive/torbrowser/"

PARENT_DIRECTORY = "../"

PRERELEASE_MARKERS = ("alpha", "beta", "rc")

_LOWEST_VERSION = Version("0.0.0")

# MAJOR.MINOR.PATCH with optional -prerelease and +build (semver.org grammar)
_SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


class SelectionKind(Enum):
    """How a version is selected."""

    PINNED = "pinned"
    LATEST = "latest"
    STABLE = "stable"


@dataclass(frozen=True)
class VersionSelection:
    """
    Version selection policy.

    Attributes:
        kind: Selection kind
        version: Pinned version string (None unless kind is PINNED)
    """

    kind: SelectionKind
    version: Optional[str] = None

    @classmethod
    def pinned(cls, version: str) -> "VersionSelection":
        """Select exactly ``version``."""
        if not version or not version.strip():
            raise ValueError("Pinned version cannot be empty")
        return cls(SelectionKind.PINNED, version)

    @classmethod
    def latest(cls) -> "VersionSelection":
        """Select the newest published release, pre-releases included."""
        return cls(SelectionKind.LATEST)

    @classmethod
    def stable(cls) -> "VersionSelection":
        """Select the newest release without an alpha/beta/rc marker."""
        return cls(SelectionKind.STABLE)

    @classmethod
    def default(cls) -> "VersionSelection":
        """Select the built-in fallback version."""
        return cls.pinned(DEFAULT_VERSION)

    @classmethod
    def parse(cls, text: str) -> "VersionSelection":
        """
        Parse a selection from user input.

        Example:
            >>> VersionSelection.parse("stable").kind
            <SelectionKind.STABLE: 'stable'>
            >>> VersionSelection.parse("14.0.4").version
            '14.0.4'
        """
        value = text.strip()
        if value.lower() == SelectionKind.LATEST.value:
            return cls.latest()
        if value.lower() == SelectionKind.STABLE.value:
            return cls.stable()
        return cls.pinned(value)

    def __str__(self) -> str:
        if self.kind is SelectionKind.PINNED:
            return str(self.version)
        return self.kind.value


# ============================================================================
# Index Listing
# ============================================================================


class DirectoryListingParser(HTMLParser):
    """Collects anchor ``href`` values from an HTML directory listing."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.hrefs: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "a":
            return
        for name, value in attrs:
            if name == "href" and value:
                self.hrefs.append(value)


def parse_index_listing(html: str) -> List[str]:
    """
    Extract link targets from a directory listing page, in document order.

    Example:
        >>> parse_index_listing('<a href="../">../</a><a href="14.0.4/">14.0.4/</a>')
        ['../', '14.0.4/']
    """
    parser = DirectoryListingParser()
    parser.feed(html)
    parser.close()
    return parser.hrefs


def list_versions(index_url: str = INDEX_URL, timeout: int = 30) -> List[str]:
    """
    Fetch the remote index and return its raw entries.

    Raises:
        FetchError: If the index cannot be fetched
    """
    return parse_index_listing(fetch_text(index_url, timeout=timeout))


# ============================================================================
# Filtering and Ordering
# ============================================================================


def is_version_folder(entry: str) -> bool:
    """
    Check whether an index entry names a version directory.

    Example:
        >>> is_version_folder("14.0.4/")
        True
        >>> is_version_folder("../")
        False
    """
    if entry == PARENT_DIRECTORY or not entry.endswith("/"):
        return False
    name = entry[:-1]
    return bool(name) and "/" not in name and "?" not in name and not name.startswith(".")


def is_prerelease(name: str) -> bool:
    """Return True when the name carries an alpha, beta or rc marker."""
    lowered = name.lower()
    return any(marker in lowered for marker in PRERELEASE_MARKERS)


def version_sort_key(name: str) -> Version:
    """
    Parse a version for ordering; unparsable names sort as 0.0.0.

    Only semantic versions parse. Short forms such as '14.5a6' or '14.0'
    and PEP 440 suffixes like '.dev1' sort as 0.0.0. Build metadata is
    ignored, and a pre-release must be spelled alpha, beta or rc.

    Example:
        >>> version_sort_key("14.5.0-alpha") > version_sort_key("14.0.4")
        True
        >>> version_sort_key("14.5a6")
        <Version('0.0.0')>
    """
    match = _SEMVER_PATTERN.fullmatch(name)
    if match is None:
        return _LOWEST_VERSION

    core = ".".join(match.group(1, 2, 3))
    prerelease = match.group(4)
    if prerelease is not None and not is_prerelease(prerelease):
        return _LOWEST_VERSION

    try:
        parsed = Version(core if prerelease is None else f"{core}-{prerelease}")
    except InvalidVersion:
        return _LOWEST_VERSION

    if parsed.dev is not None or parsed.post is not None or parsed.local is not None:
        return _LOWEST_VERSION
    return parsed


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        1 when ``a`` is newer, -1 when older and 0 when equivalent
    """
    key_a = version_sort_key(a)
    key_b = version_sort_key(b)
    if key_a > key_b:
        return 1
    if key_a < key_b:
        return -1
    return 0


def select_version(entries: List[str], stable_only: bool) -> Optional[str]:
    """
    Pick the highest version among raw index entries.

    Ties keep the entry listed first.

    Returns:
        The chosen version name, or None when no candidate remains
    """
    candidates = [entry[:-1] for entry in entries if is_version_folder(entry)]
    if stable_only:
        candidates = [name for name in candidates if not is_prerelease(name)]

    if not candidates:
        return None

    return max(candidates, key=version_sort_key)


# ============================================================================
# Resolver
# ============================================================================


class VersionResolver:
    """
    Resolves a VersionSelection to a concrete version string.

    Example:
        >>> resolver = VersionResolver(list_versions=lambda url: ["14.0.1/", "../"])
        >>> resolver.resolve(VersionSelection.latest())
        '14.0.1'
    """

    def __init__(
        self,
        index_url: str = INDEX_URL,
        list_versions: Optional[Callable[[str], List[str]]] = None,
        timeout: int = 30,
    ):
        """
        Initialize resolver.

        Args:
            index_url: Directory listing of published releases
            list_versions: Callable returning raw index entries for a URL
                (defaults to fetching and parsing the HTML listing)
            timeout: Index request timeout in seconds
        """
        self.index_url = index_url
        self.timeout = timeout
        self._list_versions = list_versions or self._fetch_listing

    def resolve(self, selection: VersionSelection) -> str:
        """
        Resolve a selection.

        Pinned selections are returned unchanged without any I/O.

        Raises:
            NoVersionsFoundError: If no candidate remains after filtering
            IndexUnavailableError: If the index cannot be fetched
        """
        if selection.kind is SelectionKind.PINNED:
            return str(selection.version)

        stable_only = selection.kind is SelectionKind.STABLE

        try:
            entries = self._list_versions(self.index_url)
        except FetchError as e:
            raise IndexUnavailableError(
                f"Failed to list versions from {self.index_url}: {e}"
            ) from e

        version = select_version(entries, stable_only)
        if version is None:
            raise NoVersionsFoundError(self.index_url, stable_only=stable_only)

        logger.info(f"Resolved {selection} Tor version: {version}")
        return version

    def _fetch_listing(self, index_url: str) -> List[str]:
        return list_versions(index_url, timeout=self.timeout)


__all__ = [
    "DEFAULT_VERSION",
    "INDEX_URL",
    "SelectionKind",
    "VersionSelection",
    "VersionResolver",
    "DirectoryListingParser",
    "parse_index_listing",
    "list_versions",
    "is_version_folder",
    "is_prerelease",
    "version_sort_key",
    "compare_versions",
    "select_version",
]
