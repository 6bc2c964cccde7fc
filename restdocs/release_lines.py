"""
Table of the product lines the REST reference is published for.

Each line is either flag-style (present or not, e.g. free-pro-team) or carries
numbered releases (e.g. enterprise-server 3.3, 3.4, ...). Schema directories and
docs version ids both resolve to a VersionTag through the registry.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from restdocs.errors import RegistryError, UnknownVersionError

LATEST = 'latest'


def release_sort_key(release: str) -> Tuple:
    """Sort key that orders '3.9' before '3.10'."""
    parts = []
    for piece in re.split(r'[.\-]', release):
        if piece.isdigit():
            parts.append((0, int(piece), ''))
        else:
            parts.append((1, 0, piece))
    return tuple(parts)


@dataclass(frozen=True)
class ReleaseLine:
    line_id: str
    plan: str
    openapi_name: str
    numbered: bool = False
    releases: Tuple[str, ...] = ()
    current_release: Optional[str] = None


@dataclass(frozen=True)
class VersionTag:
    line_id: str
    release: Optional[str] = None

    def __str__(self):
        return f"{self.line_id}@{self.release or LATEST}"


class ReleaseLineRegistry:
    """Resolves version identifiers to (line, release) pairs."""

    def __init__(self, lines: Iterable[ReleaseLine]):
        self._lines: Dict[str, ReleaseLine] = {}
        for line in lines:
            if line.line_id in self._lines:
                raise RegistryError(f"Duplicate release line '{line.line_id}'")
            if line.numbered:
                line = self._validate_numbered(line)
            self._lines[line.line_id] = line

    @staticmethod
    def _validate_numbered(line: ReleaseLine) -> ReleaseLine:
        if not line.releases:
            raise RegistryError(f"Numbered release line '{line.line_id}' lists no releases")
        if len(set(line.releases)) != len(line.releases):
            raise RegistryError(f"Release line '{line.line_id}' lists a release twice")
        if line.current_release not in line.releases:
            raise RegistryError(
                f"Current release '{line.current_release}' of '{line.line_id}' "
                f"is not one of its releases {list(line.releases)}"
            )
        ordered = tuple(sorted(line.releases, key=release_sort_key))
        return ReleaseLine(
            line_id=line.line_id,
            plan=line.plan,
            openapi_name=line.openapi_name,
            numbered=True,
            releases=ordered,
            current_release=line.current_release,
        )

    @classmethod
    def from_config(cls, entries: List[dict]) -> 'ReleaseLineRegistry':
        lines = []
        for entry in entries:
            try:
                numbered = bool(entry.get('numbered', False))
                releases = tuple(str(r) for r in entry.get('releases', ())) if numbered else ()
                current = entry.get('currentRelease')
                if numbered and current is None and releases:
                    current = max(releases, key=release_sort_key)
                lines.append(ReleaseLine(
                    line_id=entry['id'],
                    plan=entry.get('plan', entry['id']),
                    openapi_name=entry.get('openApiName', entry['id']),
                    numbered=numbered,
                    releases=releases,
                    current_release=str(current) if current is not None else None,
                ))
            except (KeyError, TypeError, AttributeError) as e:
                raise RegistryError(f"Invalid release line entry {entry!r}: {e}") from e
        return cls(lines)

    @property
    def lines(self) -> List[ReleaseLine]:
        return list(self._lines.values())

    def line(self, line_id: str) -> ReleaseLine:
        try:
            return self._lines[line_id]
        except KeyError:
            raise UnknownVersionError(line_id, "no such release line") from None

    def resolve(self, identifier: str) -> VersionTag:
        """
        Resolve a schema directory name ('api.github.com', 'ghes-3.4') or a docs
        version id ('free-pro-team@latest', 'enterprise-server@3.4').
        """
        if '@' in identifier:
            plan, _, release = identifier.partition('@')
            for line in self._lines.values():
                if line.plan == plan:
                    return self._tag(line, None if release == LATEST else release, identifier)
            raise UnknownVersionError(identifier)

        for line in self._lines.values():
            if not line.numbered and identifier == line.openapi_name:
                return VersionTag(line.line_id)
        for line in self._lines.values():
            if line.numbered and identifier.startswith(line.openapi_name):
                release = identifier[len(line.openapi_name):]
                if release:
                    return self._tag(line, release, identifier)
        raise UnknownVersionError(identifier)

    @staticmethod
    def _tag(line: ReleaseLine, release: Optional[str], identifier: str) -> VersionTag:
        if not line.numbered:
            return VersionTag(line.line_id)
        if release is None:
            release = line.current_release
        if release not in line.releases:
            raise UnknownVersionError(
                identifier, f"'{release}' is not a known release of '{line.line_id}'"
            )
        return VersionTag(line.line_id, release)
