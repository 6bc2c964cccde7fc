"""
Converts the set of versions a page applies to into frontmatter `versions`.

Takes a set of version tags like

    free-pro-team@latest, enterprise-cloud@latest,
    enterprise-server@3.4, enterprise-server@3.5, enterprise-server@3.6

and, with enterprise-server releases 3.3 - 3.6 known, returns

    {'fpt': '*', 'ghec': '*', 'ghes': '>=3.4'}

Numbered lines prefer the compact bound form. Each release is listed
(`=3.3 || =3.5`) only when there is a gap between the first and last release
present.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from restdocs.errors import UnknownVersionError
from restdocs.release_lines import ReleaseLine, ReleaseLineRegistry, VersionTag

ALL = '*'


def release_slots(line: ReleaseLine, present: Iterable[str]) -> List[Optional[str]]:
    """One slot per known release, holding the release if present, else None."""
    present = set(present)
    unknown = present.difference(line.releases)
    if unknown:
        raise UnknownVersionError(
            f"{line.plan}@{sorted(unknown)[0]}",
            f"not a known release of '{line.line_id}'",
        )
    return [release if release in present else None for release in line.releases]


def is_continuous(slots: List[Optional[str]]) -> bool:
    """True when the filled slots form a single window with no interior gaps."""
    filled = [i for i, slot in enumerate(slots) if slot is not None]
    if not filled:
        return True
    window = slots[filled[0]:filled[-1] + 1]
    return all(slot is not None for slot in window)


def numbered_range(slots: List[Optional[str]]) -> str:
    present = [slot for slot in slots if slot is not None]
    if len(present) == len(slots):
        return ALL
    if not is_continuous(slots):
        return ' || '.join(f"={release}" for release in present)

    bounds = []
    if slots[-1] is None:
        bounds.append(f"<={present[-1]}")
    if slots[0] is None:
        bounds.append(f">={present[0]}")
    return ' '.join(bounds)


def compact_versions(version_set: Iterable[VersionTag],
                     registry: ReleaseLineRegistry) -> Dict[str, str]:
    expressions = {}
    numbered = defaultdict(set)

    for tag in version_set:
        line = registry.line(tag.line_id)
        if not line.numbered:
            expressions[line.line_id] = ALL
        else:
            numbered[line.line_id].add(tag.release)

    for line_id, releases in numbered.items():
        line = registry.line(line_id)
        expressions[line_id] = numbered_range(release_slots(line, releases))

    return {key: expressions[key] for key in sorted(expressions)}
