"""
Maps the catalog to the pages that should exist under the content directory.

A category with a single subcategory becomes <content_dir>/<category>.md; one
with several becomes <content_dir>/<category>/<subcategory>.md per subcategory.
"""

from pathlib import Path
from typing import Dict, Mapping

from restdocs.catalog import Catalog
from restdocs.frontmatter import Frontmatter
from restdocs.release_lines import ReleaseLineRegistry
from restdocs.version_ranges import compact_versions


def page_frontmatter(name: str, versions: Dict[str, str], defaults: Mapping) -> Frontmatter:
    return Frontmatter(
        title=name,
        short_title=name,
        intro='',
        versions=versions,
        extra=dict(defaults),
    )


def project_pages(catalog: Catalog, registry: ReleaseLineRegistry, content_dir,
                  defaults: Mapping) -> Dict[Path, Frontmatter]:
    content_dir = Path(content_dir)
    pages = {}

    for category in sorted(catalog):
        subcategories = catalog[category]
        if len(subcategories) == 1:
            (version_set,) = subcategories.values()
            pages[content_dir / f"{category}.md"] = page_frontmatter(
                category, compact_versions(version_set, registry), defaults
            )
            continue

        for subcategory in sorted(subcategories):
            pages[content_dir / category / f"{subcategory}.md"] = page_frontmatter(
                subcategory, compact_versions(subcategories[subcategory], registry), defaults
            )

    return pages
