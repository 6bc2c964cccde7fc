import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from restdocs.frontmatter import Frontmatter, Page, read_page, write_page

logger = logging.getLogger(__name__)

INDEX_FILENAME = 'index.md'
ADD = 'add'
REMOVE = 'remove'


def placeholder_index(directory: Path, defaults: Mapping,
                      versions: Optional[Dict[str, str]] = None) -> Page:
    """A stand-in index.md, used when a directory does not have one yet."""
    return Page(Frontmatter(
        title=directory.name,
        short_title=directory.name,
        intro='',
        versions=versions,
        children=[],
        extra=dict(defaults),
    ))


def update_index(target, change: str, defaults: Mapping,
                 versions: Optional[Dict[str, str]] = None) -> Path:
    """
    Add or remove the `/<name>` child reference for `target` (a page or a
    directory) in the index.md of the directory that holds it.
    """
    if change not in (ADD, REMOVE):
        raise ValueError(f"Unsupported index change: {change!r}")

    target = Path(target)
    directory = target.parent
    index_path = directory / INDEX_FILENAME
    reference = f"/{target.stem if target.suffix == '.md' else target.name}"

    if index_path.exists():
        page = read_page(index_path)
    else:
        logger.info(f"Creating placeholder index {index_path}")
        page = placeholder_index(directory, defaults, versions)
    children = page.frontmatter.children
    if children is None:
        children = page.frontmatter.children = []

    if change == REMOVE:
        if reference in children:
            children.remove(reference)
            logger.info(f"Removed {reference} from {index_path}")
        else:
            # The directory may already have been collapsed.
            logger.debug(f"{reference} not listed in {index_path}, nothing to remove")
    elif reference not in children:
        children.append(reference)
        logger.info(f"Added {reference} to {index_path}")

    write_page(index_path, page)
    return index_path
