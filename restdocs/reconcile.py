"""
Applies the desired page set to the content directory.

Pages that are no longer in the catalog are deleted (together with their
directory when nothing but index.md is left), pages that still exist get their
`versions` refreshed, and new pages are created. Every structural change is
mirrored in the index.md of the directory that holds it. All mutations run one
at a time, because each step reads the state the previous one left behind.
"""

import concurrent.futures
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Set

from tqdm import tqdm

from restdocs.config import DEFAULT_MARKER
from restdocs.frontmatter import Frontmatter, Page, read_page, write_page
from restdocs.index_pages import ADD, INDEX_FILENAME, REMOVE, update_index

logger = logging.getLogger(__name__)

SKIPPED_FILENAMES = {INDEX_FILENAME, 'README.md'}


@dataclass
class ReconcileReport:
    created: List[Path] = field(default_factory=list)
    updated: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    created_dirs: List[Path] = field(default_factory=list)
    removed_dirs: List[Path] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.created or self.updated or self.deleted
                    or self.created_dirs or self.removed_dirs)


def _autogenerated_by(path: Path, marker: str) -> Optional[Path]:
    page = read_page(path)
    if page.frontmatter.extra.get('autogenerated') == marker:
        return path
    return None


def find_autogenerated_pages(content_dir, marker: str = DEFAULT_MARKER,
                             max_workers: int = 10, quiet: bool = False) -> Set[Path]:
    """Pages under content_dir that carry `autogenerated: <marker>`."""
    content_dir = Path(content_dir)
    if not content_dir.exists():
        return set()

    md_files = sorted(
        p for p in content_dir.rglob('*.md')
        if p.is_file() and p.name not in SKIPPED_FILENAMES
    )
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        found = list(tqdm(
            executor.map(lambda p: _autogenerated_by(p, marker), md_files),
            total=len(md_files),
            desc='Scanning pages',
            disable=quiet,
            bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}]'
        ))
    return {p for p in found if p is not None}


class TreeReconciler:

    def __init__(self, content_dir, defaults: Mapping, marker: str = DEFAULT_MARKER):
        self.content_dir = Path(content_dir)
        self.defaults = defaults
        self.marker = marker

    def reconcile(self, desired: Dict[Path, Frontmatter], existing: Set[Path]) -> ReconcileReport:
        report = ReconcileReport()

        for path in sorted(set(existing) - set(desired)):
            self._remove_page(path, report)

        for path, frontmatter in desired.items():
            if path.exists():
                self._update_page(path, frontmatter, report)
            else:
                self._create_page(path, frontmatter, report)

        return report

    def _remove_page(self, path: Path, report: ReconcileReport):
        path.unlink()
        report.deleted.append(path)
        logger.info(f"Deleted {path}")

        directory = path.parent
        remaining = [p.name for p in directory.iterdir()]
        if remaining == [INDEX_FILENAME] and directory != self.content_dir:
            # Only the index is left: drop the directory and its entry one level up.
            shutil.rmtree(directory)
            report.removed_dirs.append(directory)
            logger.info(f"Removed empty directory {directory}")
            update_index(directory, REMOVE, self.defaults)
        else:
            update_index(path, REMOVE, self.defaults)

    def _update_page(self, path: Path, frontmatter: Frontmatter, report: ReconcileReport):
        # Title, intro and body belong to the writers; only versions is generated.
        page = read_page(path)
        current = page.frontmatter.versions
        if isinstance(current, dict) and list(current.items()) == list(frontmatter.versions.items()):
            report.unchanged.append(path)
            logger.debug(f"Versions unchanged for {path}")
            return
        page.frontmatter.versions = dict(frontmatter.versions)
        write_page(path, page)
        report.updated.append(path)
        logger.info(f"Updated versions of {path}: {frontmatter.versions}")

    def _create_page(self, path: Path, frontmatter: Frontmatter, report: ReconcileReport):
        directory = path.parent
        if not directory.exists():
            directory.mkdir(parents=True)
            if directory != self.content_dir:
                report.created_dirs.append(directory)
                logger.info(f"Created directory {directory}")
                update_index(directory, ADD, self.defaults)

        write_page(path, Page(frontmatter, ''))
        report.created.append(path)
        logger.info(f"Created {path}")
        update_index(path, ADD, self.defaults, versions=dict(frontmatter.versions or {}))
