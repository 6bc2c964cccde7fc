"""
Builds the category -> subcategory -> versions catalog from the per-version
schema files (<data_dir>/<version-dir>/<schema_filename>).
"""

import concurrent.futures
import json
import logging
import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, FrozenSet, List, Tuple

from tqdm import tqdm

from restdocs.errors import ParseError
from restdocs.release_lines import ReleaseLineRegistry, VersionTag

logger = logging.getLogger(__name__)

Catalog = Dict[str, Dict[str, FrozenSet[VersionTag]]]


def _raise_walk_error(error: OSError):
    raise error


def find_schema_files(data_dir, schema_filename: str) -> List[Path]:
    if not Path(data_dir).is_dir():
        raise FileNotFoundError(f"Schema data directory not found: {data_dir}")
    schema_files = []
    for root, dirs, files in os.walk(data_dir, onerror=_raise_walk_error):
        if schema_filename in files:
            schema_files.append(Path(root) / schema_filename)
    return sorted(schema_files)


def load_schema(path: Path) -> Dict[str, List[str]]:
    """Return {category: [subcategory, ...]} for a single schema file."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(path, str(e)) from e

    if not isinstance(data, dict):
        raise ParseError(path, "top level must be an object of categories")
    categories = {}
    for category, subcategories in data.items():
        if not isinstance(subcategories, dict):
            raise ParseError(path, f"category '{category}' must be an object of subcategories")
        categories[category] = list(subcategories)
    return categories


def build_catalog(data_dir, schema_filename: str, registry: ReleaseLineRegistry,
                  max_workers: int = 10, quiet: bool = False) -> Catalog:
    schema_files = find_schema_files(data_dir, schema_filename)
    if not schema_files:
        logger.warning(f"No '{schema_filename}' files found under {data_dir}")
        return {}

    # Resolve every version up front so an unknown directory fails before any reads.
    tags = [registry.resolve(path.parent.name) for path in schema_files]

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        schemas = list(tqdm(
            executor.map(load_schema, schema_files),
            total=len(schema_files),
            desc='Reading schemas',
            disable=quiet,
            bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}]'
        ))

    versions = defaultdict(lambda: defaultdict(set))
    for path, tag, categories in zip(schema_files, tags, schemas):
        logger.debug(f"{path}: {len(categories)} categories for {tag}")
        for category, subcategories in categories.items():
            for subcategory in subcategories:
                versions[category][subcategory].add(tag)

    catalog: Catalog = {
        category: {sub: frozenset(found) for sub, found in subcategories.items()}
        for category, subcategories in versions.items()
    }
    logger.info(f"Catalog built from {len(schema_files)} schema files: {len(catalog)} categories")
    return catalog
