#!/usr/bin/env python3
"""
Sync the REST reference Markdown pages with the per-version API schemas.

Reads every <data_dir>/<version>/<schema_filename>, works out which product
versions each category/subcategory appears in, and creates, updates or deletes
the autogenerated pages under the content directory to match, keeping every
index.md children list in step.

Usage:
    python sync_rest_docs.py [--data-dir src/rest/data] [--content-dir content/rest]
"""

import argparse
import logging
import sys
from pathlib import Path

from restdocs.catalog import build_catalog
from restdocs.config import load_config
from restdocs.errors import SyncError
from restdocs.projector import project_pages
from restdocs.reconcile import TreeReconciler, find_autogenerated_pages

logger = logging.getLogger('sync_rest_docs')


def setup_logging(log_file, verbose=False):
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    c_handler = logging.StreamHandler()
    c_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    c_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root.addHandler(c_handler)

    if log_file:
        f_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        f_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        f_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s: %(message)s'))
        root.addHandler(f_handler)

    return root


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description='Create, update and delete REST reference pages from the per-version schemas.'
    )
    parser.add_argument(
        '--data-dir',
        default='src/rest/data',
        help='Directory holding one sub-directory per version (default: src/rest/data)',
    )
    parser.add_argument(
        '--content-dir',
        default='content/rest',
        help='Root of the REST Markdown pages (default: content/rest)',
    )
    parser.add_argument(
        '--schema-filename',
        default='index.json',
        help='Name of the schema file inside each version directory (default: index.json)',
    )
    parser.add_argument(
        '--config',
        default='src/rest/lib/config.json',
        help='JSON file with frontmatterDefaults and releaseLines (default: src/rest/lib/config.json)',
    )
    parser.add_argument(
        '--max-workers',
        type=int,
        default=10,
        help='Maximum worker threads for reading files (default: 10)',
    )
    parser.add_argument(
        '--log-file',
        default='sync_rest_docs.log',
        help="Log file path, '' to disable (default: sync_rest_docs.log)",
    )
    parser.add_argument('--verbose', action='store_true', help='Log every page decision')
    parser.add_argument('--quiet', action='store_true', help='Hide progress bars')
    return parser.parse_args(argv)


def print_summary(report, content_dir):
    print("\n" + "=" * 70)
    print("REST DOCS SYNC SUMMARY")
    print("=" * 70)
    print(f"Created:             {len(report.created)}")
    print(f"Updated:             {len(report.updated)}")
    print(f"Unchanged:           {len(report.unchanged)}")
    print(f"Deleted:             {len(report.deleted)}")
    print(f"Directories added:   {len(report.created_dirs)}")
    print(f"Directories removed: {len(report.removed_dirs)}")
    if not report.has_changes:
        print("\n✓ Pages already up to date")
    print(f"\n📁 Content directory: {content_dir}")


def run(args) -> int:
    config = load_config(args.config)
    content_dir = Path(args.content_dir)

    catalog = build_catalog(
        args.data_dir,
        args.schema_filename,
        config.registry,
        max_workers=args.max_workers,
        quiet=args.quiet,
    )
    desired = project_pages(catalog, config.registry, content_dir, config.frontmatter_defaults)
    existing = find_autogenerated_pages(
        content_dir,
        config.autogenerated_marker,
        max_workers=args.max_workers,
        quiet=args.quiet,
    )
    logger.info(f"{len(desired)} pages wanted, {len(existing)} autogenerated pages on disk")

    reconciler = TreeReconciler(content_dir, config.frontmatter_defaults, config.autogenerated_marker)
    report = reconciler.reconcile(desired, existing)
    print_summary(report, content_dir)
    return 0


def main(argv=None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.log_file, args.verbose)

    try:
        return run(args)
    except SyncError as e:
        logger.error(str(e))
        print(f"✗ {e}")
        return 1
    except OSError as e:
        logger.error(f"Filesystem error: {e}")
        print(f"✗ Filesystem error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
