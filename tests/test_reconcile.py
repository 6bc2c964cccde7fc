from types import MappingProxyType

import pytest

from restdocs.errors import ParseError
from restdocs.frontmatter import Frontmatter, Page, read_page, write_page
from restdocs.projector import project_pages
from restdocs.reconcile import TreeReconciler, find_autogenerated_pages
from restdocs.release_lines import ReleaseLine, ReleaseLineRegistry, VersionTag

DEFAULTS = MappingProxyType({"topics": ["API"], "autogenerated": "rest"})


def _registry():
    return ReleaseLineRegistry([
        ReleaseLine("fpt", "free-pro-team", "api.github.com"),
        ReleaseLine("ghes", "enterprise-server", "ghes-", numbered=True,
                    releases=("3.3", "3.4", "3.5"), current_release="3.5"),
    ])


def _sync(content_dir, catalog):
    registry = _registry()
    desired = project_pages(catalog, registry, content_dir, DEFAULTS)
    existing = find_autogenerated_pages(content_dir, "rest", quiet=True)
    return TreeReconciler(content_dir, DEFAULTS, "rest").reconcile(desired, existing)


def _snapshot(root):
    return {
        str(p.relative_to(root)): p.read_text(encoding="utf-8")
        for p in sorted(root.rglob("*")) if p.is_file()
    }


def _children(path):
    return read_page(path).frontmatter.children


def _root(tmp_path):
    root = tmp_path / "content" / "rest"
    root.mkdir(parents=True)
    write_page(root / "index.md", Page(Frontmatter(title="REST API", children=[])))
    return root


FPT = VersionTag("fpt")


def test_initial_sync_creates_pages_and_indexes(tmp_path):
    root = _root(tmp_path)
    report = _sync(root, {
        "meta": {"meta": frozenset({FPT})},
        "actions": {
            "artifacts": frozenset({FPT, VersionTag("ghes", "3.4"), VersionTag("ghes", "3.5")}),
            "cache": frozenset({FPT}),
        },
    })

    assert (root / "meta.md").exists()
    assert read_page(root / "actions" / "artifacts.md").frontmatter.versions == {"fpt": "*", "ghes": ">=3.4"}
    assert _children(root / "index.md") == ["/actions", "/meta"]
    assert _children(root / "actions" / "index.md") == ["/artifacts", "/cache"]
    assert report.created_dirs == [root / "actions"]
    assert len(report.created) == 3


def test_directory_introduction(tmp_path):
    root = _root(tmp_path)
    _sync(root, {"meta": {"meta": frozenset({FPT})}})
    _sync(root, {
        "meta": {"meta": frozenset({FPT})},
        "billing": {"orgs": frozenset({FPT}), "users": frozenset({FPT})},
    })

    assert (root / "billing").is_dir()
    assert _children(root / "index.md") == ["/meta", "/billing"]
    index = read_page(root / "billing" / "index.md")
    assert index.frontmatter.title == "billing"
    assert index.frontmatter.children == ["/orgs", "/users"]
    assert (root / "billing" / "orgs.md").exists()


def test_second_run_is_a_no_op(tmp_path):
    root = _root(tmp_path)
    catalog = {
        "meta": {"meta": frozenset({FPT})},
        "actions": {"artifacts": frozenset({FPT}), "cache": frozenset({VersionTag("ghes", "3.3")})},
    }
    _sync(root, catalog)
    before = _snapshot(root)

    report = _sync(root, catalog)

    assert not report.has_changes
    assert len(report.unchanged) == 3
    assert _snapshot(root) == before


def test_update_only_touches_versions(tmp_path):
    root = _root(tmp_path)
    _sync(root, {"meta": {"meta": frozenset({FPT})}})
    page = read_page(root / "meta.md")
    page.frontmatter.title = "Meta"
    page.frontmatter.intro = "Get meta information about GitHub."
    page.frontmatter.extra["redirect_from"] = ["/rest/reference/meta"]
    page.body = "\n## Written by hand\n"
    write_page(root / "meta.md", page)

    report = _sync(root, {"meta": {"meta": frozenset({FPT, VersionTag("ghes", "3.5")})}})

    updated = read_page(root / "meta.md")
    assert report.updated == [root / "meta.md"]
    assert updated.frontmatter.versions == {"fpt": "*", "ghes": ">=3.5"}
    assert updated.frontmatter.title == "Meta"
    assert updated.frontmatter.intro == "Get meta information about GitHub."
    assert updated.frontmatter.extra["redirect_from"] == ["/rest/reference/meta"]
    assert updated.body == "\n## Written by hand\n"


def test_round_trip_keeps_versions(tmp_path):
    root = _root(tmp_path)
    catalog = {"meta": {"meta": frozenset({VersionTag("ghes", "3.3"), VersionTag("ghes", "3.5")})}}
    _sync(root, catalog)
    desired = project_pages(catalog, _registry(), root, DEFAULTS)
    on_disk = read_page(root / "meta.md").frontmatter.versions
    assert on_disk == desired[root / "meta.md"].versions == {"ghes": "=3.3 || =3.5"}


def test_removed_page_leaves_sibling(tmp_path):
    root = _root(tmp_path)
    _sync(root, {"actions": {
        "artifacts": frozenset({FPT}), "cache": frozenset({FPT}), "secrets": frozenset({FPT}),
    }})
    report = _sync(root, {"actions": {"artifacts": frozenset({FPT}), "secrets": frozenset({FPT})}})

    assert report.deleted == [root / "actions" / "cache.md"]
    assert not (root / "actions" / "cache.md").exists()
    assert _children(root / "actions" / "index.md") == ["/artifacts", "/secrets"]


def test_directory_collapse(tmp_path):
    root = _root(tmp_path)
    _sync(root, {
        "meta": {"meta": frozenset({FPT})},
        "actions": {"artifacts": frozenset({FPT}), "cache": frozenset({FPT})},
    })
    # Shrink the directory to index.md plus a single page.
    (root / "actions" / "artifacts.md").unlink()
    write_page(root / "actions" / "index.md", Page(Frontmatter(title="actions", children=["/cache"])))

    report = _sync(root, {"meta": {"meta": frozenset({FPT})}})

    assert not (root / "actions").exists()
    assert report.removed_dirs == [root / "actions"]
    assert _children(root / "index.md") == ["/meta"]


def test_category_split_replaces_root_page_with_directory(tmp_path):
    root = _root(tmp_path)
    _sync(root, {"billing": {"billing": frozenset({FPT})}})
    assert _children(root / "index.md") == ["/billing"]

    _sync(root, {"billing": {"orgs": frozenset({FPT}), "users": frozenset({FPT})}})

    assert not (root / "billing.md").exists()
    assert _children(root / "index.md") == ["/billing"]
    assert _children(root / "billing" / "index.md") == ["/orgs", "/users"]


def test_hand_written_pages_are_never_deleted(tmp_path):
    root = _root(tmp_path)
    write_page(root / "guide.md", Page(Frontmatter(title="Guide"), "Hand written\n"))
    write_page(root / "README.md", Page(Frontmatter(extra={"autogenerated": "rest"})))

    _sync(root, {"meta": {"meta": frozenset({FPT})}})

    assert (root / "guide.md").exists()
    assert (root / "README.md").exists()


def test_find_autogenerated_pages(tmp_path):
    root = _root(tmp_path)
    write_page(root / "a.md", Page(Frontmatter(extra={"autogenerated": "rest"})))
    write_page(root / "b.md", Page(Frontmatter(extra={"autogenerated": "graphql"})))
    (root / "sub").mkdir()
    write_page(root / "sub" / "c.md", Page(Frontmatter(extra={"autogenerated": "rest"})))
    write_page(root / "sub" / "index.md", Page(Frontmatter(extra={"autogenerated": "rest"})))

    assert find_autogenerated_pages(root, "rest", quiet=True) == {root / "a.md", root / "sub" / "c.md"}
    assert find_autogenerated_pages(tmp_path / "missing", "rest", quiet=True) == set()


def test_versions_keys_sorted_on_disk(tmp_path):
    root = _root(tmp_path)
    _sync(root, {"meta": {"meta": frozenset({VersionTag("ghes", "3.3"), FPT})}})
    text = (root / "meta.md").read_text(encoding="utf-8")
    assert text.index("fpt:") < text.index("ghes:")


def test_scan_rejects_undecodable_page(tmp_path):
    root = _root(tmp_path)
    (root / "broken.md").write_bytes(b"\xff\xfe")
    with pytest.raises(ParseError):
        find_autogenerated_pages(root, "rest", quiet=True)
