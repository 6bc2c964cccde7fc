"""
Reading and writing Markdown pages that start with a YAML frontmatter block:

    ---
    title: Artifacts
    versions:
      fpt: '*'
    ---
    Body text, kept exactly as authored.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from restdocs.errors import ParseError

FM_PATTERN = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)


@dataclass
class Frontmatter:
    title: Optional[str] = None
    short_title: Optional[str] = None
    intro: Optional[str] = None
    versions: Optional[Dict[str, str]] = None
    children: Optional[List[str]] = None
    # Every other key (topics, autogenerated, hand-added keys), in file order.
    extra: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> 'Frontmatter':
        data = dict(data)
        versions = data.pop('versions', None)
        children = data.pop('children', None)
        return cls(
            title=data.pop('title', None),
            short_title=data.pop('shortTitle', None),
            intro=data.pop('intro', None),
            versions=dict(versions) if isinstance(versions, dict) else versions,
            children=list(children) if children is not None else None,
            extra=data,
        )

    def to_dict(self) -> dict:
        data = {}
        for key, value in (('title', self.title),
                           ('shortTitle', self.short_title),
                           ('intro', self.intro),
                           ('versions', self.versions)):
            if value is not None:
                data[key] = value
        data.update(self.extra)
        if self.children is not None:
            data['children'] = list(self.children)
        return data


@dataclass
class Page:
    frontmatter: Frontmatter
    body: str = ''


def parse_page(text: str, source=None) -> Page:
    m = FM_PATTERN.match(text)
    if not m:
        return Page(Frontmatter(), text)
    try:
        data = yaml.safe_load(m.group(1)) or {}
    except yaml.YAMLError as e:
        raise ParseError(source or '<page>', f"invalid frontmatter: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(source or '<page>', "frontmatter must be a mapping")
    return Page(Frontmatter.from_dict(data), text[m.end():])


def render_page(page: Page) -> str:
    fm_text = yaml.safe_dump(
        page.frontmatter.to_dict(),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    return f"---\n{fm_text}---\n{page.body}"


def read_page(path) -> Page:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise ParseError(path, f"not valid UTF-8: {e}") from e
    return parse_page(text, source=path)


def write_page(path, page: Page):
    Path(path).write_text(render_page(page), encoding='utf-8')
