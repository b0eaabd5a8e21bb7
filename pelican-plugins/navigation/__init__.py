"""Pelican plugin that builds hierarchical navigation from page metadata.

Pages opt in with ``nav_*`` metadata in their front matter::

    Title: Installing
    Nav_key: install
    Nav_parent: docs
    Nav_order: 2

Recognised keys:
    nav_key      unique key of the entry (required)
    nav_parent   key of the parent entry; omitted for top-level entries
    nav_title    label shown in menus (defaults to the page title)
    nav_order    integer sort order among siblings (defaults to 0)
    nav_url      link target (defaults to "/" + page.url)
    nav_excerpt  short description, shown when ``show_excerpt`` is set

Templates get four filters::

    {% set tree = pages|navigation %}
    {{ tree|navigation_to_html(active_key=page.nav_key) }}
    {% for crumb in pages|navigation_breadcrumb(page.nav_key) %}...{% endfor %}
    {{ tree|navigation_to_markdown }}
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Iterable, List, Optional

from markupsafe import Markup, escape
from pelican import signals

logger = logging.getLogger(__name__)


class NavigationError(Exception):
    """Raised for unknown breadcrumb keys and cyclic parent chains."""


@dataclass
class NavigationEntry:
    key: str
    title: str
    url: str
    order: int = 0
    parent: Optional[str] = None
    excerpt: Optional[str] = None
    children: List['NavigationEntry'] = field(default_factory=list)


def _parse_order(raw, key: str) -> int:
    if raw in (None, ''):
        return 0
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning('Ignoring non-integer nav_order %r on navigation entry %s', raw, key)
        return 0


def _entry_for(page) -> Optional[NavigationEntry]:
    metadata = getattr(page, 'metadata', None) or {}
    key = metadata.get('nav_key')
    if not key:
        return None
    title = metadata.get('nav_title') or getattr(page, 'title', None) or key
    url = metadata.get('nav_url')
    if not url:
        url = '/' + str(getattr(page, 'url', '')).lstrip('/')
    return NavigationEntry(
        key=key,
        title=str(title),
        url=url,
        order=_parse_order(metadata.get('nav_order'), key),
        parent=metadata.get('nav_parent') or None,
        excerpt=metadata.get('nav_excerpt'),
    )


def _collect(pages: Iterable) -> List[NavigationEntry]:
    return [entry for entry in map(_entry_for, pages) if entry is not None]


def _children_of(entries: List[NavigationEntry], key: Optional[str],
                 seen: frozenset = frozenset()) -> List[NavigationEntry]:
    children = sorted((e for e in entries if e.parent == key), key=lambda e: e.order)
    tree = []
    for entry in children:
        if entry.key in seen:
            raise NavigationError(f'Navigation parent cycle through {entry.key!r}')
        node = NavigationEntry(entry.key, entry.title, entry.url, entry.order,
                               entry.parent, entry.excerpt)
        node.children = _children_of(entries, entry.key, seen | {entry.key})
        tree.append(node)
    return tree


def find_navigation_entries(pages: Iterable, key: Optional[str] = None) -> List[NavigationEntry]:
    """Return the entries below *key* (top-level entries when None) as a tree."""
    entries = _collect(pages)
    seen = frozenset([key]) if key is not None else frozenset()
    return _children_of(entries, key, seen)


def find_breadcrumb_entries(pages: Iterable, key: str, include_self: bool = False,
                            allow_missing: bool = False) -> List[NavigationEntry]:
    """Return the ancestors of *key*, root first."""
    by_key = {entry.key: entry for entry in _collect(pages)}
    if key not in by_key:
        if allow_missing:
            return []
        raise NavigationError(f'Navigation key {key!r} not found')

    chain = []
    visited = set()
    current = by_key[key] if include_self else by_key.get(by_key[key].parent)
    if not include_self:
        visited.add(key)
    while current is not None:
        if current.key in visited:
            raise NavigationError(f'Navigation parent cycle through {current.key!r}')
        visited.add(current.key)
        chain.append(current)
        current = by_key.get(current.parent)
    chain.reverse()
    return chain


def _class_attr(*classes: str) -> Markup:
    names = ' '.join(c for c in classes if c)
    return Markup(' class="%s"') % names if names else Markup('')


def navigation_to_html(entries: List[NavigationEntry], active_key: Optional[str] = None,
                       list_element: str = 'ul', list_item_element: str = 'li',
                       list_class: str = '', list_item_class: str = '',
                       list_item_has_children_class: str = '', anchor_class: str = '',
                       active_list_item_class: str = '', active_anchor_class: str = '',
                       show_excerpt: bool = False, use_aria_current: bool = True) -> Markup:
    """Render *entries* as nested HTML lists."""
    if not entries:
        return Markup('')

    def _render(nodes: List[NavigationEntry]) -> Markup:
        items = []
        for node in nodes:
            active = active_key is not None and node.key == active_key
            item_classes = _class_attr(
                list_item_class,
                list_item_has_children_class if node.children else '',
                active_list_item_class if active else '')
            anchor_classes = _class_attr(anchor_class, active_anchor_class if active else '')
            aria = Markup(' aria-current="page"') if active and use_aria_current else Markup('')
            body = Markup('<a href="%s"%s%s>%s</a>') % (node.url, anchor_classes, aria, node.title)
            if show_excerpt and node.excerpt:
                body += Markup(': %s') % node.excerpt
            if node.children:
                body += _render(node.children)
            items.append(Markup('<{0}{1}>{2}</{0}>').format(
                Markup(list_item_element), item_classes, body))
        return Markup('<{0}{1}>{2}</{0}>').format(
            Markup(list_element), _class_attr(list_class), Markup('').join(items))

    return _render(entries)


def navigation_to_markdown(entries: List[NavigationEntry], show_excerpt: bool = False) -> str:
    """Render *entries* as a nested Markdown bullet list."""
    lines = []

    def _walk(nodes: List[NavigationEntry], depth: int) -> None:
        for node in nodes:
            line = f"{'  ' * depth}* [{node.title}]({node.url})"
            if show_excerpt and node.excerpt:
                line += f': {node.excerpt}'
            lines.append(line)
            _walk(node.children, depth + 1)

    _walk(entries, 0)
    return '\n'.join(lines)


FILTERS = {
    'navigation': find_navigation_entries,
    'navigation_breadcrumb': find_breadcrumb_entries,
    'navigation_to_html': navigation_to_html,
    'navigation_to_markdown': navigation_to_markdown,
}


def add_filters(generator):
    generator.env.filters.update(FILTERS)


def register():  # Pelican entry point
    signals.generator_init.connect(add_filters)


__all__ = [
    'NavigationEntry',
    'NavigationError',
    'find_breadcrumb_entries',
    'find_navigation_entries',
    'navigation_to_html',
    'navigation_to_markdown',
    'register',
]
