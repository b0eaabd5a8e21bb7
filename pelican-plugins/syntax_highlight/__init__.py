"""Pelican plugin for syntax highlighting of code blocks.

Fenced code blocks in Markdown are highlighted by Pygments through the
``codehilite`` extension; this plugin makes sure both extensions are enabled::

    ```python
    print("hello")
    ```

Templates also get a ``highlight`` filter, with optional line emphasis::

    {{ snippet|highlight('python', '1,3-4') }}

After the build the Pygments stylesheet for ``PYGMENTS_STYLE`` is written to
``SYNTAX_HIGHLIGHT_STYLESHEET`` inside the output directory.

Configuration (optional in pelicanconf.py):
    SYNTAX_HIGHLIGHT_CSS_CLASS = 'highlight'
    SYNTAX_HIGHLIGHT_STYLESHEET = 'css/highlight.css'  # None disables
    PYGMENTS_STYLE = 'default'
"""
from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import List, Optional

from markupsafe import Markup
from pelican import signals
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name

logger = logging.getLogger(__name__)

DEFAULT_CSS_CLASS = 'highlight'
DEFAULT_STYLESHEET = 'css/highlight.css'
DEFAULT_STYLE = 'default'

FENCED_CODE = 'markdown.extensions.fenced_code'
CODEHILITE = 'markdown.extensions.codehilite'


def parse_line_ranges(spec: Optional[str]) -> List[int]:
    """Expand ``'1,3-5'`` into ``[1, 3, 4, 5]``."""
    if not spec:
        return []
    lines = set()
    for part in str(spec).split(','):
        part = part.strip()
        if not part:
            continue
        if '-' in part:
            start, end = (int(bound) for bound in part.split('-', 1))
            if start > end:
                raise ValueError(f'Invalid line range: {part!r}')
            lines.update(range(start, end + 1))
        else:
            lines.add(int(part))
    return sorted(lines)


def highlight(code: str, language: str, lines: Optional[str] = None,
              css_class: str = DEFAULT_CSS_CLASS) -> Markup:
    lexer = get_lexer_by_name(language)
    formatter = HtmlFormatter(cssclass=css_class, hl_lines=parse_line_ranges(lines))
    return Markup(pygments_highlight(code, lexer, formatter))


def configure_markdown(pelican):
    settings = pelican.settings
    css_class = settings.get('SYNTAX_HIGHLIGHT_CSS_CLASS', DEFAULT_CSS_CLASS)

    markdown = settings.setdefault('MARKDOWN', {})
    configs = markdown.setdefault('extension_configs', {})
    configs.setdefault(FENCED_CODE, {})
    codehilite = configs.setdefault(CODEHILITE, {})
    codehilite['css_class'] = css_class
    codehilite.setdefault('guess_lang', False)

    extensions = markdown.get('extensions')
    if extensions is not None:
        for name in (FENCED_CODE, CODEHILITE):
            if name not in extensions:
                extensions.append(name)


def write_stylesheet(pelican):
    settings = pelican.settings
    target = settings.get('SYNTAX_HIGHLIGHT_STYLESHEET', DEFAULT_STYLESHEET)
    if not target:
        return

    css_class = settings.get('SYNTAX_HIGHLIGHT_CSS_CLASS', DEFAULT_CSS_CLASS)
    style = settings.get('PYGMENTS_STYLE') or DEFAULT_STYLE
    path = Path(pelican.output_path) / target
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(HtmlFormatter(style=style).get_style_defs(f'.{css_class}'), encoding='utf-8')
    logger.info('Wrote %s stylesheet to %s', style, path)


def add_filters(generator):
    css_class = generator.settings.get('SYNTAX_HIGHLIGHT_CSS_CLASS', DEFAULT_CSS_CLASS)
    generator.env.filters['highlight'] = functools.partial(highlight, css_class=css_class)


def register():  # Pelican entry point
    signals.initialized.connect(configure_markdown)
    signals.generator_init.connect(add_filters)
    signals.finalized.connect(write_stylesheet)
