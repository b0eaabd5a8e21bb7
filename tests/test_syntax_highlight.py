"""Tests for the syntax highlighting plugin."""
from types import SimpleNamespace

import pytest
from markupsafe import Markup
from pygments.util import ClassNotFound

import syntax_highlight
from syntax_highlight import configure_markdown, highlight, parse_line_ranges, write_stylesheet


@pytest.mark.parametrize('spec, expected', [
    (None, []),
    ('', []),
    ('3', [3]),
    ('1,3-5', [1, 3, 4, 5]),
    ('4-5, 1 ,4', [1, 4, 5]),
])
def test_parse_line_ranges(spec, expected):
    assert parse_line_ranges(spec) == expected


@pytest.mark.parametrize('spec', ['a', '5-3', '1-x'])
def test_parse_line_ranges_rejects_garbage(spec):
    with pytest.raises(ValueError):
        parse_line_ranges(spec)


def test_highlight_returns_markup():
    html = highlight('print("hi")\n', 'python')
    assert isinstance(html, Markup)
    assert html.startswith('<div class="highlight">')
    assert '<span class="nb">print</span>' in html


def test_highlight_marks_lines():
    html = highlight('a = 1\nb = 2\nc = 3\n', 'python', lines='2', css_class='code')
    assert html.startswith('<div class="code">')
    assert html.count('class="hll"') == 1


def test_highlight_unknown_language():
    with pytest.raises(ClassNotFound):
        highlight('x', 'no-such-language')


def test_configure_markdown_adds_extensions():
    settings = {
        'MARKDOWN': {
            'extension_configs': {'markdown.extensions.extra': {}},
            'output_format': 'html5',
        },
        'SYNTAX_HIGHLIGHT_CSS_CLASS': 'code',
    }
    configure_markdown(SimpleNamespace(settings=settings))

    configs = settings['MARKDOWN']['extension_configs']
    assert configs['markdown.extensions.extra'] == {}
    assert configs['markdown.extensions.fenced_code'] == {}
    assert configs['markdown.extensions.codehilite'] == {'css_class': 'code', 'guess_lang': False}
    assert settings['MARKDOWN']['output_format'] == 'html5'


def test_configure_markdown_extends_extension_list():
    settings = {'MARKDOWN': {'extensions': ['markdown.extensions.toc']}}
    configure_markdown(SimpleNamespace(settings=settings))
    assert settings['MARKDOWN']['extensions'] == [
        'markdown.extensions.toc',
        'markdown.extensions.fenced_code',
        'markdown.extensions.codehilite',
    ]


def test_configure_markdown_keeps_existing_codehilite_options():
    settings = {'MARKDOWN': {'extension_configs': {
        'markdown.extensions.codehilite': {'linenums': True, 'guess_lang': True}}}}
    configure_markdown(SimpleNamespace(settings=settings))
    assert settings['MARKDOWN']['extension_configs']['markdown.extensions.codehilite'] == {
        'linenums': True, 'guess_lang': True, 'css_class': 'highlight'}


def test_fenced_code_is_highlighted():
    markdown = pytest.importorskip('markdown')
    settings = {'MARKDOWN': {}}
    configure_markdown(SimpleNamespace(settings=settings))
    configs = settings['MARKDOWN']['extension_configs']

    html = markdown.markdown('```python\nx = 1\n```\n',
                             extensions=list(configs), extension_configs=configs)
    assert '<div class="highlight">' in html


def test_write_stylesheet(tmp_path):
    pelican = SimpleNamespace(output_path=str(tmp_path), settings={'PYGMENTS_STYLE': 'friendly'})
    write_stylesheet(pelican)

    css = (tmp_path / 'css' / 'highlight.css').read_text(encoding='utf-8')
    assert '.highlight .k' in css


def test_write_stylesheet_disabled(tmp_path):
    pelican = SimpleNamespace(output_path=str(tmp_path),
                              settings={'SYNTAX_HIGHLIGHT_STYLESHEET': None})
    write_stylesheet(pelican)
    assert list(tmp_path.iterdir()) == []


def test_filter_uses_configured_css_class():
    generator = SimpleNamespace(env=SimpleNamespace(filters={}),
                                settings={'SYNTAX_HIGHLIGHT_CSS_CLASS': 'code'})
    syntax_highlight.add_filters(generator)
    assert generator.env.filters['highlight']('x = 1', 'python').startswith('<div class="code">')
