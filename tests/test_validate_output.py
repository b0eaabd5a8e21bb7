"""Tests for the post-build output validator."""
from unittest import mock

import pytest
import requests

import validate_output


def write(path, text=''):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding='utf-8')
    return path


@pytest.fixture
def site(tmp_path):
    out = tmp_path / 'output'
    write(out / 'css' / 'style.css', 'body {}')
    write(out / 'css' / 'highlight.css', '.highlight {}')
    write(out / 'img' / 'logo.png', 'png')
    write(out / 'img' / 'unused.jpg', 'jpg')
    write(out / 'posts' / 'hello' / 'index.html', '<p>hello</p>')
    write(out / 'index.html', """
        <html><head>
          <link rel="stylesheet" href="/css/style.css">
          <script src="js/site.js"></script>
        </head><body>
          <a href="posts/hello/">Hello</a>
          <a href="#top">Top</a>
          <a href="mailto:me@example.org">Mail</a>
          <a href="https://example.org/">Out</a>
          <img src="img/logo.png?v=2" alt="logo">
        </body></html>
    """)
    return out.resolve()


def test_normalize_path(site):
    source = site / 'index.html'
    assert validate_output.normalize_path('https://example.org', source, site) is None
    assert validate_output.normalize_path('#anchor', source, site) is None
    assert validate_output.normalize_path('/css/style.css', source, site) == site / 'css' / 'style.css'
    assert validate_output.normalize_path('posts/hello/', source, site) == site / 'posts' / 'hello' / 'index.html'
    assert validate_output.normalize_path('img/logo.png#x', source, site) == site / 'img' / 'logo.png'


def test_extract_references(site):
    refs = validate_output.extract_references(site / 'index.html', site)
    assert refs['links'] == ['posts/hello/']
    assert refs['external'] == ['https://example.org/']
    assert refs['images'] == ['img/logo.png?v=2']
    assert refs['stylesheets'] == ['/css/style.css']
    assert refs['scripts'] == ['js/site.js']


def test_internal_references(site):
    errors, referenced = validate_output.validate_internal_references(site)
    assert dict(errors) == {'index.html': ['Missing script: js/site.js']}
    assert site / 'img' / 'logo.png' in referenced


def test_passthrough_copies(site):
    assert validate_output.check_passthrough_copies(site) == []
    assert validate_output.check_passthrough_copies(site, ['css', 'fonts']) == ['fonts']


def test_orphaned_images(site):
    _, referenced = validate_output.validate_internal_references(site)
    orphaned = validate_output.find_orphaned_assets(site, referenced)
    assert orphaned == [site / 'img' / 'unused.jpg']


def test_orphaned_images_ignore_extension_case(site):
    write(site / 'img' / 'PHOTO.JPG', 'jpg')
    write(site / 'img' / 'notes.txt', 'txt')
    _, referenced = validate_output.validate_internal_references(site)
    orphaned = validate_output.find_orphaned_assets(site, referenced)
    assert orphaned == sorted([site / 'img' / 'PHOTO.JPG', site / 'img' / 'unused.jpg'])


def test_external_links(site):
    responses = {'https://example.org/': mock.Mock(status_code=404)}
    with mock.patch.object(validate_output.requests, 'head', side_effect=lambda url, **kw: responses[url]):
        errors = validate_output.check_external_links(site)
    assert errors['external'] == ['https://example.org/ -> HTTP 404']


def test_external_link_errors_are_reported(site):
    with mock.patch.object(validate_output.requests, 'head',
                           side_effect=requests.ConnectionError('refused')):
        errors = validate_output.check_external_links(site)
    assert errors['external'] == ['https://example.org/ -> ConnectionError: refused']


def test_main_fails_on_missing_assets(site, capsys):
    assert validate_output.main(['--output-dir', str(site)]) == 1
    assert 'Missing script: js/site.js' in capsys.readouterr().out


def test_main_passes_clean_site(site, capsys):
    write(site / 'js' / 'site.js', '')
    assert validate_output.main(['--output-dir', str(site)]) == 0
    out = capsys.readouterr().out
    assert 'Validation PASSED' in out
    assert 'img/unused.jpg' in out


def test_main_fails_on_missing_passthrough(site, capsys):
    write(site / 'js' / 'site.js', '')
    assert validate_output.main(['--output-dir', str(site), '--passthrough', 'css', 'img', 'fonts']) == 1
    assert 'fonts/' in capsys.readouterr().out


def test_main_missing_output_dir(tmp_path):
    assert validate_output.main(['--output-dir', str(tmp_path / 'nope')]) == 1
