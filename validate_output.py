"""Post-build validator for the Pelican site.

Validates internal links, images, stylesheets and scripts in the output/
directory before deployment, checks that the passthrough directories (css/,
img/) were copied, and reports images nobody references.

Usage:
    python validate_output.py                     # default: internal only
    python validate_output.py --check-external    # include external links (slow)
    python validate_output.py --output-dir public  # custom output directory

Exit codes:
    0 = all validations passed
    1 = validation errors found (broken links, missing assets or copies)
"""
from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path
from urllib.parse import unquote, urlparse

try:
    from bs4 import BeautifulSoup
    import requests
except ImportError:
    print("[ERROR] Missing dependencies. Install with: pip install beautifulsoup4 requests")
    sys.exit(2)

from siteconfig import PASSTHROUGH_COPIES

IMAGE_EXT = {'.avif', '.gif', '.jpeg', '.jpg', '.png', '.svg', '.webp'}


def normalize_path(href: str, source_html: Path, output_dir: Path) -> Path | None:
    """Convert href to absolute filesystem path, or None if external/anchor."""
    href = href.strip()

    if not href or href.startswith(('#', 'mailto:', 'tel:', 'data:', 'javascript:',
                                    'http://', 'https://', '//')):
        return None

    path = unquote(urlparse(href).path)
    if not path:
        return None

    if path.startswith('/'):
        target = (output_dir / path.lstrip('/')).resolve()
    else:
        target = (source_html.parent / path).resolve()

    # Pretty URLs: posts/slug/ is served from posts/slug/index.html
    if path.endswith('/') or target.is_dir():
        target = target / 'index.html'
    return target


def extract_references(html_file: Path, output_dir: Path) -> dict[str, list[str]]:
    """Extract all href/src references from HTML file."""
    refs = {
        'links': [],        # <a href>
        'images': [],       # <img src>
        'stylesheets': [],  # <link rel="stylesheet" href>
        'scripts': [],      # <script src>
        'external': [],     # http/https links
    }

    try:
        soup = BeautifulSoup(html_file.read_text(encoding='utf-8'), 'html.parser')
    except (OSError, UnicodeDecodeError) as e:
        print(f"[WARN] Failed to parse {html_file.relative_to(output_dir)}: {e}")
        return refs

    for a in soup.find_all('a', href=True):
        href = a['href'].strip()
        if href.startswith(('http://', 'https://', '//')):
            refs['external'].append(href)
        elif not href.startswith(('#', 'mailto:')):
            refs['links'].append(href)

    for img in soup.find_all('img', src=True):
        refs['images'].append(img['src'])

    for link in soup.find_all('link', href=True, rel='stylesheet'):
        refs['stylesheets'].append(link['href'])

    for script in soup.find_all('script', src=True):
        refs['scripts'].append(script['src'])

    return refs


def validate_internal_references(output_dir: Path) -> tuple[dict, set[Path]]:
    """Validate internal links and assets. Returns (errors, referenced_assets)."""
    errors = defaultdict(list)
    referenced = set()
    html_files = sorted(output_dir.rglob('*.html'))

    print(f"[INFO] Validating {len(html_files)} HTML files in {output_dir}...")

    labels = {
        'images': 'Missing image',
        'stylesheets': 'Missing CSS',
        'scripts': 'Missing script',
    }

    for html_file in html_files:
        refs = extract_references(html_file, output_dir)
        rel_source = str(html_file.relative_to(output_dir))

        for href in refs['links']:
            target = normalize_path(href, html_file, output_dir)
            if target and not target.exists():
                errors[rel_source].append(f"Broken link: {href}")

        for kind, label in labels.items():
            for src in refs[kind]:
                target = normalize_path(src, html_file, output_dir)
                if not target:
                    continue
                referenced.add(target)
                if not target.exists():
                    errors[rel_source].append(f"{label}: {src}")

    return errors, referenced


def check_passthrough_copies(output_dir: Path, paths=PASSTHROUGH_COPIES) -> list[str]:
    """Return the passthrough directories that did not make it into the output."""
    return [path for path in paths if not (output_dir / path).is_dir()]


def check_external_links(output_dir: Path) -> dict[str, list[str]]:
    """Optionally validate external HTTP(S) links (slow)."""
    errors = defaultdict(list)
    external_links = set()

    print("[INFO] Checking external links (this may take a while)...")

    for html_file in output_dir.rglob('*.html'):
        external_links.update(extract_references(html_file, output_dir)['external'])

    print(f"[INFO] Found {len(external_links)} unique external links to check...")

    for url in sorted(external_links):
        if url.startswith('//'):
            url = f'https:{url}'
        try:
            resp = requests.head(url, timeout=10, allow_redirects=True)
            if resp.status_code >= 400:
                errors['external'].append(f"{url} -> HTTP {resp.status_code}")
        except requests.RequestException as e:
            errors['external'].append(f"{url} -> {type(e).__name__}: {e}")

    return errors


def find_orphaned_assets(output_dir: Path, referenced: set[Path],
                         paths=PASSTHROUGH_COPIES) -> list[Path]:
    """Images inside the passthrough directories that no page references.

    Stylesheets are skipped since they are usually pulled in through
    ``@import`` rather than from HTML.
    """
    orphaned = []
    for path in paths:
        root = output_dir / path
        if not root.is_dir():
            continue
        orphaned.extend(p.resolve() for p in root.rglob('*')
                        if p.is_file() and p.suffix.lower() in IMAGE_EXT)
    return sorted(set(orphaned) - referenced)


def print_report(internal_errors: dict, missing_copies: list[str], external_errors: dict,
                 orphaned: list[Path], output_dir: Path) -> int:
    """Print validation report and return exit code."""
    has_errors = bool(internal_errors or missing_copies or external_errors)

    print("\n" + "=" * 70)
    print("VALIDATION REPORT")
    print("=" * 70)

    if missing_copies:
        print(f"\n[FAIL] MISSING PASSTHROUGH COPIES ({len(missing_copies)}):\n")
        for path in missing_copies:
            print(f"  - {path}/ (expected under {output_dir})")
        print("\n  Hint: add the directory to content/ or check STATIC_PATHS")

    if internal_errors:
        total_errors = sum(len(v) for v in internal_errors.values())
        print(f"\n[FAIL] INTERNAL ERRORS ({total_errors} total):\n")
        for source, issues in sorted(internal_errors.items()):
            print(f"  {source}:")
            for issue in issues:
                print(f"    - {issue}")
    else:
        print("\n[OK] All internal links and assets validated successfully!")

    if external_errors:
        print(f"\n[FAIL] EXTERNAL LINK ERRORS ({len(external_errors['external'])} total):\n")
        for issue in external_errors['external']:
            print(f"  - {issue}")

    if orphaned:
        print(f"\n[WARN] ORPHANED IMAGES ({len(orphaned)} unreferenced files):\n")
        for asset in orphaned[:10]:
            size_kb = asset.stat().st_size / 1024
            print(f"  - {asset.relative_to(output_dir)} ({size_kb:.1f} KB)")
        if len(orphaned) > 10:
            print(f"  ... and {len(orphaned) - 10} more")

    print("\n" + "=" * 70)
    print("SUMMARY:")
    print(f"  - HTML files checked: {len(list(output_dir.rglob('*.html')))}")
    print(f"  - Missing passthrough copies: {len(missing_copies)}")
    print(f"  - Internal errors: {sum(len(v) for v in internal_errors.values())}")
    if external_errors:
        print(f"  - External errors: {len(external_errors.get('external', []))}")
    print(f"  - Orphaned images: {len(orphaned)}")
    print("=" * 70)

    if has_errors:
        print("\nValidation FAILED - fix errors before deploying!")
        return 1
    print("\nValidation PASSED - site is ready to deploy!")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate the generated site for broken links and missing assets")
    parser.add_argument('--output-dir', default='output', help='Output directory to validate (default: output)')
    parser.add_argument('--check-external', action='store_true', help='Check external HTTP(S) links (slow)')
    parser.add_argument('--passthrough', nargs='*', default=list(PASSTHROUGH_COPIES),
                        help='Directories expected to be copied verbatim (default: css img)')
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir).resolve()
    if not output_dir.exists():
        print(f"[ERROR] Output directory not found: {output_dir}")
        print("Run 'pelican content' to generate the site first.")
        return 1

    internal_errors, referenced = validate_internal_references(output_dir)
    missing_copies = check_passthrough_copies(output_dir, args.passthrough)

    external_errors = {}
    if args.check_external:
        external_errors = check_external_links(output_dir)

    orphaned = find_orphaned_assets(output_dir, referenced, args.passthrough)

    return print_report(internal_errors, missing_copies, external_errors, orphaned, output_dir)


if __name__ == '__main__':
    sys.exit(main())
