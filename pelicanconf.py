import os
import sys
sys.path.insert(0, os.path.dirname(__file__))

from siteconfig import SiteConfig, configure  # noqa: E402

# --- Site Information ---
AUTHOR = 'Site Author'
SITENAME = 'Notes'
SITEURL = ''

# --- Paths ---
PATH = 'content'
ARTICLE_PATHS = ['posts']
PAGE_PATHS = ['pages']

# --- Content Settings ---
TIMEZONE = 'UTC'
DEFAULT_LANG = 'en'
ARTICLE_SAVE_AS = 'posts/{slug}/index.html'
ARTICLE_URL = 'posts/{slug}/'
PAGE_SAVE_AS = '{slug}/index.html'
PAGE_URL = '{slug}/'
DELETE_OUTPUT_DIRECTORY = True

# --- Feed Settings (disabled for development) ---
FEED_ALL_ATOM = None
CATEGORY_FEED_ATOM = None
TRANSLATION_FEED_ATOM = None
AUTHOR_FEED_ATOM = None
AUTHOR_FEED_RSS = None

# --- Pagination ---
DEFAULT_PAGINATION = 10

# --- Plugins ---
PLUGIN_PATHS = ['pelican-plugins']
PLUGINS = []
# Optional plugin settings
SYNTAX_HIGHLIGHT_CSS_CLASS = 'highlight'
SYNTAX_HIGHLIGHT_STYLESHEET = 'css/highlight.css'
PYGMENTS_STYLE = 'friendly'

# --- Markdown Extensions ---
# fenced_code and codehilite are added by the syntax_highlight plugin
MARKDOWN = {
    'extension_configs': {
        'markdown.extensions.extra': {},
        'markdown.extensions.meta': {},
    },
    'output_format': 'html5',
}

# --- URL Settings ---
RELATIVE_URLS = True

# --- Theme-Specific Settings ---
DISPLAY_PAGES_ON_MENU = False
DISPLAY_CATEGORIES_ON_MENU = False

# --- Filters, plugins and static copies ---
configure(SiteConfig(globals()), locale=DEFAULT_LANG)
