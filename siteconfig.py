"""Registration of the site's template filters, plugins and static copies.

``pelicanconf.py`` hands its own namespace to ``configure``::

    from siteconfig import SiteConfig, configure
    configure(SiteConfig(globals()))

which leaves ``JINJA_FILTERS``, ``PLUGINS`` and ``STATIC_PATHS`` populated
before Pelican reads the settings.
"""
from __future__ import annotations

import functools
import logging
from collections.abc import MutableMapping

from dateutil import tz

from datefilters import DEFAULT_LOCALE, date_iso, date_readable

logger = logging.getLogger(__name__)

NAVIGATION_PLUGIN = 'navigation'
SYNTAX_HIGHLIGHT_PLUGIN = 'syntax_highlight'
PASSTHROUGH_COPIES = ('css', 'img')


class SiteConfig:
    """Registration facade over a Pelican settings mapping."""

    def __init__(self, settings: MutableMapping | None = None):
        self.settings = settings if settings is not None else {}

    def get(self, name: str, default=None):
        return self.settings.get(name, default)

    def add_filter(self, name: str, function) -> None:
        self.settings.setdefault('JINJA_FILTERS', {})[name] = function
        logger.debug('Registered template filter %s', name)

    def add_plugin(self, plugin, **options) -> None:
        """Enable *plugin*; *options* are merged in as Pelican settings."""
        self.settings.setdefault('PLUGINS', []).append(plugin)
        self.settings.update(options)
        logger.debug('Registered plugin %s', getattr(plugin, '__name__', plugin))

    def add_passthrough_copy(self, path: str) -> None:
        self.settings.setdefault('STATIC_PATHS', []).append(path)
        logger.debug('Registered passthrough copy %s', path)

    @property
    def filters(self) -> dict:
        return dict(self.settings.get('JINJA_FILTERS', {}))

    @property
    def plugins(self) -> list:
        return list(self.settings.get('PLUGINS', []))

    @property
    def passthrough_copies(self) -> list:
        return list(self.settings.get('STATIC_PATHS', []))


def resolve_timezone(name: str | None):
    """Zone used for naive dates: the ``TIMEZONE`` setting, else local time."""
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f'Unknown TIMEZONE setting: {name!r}')
    return zone


def configure(config: SiteConfig, locale: str = DEFAULT_LOCALE) -> None:
    zone = resolve_timezone(config.get('TIMEZONE'))

    config.add_filter('dateIso', functools.partial(date_iso, tzinfo=zone))
    config.add_filter(
        'dateReadable', functools.partial(date_readable, locale=locale, tzinfo=zone))

    config.add_plugin(NAVIGATION_PLUGIN)
    config.add_plugin(SYNTAX_HIGHLIGHT_PLUGIN)

    for path in PASSTHROUGH_COPIES:
        config.add_passthrough_copy(path)
