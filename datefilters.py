"""Date formatting filters for Jinja templates.

Two filters are exposed to the site's templates (see ``siteconfig.configure``):

    {{ article.date|dateIso }}       ->  2024-04-05T00:00:00.000Z
    {{ article.date|dateReadable }}  ->  April 5, 2024

Accepted inputs:
    - ``datetime`` (naive values are read in the configured zone)
    - ``date`` (midnight of that day in the configured zone)
    - ``int``/``float`` epoch values in milliseconds
    - any string ``dateutil.parser.parse`` understands

Parsing errors are not caught here; ``dateutil`` raises ``ParserError`` for
strings it cannot read.
"""
from __future__ import annotations

import datetime as dt

from babel.dates import format_date
from dateutil import parser, tz

DEFAULT_LOCALE = 'en'


def to_datetime(value, tzinfo: dt.tzinfo | None = None) -> dt.datetime:
    """Return *value* as a timezone-aware datetime."""
    zone = tzinfo if tzinfo is not None else tz.tzlocal()

    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, dt.date):
        return dt.datetime.combine(value, dt.time(), tzinfo=zone)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        return dt.datetime.fromtimestamp(value / 1000, tz=dt.timezone.utc)
    else:
        parsed = parser.parse(value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone)
    return parsed


def date_iso(value, tzinfo: dt.tzinfo | None = None) -> str:
    """Serialise *value* as a UTC ISO-8601 timestamp with milliseconds."""
    instant = to_datetime(value, tzinfo).astimezone(dt.timezone.utc)
    return instant.replace(tzinfo=None).isoformat(timespec='milliseconds') + 'Z'


def date_readable(value, locale: str = DEFAULT_LOCALE,
                  tzinfo: dt.tzinfo | None = None) -> str:
    """Format *value*, taken in UTC, with the locale's long date pattern."""
    instant = to_datetime(value, tzinfo).astimezone(dt.timezone.utc)
    return format_date(instant.date(), format='long', locale=locale)
