"""
Utility functions for the CRM application.
Helpers for rendering timestamps in India Standard Time (IST), independent of
the timezone the server or the viewer happens to run in.
"""
import logging
from datetime import datetime, date, timedelta
import pytz

from config import IST_TIMEZONE, ist

logger = logging.getLogger(__name__)

INVALID_DATE = 'Invalid Date'

# IST has no daylight saving, so the offset is fixed
IST_OFFSET_SECONDS = 5 * 3600 + 30 * 60

EPOCH = datetime(1970, 1, 1, tzinfo=pytz.UTC)

MONTHS_SHORT = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
MONTHS_LONG = ['January', 'February', 'March', 'April', 'May', 'June',
               'July', 'August', 'September', 'October', 'November', 'December']
WEEKDAYS_SHORT = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']
WEEKDAYS_LONG = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
MONTHS_NARROW = [name[0] for name in MONTHS_SHORT]
WEEKDAYS_NARROW = [name[0] for name in WEEKDAYS_SHORT]

MONTH_NAMES = {'narrow': MONTHS_NARROW, 'short': MONTHS_SHORT, 'long': MONTHS_LONG}
WEEKDAY_NAMES = {'narrow': WEEKDAYS_NARROW, 'short': WEEKDAYS_SHORT, 'long': WEEKDAYS_LONG}

DATE_DEFAULTS = {
    'day': 'numeric',
    'month': 'short',
    'year': 'numeric',
}

DATETIME_DEFAULTS = {
    'day': 'numeric',
    'month': 'short',
    'year': 'numeric',
    'hour': 'numeric',
    'minute': '2-digit',
    'hour12': True,
}

FORMAT_OPTIONS = ('weekday', 'day', 'month', 'year', 'hour', 'minute', 'second', 'hour12')

TEXT_STYLES = ('narrow', 'short', 'long')


def _ist_zone():
    """Timezone database entry for the display timezone"""
    return pytz.timezone(IST_TIMEZONE)


def parse_timestamp(value):
    """
    Parse an ISO-8601 string, datetime or date into an aware UTC datetime.

    Naive values are treated as UTC, matching how timestamps are persisted.
    Returns None when the value cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ('Z', 'z'):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    try:
        if dt.tzinfo is None:
            dt = pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC)
    except (ValueError, OverflowError):
        return None


def utc_to_ist(utc_dt):
    """Convert UTC datetime to IST"""
    if utc_dt is None:
        return None
    if utc_dt.tzinfo is None:
        utc_dt = pytz.UTC.localize(utc_dt)
    return utc_dt.astimezone(ist)


def to_ist_iso(dt):
    """Convert datetime to IST ISO string for API responses"""
    if dt is None:
        return None
    ist_dt = utc_to_ist(dt)
    return ist_dt.isoformat() if ist_dt else None


def to_utc_iso(dt):
    """Convert datetime to a UTC ISO string with millisecond precision, e.g. 2025-01-01T00:00:00.000Z"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _epoch_ms(dt):
    return (dt - EPOCH) // timedelta(milliseconds=1)


def _merge_options(defaults, options):
    unknown = set(options) - set(FORMAT_OPTIONS)
    if unknown:
        raise TypeError(f"Unknown format option(s): {', '.join(sorted(unknown))}")
    merged = dict(defaults)
    merged.update(options)
    return merged


def _numeric(value, style):
    if style == 'numeric':
        return str(value)
    if style == '2-digit':
        return f"{value % 100:02d}"
    raise ValueError(f"Unsupported numeric style: {style!r}")


def _text(names_by_style, index, style, part):
    if style not in TEXT_STYLES:
        raise ValueError(f"Unsupported {part} style: {style!r}")
    return names_by_style[style][index]


def _render(local_dt, options):
    """
    Render a wall-clock datetime the way en-IN locale formatting lays it out:
    "11 Aug 2025" for textual months, "11/8/2025" for numeric ones, and the
    time appended as ", 3:58 pm".
    """
    date_parts = []
    separator = '/'

    if options.get('day'):
        date_parts.append(_numeric(local_dt.day, options['day']))

    month = options.get('month')
    if month in TEXT_STYLES:
        date_parts.append(_text(MONTH_NAMES, local_dt.month - 1, month, 'month'))
        separator = ' '
    elif month:
        date_parts.append(_numeric(local_dt.month, month))

    year = options.get('year')
    if year == 'numeric':
        date_parts.append(str(local_dt.year))
    elif year:
        date_parts.append(_numeric(local_dt.year, year))

    date_text = separator.join(date_parts)

    weekday = options.get('weekday')
    if weekday:
        day_name = _text(WEEKDAY_NAMES, local_dt.weekday(), weekday, 'weekday')
        date_text = f"{day_name}, {date_text}" if date_text else day_name

    time_text = ''
    hour = options.get('hour')
    if hour:
        hours = local_dt.hour
        meridiem = ''
        if options.get('hour12', True):
            meridiem = ' am' if hours < 12 else ' pm'
            hours = hours % 12 or 12
            time_text = _numeric(hours, hour)
        else:
            time_text = f"{hours:02d}"
        if options.get('minute'):
            _numeric(local_dt.minute, options['minute'])
            time_text += f":{local_dt.minute:02d}"
        if options.get('second'):
            _numeric(local_dt.second, options['second'])
            time_text += f":{local_dt.second:02d}"
        time_text += meridiem

    return ', '.join(part for part in (date_text, time_text) if part)


def _manual_ist_format(utc_dt):
    """
    Format an instant in IST using plain arithmetic on the epoch, without any
    timezone database.
    """
    seconds = _epoch_ms(utc_dt) // 1000 + IST_OFFSET_SECONDS
    days, remainder = divmod(seconds, 86400)
    try:
        day = date(1970, 1, 1) + timedelta(days=days)
    except OverflowError:
        return INVALID_DATE

    hours = remainder // 3600
    minutes = (remainder % 3600) // 60
    meridiem = 'pm' if hours >= 12 else 'am'
    hours = hours % 12 or 12

    return f"{day.day} {MONTHS_SHORT[day.month - 1]} {day.year}, {hours}:{minutes:02d} {meridiem} IST"


def format_to_ist(value, **options):
    """
    Format a timestamp as an IST date, e.g. "11 Aug 2025".

    Keyword options override the default day/month/year styles; pass None
    to drop a part.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return INVALID_DATE
    return _render(utc_to_ist(dt), _merge_options(DATE_DEFAULTS, options))


def format_to_ist_datetime(value, **options):
    """
    Format a timestamp as an IST date and time, e.g. "11 Jan 2025, 3:58 pm IST".

    Never raises: unparseable input gives "Invalid Date", unsupported
    options fall back to the default style, and a failing timezone lookup
    falls back to fixed-offset arithmetic.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return INVALID_DATE

    try:
        local_dt = dt.astimezone(_ist_zone())
    except (pytz.UnknownTimeZoneError, ValueError, OverflowError) as e:
        logger.warning("Error formatting date to IST, using manual conversion: %s", e)
        return _manual_ist_format(dt)

    try:
        rendered = _render(local_dt, _merge_options(DATETIME_DEFAULTS, options))
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring unsupported date format options %r: %s", options, e)
        rendered = _render(local_dt, DATETIME_DEFAULTS)
    return f"{rendered} IST"


def format_to_ist_date_only(value):
    """Return the IST calendar date of a timestamp as YYYY-MM-DD"""
    dt = parse_timestamp(value)
    if dt is None:
        raise ValueError(f"Invalid time value: {value!r}")
    # IST wall clock, read back without a zone
    wall_clock = utc_to_ist(dt).replace(tzinfo=None)
    return wall_clock.date().isoformat()


def get_current_ist_instant(now=None):
    """
    Current instant in IST, for display formatting only.
    `now` pins the clock (naive values are UTC).
    """
    current = now if now is not None else datetime.now(pytz.UTC)
    return utc_to_ist(current)


def get_current_ist_timestamp(now=None):
    """Current time as an IST display string"""
    return format_to_ist_datetime(get_current_ist_instant(now))


def is_overdue(due_date, now=None):
    """True if the due timestamp lies strictly before the current instant"""
    due = parse_timestamp(due_date)
    if due is None:
        return False
    return _epoch_ms(due) < _epoch_ms(get_current_ist_instant(now))


def _ago(count, unit):
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def get_relative_time_ist(value, now=None):
    """
    Short relative description such as "5 minutes ago".
    Anything a week or older is shown as an IST date.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return INVALID_DATE

    diff_ms = _epoch_ms(get_current_ist_instant(now)) - _epoch_ms(dt)
    diff_minutes = diff_ms // (1000 * 60)
    diff_hours = diff_ms // (1000 * 60 * 60)
    diff_days = diff_ms // (1000 * 60 * 60 * 24)

    if diff_minutes < 1:
        return 'just now'
    if diff_minutes < 60:
        return _ago(diff_minutes, 'minute')
    if diff_hours < 24:
        return _ago(diff_hours, 'hour')
    if diff_days < 7:
        return _ago(diff_days, 'day')

    return format_to_ist(dt)
