"""
Time Format - Renders timestamps from ``yyyy-MM-dd HH:mm:ss.fff`` style patterns.

Log files are configured with date/time patterns written in the widely used
custom-format notation (runs of ``y``, ``M``, ``d``, ``H``, ``m``, ``s``,
``f`` ...) rather than ``strftime`` directives. This module turns such a
pattern into text for a given ``datetime``.

Supported specifiers:
    y/yy/yyy/yyyy   year (``yy`` and ``y`` are the year within the century)
    M/MM/MMM/MMMM   month number, abbreviated or full month name
    d/dd/ddd/dddd   day of month, abbreviated or full weekday name
    h/hh, H/HH      hour on a 12- or 24-hour clock
    m/mm, s/ss      minute, second
    f..fffffff      fraction of a second (truncated)
    F..FFFFFFF      fraction of a second without trailing zeros
    t/tt            AM/PM designator
    z/zz/zzz        offset from UTC (local offset for naive times)

Text in single or double quotes and characters escaped with a backslash are
copied as-is; any other character is a literal. ``%`` before a specifier
letter makes it a one-letter specifier, so ``%d`` is the unpadded day.
When an ``F`` fraction renders empty, a ``.`` directly before it is dropped.
"""

from datetime import datetime
from functools import lru_cache

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
DAY_NAMES = (
    "Monday", "Tuesday", "Wednesday", "Thursday",
    "Friday", "Saturday", "Sunday",
)

SPECIFIERS = frozenset("yMdhHmsfFtz")
MAX_FRACTION_DIGITS = 7


@lru_cache(maxsize=32)
def _tokenize(pattern: str) -> tuple:
    """Split a pattern into ``("spec", char, count)`` and ``("text", str)`` tokens.

    Raises ValueError for unterminated quotes, a dangling backslash or
    ``%``, and a fraction specifier longer than seven digits.
    """
    tokens = []
    literal = []
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]

        if ch in ("'", '"'):
            end = pattern.find(ch, i + 1)
            if end == -1:
                raise ValueError(f"Unterminated quote in time format: {pattern!r}")
            literal.append(pattern[i + 1:end])
            i = end + 1
            continue

        if ch == "\\":
            if i + 1 >= n:
                raise ValueError(f"Dangling escape in time format: {pattern!r}")
            literal.append(pattern[i + 1])
            i += 2
            continue

        if ch == "%":
            if i + 1 >= n or pattern[i + 1] == "%":
                raise ValueError(f"Invalid '%' in time format: {pattern!r}")
            nxt = pattern[i + 1]
            if nxt in SPECIFIERS:
                if literal:
                    tokens.append(("text", "".join(literal)))
                    literal = []
                tokens.append(("spec", nxt, 1))
            else:
                literal.append(nxt)
            i += 2
            continue

        if ch not in SPECIFIERS:
            literal.append(ch)
            i += 1
            continue

        count = 1
        while i + count < n and pattern[i + count] == ch:
            count += 1

        if ch in "fF" and count > MAX_FRACTION_DIGITS:
            raise ValueError(
                f"Fraction specifier longer than {MAX_FRACTION_DIGITS} digits: {pattern!r}"
            )

        if literal:
            tokens.append(("text", "".join(literal)))
            literal = []
        tokens.append(("spec", ch, count))
        i += count

    if literal:
        tokens.append(("text", "".join(literal)))
    return tuple(tokens)


def validate_pattern(pattern: str) -> None:
    """Raise ValueError if the pattern cannot be rendered."""
    if not pattern:
        raise ValueError("Time format must not be empty")
    _tokenize(pattern)


def _format_offset(moment: datetime, count: int) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    offset = moment.utcoffset()
    total_minutes = int(offset.total_seconds() // 60)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    if count == 1:
        return f"{sign}{hours}"
    if count == 2:
        return f"{sign}{hours:02d}"
    return f"{sign}{hours:02d}:{minutes:02d}"


def _render(moment: datetime, ch: str, count: int) -> str:
    if ch == "y":
        if count <= 2:
            year = moment.year % 100
            return f"{year:02d}" if count == 2 else str(year)
        return str(moment.year).zfill(count)

    if ch == "M":
        if count >= 4:
            return MONTH_NAMES[moment.month - 1]
        if count == 3:
            return MONTH_NAMES[moment.month - 1][:3]
        return f"{moment.month:02d}" if count == 2 else str(moment.month)

    if ch == "d":
        if count >= 4:
            return DAY_NAMES[moment.weekday()]
        if count == 3:
            return DAY_NAMES[moment.weekday()][:3]
        return f"{moment.day:02d}" if count == 2 else str(moment.day)

    if ch in "hHms":
        if ch == "h":
            value = moment.hour % 12 or 12
        elif ch == "H":
            value = moment.hour
        elif ch == "m":
            value = moment.minute
        else:
            value = moment.second
        return f"{value:02d}" if count >= 2 else str(value)

    if ch in "fF":
        # Seven digits of precision; the seventh is always zero for datetime
        digits = f"{moment.microsecond:06d}0"[:count]
        return digits if ch == "f" else digits.rstrip("0")

    if ch == "t":
        designator = "AM" if moment.hour < 12 else "PM"
        return designator if count >= 2 else designator[0]

    return _format_offset(moment, count)


def format_timestamp(moment: datetime, pattern: str) -> str:
    """Render ``moment`` using a custom date/time pattern.

    Examples:
        >>> format_timestamp(datetime(2024, 6, 7, 16, 3, 19, 658000), "yyyy-MM-dd HH:mm:ss.fff")
        '2024-06-07 16:03:19.658'
    """
    parts = []
    for token in _tokenize(pattern):
        if token[0] == "text":
            parts.append(token[1])
        else:
            rendered = _render(moment, token[1], token[2])
            if not rendered and token[1] == "F" and parts and parts[-1].endswith("."):
                parts[-1] = parts[-1][:-1]
            parts.append(rendered)
    return "".join(parts)
