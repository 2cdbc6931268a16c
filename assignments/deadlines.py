"""
Building deadlines from the date strings teachers type into the form.
"""
from dateutil import parser as date_parser
from django.utils import timezone

from .models import Deadline

DISPLAY_FORMAT = '%m/%d/%Y %H:%M'


class InvalidDeadlineError(ValueError):
    """The deadline string could not be understood"""


def parse_deadline(deadline_at):
    """
    Parse a human date string ("10/31/2026 17:00", "2026-10-31T17:00Z", ...)
    into an aware datetime. Naive values are read in the current time zone.
    """
    value = (deadline_at or '').strip()
    if not value:
        raise InvalidDeadlineError("Deadline is blank.")

    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError) as e:
        raise InvalidDeadlineError(f"\"{value}\" is not a valid date.") from e

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())
    return parsed


def build_from_string(deadline_at):
    """Return an unsaved Deadline for the given string"""
    return Deadline(deadline_at=parse_deadline(deadline_at))


def format_deadline(deadline):
    """The string the form shows for an existing deadline"""
    if deadline is None:
        return ''
    return timezone.localtime(deadline.deadline_at).strftime(DISPLAY_FORMAT)
