"""
Template filters.
Makes the IST formatting helpers available to every Jinja template, e.g.
{{ lead.created_at|ist_date }} or {% if step.due_date is overdue %}.
"""
from flask import Blueprint
from utils import (
    format_to_ist, format_to_ist_datetime, format_to_ist_date_only,
    get_relative_time_ist, is_overdue
)

filters_bp = Blueprint('filters', __name__)


@filters_bp.app_template_filter('ist_date')
def ist_date_filter(value, **options):
    return format_to_ist(value, **options)


@filters_bp.app_template_filter('ist_datetime')
def ist_datetime_filter(value, **options):
    return format_to_ist_datetime(value, **options)


@filters_bp.app_template_filter('ist_date_only')
def ist_date_only_filter(value):
    """YYYY-MM-DD in IST, e.g. for date inputs; empty for unparseable values"""
    try:
        return format_to_ist_date_only(value)
    except ValueError:
        return ''


@filters_bp.app_template_filter('relative_time')
def relative_time_filter(value):
    return get_relative_time_ist(value)


@filters_bp.app_template_test('overdue')
def overdue_test(value):
    return is_overdue(value)
