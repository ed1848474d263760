"""
Tests for the IST template filters registered on the Flask application.
"""
from flask import render_template_string


def test_filters_are_registered(app):
    for name in ('ist_date', 'ist_datetime', 'ist_date_only', 'relative_time'):
        assert name in app.jinja_env.filters
    assert 'overdue' in app.jinja_env.tests


def test_ist_date(app):
    assert render_template_string('{{ ts|ist_date }}', ts='2025-08-11T18:30:00Z') == '12 Aug 2025'


def test_ist_date_with_options(app):
    rendered = render_template_string("{{ ts|ist_date(month='long') }}", ts='2025-08-11T18:30:00Z')
    assert rendered == '12 August 2025'


def test_ist_datetime(app):
    rendered = render_template_string('{{ ts|ist_datetime }}', ts='2025-01-11T10:28:00Z')
    assert rendered == '11 Jan 2025, 3:58 pm IST'


def test_ist_date_only(app):
    assert render_template_string('{{ ts|ist_date_only }}', ts='2025-08-11T18:30:00Z') == '2025-08-12'
    assert render_template_string('{{ ts|ist_date_only }}', ts='garbage') == ''


def test_relative_time_of_old_timestamp_is_a_date(app):
    assert render_template_string('{{ ts|relative_time }}', ts='2000-01-01T00:00:00Z') == '1 Jan 2000'


def test_overdue(app):
    template = '{% if ts is overdue %}overdue{% else %}on time{% endif %}'
    assert render_template_string(template, ts='2000-01-01T00:00:00Z') == 'overdue'
    assert render_template_string(template, ts='2999-01-01T00:00:00Z') == 'on time'


def test_ist_datetime_with_seconds(app):
    rendered = render_template_string("{{ ts|ist_datetime(second='2-digit') }}", ts='2025-01-11T10:28:05Z')
    assert rendered == '11 Jan 2025, 3:58:05 pm IST'
