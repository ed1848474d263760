from datetime import datetime

import pytest
import pytz


@pytest.fixture
def fixed_now():
    """A pinned 'current' instant: 2025-01-11 12:00 UTC (17:30 IST)"""
    return datetime(2025, 1, 11, 12, 0, tzinfo=pytz.UTC)


@pytest.fixture
def draft_record():
    return {
        'id': 42,
        'notes': '{"originalData":{"foo":"bar"},"lastSaved":"2025-01-01T00:00:00Z","completedTabs":["info"]}',
        'client_name': 'PARTIAL_SAVE_IN_PROGRESS',
        'project_title': 'Real Title',
        'project_description': 'Cloud migration',
        'lead_source': 'email',
        'created_at': '2024-12-31T10:00:00Z',
    }


@pytest.fixture
def app():
    from application import application
    application.config['TESTING'] = True
    with application.app_context():
        yield application
