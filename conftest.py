"""
Global pytest configuration and fixtures.
"""
import datetime as dt
import json
from decimal import Decimal
from typing import Any, Dict

import pytest

from analytics_engine.config import AnalyticsConfig, reload_config
from analytics_engine.models import EntryUser, Member, Project, TimeEntry


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        'ENVIRONMENT': 'testing',
        'DEBUG': 'false',
        'LOG_LEVEL': 'DEBUG',
        'STANDARD_WEEKLY_HOURS': '40',
        'RED_LIST_THRESHOLD': '0.90',
        'FORECAST_MIN_POINTS': '3',
        'FORECAST_PERIODS': '2',
    }


@pytest.fixture
def mock_env(test_env_vars, monkeypatch):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv('SNAPSHOT_PATH', raising=False)

    # Clear the global config to force reload with test values
    import analytics_engine.config.settings
    analytics_engine.config.settings._config = None

    yield test_env_vars

    # Clean up
    analytics_engine.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> AnalyticsConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def sample_member() -> Member:
    """Member billed at 100/h with a cost of 50/h and a 40h week."""
    return Member(
        id='u1',
        first_name='Ada',
        last_name='Lovelace',
        email='ada@example.com',
        hourly_rate=Decimal('100'),
        cost_rate=Decimal('50'),
        weekly_target=Decimal('40'),
    )


@pytest.fixture
def sample_project() -> Project:
    """Budgeted project scheduled over the first quarter of 2024."""
    return Project(
        id='p1',
        name='Website Redesign',
        client='Acme Corp',
        budget_hours=Decimal('100'),
        start_date=dt.date(2024, 1, 1),
        end_date=dt.date(2024, 3, 31),
    )


@pytest.fixture
def make_entry():
    """Factory for time entries with sensible defaults."""
    counter = {'n': 0}

    def _make(
        hours,
        billing_status='billable',
        date=dt.date(2024, 1, 15),
        user_id='u1',
        project_id='p1',
        approval_status='approved',
        hourly_rate='100',
        cost_rate='50',
        **kwargs: Any,
    ) -> TimeEntry:
        counter['n'] += 1
        return TimeEntry(
            id=kwargs.pop('id', f"e{counter['n']}"),
            hours=Decimal(str(hours)),
            date=date,
            billing_status=billing_status,
            approval_status=approval_status,
            user_id=user_id,
            project_id=project_id,
            user=EntryUser(hourly_rate=hourly_rate, cost_rate=cost_rate),
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_snapshot_data() -> Dict[str, Any]:
    """Snapshot in the exported camelCase layout."""
    return {
        'members': [
            {
                'id': 'u1',
                'firstName': 'Ada',
                'lastName': 'Lovelace',
                'email': 'ada@example.com',
                'hourlyRate': 100,
                'costRate': 50,
                'weeklyTarget': 40,
            },
            {
                'id': 'u2',
                'email': 'grace@example.com',
                'hourlyRate': 120,
                'costRate': 60,
            },
        ],
        'projects': [
            {
                'id': 'p1',
                'name': 'Website Redesign',
                'client': 'Acme Corp',
                'budgetHours': 100,
                'startDate': '2024-01-01',
                'endDate': '2024-03-31',
            },
            {'id': 'p2', 'name': 'Internal', 'billable': False},
        ],
        'timeEntries': [
            {
                'id': 'e1',
                'hours': 10,
                'date': '2024-01-10',
                'billingStatus': 'billable',
                'approvalStatus': 'approved',
                'userId': 'u1',
                'projectId': 'p1',
                'phaseName': 'Design',
                'user': {'hourlyRate': 100, 'costRate': 50},
            },
            {
                'id': 'e2',
                'hours': 5,
                'date': '2024-01-11',
                'billingStatus': 'internal',
                'approvalStatus': 'approved',
                'userId': 'u1',
                'projectId': 'p2',
                'user': {'hourlyRate': 100, 'costRate': 50},
            },
            {
                'id': 'e3',
                'hours': 8,
                'date': '2024-02-05',
                'billingStatus': 'billable',
                'approvalStatus': 'submitted',
                'userId': 'u2',
                'projectId': 'p1',
                'user': {'hourlyRate': 120, 'costRate': 60},
            },
        ],
        'projectExpenses': [
            {'projectId': 'p1', 'amount': 200, 'date': '2024-01-20', 'category': 'travel'},
        ],
        'companyExpenses': [
            {
                'amount': 300,
                'date': '2024-01-01',
                'category': 'rent',
                'recurring': True,
                'frequency': 'monthly',
            },
        ],
        'allocations': [
            {
                'userId': 'u1',
                'projectId': 'p1',
                'startDate': '2024-03-01',
                'endDate': '2024-04-30',
                'hoursPerDay': 4,
                'status': 'confirmed',
            },
        ],
        'invoices': [
            {
                'id': 'i1',
                'status': 'paid',
                'total': 1000,
                'invoiceDate': '2024-01-31',
                'dueDate': '2024-02-29',
            },
        ],
        'holidays': ['2024-01-01'],
    }


@pytest.fixture
def snapshot_file(tmp_path, sample_snapshot_data):
    """Sample snapshot written to a temporary JSON file."""
    path = tmp_path / 'snapshot.json'
    path.write_text(json.dumps(sample_snapshot_data), encoding='utf-8')
    return path


# Pytest configuration for different test types
def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)

        # Add integration marker for tests in tests/integration/
        elif "tests/integration/" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
