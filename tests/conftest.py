import pytest
from datetime import datetime
from app import create_app
from garden.rows import ContactRow


@pytest.fixture
def app_context():
    """Fixture for Flask app context."""
    app = create_app('Testing')
    app.config["spreadsheets"] = {"contact_log": {"id": "test-sheet-id"}}
    app.config["ranking"] = {"limit": 5}
    with app.app_context():
        yield app


@pytest.fixture
def client(app_context):
    return app_context.test_client()


@pytest.fixture
def wednesday():
    """Wed 13 Aug 2025 15:30, so the week window starts Mon 11 Aug 00:00."""
    return datetime(2025, 8, 13, 15, 30)


def make_row(
        name="A",
        client="X",
        dates=("2025/01/01",),
        confirmed="",
        content="c"):
    """
    Helper to build a contact row the way the sheet would hand it over.

    Args:
        name (str): employee name (column D).
        client (str): client name (column E).
        dates (tuple): contact date columns I/J/K, raw.
        confirmed (str): confirmed date (column N), raw.
        content (str): note (column O).
    """
    return ContactRow(
        employee_name=name,
        client_name=client,
        contact_dates=tuple(dates),
        confirmed_date=confirmed,
        content=content,
    )


@pytest.fixture
def row_factory():
    return make_row
