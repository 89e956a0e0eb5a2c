import pytest

from app import create_app
from models import Table


@pytest.fixture
def sales_rows():
    """Small mixed-type table resembling an uploaded spreadsheet"""
    return [
        {'region': 'North', 'month': '2024-01-01', 'units': 10, 'revenue': '$1,000', 'status': 'ok'},
        {'region': 'South', 'month': '2024-02-01', 'units': 20, 'revenue': '$2,100', 'status': 'ok'},
        {'region': 'North', 'month': '2024-03-01', 'units': 30, 'revenue': '$2,900', 'status': 'fail'},
        {'region': 'East', 'month': '2024-04-01', 'units': 40, 'revenue': '$4,200', 'status': 'ok'},
        {'region': 'South', 'month': '2024-05-01', 'units': 50, 'revenue': '$5,000', 'status': None},
    ]


@pytest.fixture
def sales_table(sales_rows):
    return Table(sales_rows)


@pytest.fixture
def app():
    return create_app({'TESTING': True, 'MAX_ANALYSIS_ROWS': 1000})


@pytest.fixture
def client(app):
    return app.test_client()
