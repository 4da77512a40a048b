import pytest
from flask import Flask
from flask.testing import FlaskClient

from wealthplan.app import create_app
from wealthplan.domain.goal_store import GoalStore


@pytest.fixture()
def store() -> GoalStore:
    return GoalStore()


@pytest.fixture()
def app(store: GoalStore) -> Flask:
    return create_app(store=store)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
