import pytest
import os
import tempfile
from datetime import datetime, timezone
from unittest.mock import patch

from prometheus_client import REGISTRY

# Set test environment variables
os.environ["FLASK_ENV"] = "testing"
os.environ["TESTING"] = "true"


@pytest.fixture(autouse=True)
def clear_prometheus_registry():
    """Clear the default prometheus registry before each test."""
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        REGISTRY.unregister(collector)
    yield


@pytest.fixture
def app():
    """Create and configure a new app instance for each test."""
    db_fd, db_path = tempfile.mkstemp()
    with patch.dict(os.environ, {
        "DATABASE_URL": f"sqlite:///{db_path}",
    }):
        from src.factory import create_app
        from src.database import db
        app = create_app()
        app.config["TESTING"] = True
        with app.app_context():
            db.create_all()
            yield app
            db.session.remove()
            db.drop_all()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def make_buyer(app):
    """Insert a buyer directly, bypassing the service rules."""
    from src.database import db
    from src.models import Buyer

    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        n = counter['n']
        values = {
            'email': f"buyer{n}@example.com",
            'phone': f"555-010{n:02d}",
            'first_name': f"First{n}",
            'last_name': f"Last{n}",
            'buyer_type': 'Investor',
            'source': 'Manual Entry',
            'preferred_areas': ['DFW'],
        }
        values.update(overrides)
        buyer = Buyer(**values)
        db.session.add(buyer)
        db.session.commit()
        return buyer

    return _make


@pytest.fixture
def make_user(app):
    from src.database import db
    from src.models import User

    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        values = {
            'email': f"user{counter['n']}@landivo.com",
            'first_name': 'Admin',
            'last_name': f"User{counter['n']}",
            'role': 'ADMIN',
        }
        values.update(overrides)
        user = User(**values)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_property(app):
    from src.database import db
    from src.models import Property

    def _make(**overrides):
        values = {
            'title': 'Lakeview Lot',
            'street_address': '100 Main St',
            'city': 'Austin',
            'state': 'TX',
            'zip': '78701',
        }
        values.update(overrides)
        prop = Property(**values)
        db.session.add(prop)
        db.session.commit()
        return prop

    return _make


@pytest.fixture
def make_offer(app, make_property):
    from src.database import db
    from src.models import Offer

    def _make(buyer, prop=None, **overrides):
        prop = prop or make_property()
        values = {
            'buyer_id': buyer.id,
            'property_id': prop.id,
            'offered_price': 125000,
            'offer_status': 'PENDING',
            'timestamp': datetime.now(timezone.utc),
        }
        values.update(overrides)
        offer = Offer(**values)
        db.session.add(offer)
        db.session.commit()
        return offer

    return _make
