"""Shared fixtures: an app on in-memory SQLite, seeded products, logged-in clients."""

from decimal import Decimal

import pytest

from app import create_app
from models import Product, db

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-pass"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "MAIL_ENABLED": False,
        "ADMIN_EMAIL": ADMIN_EMAIL,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "BRACELET_CONFIG_FILE": None,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def settings(app):
    return app.extensions["bracelet_settings"]


@pytest.fixture
def products(app):
    """One customizable bracelet, one charm, one plain (non-customizable) product."""
    with app.app_context():
        bracelet = Product(
            slug="bluestone",
            name="Bluestone",
            product_type="standard_bracelet",
            price=Decimal("20.00"),
            category="standard",
            sizes="XS, S/M, M/L",
            image_url="/static/images/bracelets/bluestone.webp",
            is_bestseller=True,
        )
        charm = Product(
            slug="heart",
            name="Heart",
            product_type="charm",
            price=Decimal("12.00"),
            category="bestsellers",
            is_new=False,
        )
        collab = Product(
            slug="artist-edition",
            name="Artist Edition",
            product_type="collab",
            price=Decimal("30.00"),
        )
        db.session.add_all([bracelet, charm, collab])
        db.session.commit()
        return {"bracelet": bracelet.id, "charm": charm.id, "collab": collab.id}


@pytest.fixture
def shopper(client):
    """Client logged in as a freshly signed-up shopper."""
    response = client.post("/signup", json={
        "email": "mia@example.com",
        "password": "secret",
        "name": "Mia",
    })
    assert response.status_code == 201
    return client


@pytest.fixture
def admin(app):
    admin_client = app.test_client()
    response = admin_client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return admin_client


@pytest.fixture
def gold_design():
    return {
        "word": "mia",
        "letterColor": "gold",
        "selectedCharms": [
            {"id": "teacher", "name": "#1 Teacher", "price": 14},
            {"id": "heart", "name": "Heart", "price": 12},
        ],
        "size": "m/l",
    }
