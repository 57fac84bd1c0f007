"""Shared pytest fixtures.

Storage is a process-wide singleton, so every test starts from an empty
store. Tests that want the demo catalog call ``init_data`` themselves.
"""

import pytest

from storefront.app import app
from storefront.auth import hash_password
from storefront.storage import storage

CUSTOMER_PASSWORD = 'silkroute123'
ADMIN_PASSWORD = 'admin-pass-99'


@pytest.fixture(autouse=True)
def clean_storage():
    storage.reset()
    yield
    storage.reset()


@pytest.fixture
def store():
    return storage


@pytest.fixture
def client():
    app.config['TESTING'] = True
    return app.test_client()


def login(client, username, password):
    return client.post('/api/auth/login', json={'username': username, 'password': password})


@pytest.fixture
def customer(store):
    return store.create_user({
        'username': 'priya',
        'email': 'priya@sareegrace.in',
        'fullName': 'Priya Nair',
        'password': hash_password(CUSTOMER_PASSWORD),
    })


@pytest.fixture
def admin(store):
    return store.create_user({
        'username': 'boss',
        'email': 'boss@sareegrace.in',
        'fullName': 'Store Admin',
        'password': hash_password(ADMIN_PASSWORD),
        'isAdmin': True,
    })


@pytest.fixture
def customer_client(customer):
    app.config['TESTING'] = True
    c = app.test_client()
    assert login(c, 'priya', CUSTOMER_PASSWORD).status_code == 200
    return c


@pytest.fixture
def admin_client(admin):
    app.config['TESTING'] = True
    c = app.test_client()
    assert login(c, 'boss', ADMIN_PASSWORD).status_code == 200
    return c


@pytest.fixture
def category(store):
    return store.create_category({
        'name': 'Silk Sarees',
        'slug': 'silk',
        'description': 'Handwoven silks',
        'imageUrl': None,
    })


def make_product(store, **overrides):
    data = {
        'name': 'Kanjeevaram Silk Saree',
        'description': 'Pure zari with temple border',
        'price': 1200.0,
        'discountPrice': None,
        'imageUrl': None,
        'images': [],
        'categoryId': None,
        'stock': 10,
        'featured': False,
        'isNewArrival': False,
        'isBestSeller': False,
    }
    data.update(overrides)
    return store.create_product(data)


@pytest.fixture
def product(store, category):
    return make_product(store, categoryId=category['id'])
