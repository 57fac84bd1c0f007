"""
Settings for the storefront backend.

Everything tunable per deployment comes from the environment (a .env file in
the working directory is picked up too). Pricing constants live at module
level since they are business rules, not deployment settings.
"""

import logging
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

APP_NAME = 'Saree Grace'
VERSION = '1.0.0'

# ============== PRICING ==============
SHIPPING_FEE = 99.0
FREE_SHIPPING_THRESHOLD = 5000.0  # subtotal at or above ships free

# ============== ADMIN DASHBOARD ==============
RECENT_ORDERS_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5

ORDER_STATUSES = ['pending', 'processing', 'shipped', 'delivered', 'cancelled']
PAYMENT_METHODS = ['cod', 'card', 'upi']


def _env_bool(environ, name, default):
    value = environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def load_settings(environ=None):
    """Build the Flask config mapping from the environment.

    Production neither seeds demo data nor invents an admin password: both
    have to be asked for explicitly.
    """
    environ = os.environ if environ is None else environ
    env = environ.get('FLASK_ENV', 'development')
    production = env == 'production'

    return {
        'ENV': env,
        'SECRET_KEY': environ.get('SESSION_SECRET', 'saree-grace-secret'),

        # 24h sessions, secure cookie only when served over https in production
        'PERMANENT_SESSION_LIFETIME': timedelta(hours=24),
        'SESSION_COOKIE_HTTPONLY': True,
        'SESSION_COOKIE_SAMESITE': 'Lax',
        'SESSION_COOKIE_SECURE': production,

        'SEED_DATA': _env_bool(environ, 'SEED_DATA', not production),
        'ADMIN_USERNAME': environ.get('ADMIN_USERNAME', 'admin'),
        'ADMIN_PASSWORD': environ.get('ADMIN_PASSWORD', None if production else 'admin12345'),
        'ADMIN_EMAIL': environ.get('ADMIN_EMAIL', 'admin@sareegrace.in'),

        'LOG_LEVEL': environ.get('LOG_LEVEL', 'INFO'),
        'HOST': environ.get('HOST', '0.0.0.0'),
        'PORT': int(environ.get('PORT', '5000')),
    }


def configure_logging(app):
    """Route package and app logs through one stream handler."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s [%(name)s] %(message)s'
    ))

    pkg_logger = logging.getLogger('storefront')
    pkg_logger.setLevel(level)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(handler)

    app.logger.setLevel(level)
