import os
import sys

import pytest

# backend/ holds the Django project; make it importable when running `pytest` from the repo root
BASE_DIR = os.path.dirname(__file__)
BACKEND_DIR = os.path.join(BASE_DIR, 'backend')
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'storefront.settings')


@pytest.fixture(autouse=True)
def _fresh_listing_cache():
    """Product listing pages are cached in locmem, which outlives per-test rollbacks."""
    from django.core.cache import cache

    cache.clear()
    yield
