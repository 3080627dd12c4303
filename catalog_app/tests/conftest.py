import io
import uuid
from decimal import Decimal

import pandas as pd
import pytest
from django.contrib.auth import get_user_model
from django.core.cache import caches
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from catalog_app.cache import reset_result_cache
from catalog_app.models import Product
from catalog_app.services.spreadsheets import XLSX_CONTENT_TYPE


@pytest.fixture(autouse=True)
def fresh_result_cache():
    reset_result_cache()
    caches["default"].clear()
    yield
    reset_result_cache()


@pytest.fixture()
def api_client():
    return APIClient()


@pytest.fixture()
def user_factory(db):
    def _create(username=None):
        username = username or f"user-{uuid.uuid4().hex[:6]}"
        return get_user_model().objects.create_user(username=username, password="secret")

    return _create


@pytest.fixture()
def user(user_factory):
    return user_factory("alice")


@pytest.fixture()
def other_user(user_factory):
    return user_factory("bob")


@pytest.fixture()
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture()
def product_factory(user):
    def _create(owner=None, **overrides):
        suffix = uuid.uuid4().hex[:6]
        defaults = {
            "user": owner or user,
            "name": f"Factory product {suffix}",
            "sku": f"SKU-{suffix}",
            "cost_item": Decimal("10.00"),
        }
        defaults.update(overrides)
        return Product.objects.create(**defaults)

    return _create


@pytest.fixture()
def make_workbook():
    def _build(rows, columns=None):
        buffer = io.BytesIO()
        frame = pd.DataFrame(rows, columns=columns)
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            frame.to_excel(writer, sheet_name="Produtos", index=False)
        return buffer.getvalue()

    return _build


@pytest.fixture()
def make_upload(make_workbook):
    def _build(rows, name="produtos.xlsx", columns=None):
        return SimpleUploadedFile(name, make_workbook(rows, columns), content_type=XLSX_CONTENT_TYPE)

    return _build
