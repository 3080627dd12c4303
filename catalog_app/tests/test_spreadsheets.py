import io
from decimal import Decimal

import pandas as pd
import pytest

from catalog_app.models import Product
from catalog_app.services import spreadsheets
from catalog_app.services.spreadsheets import (
    CHANNEL_TEMPLATE,
    INSTRUCTIONS_SHEET,
    PRODUCT_TEMPLATE,
    CellValueError,
    decode_rows,
    export_channels,
    export_products,
    is_channel_placeholder,
    row_to_channel,
    row_to_product,
)
from core.enums import ImportType
from core.exceptions import SpreadsheetDecodeError
from core.schemas import ImportRow


def sheet_names(content):
    return list(pd.read_excel(io.BytesIO(content), sheet_name=None).keys())


def test_templates_declare_headers_samples_and_required_columns():
    assert spreadsheets.get_template(ImportType.PRODUCTS) is PRODUCT_TEMPLATE
    assert spreadsheets.get_template(ImportType.CHANNELS) is CHANNEL_TEMPLATE

    assert PRODUCT_TEMPLATE.headers[:2] == ("nome", "sku")
    assert PRODUCT_TEMPLATE.required == ("nome", "sku")
    assert len(PRODUCT_TEMPLATE.sample_rows) == 2
    assert CHANNEL_TEMPLATE.required == ("produto_id", "canal", "preco")
    assert len(CHANNEL_TEMPLATE.sample_rows) == 2
    for sample in PRODUCT_TEMPLATE.sample_rows + CHANNEL_TEMPLATE.sample_rows:
        headers = PRODUCT_TEMPLATE.headers if "nome" in sample else CHANNEL_TEMPLATE.headers
        assert set(sample) <= set(headers)


def test_product_template_workbook_has_instructions_and_sample_rows():
    content = export_products([], include_data=False)

    assert sheet_names(content) == [PRODUCT_TEMPLATE.sheet_name, INSTRUCTIONS_SHEET]

    rows = decode_rows(content)
    assert [row.number for row in rows] == [2, 3]
    assert [row.get("sku") for row in rows] == ["SKU001", "SKU002"]

    instructions = pd.read_excel(io.BytesIO(content), sheet_name=INSTRUCTIONS_SHEET)
    assert list(instructions.columns) == ["Campo", "Obrigatório", "Tipo", "Descrição"]
    assert list(instructions["Campo"]) == list(PRODUCT_TEMPLATE.headers)


def test_exported_products_decode_back_to_the_same_fields():
    product = Product(
        id=10,
        name="Furadeira",
        sku="FUR-1",
        ean="7891234567890",
        brand="Bosch",
        category="Ferramentas",
        supplier_id=3,
        dimensions={"length": 30, "width": 10.5, "height": 8},
        weight=Decimal("1.250"),
        cost_item=Decimal("199.90"),
        pack_cost=Decimal("4.00"),
        tax_percent=Decimal("18.00"),
        bullet_points=["Potente", "Leve"],
        description="Furadeira de impacto",
        active=False,
    )

    rows = decode_rows(export_products([product]))
    assert len(rows) == 1

    data = row_to_product(rows[0], user_id=5)
    assert data["user_id"] == 5
    assert data["name"] == "Furadeira"
    assert data["sku"] == "FUR-1"
    assert data["ean"] == "7891234567890"
    assert data["supplier_id"] == 3
    assert data["dimensions"] == {"length": 30, "width": 10.5, "height": 8}
    assert Decimal(data["weight"]) == Decimal("1.25")
    assert Decimal(data["cost_item"]) == Decimal("199.90")
    assert data["bullet_points"] == ["Potente", "Leve"]
    assert data["active"] is False
    assert data["supplier_code"] is None


def test_channel_export_writes_placeholder_for_products_without_channels():
    with_channels = Product(
        id=1,
        name="Furadeira",
        channels=[
            {
                "name": "Amazon",
                "active": True,
                "price": "39.90",
                "stock": 5,
                "categories": ["Ferramentas", "Elétricas"],
                "keywords": ["furadeira", "impacto"],
                "amazon": {"asin": "B0001", "category": "Tools"},
            }
        ],
    )
    without_channels = Product(id=2, name="Martelo", channels=[])

    content = export_channels([with_channels, without_channels])
    assert sheet_names(content) == [CHANNEL_TEMPLATE.sheet_name]

    rows = decode_rows(content)
    assert len(rows) == 2

    channel = row_to_channel(rows[0])
    assert channel["name"] == "Amazon"
    assert Decimal(channel["price"]) == Decimal("39.90")
    assert channel["stock"] == 5
    assert channel["categories"] == ["Ferramentas", "Elétricas"]
    assert channel["keywords"] == ["furadeira", "impacto"]
    assert channel["amazon"] == {"asin": "B0001", "category": "Tools"}
    assert not is_channel_placeholder(rows[0])

    assert rows[1].get("produto_id") == 2
    assert bool(rows[1].get("ativo")) is False
    assert is_channel_placeholder(rows[1])


def test_decode_rows_maps_blank_cells_to_none_and_skips_blank_rows(make_workbook):
    content = make_workbook(
        [
            {"nome": "A", "sku": "S1", "marca": None},
            {"nome": None, "sku": None, "marca": None},
            {"nome": "C", "sku": "S3", "marca": "Acme"},
        ]
    )
    rows = decode_rows(content)

    assert [row.number for row in rows] == [2, 4]
    assert rows[0].values == {"nome": "A", "sku": "S1", "marca": None}


def test_decode_rows_rejects_garbage():
    with pytest.raises(SpreadsheetDecodeError):
        decode_rows(b"this is not a workbook")


def test_row_to_product_normalises_cells():
    row = ImportRow(
        number=2,
        values={
            "nome": "  Serra  ",
            "sku": 12345.0,
            "ean": 7891234567890.0,
            "fornecedor_id": 4.0,
            "custo_item": "12,5",
            "bullet_points": "Um; Dois ;;Três",
            "ativo": "FALSO",
        },
    )
    data = row_to_product(row, user_id=1)

    assert data["name"] == "Serra"
    assert data["sku"] == "12345"
    assert data["ean"] == "7891234567890"
    assert data["supplier_id"] == 4
    assert data["cost_item"] == "12.5"
    assert data["pack_cost"] == "0"
    assert data["bullet_points"] == ["Um", "Dois", "Três"]
    assert data["dimensions"] is None
    assert data["active"] is False


@pytest.mark.parametrize("value, expected", [(None, True), ("sim", True), (True, True), (0, False), ("false", False)])
def test_active_flag_defaults_to_true(value, expected):
    data = row_to_product(ImportRow(number=2, values={"nome": "x", "sku": "y", "ativo": value}), user_id=1)
    assert data["active"] is expected


def test_row_to_product_reports_malformed_numbers():
    row = ImportRow(number=7, values={"nome": "x", "sku": "y", "custo_item": "doze"})
    with pytest.raises(CellValueError) as excinfo:
        row_to_product(row, user_id=1)
    assert excinfo.value.column == "custo_item"
    assert excinfo.value.value == "doze"


def test_row_to_channel_defaults():
    channel = row_to_channel(ImportRow(number=2, values={"produto_id": 1, "canal": "Shopify", "preco": 10}))
    assert channel == {
        "name": "Shopify",
        "active": True,
        "price": "10",
        "stock": 0,
        "title": "",
        "description": "",
        "categories": [],
        "keywords": [],
        "amazon": {"asin": "", "category": ""},
        "mercadolivre": {"id": "", "category": ""},
        "shopify": {"handle": ""},
        "magento": {"sku": ""},
    }
