from decimal import Decimal

import pytest

from catalog_app.models import Product
from catalog_app.services.reconciler import ImportReconciler
from catalog_app.services.spreadsheets import decode_rows, export_products
from catalog_app.store import ProductStore
from core.enums import ConflictAction, ConflictType
from core.schemas import ImportRow


@pytest.fixture()
def reconciler():
    return ImportReconciler(ProductStore(), match_by_name=True, match_by_supplier_code=False)


def rows(*values):
    return [ImportRow(number=index + 2, values=dict(row)) for index, row in enumerate(values)]


@pytest.mark.django_db
def test_missing_name_or_sku_is_reported_with_sheet_row_number(reconciler, user):
    result = reconciler.import_products(
        rows({"nome": "Produto A", "sku": "SKU-A"}, {"nome": "", "sku": None}),
        user.pk,
    )

    assert result.new_products == 1
    assert result.total_processed == 1
    assert len(result.errors) == 1
    issue = result.errors[0]
    assert issue.row == 3
    assert issue.field == "nome/sku"
    assert issue.value == {"nome": "", "sku": None}
    assert Product.objects.filter(user=user).count() == 1


@pytest.mark.django_db
def test_sku_collision_is_a_conflict_and_nothing_is_written(reconciler, user, product_factory):
    existing = product_factory(name="Original", sku="SKU-1", cost_item=Decimal("5.00"))

    result = reconciler.import_products(rows({"nome": "Renamed", "sku": "SKU-1", "custo_item": "9.99"}), user.pk)

    assert result.total_processed == 0
    assert result.new_products == 0
    assert len(result.conflicts) == 1
    conflict = result.conflicts[0]
    assert conflict.conflict_type is ConflictType.SKU
    assert conflict.to_dict() == {
        "row": 2,
        "type": "sku",
        "existing": {"id": existing.pk, "name": "Original", "sku": "SKU-1"},
        "new": {"name": "Renamed", "sku": "SKU-1"},
    }
    existing.refresh_from_db()
    assert existing.cost_item == Decimal("5.00")


@pytest.mark.django_db
def test_name_collision_depends_on_configuration(user, product_factory):
    product_factory(name="Martelo", sku="OLD-1")
    sheet = rows({"nome": "Martelo", "sku": "NEW-1"})

    strict = ImportReconciler(match_by_name=True).import_products(sheet, user.pk, dry_run=True)
    assert [conflict.conflict_type for conflict in strict.conflicts] == [ConflictType.NAME]

    relaxed = ImportReconciler(match_by_name=False).import_products(sheet, user.pk)
    assert relaxed.conflicts == []
    assert relaxed.new_products == 1


@pytest.mark.django_db
def test_supplier_code_match_when_enabled(user, product_factory):
    product_factory(name="Serra", sku="S-1", supplier_code="FORN-9")
    sheet = rows({"nome": "Serra circular", "sku": "S-2", "codigo_fornecedor": "FORN-9"})

    result = ImportReconciler(match_by_supplier_code=True).import_products(sheet, user.pk)
    assert [conflict.conflict_type for conflict in result.conflicts] == [ConflictType.SUPPLIER_CODE]

    result = ImportReconciler(match_by_supplier_code=False).import_products(sheet, user.pk)
    assert result.new_products == 1


@pytest.mark.django_db
def test_other_users_products_never_collide(reconciler, user, other_user, product_factory):
    product_factory(owner=other_user, name="Shared", sku="SKU-X")

    result = reconciler.import_products(rows({"nome": "Shared", "sku": "SKU-X"}), user.pk)

    assert result.conflicts == []
    assert result.new_products == 1


@pytest.mark.django_db
def test_auto_update_overwrites_the_matched_product(reconciler, user, product_factory):
    existing = product_factory(name="Original", sku="SKU-1", cost_item=Decimal("5.00"))

    result = reconciler.import_products(
        rows({"nome": "Renamed", "sku": "SKU-1", "custo_item": "9.99", "marca": "Acme"}),
        user.pk,
        auto_update=True,
    )

    assert result.updated_products == 1
    assert result.total_processed == 1
    assert result.conflicts == []
    existing.refresh_from_db()
    assert existing.name == "Renamed"
    assert existing.cost_item == Decimal("9.99")
    assert existing.brand == "Acme"
    assert Product.objects.filter(user=user).count() == 1


@pytest.mark.django_db
def test_duplicate_rows_in_one_file_collide_with_each_other(reconciler, user):
    result = reconciler.import_products(
        rows({"nome": "A", "sku": "DUP"}, {"nome": "B", "sku": "DUP"}),
        user.pk,
    )

    assert result.new_products == 1
    assert [conflict.row for conflict in result.conflicts] == [3]


@pytest.mark.django_db
def test_decisions_resolve_conflicts_per_row(reconciler, user, product_factory):
    first = product_factory(name="First", sku="SKU-1")
    second = product_factory(name="Second", sku="SKU-2")
    product_factory(name="Third", sku="SKU-3")

    result = reconciler.import_products(
        rows(
            {"nome": "First v2", "sku": "SKU-1"},
            {"nome": "Second copy", "sku": "SKU-2"},
            {"nome": "Third v2", "sku": "SKU-3"},
            {"nome": "Fourth", "sku": "SKU-4"},
        ),
        user.pk,
        decisions={
            2: ConflictAction.UPDATE,
            3: ConflictAction.CREATE_NEW,
            4: ConflictAction.SKIP,
        },
    )

    assert result.updated_products == 1
    assert result.new_products == 2
    assert result.skipped == 1
    assert result.total_processed == 3
    assert result.conflicts == []

    first.refresh_from_db()
    assert first.name == "First v2"
    second.refresh_from_db()
    assert second.name == "Second"
    assert Product.objects.filter(user=user, sku="SKU-2").count() == 2
    assert Product.objects.filter(user=user, name="Third v2").exists() is False
    assert Product.objects.filter(user=user, sku="SKU-4").exists()


@pytest.mark.django_db
def test_dry_run_counts_without_writing(reconciler, user, product_factory):
    product_factory(name="Existing", sku="SKU-1")

    result = reconciler.import_products(
        rows({"nome": "Existing", "sku": "SKU-1"}, {"nome": "New", "sku": "SKU-2"}),
        user.pk,
        auto_update=True,
        dry_run=True,
    )

    assert result.dry_run is True
    assert result.updated_products == 1
    assert result.new_products == 1
    assert Product.objects.filter(user=user).count() == 1
    assert Product.objects.get(user=user).name == "Existing"


@pytest.mark.django_db
def test_store_failure_on_one_row_does_not_abort_the_batch(mocker, user):
    store = ProductStore()
    created = Product(id=99, name="B", sku="SKU-B")
    mocker.patch.object(store, "create_product", side_effect=[RuntimeError("database is locked"), created])
    reconciler = ImportReconciler(store)

    result = reconciler.import_products(rows({"nome": "A", "sku": "SKU-A"}, {"nome": "B", "sku": "SKU-B"}), user.pk)

    assert result.new_products == 1
    assert len(result.errors) == 1
    issue = result.errors[0]
    assert issue.row == 2
    assert issue.field == "general"
    assert issue.message == "database is locked"
    assert issue.value == {"nome": "A", "sku": "SKU-A"}


@pytest.mark.django_db
def test_malformed_cell_is_reported_against_its_column(reconciler, user):
    result = reconciler.import_products(
        rows({"nome": "A", "sku": "SKU-A", "custo_item": "caro"}, {"nome": "B", "sku": "SKU-B"}),
        user.pk,
    )

    assert result.new_products == 1
    assert [(issue.row, issue.field, issue.value) for issue in result.errors] == [(2, "custo_item", "caro")]


@pytest.mark.django_db
def test_exported_catalog_imports_into_an_empty_catalog(reconciler, user, other_user, product_factory):
    product_factory(
        name="Furadeira",
        sku="FUR-1",
        ean="7891234567890",
        brand="Bosch",
        cost_item=Decimal("199.90"),
        dimensions={"length": 30, "width": 10, "height": 8},
        bullet_points=["Potente", "Leve"],
    )
    product_factory(name="Martelo", sku="MAR-1", active=False)

    content = export_products(ProductStore().get_products(user.pk))

    result = reconciler.import_products(decode_rows(content), other_user.pk)
    assert result.new_products == 2
    assert result.errors == []
    assert result.conflicts == []

    imported = {product.sku: product for product in Product.objects.filter(user=other_user)}
    assert imported["FUR-1"].ean == "7891234567890"
    assert imported["FUR-1"].cost_item == Decimal("199.90")
    assert imported["FUR-1"].dimensions == {"length": 30, "width": 10, "height": 8}
    assert imported["FUR-1"].bullet_points == ["Potente", "Leve"]
    assert imported["MAR-1"].active is False

    again = reconciler.import_products(decode_rows(content), user.pk)
    assert len(again.conflicts) == 2
    assert {conflict.conflict_type for conflict in again.conflicts} == {ConflictType.SKU}


@pytest.mark.django_db
def test_channel_import_replaces_channels_of_owned_products(reconciler, user, product_factory):
    product = product_factory(channels=[{"name": "Old", "price": "1.00"}])

    result = reconciler.import_channels(
        rows(
            {"produto_id": product.pk, "canal": "Amazon", "preco": "39.90", "estoque": 3},
            {"produto_id": product.pk, "canal": "Shopify", "preco": 42, "categorias": "Casa > Cozinha"},
        ),
        user.pk,
    )

    assert result.updated_products == 1
    assert result.total_processed == 1
    assert result.errors == []
    product.refresh_from_db()
    assert [channel["name"] for channel in product.channels] == ["Amazon", "Shopify"]
    assert product.channels[0]["price"] == "39.90"
    assert product.channels[0]["stock"] == 3
    assert product.channels[1]["categories"] == ["Casa", "Cozinha"]


@pytest.mark.django_db
def test_channel_import_rejects_foreign_and_unknown_products(reconciler, user, other_user, product_factory):
    foreign = product_factory(owner=other_user, channels=[])

    result = reconciler.import_channels(
        rows(
            {"produto_id": foreign.pk, "canal": "Amazon", "preco": "10"},
            {"produto_id": foreign.pk, "canal": "Shopify", "preco": "11"},
            {"produto_id": 987654, "canal": "Amazon", "preco": "12"},
        ),
        user.pk,
    )

    assert result.updated_products == 0
    assert [(issue.row, issue.field) for issue in result.errors] == [(2, "produto_id"), (4, "produto_id")]
    foreign.refresh_from_db()
    assert foreign.channels == []


@pytest.mark.django_db
def test_channel_group_with_an_invalid_row_is_not_written(reconciler, user, product_factory):
    product = product_factory(channels=[{"name": "Keep", "price": "1.00"}])
    other = product_factory(channels=[])

    result = reconciler.import_channels(
        rows(
            {"produto_id": product.pk, "canal": "Amazon", "preco": "10"},
            {"produto_id": product.pk, "canal": None, "preco": "10"},
            {"produto_id": other.pk, "canal": "Magento", "preco": "5", "magento_sku": "MG-1"},
            {"produto_id": None, "canal": "Orphan", "preco": "1"},
            {"produto_id": other.pk, "produto_nome": other.name, "ativo": False},
        ),
        user.pk,
    )

    assert result.updated_products == 1
    assert [(issue.row, issue.field) for issue in result.errors] == [(3, "canal/preco")]
    product.refresh_from_db()
    assert product.channels == [{"name": "Keep", "price": "1.00"}]
    other.refresh_from_db()
    assert [channel["magento"] for channel in other.channels] == [{"sku": "MG-1"}]


@pytest.mark.django_db
def test_channel_dry_run_leaves_products_untouched(reconciler, user, product_factory):
    product = product_factory(channels=[])

    result = reconciler.import_channels(rows({"produto_id": product.pk, "canal": "Amazon", "preco": "1"}), user.pk, dry_run=True)

    assert result.updated_products == 1
    product.refresh_from_db()
    assert product.channels == []


def counts(result):
    return result.new_products, result.updated_products, [conflict.row for conflict in result.conflicts]


@pytest.mark.django_db
def test_dry_run_classifies_in_file_duplicates_like_a_commit(reconciler, user, product_factory):
    product_factory(name="Existing", sku="SKU-1")
    sheet = rows(
        {"nome": "A", "sku": "DUP"},
        {"nome": "A2", "sku": "DUP"},
        {"nome": "Renamed", "sku": "SKU-1"},
        {"nome": "Renamed", "sku": "SKU-9"},
    )

    preview = reconciler.import_products(sheet, user.pk, dry_run=True)
    assert Product.objects.filter(user=user).count() == 1

    committed = reconciler.import_products(sheet, user.pk)

    assert counts(preview) == counts(committed) == (2, 0, [3, 4])


@pytest.mark.django_db
def test_dry_run_auto_update_tracks_renamed_products(reconciler, user, product_factory):
    product_factory(name="Existing", sku="SKU-1")
    sheet = rows({"nome": "Renamed", "sku": "SKU-1"}, {"nome": "Existing", "sku": "SKU-2"}, {"nome": "Renamed", "sku": "SKU-3"})

    preview = reconciler.import_products(sheet, user.pk, auto_update=True, dry_run=True)
    committed = reconciler.import_products(sheet, user.pk, auto_update=True)

    assert counts(preview) == counts(committed) == (1, 2, [])


@pytest.mark.django_db
def test_exported_catalog_reimports_into_the_same_user_as_updates(reconciler, user, product_factory):
    product_factory(name="Furadeira", sku="FUR-1", cost_item=Decimal("199.90"), bullet_points=["Potente"])
    product_factory(name="Martelo", sku="MAR-1", active=False)
    product_factory(name="Serra", sku="SER-1", supplier_code="FORN-1")

    content = export_products(ProductStore().get_products(user.pk))
    result = reconciler.import_products(decode_rows(content), user.pk, auto_update=True)

    assert result.new_products == 0
    assert result.updated_products == 3
    assert result.errors == []
    assert result.conflicts == []
    assert Product.objects.filter(user=user).count() == 3
    assert Product.objects.get(user=user, sku="MAR-1").active is False
