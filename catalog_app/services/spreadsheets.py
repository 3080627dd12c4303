"""Excel codec for product and sales-channel sheets.

Column names are the business labels the back-office team works with
(Portuguese), mapped one-to-one onto ``Product`` attributes. Composite values
are flattened on export and re-assembled on import:

* ``dimensions`` -> ``dimensoes_comprimento/largura/altura``
* ``bullet_points`` -> one cell joined with ``;``
* channel ``categories`` -> ``A > B`` path, ``keywords`` -> comma separated
"""

import io
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from core.enums import ImportType
from core.exceptions import SpreadsheetDecodeError
from core.schemas import ImportRow

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

BULLET_SEPARATOR = ";"
CATEGORY_SEPARATOR = ">"
KEYWORD_SEPARATOR = ","

_FALSE_VALUES = frozenset({"false", "falso", "0", "no", "n", "nao", "não", "inativo"})


class CellValueError(ValueError):
    """A cell holds a value that cannot be converted to the column type."""

    def __init__(self, column: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.column = column
        self.value = value


@dataclass(frozen=True)
class SpreadsheetTemplate:
    import_type: ImportType
    sheet_name: str
    headers: Tuple[str, ...]
    sample_rows: Tuple[Mapping[str, Any], ...]
    required: Tuple[str, ...]
    template_filename: str
    export_filename: str


PRODUCT_TEMPLATE = SpreadsheetTemplate(
    import_type=ImportType.PRODUCTS,
    sheet_name="Produtos",
    headers=(
        "nome",
        "sku",
        "codigo_fornecedor",
        "codigo_interno",
        "ean",
        "marca",
        "categoria",
        "fornecedor_id",
        "ncm",
        "dimensoes_comprimento",
        "dimensoes_largura",
        "dimensoes_altura",
        "peso",
        "custo_item",
        "custo_embalagem",
        "percentual_imposto",
        "observacoes",
        "bullet_points",
        "descricao",
        "ativo",
    ),
    sample_rows=(
        {
            "nome": "Produto Exemplo 1",
            "sku": "SKU001",
            "codigo_fornecedor": "FORN001",
            "codigo_interno": "INT001",
            "ean": "7891234567890",
            "marca": "Marca Exemplo",
            "categoria": "Eletrônicos",
            "fornecedor_id": 1,
            "ncm": "85176220",
            "dimensoes_comprimento": 10,
            "dimensoes_largura": 8,
            "dimensoes_altura": 5,
            "peso": "0.5",
            "custo_item": "25.90",
            "custo_embalagem": "2.50",
            "percentual_imposto": "18",
            "observacoes": "Produto em promoção",
            "bullet_points": "Alta qualidade;Garantia 1 ano;Envio rápido",
            "descricao": "Descrição detalhada do produto exemplo",
            "ativo": True,
        },
        {
            "nome": "Produto Exemplo 2",
            "sku": "SKU002",
            "codigo_fornecedor": "FORN002",
            "codigo_interno": "INT002",
            "ean": "7891234567891",
            "marca": "Outra Marca",
            "categoria": "Casa e Jardim",
            "fornecedor_id": 2,
            "ncm": "94032900",
            "dimensoes_comprimento": 15,
            "dimensoes_largura": 12,
            "dimensoes_altura": 8,
            "peso": "1.2",
            "custo_item": "45.00",
            "custo_embalagem": "5.00",
            "percentual_imposto": "12",
            "observacoes": "Produto sazonal",
            "bullet_points": "Resistente;Fácil instalação;Design moderno",
            "descricao": "Descrição completa do segundo produto",
            "ativo": True,
        },
    ),
    required=("nome", "sku"),
    template_filename="template_produtos.xlsx",
    export_filename="meus_produtos.xlsx",
)

CHANNEL_TEMPLATE = SpreadsheetTemplate(
    import_type=ImportType.CHANNELS,
    sheet_name="Canais de Venda",
    headers=(
        "produto_id",
        "produto_nome",
        "canal",
        "ativo",
        "preco",
        "estoque",
        "titulo",
        "descricao",
        "categorias",
        "palavras_chave",
        "amazon_asin",
        "amazon_categoria",
        "mercadolivre_id",
        "mercadolivre_categoria",
        "shopify_handle",
        "magento_sku",
    ),
    sample_rows=(
        {
            "produto_id": 1,
            "produto_nome": "Produto Exemplo 1",
            "canal": "Amazon",
            "ativo": True,
            "preco": "39.90",
            "estoque": 100,
            "titulo": "Produto Exemplo Premium - Alta Qualidade",
            "descricao": "Descrição otimizada para Amazon com palavras-chave",
            "categorias": "Eletrônicos > Acessórios",
            "palavras_chave": "produto,exemplo,qualidade,premium",
            "amazon_asin": "B08EXAMPLE",
            "amazon_categoria": "Electronics",
        },
        {
            "produto_id": 1,
            "produto_nome": "Produto Exemplo 1",
            "canal": "Mercado Livre",
            "ativo": True,
            "preco": "42.90",
            "estoque": 80,
            "titulo": "Produto Exemplo - Melhor Preço",
            "descricao": "Descrição adaptada para Mercado Livre",
            "categorias": "Eletrônicos e Áudio > Acessórios",
            "palavras_chave": "produto,exemplo,barato,promoção",
            "mercadolivre_id": "MLB123456789",
            "mercadolivre_categoria": "Eletrônicos",
        },
    ),
    required=("produto_id", "canal", "preco"),
    template_filename="template_canais_venda.xlsx",
    export_filename="meus_canais_venda.xlsx",
)

INSTRUCTIONS_SHEET = "Instruções"

PRODUCT_INSTRUCTIONS = (
    ("nome", "Sim", "Texto", "Nome do produto (máx. 255 caracteres)"),
    ("sku", "Sim", "Texto", "SKU único do produto (máx. 100 caracteres)"),
    ("codigo_fornecedor", "Não", "Texto", "Código do produto no fornecedor"),
    ("codigo_interno", "Não", "Texto", "Código interno da empresa"),
    ("ean", "Não", "Texto", "Código de barras EAN/GTIN"),
    ("marca", "Não", "Texto", "Marca do produto"),
    ("categoria", "Não", "Texto", "Categoria do produto"),
    ("fornecedor_id", "Não", "Número inteiro", "ID do fornecedor cadastrado"),
    ("ncm", "Não", "Texto", "Classificação fiscal NCM"),
    ("dimensoes_comprimento", "Não", "Número", "Comprimento em cm"),
    ("dimensoes_largura", "Não", "Número", "Largura em cm"),
    ("dimensoes_altura", "Não", "Número", "Altura em cm"),
    ("peso", "Não", "Número", "Peso em kg"),
    ("custo_item", "Não", "Número", "Custo do item (ex: 25.90)"),
    ("custo_embalagem", "Não", "Número", "Custo da embalagem (ex: 2.50)"),
    ("percentual_imposto", "Não", "Número", "Percentual de imposto (ex: 18)"),
    ("observacoes", "Não", "Texto", "Observações internas"),
    ("bullet_points", "Não", "Texto", "Tópicos separados por ponto e vírgula (;)"),
    ("descricao", "Não", "Texto", "Descrição completa do produto"),
    ("ativo", "Não", "Verdadeiro/Falso", "Se o produto está ativo (true/false)"),
)

_TEMPLATES = {
    ImportType.PRODUCTS: PRODUCT_TEMPLATE,
    ImportType.CHANNELS: CHANNEL_TEMPLATE,
}


def get_template(import_type: ImportType) -> SpreadsheetTemplate:
    return _TEMPLATES[import_type]


# -- cell helpers ---------------------------------------------------------


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        # Long codes such as EANs come back from Excel as floats.
        return str(int(value))
    return str(value).strip()


def _decimal_text(row: ImportRow, column: str) -> str:
    value = row.get(column)
    if _is_blank(value):
        return "0"
    try:
        number = Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        raise CellValueError(column, value, f"Valor numérico inválido em '{column}'")
    if not number.is_finite():
        raise CellValueError(column, value, f"Valor numérico inválido em '{column}'")
    return str(number)


def _number(row: ImportRow, column: str) -> Any:
    value = row.get(column)
    if _is_blank(value):
        return 0
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        raise CellValueError(column, value, f"Valor numérico inválido em '{column}'")
    return int(number) if number.is_integer() else number


def _integer(row: ImportRow, column: str) -> Optional[int]:
    value = row.get(column)
    if _is_blank(value):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        raise CellValueError(column, value, f"Número inteiro inválido em '{column}'")
    if not number.is_integer():
        raise CellValueError(column, value, f"Número inteiro inválido em '{column}'")
    return int(number)


def _flag(value: Any) -> bool:
    """Anything but an explicit false-like value counts as active."""
    if _is_blank(value):
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in _FALSE_VALUES


def _split(value: Any, separator: str) -> List[str]:
    text = _text(value)
    if not text:
        return []
    return [part.strip() for part in text.split(separator) if part.strip()]


def _plain(value: Any) -> Any:
    """Cell-friendly representation of a stored value."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return str(value)
    return value


# -- import mapping ---------------------------------------------------------


def row_to_product(row: ImportRow, user_id: int) -> Dict[str, Any]:
    dimensions = None
    if not _is_blank(row.get("dimensoes_comprimento")):
        dimensions = {
            "length": _number(row, "dimensoes_comprimento"),
            "width": _number(row, "dimensoes_largura"),
            "height": _number(row, "dimensoes_altura"),
        }

    return {
        "user_id": user_id,
        "name": _text(row.get("nome")),
        "sku": _text(row.get("sku")) or "",
        "supplier_code": _text(row.get("codigo_fornecedor")),
        "internal_code": _text(row.get("codigo_interno")),
        "ean": _text(row.get("ean")),
        "brand": _text(row.get("marca")),
        "category": _text(row.get("categoria")),
        "supplier_id": _integer(row, "fornecedor_id"),
        "ncm": _text(row.get("ncm")),
        "dimensions": dimensions,
        "weight": _decimal_text(row, "peso"),
        "cost_item": _decimal_text(row, "custo_item"),
        "pack_cost": _decimal_text(row, "custo_embalagem"),
        "tax_percent": _decimal_text(row, "percentual_imposto"),
        "observations": _text(row.get("observacoes")),
        "bullet_points": _split(row.get("bullet_points"), BULLET_SEPARATOR),
        "description": _text(row.get("descricao")),
        "active": _flag(row.get("ativo")),
    }


def row_to_channel(row: ImportRow) -> Dict[str, Any]:
    return {
        "name": _text(row.get("canal")),
        "active": _flag(row.get("ativo")),
        "price": _decimal_text(row, "preco"),
        "stock": _integer(row, "estoque") or 0,
        "title": _text(row.get("titulo")) or "",
        "description": _text(row.get("descricao")) or "",
        "categories": _split(row.get("categorias"), CATEGORY_SEPARATOR),
        "keywords": _split(row.get("palavras_chave"), KEYWORD_SEPARATOR),
        "amazon": {
            "asin": _text(row.get("amazon_asin")) or "",
            "category": _text(row.get("amazon_categoria")) or "",
        },
        "mercadolivre": {
            "id": _text(row.get("mercadolivre_id")) or "",
            "category": _text(row.get("mercadolivre_categoria")) or "",
        },
        "shopify": {"handle": _text(row.get("shopify_handle")) or ""},
        "magento": {"sku": _text(row.get("magento_sku")) or ""},
    }


_CHANNEL_CONTENT_COLUMNS = tuple(
    column for column in CHANNEL_TEMPLATE.headers if column not in {"produto_id", "produto_nome", "ativo"}
)


def is_channel_placeholder(row: ImportRow) -> bool:
    """Export rows written for products that have no channel configured."""
    return all(_is_blank(row.get(column)) for column in _CHANNEL_CONTENT_COLUMNS)


# -- export mapping ---------------------------------------------------------


def product_to_row(product: Any) -> Dict[str, Any]:
    dimensions = product.dimensions or {}
    bullet_points = product.bullet_points if isinstance(product.bullet_points, list) else []
    return {
        "nome": product.name,
        "sku": product.sku or None,
        "codigo_fornecedor": product.supplier_code,
        "codigo_interno": product.internal_code,
        "ean": product.ean,
        "marca": product.brand,
        "categoria": product.category,
        "fornecedor_id": product.supplier_id,
        "ncm": product.ncm,
        "dimensoes_comprimento": dimensions.get("length"),
        "dimensoes_largura": dimensions.get("width"),
        "dimensoes_altura": dimensions.get("height"),
        "peso": _plain(product.weight),
        "custo_item": _plain(product.cost_item),
        "custo_embalagem": _plain(product.pack_cost),
        "percentual_imposto": _plain(product.tax_percent),
        "observacoes": product.observations,
        "bullet_points": BULLET_SEPARATOR.join(bullet_points) or None,
        "descricao": product.description,
        "ativo": bool(product.active),
    }


def product_channel_rows(product: Any) -> List[Dict[str, Any]]:
    channels = product.channels if isinstance(product.channels, list) else []
    if not channels:
        return [{"produto_id": product.id, "produto_nome": product.name, "ativo": False}]

    rows = []
    for channel in channels:
        amazon = channel.get("amazon") or {}
        mercadolivre = channel.get("mercadolivre") or {}
        rows.append(
            {
                "produto_id": product.id,
                "produto_nome": product.name,
                "canal": channel.get("name") or None,
                "ativo": bool(channel.get("active")),
                "preco": _plain(channel.get("price")),
                "estoque": channel.get("stock"),
                "titulo": channel.get("title") or None,
                "descricao": channel.get("description") or None,
                "categorias": f" {CATEGORY_SEPARATOR} ".join(channel.get("categories") or []) or None,
                "palavras_chave": KEYWORD_SEPARATOR.join(channel.get("keywords") or []) or None,
                "amazon_asin": amazon.get("asin") or None,
                "amazon_categoria": amazon.get("category") or None,
                "mercadolivre_id": mercadolivre.get("id") or None,
                "mercadolivre_categoria": mercadolivre.get("category") or None,
                "shopify_handle": (channel.get("shopify") or {}).get("handle") or None,
                "magento_sku": (channel.get("magento") or {}).get("sku") or None,
            }
        )
    return rows


def _frame(rows: Iterable[Mapping[str, Any]], headers: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame([dict(row) for row in rows], columns=list(headers))


def _write_workbook(sheets: Sequence[Tuple[str, pd.DataFrame]]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet_name, frame in sheets:
            frame.to_excel(writer, sheet_name=sheet_name, index=False)
    return buffer.getvalue()


def export_products(products: Iterable[Any], include_data: bool = True) -> bytes:
    template = PRODUCT_TEMPLATE
    rows = [product_to_row(product) for product in products] if include_data else template.sample_rows
    instructions = pd.DataFrame(
        list(PRODUCT_INSTRUCTIONS),
        columns=["Campo", "Obrigatório", "Tipo", "Descrição"],
    )
    return _write_workbook(
        [
            (template.sheet_name, _frame(rows, template.headers)),
            (INSTRUCTIONS_SHEET, instructions),
        ]
    )


def export_channels(products: Iterable[Any], include_data: bool = True) -> bytes:
    template = CHANNEL_TEMPLATE
    if include_data:
        rows = [row for product in products for row in product_channel_rows(product)]
    else:
        rows = list(template.sample_rows)
    return _write_workbook([(template.sheet_name, _frame(rows, template.headers))])


def export_workbook(import_type: ImportType, products: Iterable[Any], include_data: bool = True) -> bytes:
    if import_type is ImportType.PRODUCTS:
        return export_products(products, include_data)
    return export_channels(products, include_data)


# -- decoding ---------------------------------------------------------------


def decode_rows(content: bytes) -> List[ImportRow]:
    """Read the first sheet into numbered rows; fully blank rows are dropped."""
    try:
        frame = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object)
    except Exception as exc:
        raise SpreadsheetDecodeError(f"Não foi possível ler a planilha: {exc}") from exc

    frame.columns = [str(column).strip() for column in frame.columns]
    frame = frame.astype(object).where(pd.notna(frame), None)

    rows: List[ImportRow] = []
    for position, record in enumerate(frame.to_dict(orient="records")):
        if all(_is_blank(value) for value in record.values()):
            continue
        rows.append(ImportRow(number=position + 2, values=record))
    return rows
