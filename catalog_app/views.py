import io
import logging

from django.conf import settings
from django.http import FileResponse
from django_filters.rest_framework import DjangoFilterBackend
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, permissions, status
from rest_framework.exceptions import NotFound, ParseError, PermissionDenied, ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from core.enums import ImportType
from core.exceptions import ProductNotFoundError, ProductOwnershipError, SpreadsheetDecodeError
from core.schemas import ImportResult, ProductFilters

from .filters import ProductFilter
from .models import Product
from .pagination import with_links
from .serializers import (
    BulkUpdateSerializer,
    ImportConfirmSerializer,
    ImportUploadSerializer,
    ListingQuerySerializer,
    ProductSerializer,
    ReplaceChannelsSerializer,
    SearchQuerySerializer,
)
from .services.listing import CachedResult, CatalogListingService
from .services.reconciler import ImportReconciler
from .services.spreadsheets import XLSX_CONTENT_TYPE, decode_rows, export_workbook, get_template
from .store import ProductStore

logger = logging.getLogger(__name__)

CACHE_HIT_HEADER = "X-Cache-Hit"


class CatalogAPIView(generics.GenericAPIView):
    """Shared plumbing: store/service access and domain error mapping."""

    serializer_class = ProductSerializer
    pagination_class = None

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Product.objects.none()
        return Product.objects.filter(user_id=self.request.user.id)

    @property
    def store(self) -> ProductStore:
        return ProductStore()

    @property
    def listing(self) -> CatalogListingService:
        return CatalogListingService(store=self.store)

    def handle_exception(self, exc):
        if isinstance(exc, ProductOwnershipError):
            exc = PermissionDenied(str(exc))
        elif isinstance(exc, ProductNotFoundError):
            exc = NotFound(str(exc))
        elif isinstance(exc, SpreadsheetDecodeError):
            exc = ParseError(str(exc))
        return super().handle_exception(exc)

    def cached_response(self, result: CachedResult, payload) -> Response:
        response = Response(payload)
        response[CACHE_HIT_HEADER] = "true" if result.cache_hit else "false"
        return response


class ProductListCreateView(CatalogAPIView):
    """
    Cached product listing of the authenticated user.

    Filtering:
    - Search: /?search=query (name, sku, brand)
    - Exact match: /?brand=..&category=..&supplier_id=..&active=true
    - Photo presence: /?has_photo=false
    - Cost range: /?min_cost=10&max_cost=50

    Sorting:
    - /?sort_by=cost_item&sort_order=desc
    Available fields: name, created_at, updated_at, cost_item

    Pagination:
    - /?page=2&limit=50 (limit between 10 and 100)
    """

    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    @swagger_auto_schema(
        operation_summary="List products",
        operation_description="Filtered, sorted and paginated listing served from the result cache when possible.",
        tags=["Products"],
        query_serializer=ListingQuerySerializer,
        responses={200: ProductSerializer(many=True)},
    )
    def get(self, request, *args, **kwargs):
        page_serializer = ListingQuerySerializer(data=request.query_params)
        page_serializer.is_valid(raise_exception=True)

        filterset = ProductFilter(request.query_params, queryset=self.get_queryset())
        if not filterset.is_valid():
            raise ValidationError(filterset.errors)

        filters = ProductFilters.from_mapping(filterset.form.cleaned_data)
        result = self.listing.list_products(request.user.id, filters, page_serializer.to_page_request())
        payload = {
            **result.value,
            "pagination": with_links(request, result.value["pagination"]),
            "performance": result.performance(),
        }
        return self.cached_response(result, payload)

    @swagger_auto_schema(
        operation_summary="Create product",
        operation_description="Create a product owned by the authenticated user.",
        tags=["Products"],
        request_body=ProductSerializer,
        responses={201: ProductSerializer},
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = self.store.create_product({**serializer.validated_data, "user_id": request.user.id})
        self.listing.invalidate(request.user.id)
        logger.info("Product %s created by user=%s", product.pk, request.user.id)
        return Response(self.get_serializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(CatalogAPIView):
    def _save(self, request, pk, partial):
        product = self.store.get_owned_product(pk, request.user.id)
        serializer = self.get_serializer(product, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        product = self.store.update_product(product.pk, serializer.validated_data)
        self.listing.invalidate(request.user.id)
        return Response(self.get_serializer(product).data)

    @swagger_auto_schema(
        operation_summary="Retrieve product",
        tags=["Products"],
        responses={200: ProductSerializer, 403: "Owned by another user", 404: "Not found"},
    )
    def get(self, request, pk, *args, **kwargs):
        product = self.store.get_owned_product(pk, request.user.id)
        return Response(self.get_serializer(product).data)

    @swagger_auto_schema(
        operation_summary="Replace product",
        tags=["Products"],
        request_body=ProductSerializer,
        responses={200: ProductSerializer},
    )
    def put(self, request, pk, *args, **kwargs):
        return self._save(request, pk, partial=False)

    @swagger_auto_schema(
        operation_summary="Update product fields",
        tags=["Products"],
        request_body=ProductSerializer,
        responses={200: ProductSerializer},
    )
    def patch(self, request, pk, *args, **kwargs):
        return self._save(request, pk, partial=True)

    @swagger_auto_schema(operation_summary="Delete product", tags=["Products"], responses={204: "Deleted"})
    def delete(self, request, pk, *args, **kwargs):
        product = self.store.get_owned_product(pk, request.user.id)
        self.store.delete_product(product.pk)
        self.listing.invalidate(request.user.id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductChannelsView(CatalogAPIView):
    serializer_class = ReplaceChannelsSerializer

    @swagger_auto_schema(
        operation_summary="Replace sales channels",
        operation_description="Overwrite the whole channel list of a product.",
        tags=["Products"],
        request_body=ReplaceChannelsSerializer,
        responses={200: ProductSerializer},
    )
    def put(self, request, pk, *args, **kwargs):
        product = self.store.get_owned_product(pk, request.user.id)
        serializer = ReplaceChannelsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = self.store.replace_channels(product.pk, serializer.validated_data["channels"])
        self.listing.invalidate(request.user.id)
        return Response(ProductSerializer(product).data)


class ProductBulkUpdateView(CatalogAPIView):
    serializer_class = BulkUpdateSerializer

    @swagger_auto_schema(
        operation_summary="Bulk update products",
        operation_description="Apply several partial updates at once; a foreign id rejects the whole batch.",
        tags=["Products"],
        request_body=BulkUpdateSerializer,
        responses={200: ProductSerializer(many=True), 403: "Batch contains foreign products"},
    )
    def post(self, request, *args, **kwargs):
        serializer = BulkUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = self.store.bulk_update(request.user.id, serializer.validated_data["updates"])
        self.listing.invalidate(request.user.id)
        return Response({"updated": len(updated), "results": ProductSerializer(updated, many=True).data})


class ProductSummaryView(CatalogAPIView):
    @swagger_auto_schema(
        operation_summary="Catalog summary",
        operation_description="Counters over the whole catalog of the user.",
        tags=["Catalog insights"],
        responses={200: "Summary counters"},
    )
    def get(self, request, *args, **kwargs):
        result = self.listing.summary(request.user.id)
        return self.cached_response(result, {"summary": result.value, "performance": result.performance()})


class ProductFilterOptionsView(CatalogAPIView):
    @swagger_auto_schema(
        operation_summary="Filter options",
        operation_description="Distinct brands, categories and supplier ids for filter dropdowns.",
        tags=["Catalog insights"],
        responses={200: "Filter options"},
    )
    def get(self, request, *args, **kwargs):
        result = self.listing.filter_options(request.user.id)
        return self.cached_response(result, {**result.value, "performance": result.performance()})


class ProductSearchView(CatalogAPIView):
    @swagger_auto_schema(
        operation_summary="Quick search",
        operation_description="Substring search over name, SKU, brand and description.",
        tags=["Catalog insights"],
        query_serializer=SearchQuerySerializer,
        responses={200: ProductSerializer(many=True)},
    )
    def get(self, request, *args, **kwargs):
        serializer = SearchQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        query = serializer.validated_data["q"]
        result = self.listing.search(request.user.id, query, serializer.validated_data["limit"])
        return self.cached_response(
            result,
            {"query": query, "results": result.value, "performance": result.performance()},
        )


class ProductCacheView(CatalogAPIView):
    @swagger_auto_schema(operation_summary="Cache statistics", tags=["Catalog insights"], responses={200: "Stats"})
    def get(self, request, *args, **kwargs):
        return Response(self.listing.cache_stats())

    @swagger_auto_schema(operation_summary="Clear own cache entries", tags=["Catalog insights"])
    def delete(self, request, *args, **kwargs):
        self.listing.invalidate(request.user.id)
        return Response({"detail": "Cache cleared."})


class SpreadsheetView(CatalogAPIView):
    def get_import_type(self) -> ImportType:
        try:
            return ImportType.from_string(self.kwargs["import_type"])
        except ValueError as exc:
            raise ValidationError({"import_type": [str(exc)]})

    def workbook_response(self, content: bytes, filename: str) -> FileResponse:
        return FileResponse(
            io.BytesIO(content),
            as_attachment=True,
            filename=filename,
            content_type=XLSX_CONTENT_TYPE,
        )


class ExcelTemplateView(SpreadsheetView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @swagger_auto_schema(
        operation_summary="Download template",
        operation_description="Blank workbook with headers and two example rows.",
        tags=["Spreadsheets"],
        responses={200: "Excel file"},
    )
    def get(self, request, *args, **kwargs):
        import_type = self.get_import_type()
        template = get_template(import_type)
        return self.workbook_response(export_workbook(import_type, [], include_data=False), template.template_filename)


class ExcelExportView(SpreadsheetView):
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    @swagger_auto_schema(
        operation_summary="Export my data",
        operation_description=(
            "Export the authenticated user's products or channels. "
            "Without includeData=true the workbook only carries the example rows. "
            "Accepts the listing filters."
        ),
        tags=["Spreadsheets"],
        manual_parameters=[
            openapi.Parameter(
                name="includeData",
                in_=openapi.IN_QUERY,
                type=openapi.TYPE_BOOLEAN,
                required=False,
                description="Include stored products instead of example rows.",
            ),
        ],
        responses={200: "Excel file"},
    )
    def get(self, request, *args, **kwargs):
        import_type = self.get_import_type()
        include_data = str(request.query_params.get("includeData", "")).lower() in {"true", "1", "yes"}
        products = self.filter_queryset(self.get_queryset()).order_by("id") if include_data else []
        template = get_template(import_type)
        filename = template.export_filename if include_data else template.template_filename
        return self.workbook_response(export_workbook(import_type, products, include_data), filename)


class SpreadsheetImportView(SpreadsheetView):
    parser_classes = [MultiPartParser, FormParser]
    serializer_class = ImportUploadSerializer

    def read_upload(self, request):
        import_type = self.get_import_type()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        rows = decode_rows(serializer.validated_data["file"].read())
        return import_type, rows, serializer.validated_data

    def run_import(self, import_type, rows, *, auto_update=False, decisions=None, dry_run=False) -> ImportResult:
        reconciler = ImportReconciler(store=self.store)
        user_id = self.request.user.id
        if import_type is ImportType.PRODUCTS:
            result = reconciler.import_products(
                rows, user_id, auto_update=auto_update, decisions=decisions, dry_run=dry_run
            )
        else:
            result = reconciler.import_channels(rows, user_id, dry_run=dry_run)
        if not dry_run:
            self.listing.invalidate(user_id)
        return result

    @staticmethod
    def committed_payload(result: ImportResult):
        return {
            "imported": True,
            "summary": result.commit_summary(),
            "errors": [issue.to_dict() for issue in result.errors],
        }

    @staticmethod
    def pending_payload(result: ImportResult):
        return {
            "summary": result.preview_summary(),
            "conflicts": [conflict.to_dict() for conflict in result.conflicts],
            "errors": [issue.to_dict() for issue in result.errors],
        }


class ExcelImportPreviewView(SpreadsheetImportView):
    @swagger_auto_schema(
        operation_summary="Preview import",
        operation_description=(
            "Classify every row as new, conflicting or invalid. Depending on "
            "CATALOG_IMPORT_PREVIEW_COMMITS rows without conflicts are written right away."
        ),
        tags=["Spreadsheets"],
        request_body=ImportUploadSerializer,
        responses={200: "Preview summary"},
    )
    def post(self, request, *args, **kwargs):
        import_type, rows, _ = self.read_upload(request)
        dry_run = not getattr(settings, "CATALOG_IMPORT_PREVIEW_COMMITS", True)
        result = self.run_import(import_type, rows, dry_run=dry_run)
        return Response({"preview": True, "dry_run": result.dry_run, **self.pending_payload(result)})


class ExcelImportConfirmView(SpreadsheetImportView):
    serializer_class = ImportConfirmSerializer

    @swagger_auto_schema(
        operation_summary="Confirm import",
        operation_description=(
            "Re-submit the workbook with a decision per conflicting row "
            "(skip, update or create_new) as a JSON list in 'decisions'."
        ),
        tags=["Spreadsheets"],
        request_body=ImportConfirmSerializer,
        responses={200: "Import summary"},
    )
    def post(self, request, *args, **kwargs):
        import_type, rows, data = self.read_upload(request)
        result = self.run_import(
            import_type,
            rows,
            auto_update=data["autoUpdate"],
            decisions=data["decisions"],
        )
        payload = self.committed_payload(result)
        payload["conflicts"] = [conflict.to_dict() for conflict in result.conflicts]
        return Response(payload)


class ExcelImportView(SpreadsheetImportView):
    @swagger_auto_schema(
        operation_summary="Import workbook",
        operation_description=(
            "Single-pass import. Conflicting rows are left untouched and reported "
            "with requiresConfirmation unless autoUpdate is true."
        ),
        tags=["Spreadsheets"],
        request_body=ImportUploadSerializer,
        responses={200: "Import summary"},
    )
    def post(self, request, *args, **kwargs):
        import_type, rows, data = self.read_upload(request)
        result = self.run_import(import_type, rows, auto_update=data["autoUpdate"])
        if result.conflicts and not data["autoUpdate"]:
            return Response({"requiresConfirmation": True, **self.pending_payload(result)})
        return Response(self.committed_payload(result))
