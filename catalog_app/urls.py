from django.urls import path

from .views import (
    ExcelExportView,
    ExcelImportConfirmView,
    ExcelImportPreviewView,
    ExcelImportView,
    ExcelTemplateView,
    ProductBulkUpdateView,
    ProductCacheView,
    ProductChannelsView,
    ProductDetailView,
    ProductFilterOptionsView,
    ProductListCreateView,
    ProductSearchView,
    ProductSummaryView,
)

urlpatterns = [
    path("products/", ProductListCreateView.as_view(), name="product-list"),
    path("products/bulk-update/", ProductBulkUpdateView.as_view(), name="product-bulk-update"),
    path("products/summary/", ProductSummaryView.as_view(), name="product-summary"),
    path("products/filter-options/", ProductFilterOptionsView.as_view(), name="product-filter-options"),
    path("products/search/", ProductSearchView.as_view(), name="product-search"),
    path("products/cache/", ProductCacheView.as_view(), name="product-cache"),
    path("products/<int:pk>/", ProductDetailView.as_view(), name="product-detail"),
    path("products/<int:pk>/channels/", ProductChannelsView.as_view(), name="product-channels"),
    path("excel/templates/<str:import_type>/", ExcelTemplateView.as_view(), name="excel-template"),
    path("excel/export/<str:import_type>/", ExcelExportView.as_view(), name="excel-export"),
    path(
        "excel/import/<str:import_type>/preview/",
        ExcelImportPreviewView.as_view(),
        name="excel-import-preview",
    ),
    path(
        "excel/import/<str:import_type>/confirm/",
        ExcelImportConfirmView.as_view(),
        name="excel-import-confirm",
    ),
    path("excel/import/<str:import_type>/", ExcelImportView.as_view(), name="excel-import"),
]
