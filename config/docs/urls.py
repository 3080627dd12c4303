"""Swagger and ReDoc documentation endpoints."""

import os

from django.urls import path, re_path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

schema_view = get_schema_view(
    openapi.Info(
        title="Catalog API",
        default_version="v1",
        description="""
        # Catalog API Documentation

        Back-office product catalog with cached listings and Excel import/export.

        ## API Organization

        ### Products
        - **Products** - Cached, filterable listing plus create/update/delete of your own products

        ### Catalog insights
        - **Catalog insights** - Summary counters, filter dropdown options and quick search

        ### Spreadsheets
        - **Spreadsheets** - Download templates, export your data and import workbooks
          (preview, confirm with per-row decisions, or single-pass import)
        """,
        license=openapi.License(name="BSD License"),
    ),
    url=os.getenv("SWAGGER_DEFAULT_API_URL", "http://localhost"),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    path("api/doc/", schema_view.with_ui("swagger", cache_timeout=0), name="schema-swagger-ui"),
    path("api/redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="schema-redoc"),
    re_path(r"^api/doc(?P<format>\.json|\.yaml)$", schema_view.without_ui(cache_timeout=0), name="schema-json"),
]
