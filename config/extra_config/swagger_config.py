"""Swagger/OpenAPI configuration for the catalog service."""

import os


SWAGGER_GENERATOR_CLASS = "config.docs.swagger_generator.CatalogOpenAPISchemaGenerator"


def get_swagger_settings() -> dict:
    """Return Swagger UI configuration."""
    environment = os.getenv("DJANGO_ENV", "development")
    is_production = environment == "production"

    return {
        "SECURITY_DEFINITIONS": {
            "Basic": {"type": "basic"},
        },
        "USE_SESSION_AUTH": True,
        "JSON_EDITOR": True,
        "SUPPORTED_SUBMIT_METHODS": ["get", "post", "put", "delete", "patch"],
        "DOC_EXPANSION": "none",
        "OPERATIONS_SORTER": "alpha",
        "TAGS_SORTER": "alpha",
        "DEEP_LINKING": True,
        "SHOW_EXTENSIONS": True,
        "DEFAULT_MODEL_RENDERING": "model",
        "DEFAULT_MODEL_DEPTH": 3,
        "VALIDATOR_URL": None if is_production else "https://validator.swagger.io/validator",
        "PERSIST_AUTH": True,
        "DISPLAY_OPERATION_ID": False,
        "DEFAULT_API_URL": os.getenv("SWAGGER_DEFAULT_API_URL", "http://localhost"),
        "DEFAULT_GENERATOR_CLASS": SWAGGER_GENERATOR_CLASS,
        "TAGS": [
            {"name": "Products", "description": "List, create, update and delete catalog products"},
            {"name": "Catalog insights", "description": "Cached summary, filter options and quick search"},
            {"name": "Spreadsheets", "description": "Excel templates, export and two-phase import"},
        ],
    }


SWAGGER_SETTINGS = get_swagger_settings()
SWAGGER_USE_SESSION_AUTH = True
