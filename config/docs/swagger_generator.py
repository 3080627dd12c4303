from drf_yasg.generators import OpenAPISchemaGenerator

from core.enums import ImportType


class CatalogOpenAPISchemaGenerator(OpenAPISchemaGenerator):
    def get_path_parameters(self, path, view_cls):
        parameters = super().get_path_parameters(path, view_cls)
        import_type_enum = [choice.value for choice in ImportType]

        for parameter in parameters:
            if getattr(parameter, "name", None) == "import_type":
                parameter.enum = import_type_enum

        return parameters
