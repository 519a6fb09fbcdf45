from pathlib import Path

from django.conf import settings
from django.contrib import admin
from django.http import HttpResponse, JsonResponse
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

from apps.common.views import live_health, ready_health

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("apps.api.urls")),
    path("health/live", live_health, name="health-live"),
    path("health/ready", ready_health, name="health-ready"),
]


def _static_schema(request):
    """Serve the exported OpenAPI document when the live generator is off."""
    file_path = Path(settings.BASE_DIR) / "static" / settings.OPENAPI_STATIC_JSON
    if not file_path.exists():
        return JsonResponse(
            {
                "error": {
                    "code": "NOT_FOUND",
                    "message": "Static schema not found. Export it or enable DEBUG.",
                    "status": 404,
                }
            },
            status=404,
        )
    return HttpResponse(file_path.read_text(), content_type="application/json")


# DEBUG builds the schema on every request; production serves the exported file.
schema_url_name = "schema" if settings.DEBUG else "schema-json"
if settings.DEBUG:
    urlpatterns.append(path("schema/", SpectacularAPIView.as_view(), name="schema"))
else:
    urlpatterns.append(path("schema/", _static_schema, name="schema-json"))

urlpatterns += [
    path(
        "docs/swagger/",
        SpectacularSwaggerView.as_view(url_name=schema_url_name),
        name="swagger-ui",
    ),
    path(
        "docs/redoc/",
        SpectacularRedocView.as_view(url_name=schema_url_name),
        name="redoc",
    ),
]
