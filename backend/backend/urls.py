"""
URL configuration for backend project.

Every portal route lives under ``/api/``; each app contributes its own
namespaced patterns.  Uploaded files are served from ``/uploads/`` in
development.
"""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('django-admin/', admin.site.urls),

    # ── Swagger / OpenAPI schema ─────────────────────────────────────
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # ── App routes ───────────────────────────────────────────────────
    path('api/', include('core.urls')),
    path('api/', include('accounts.urls')),
    path('api/', include('catalog.urls')),
    path('api/', include('service_requests.urls')),
]

# ── Serve uploaded files in local development ────────────────────────
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
