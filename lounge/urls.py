from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .views import HealthView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/health', HealthView.as_view(), name='health'),
    path('api/auth/', include('accounts.urls')),
    path('api/users/', include('accounts.staff_urls')),
    path('api/tables/', include('tables.urls')),
    path('api/menu/', include('menu.urls')),
    path('api/orders/', include('orders.urls')),
    path('api/kot/', include('orders.kot_urls')),
    path('api/sessions/', include('table_sessions.urls')),
    path('api/billing/', include('billing.urls')),
    path('api/reservations/', include('reservations.urls')),
    path('api/reports/', include('reports.urls')),
    path('api/devices/', include('devices.urls')),
    path('api/printers/', include('devices.printer_urls')),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]

handler404 = 'lounge.views.route_not_found'
handler500 = 'lounge.views.server_error'
