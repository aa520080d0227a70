from django.urls import path
from . import views

urlpatterns = [
    path('', views.DeviceListView.as_view(), name='device_list'),
    path('stats/overview', views.DeviceStatsView.as_view(), name='device_stats'),
    path('<int:pk>', views.DeviceDetailView.as_view(), name='device_detail'),
    path('<int:pk>/control', views.DeviceControlView.as_view(), name='device_control'),
    path('<int:pk>/status', views.DeviceStatusView.as_view(), name='device_status'),
]
