from django.urls import path
from . import views

urlpatterns = [
    path('', views.PrinterListView.as_view(), name='printer_list'),
    path('stats/overview', views.PrinterStatsView.as_view(), name='printer_stats'),
    path('<int:pk>', views.PrinterDetailView.as_view(), name='printer_detail'),
    path('<int:pk>/test', views.PrinterTestView.as_view(), name='printer_test'),
    path('<int:pk>/toggle', views.PrinterToggleView.as_view(), name='printer_toggle'),
    path('<int:pk>/status', views.PrinterStatusView.as_view(), name='printer_status'),
]
