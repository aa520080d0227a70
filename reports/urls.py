from django.urls import path
from . import views

urlpatterns = [
    path('dashboard', views.DashboardView.as_view(), name='report_dashboard'),
    path('revenue/category', views.CategoryRevenueView.as_view(), name='report_category_revenue'),
    path('tables/performance', views.TablePerformanceView.as_view(), name='report_table_performance'),
    path('items/sales', views.ItemSalesView.as_view(), name='report_item_sales'),
    path('staff/performance', views.StaffPerformanceView.as_view(), name='report_staff_performance'),
    path('financial/summary', views.FinancialSummaryView.as_view(), name='report_financial_summary'),
    path('export/<str:kind>', views.ExportView.as_view(), name='report_export'),
]
