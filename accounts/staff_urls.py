from django.urls import path
from . import views

urlpatterns = [
    path('staff', views.StaffListView.as_view(), name='staff_list'),
    path('staff/<int:pk>', views.StaffDetailView.as_view(), name='staff_detail'),
    path('staff/<int:pk>/permissions', views.StaffPermissionsView.as_view(), name='staff_permissions'),
]
