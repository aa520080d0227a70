from django.urls import path
from . import views

urlpatterns = [
    path('', views.MenuListView.as_view(), name='menu_list'),
    path('structure/categories', views.MenuStructureView.as_view(), name='menu_structure'),
    path('<int:pk>', views.MenuDetailView.as_view(), name='menu_detail'),
    path('<int:pk>/availability', views.MenuAvailabilityView.as_view(), name='menu_availability'),
]
