from django.urls import path
from . import views

urlpatterns = [
    path('', views.TableListView.as_view(), name='table_list'),
    path('<int:pk>', views.TableDetailView.as_view(), name='table_detail'),
    path('<int:pk>/status', views.TableStatusView.as_view(), name='table_status'),
    path('<int:pk>/plug', views.TablePlugView.as_view(), name='table_plug'),
    path('<int:pk>/plug/control', views.TablePlugControlView.as_view(), name='table_plug_control'),
]
