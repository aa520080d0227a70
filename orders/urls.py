from django.urls import path
from . import views

urlpatterns = [
    path('', views.OrderListView.as_view(), name='order_list'),
    path('<int:pk>', views.OrderDetailView.as_view(), name='order_detail'),
    path('<int:pk>/status', views.OrderStatusView.as_view(), name='order_status'),
    path('<int:order_pk>/items/<int:item_pk>/status', views.OrderItemStatusView.as_view(), name='order_item_status'),
    path('<int:pk>/kot', views.OrderKOTView.as_view(), name='order_kot'),
]
