from django.urls import path
from . import kot_views

urlpatterns = [
    path('queue', kot_views.KOTQueueView.as_view(), name='kot_queue'),
    path('items/<int:pk>/complete', kot_views.KOTItemCompleteView.as_view(), name='kot_item_complete'),
    path('orders/<int:pk>/complete', kot_views.KOTOrderCompleteView.as_view(), name='kot_order_complete'),
    path('stats', kot_views.KOTStatsView.as_view(), name='kot_stats'),
]
