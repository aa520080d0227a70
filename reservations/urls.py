from django.urls import path
from . import views

urlpatterns = [
    path('', views.ReservationListView.as_view(), name='reservation_list'),
    path('today', views.TodayReservationsView.as_view(), name='reservation_today'),
    path('user/my-reservations', views.MyReservationsView.as_view(), name='my_reservations'),
    path('<int:pk>', views.ReservationDetailView.as_view(), name='reservation_detail'),
    path('<int:pk>/status', views.ReservationStatusView.as_view(), name='reservation_status'),
]
