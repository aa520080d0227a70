from django.urls import path
from . import views

urlpatterns = [
    path('session/<int:pk>', views.SessionBillView.as_view(), name='session_bill'),
    path('session/<int:pk>/discount', views.SessionDiscountView.as_view(), name='session_discount'),
    path('session/<int:pk>/payment', views.SessionPaymentView.as_view(), name='session_payment'),
    path('session/<int:pk>/receipt', views.SessionReceiptView.as_view(), name='session_receipt'),
    path('user/history', views.BillingHistoryView.as_view(), name='billing_history'),
]
