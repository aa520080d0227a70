from django.urls import path
from . import views

urlpatterns = [
    path('', views.SessionListView.as_view(), name='session_list'),
    path('start', views.SessionStartView.as_view(), name='session_start'),
    path('user/history', views.SessionHistoryView.as_view(), name='session_history'),
    path('<int:pk>', views.SessionDetailView.as_view(), name='session_detail'),
    path('<int:pk>/end', views.SessionEndView.as_view(), name='session_end'),
    path('<int:pk>/extend', views.SessionExtendView.as_view(), name='session_extend'),
    path('<int:pk>/pause', views.SessionPauseView.as_view(), name='session_pause'),
    path('<int:pk>/resume', views.SessionResumeView.as_view(), name='session_resume'),
]
