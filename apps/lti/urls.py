from django.urls import path
from . import views

app_name = 'lti'

urlpatterns = [
    path('launch/', views.LtiLaunchView.as_view(), name='launch'),
]
