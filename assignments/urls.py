from django.urls import path
from . import views

app_name = 'assignments'

urlpatterns = [
    path('new/', views.AssignmentCreateView.as_view(), name='new'),
    path('<slug:slug>/', views.AssignmentDetailView.as_view(), name='show'),
    path('<slug:slug>/edit/', views.AssignmentUpdateView.as_view(), name='edit'),
    path('<slug:slug>/delete/', views.AssignmentDeleteView.as_view(), name='destroy'),
    path('<slug:slug>/assistant/', views.AssignmentAssistantView.as_view(), name='assistant'),
    path('<slug:slug>/link-to-lms/', views.AssignmentLinkToLmsView.as_view(), name='link_to_lms'),
]
