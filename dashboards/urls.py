"""
Admin Dashboard URL Configuration
"""
from django.urls import path
from . import views

app_name = 'dashboards'

urlpatterns = [
    path('admin', views.dashboard, name='index'),
    path('admin/submission/<int:submission_id>', views.SubmissionView.as_view(), name='submission'),
    path('admin/submission/<int:submission_id>/status', views.update_status, name='submission-status'),
]
