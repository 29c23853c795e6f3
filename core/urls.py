"""
URL configuration for the Health Scale Digital backend.

Public API:
    POST /api/contact                       Contact form submission
Admin dashboard (session-gated):
    /admin/login, /admin/logout, /admin/setup
    /admin, /admin/submission/<id>, /admin/submission/<id>/status
"""
from django.urls import path, include

urlpatterns = [
    path('api/', include('contact.urls')),
    path('admin/', include('accounts.urls')),
    path('', include('dashboards.urls')),
]

handler404 = 'core.views.page_not_found'
handler500 = 'core.views.server_error'
