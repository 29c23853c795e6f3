"""
Contact Management URL Configuration
"""
from django.urls import path
from .views import ContactFormSubmitView

app_name = 'contact'

urlpatterns = [
    path('contact', ContactFormSubmitView.as_view(), name='submit'),
]
