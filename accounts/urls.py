from django.urls import path

from .views import AdminLoginView, AdminSetupView, admin_logout

app_name = 'accounts'

urlpatterns = [
    path('login', AdminLoginView.as_view(), name='login'),
    path('logout', admin_logout, name='logout'),
    path('setup', AdminSetupView.as_view(), name='setup'),
]
