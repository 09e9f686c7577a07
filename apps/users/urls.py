from django.urls import path
from rest_framework.authtoken.views import obtain_auth_token
from .views import UserProfileView

urlpatterns = [
    # Authentication
    path('auth/login/', obtain_auth_token, name='auth_login'),

    # Profile
    path('profile/', UserProfileView.as_view(), name='user_profile'),
]
