"""Authentication-focused API endpoints."""

from django.urls import path

from ..api.views import CurrentUserView
from ..views import auth

urlpatterns = [
    path('api/auth/sign-up/', auth.SignUpView.as_view(), name='auth_sign_up'),
    path('api/auth/sign-in/', auth.SignInView.as_view(), name='auth_sign_in'),
    path('api/auth/sign-out/', auth.SignOutView.as_view(), name='auth_sign_out'),
    path('api/auth/me/', CurrentUserView.as_view(), name='auth_me'),
]
