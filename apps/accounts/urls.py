from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    # Authentication
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('login/dependent/', views.dependent_login, name='dependent-login'),
    path('logout/', views.logout, name='logout'),

    # User profile
    path('user/', views.get_current_user, name='current-user'),
    path('user/photo/', views.upload_photo, name='upload-photo'),
    path('users/<uuid:pk>/profile/', views.user_profile, name='user-profile'),

    # Password reset
    path('password-reset/', views.password_reset, name='password-reset'),
    path('password-reset/confirm/', views.password_reset_confirm, name='password-reset-confirm'),
]
