from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List user's groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details
    # PATCH  /api/groups/{id}/         - Update group (creator)
    # DELETE /api/groups/{id}/         - Delete group (creator)

    # Custom group actions
    # GET    /api/groups/{id}/members/            - List members
    # POST   /api/groups/{id}/add_member/         - Add existing user (creator)
    # POST   /api/groups/{id}/invite/             - Add user by email and notify (creator)
    # POST   /api/groups/{id}/remove_member/      - Remove member (creator)
    # GET    /api/groups/{id}/dependents/         - List dependents (creator)
    # POST   /api/groups/{id}/add_dependent/      - Add dependent by email (creator)
    # POST   /api/groups/{id}/mark_dependent/     - Mark member as dependent (creator)
    # POST   /api/groups/{id}/remove_dependent/   - Remove dependent (creator)

    # Additional endpoints
    path('created/', views.created_groups, name='created-groups'),

    # Include router URLs
    path('', include(router.urls)),
]
