from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'challenges'

router = DefaultRouter()
router.register(r'', views.ChallengeViewSet, basename='challenge')

urlpatterns = [
    # GET    /api/challenges/?group_id=        - Group challenges (members)
    # POST   /api/challenges/                  - Create challenge
    # GET    /api/challenges/{id}/             - Challenge details
    # PATCH  /api/challenges/{id}/             - Update (creator)
    # DELETE /api/challenges/{id}/             - Delete (creator)
    # GET    /api/challenges/created/          - Created by current user
    # GET    /api/challenges/assigned/         - Assigned to current user
    # POST   /api/challenges/{id}/assign/      - Assign members (creator)
    # POST   /api/challenges/{id}/complete/    - Claim completion
    # POST   /api/challenges/{id}/validate/    - Approve or reject a claim (creator)
    # GET    /api/challenges/{id}/completions/ - Claims (creator)
    path('', include(router.urls)),
]
