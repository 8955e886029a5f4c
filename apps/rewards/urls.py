from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rewards'

router = DefaultRouter()
router.register(r'', views.RewardViewSet, basename='reward')

urlpatterns = [
    # GET    /api/rewards/?group_id=                 - Group rewards (members)
    # POST   /api/rewards/                           - Add reward (group creator)
    # GET    /api/rewards/{id}/                      - Reward details
    # DELETE /api/rewards/{id}/                      - Delete reward (group creator)
    # POST   /api/rewards/{id}/redeem/               - Redeem for self or a dependent
    # GET    /api/rewards/redeemed/?group_id=&user_id= - Redemption history
    path('', include(router.urls)),
]
