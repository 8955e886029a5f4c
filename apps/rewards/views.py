from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    RewardSerializer,
    RewardCreateSerializer,
    RedeemSerializer,
    RewardTransactionSerializer,
    GroupQuerySerializer,
    RedeemedQuerySerializer,
)

from apps.rewards.services import (
    create_reward,
    delete_reward,
    get_reward,
    list_by_group,
    list_redeemed_by_user_in_group,
    redeem as redeem_reward,
)
from apps.groups.permissions import IsGroupMember
from apps.groups.services import get_group_by_id
from apps.coins.services import check_ledger_access


class RewardViewSet(viewsets.ViewSet):
    """
    ViewSet for group rewards and their redemption.

    All business logic is handled by services.
    Views are thin HTTP handlers only.
    """

    permission_classes = [IsAuthenticated, IsGroupMember]
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(
        parameters=[OpenApiParameter('group_id', str, required=True)],
        responses={200: RewardSerializer(many=True)},
    )
    def list(self, request):
        """Rewards of a group the user belongs to."""
        query = GroupQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        group = get_group_by_id(group_id=query.validated_data['group_id'])
        self.check_object_permissions(request, group)

        rewards = list_by_group(group_id=group.id)
        return Response(RewardSerializer(rewards, many=True).data)

    @extend_schema(request=RewardCreateSerializer, responses={201: RewardSerializer})
    def create(self, request):
        """Add a reward (group creator only)."""
        serializer = RewardCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        reward = create_reward(
            group_id=data['group_id'],
            created_by=request.user,
            description=data['description'],
            required_coins=data['required_coins'],
        )

        return Response(RewardSerializer(reward).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RewardSerializer})
    def retrieve(self, request, pk=None):
        reward = get_reward(reward_id=pk)
        self.check_object_permissions(request, reward)
        return Response(RewardSerializer(reward).data)

    def destroy(self, request, pk=None):
        """Delete a reward (group creator only)."""
        delete_reward(reward_id=pk, deleted_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=RedeemSerializer, responses={201: RewardTransactionSerializer})
    @action(detail=True, methods=['post'])
    def redeem(self, request, pk=None):
        """Spend coins on the reward, for yourself or for one of your dependents."""
        serializer = RedeemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        redemption = redeem_reward(
            reward_id=pk,
            user_id=serializer.validated_data.get('user_id', request.user.id),
            acting_user=request.user
        )

        output_serializer = RewardTransactionSerializer(redemption)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(
        parameters=[
            OpenApiParameter('group_id', str, required=True),
            OpenApiParameter('user_id', str),
        ],
        responses={200: RewardTransactionSerializer(many=True)},
    )
    @action(detail=False, methods=['get'])
    def redeemed(self, request):
        """
        Redemptions in a group.

        Defaults to the caller's own. Masters may look at a dependent's
        and the group creator at anyone's.
        """
        query = RedeemedQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        group = get_group_by_id(group_id=query.validated_data['group_id'])
        user_id = query.validated_data.get('user_id', request.user.id)

        if user_id == request.user.id:
            self.check_object_permissions(request, group)
        else:
            check_ledger_access(actor=request.user, group_id=group.id, user_id=user_id)

        redemptions = list_redeemed_by_user_in_group(group_id=group.id, user_id=user_id)
        serializer = RewardTransactionSerializer(
            redemptions.select_related('coin_transaction', 'user'),
            many=True
        )
        return Response(serializer.data)
