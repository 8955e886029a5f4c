from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    CoinBalanceSerializer,
    CoinTransactionSerializer,
    BalanceQuerySerializer,
    TransactionQuerySerializer,
)
from apps.coins.services import (
    check_ledger_access,
    get_balance,
    list_balances_for_user,
    list_transactions,
)


class TransactionPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class BalanceResponseSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    group_id = serializers.UUIDField()
    balance = serializers.IntegerField()


@extend_schema(
    responses={200: CoinBalanceSerializer(many=True)},
    description="Balances of the current user in every group they were credited in.",
    tags=['coins'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_balances(request):
    balances = list_balances_for_user(user_id=request.user.id)
    return Response(CoinBalanceSerializer(balances, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('group_id', str, required=True),
        OpenApiParameter('user_id', str, description='Defaults to the current user'),
    ],
    responses={200: BalanceResponseSerializer},
    description="Balance of a user in a group. Zero when the user was never credited.",
    tags=['coins'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balance(request):
    """Balance of the current user, a dependent, or (for the creator) a group member."""
    query = BalanceQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    group_id = query.validated_data['group_id']
    user_id = query.validated_data.get('user_id', request.user.id)

    check_ledger_access(actor=request.user, group_id=group_id, user_id=user_id)

    return Response({
        'user_id': user_id,
        'group_id': group_id,
        'balance': get_balance(user_id=user_id, group_id=group_id),
    })


@extend_schema(
    parameters=[
        OpenApiParameter('group_id', str),
        OpenApiParameter('user_id', str),
    ],
    responses={200: CoinTransactionSerializer(many=True)},
    description="Transaction history filtered by user, group, or both. Newest first.",
    tags=['coins'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def transactions(request):
    """Paginated transaction history."""
    query = TransactionQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    group_id = query.validated_data.get('group_id')
    user_id = query.validated_data.get('user_id')

    # list_transactions rejects a request with neither filter
    queryset = list_transactions(user_id=user_id, group_id=group_id)
    check_ledger_access(actor=request.user, group_id=group_id, user_id=user_id)

    paginator = TransactionPagination()
    page = paginator.paginate_queryset(queryset, request)
    serializer = CoinTransactionSerializer(page, many=True)
    return paginator.get_paginated_response(serializer.data)
