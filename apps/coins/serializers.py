from rest_framework import serializers
from .models import CoinBalance, CoinTransaction
from apps.accounts.serializers import UserMinimalSerializer


class CoinBalanceSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source='group.name', read_only=True)

    class Meta:
        model = CoinBalance
        fields = ['group', 'group_name', 'balance', 'updated_at']
        read_only_fields = fields


class CoinTransactionSerializer(serializers.ModelSerializer):
    """Ledger entry; negative amounts are debits."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = CoinTransaction
        fields = ['id', 'user', 'group', 'amount', 'description', 'timestamp']
        read_only_fields = fields


class BalanceQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    user_id = serializers.UUIDField(required=False)


class TransactionQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField(required=False)
    user_id = serializers.UUIDField(required=False)
