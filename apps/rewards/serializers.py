from rest_framework import serializers
from .models import Reward, RewardTransaction
from apps.accounts.serializers import UserMinimalSerializer


class RewardSerializer(serializers.ModelSerializer):
    class Meta:
        model = Reward
        fields = ['id', 'group', 'description', 'required_coins', 'created_at']
        read_only_fields = fields


class RewardCreateSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    description = serializers.CharField(max_length=255)
    required_coins = serializers.IntegerField(min_value=0)


class RedeemSerializer(serializers.Serializer):
    """Payer defaults to the caller; a master may redeem for a dependent."""

    user_id = serializers.UUIDField(required=False)


class RewardTransactionSerializer(serializers.ModelSerializer):
    """Redemption with the reward inlined and the amount actually debited."""

    user = UserMinimalSerializer(read_only=True)
    reward = RewardSerializer(read_only=True)
    coins_spent = serializers.SerializerMethodField()

    class Meta:
        model = RewardTransaction
        fields = ['id', 'user', 'reward', 'coins_spent', 'timestamp']
        read_only_fields = fields

    def get_coins_spent(self, obj):
        if obj.coin_transaction_id is None:
            return 0
        return -obj.coin_transaction.amount


class GroupQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField()


class RedeemedQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    user_id = serializers.UUIDField(required=False)
