from rest_framework import serializers
from .models import Challenge, CompletedChallenge
from apps.accounts.serializers import UserMinimalSerializer


class ChallengeSerializer(serializers.ModelSerializer):
    """Main serializer for challenges."""

    created_by = UserMinimalSerializer(read_only=True)
    assigned_users = UserMinimalSerializer(many=True, read_only=True)

    class Meta:
        model = Challenge
        fields = [
            'id',
            'group',
            'created_by',
            'name',
            'description',
            'coin_value',
            'start_date',
            'end_date',
            'is_daily',
            'assigned_users',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ChallengeListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    class Meta:
        model = Challenge
        fields = [
            'id',
            'group',
            'name',
            'description',
            'coin_value',
            'start_date',
            'end_date',
            'is_daily',
        ]
        read_only_fields = fields


class ChallengeCreateSerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    coin_value = serializers.IntegerField(min_value=1)
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    is_daily = serializers.BooleanField(required=False, default=False)
    assigned_user_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list
    )


class ChallengeUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    coin_value = serializers.IntegerField(min_value=1, required=False)
    start_date = serializers.DateTimeField(required=False, allow_null=True)
    end_date = serializers.DateTimeField(required=False, allow_null=True)
    is_daily = serializers.BooleanField(required=False)


class AssignUsersSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class CompleteChallengeSerializer(serializers.Serializer):
    """Claimant defaults to the caller; a master may claim for a dependent."""

    user_id = serializers.UUIDField(required=False)


class ValidateCompletionSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    is_completed = serializers.BooleanField()


class CompletedChallengeSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = CompletedChallenge
        fields = ['id', 'challenge', 'user', 'completed_at', 'is_validated', 'reviewed_at']
        read_only_fields = fields


class GroupQuerySerializer(serializers.Serializer):
    group_id = serializers.UUIDField()
