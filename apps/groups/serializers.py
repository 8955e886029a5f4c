from rest_framework import serializers
from .models import Group, GroupMembership
from apps.accounts.serializers import UserMinimalSerializer


class GroupSerializer(serializers.ModelSerializer):
    """Main serializer for groups."""

    created_by = UserMinimalSerializer(read_only=True)
    member_count = serializers.SerializerMethodField()
    is_creator = serializers.SerializerMethodField()

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'photo_url',
            'has_unique_rewards',
            'created_by',
            'member_count',
            'is_creator',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']

    def get_member_count(self, obj):
        """Get number of members in the group."""
        return obj.memberships.count()

    def get_is_creator(self, obj):
        request = self.context.get('request')
        if request and request.user.is_authenticated:
            return obj.is_creator(request.user)
        return False


class GroupCreateSerializer(serializers.Serializer):
    """Input for creating or updating a group."""

    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    photo_url = serializers.CharField(max_length=200, required=False, allow_blank=True)
    has_unique_rewards = serializers.BooleanField(required=False, default=False)


class GroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    photo_url = serializers.CharField(max_length=200, required=False)
    has_unique_rewards = serializers.BooleanField(required=False)


class GroupListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    created_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Group
        fields = [
            'id',
            'name',
            'description',
            'photo_url',
            'created_by',
            'created_at',
        ]
        read_only_fields = fields


class GroupMemberSerializer(serializers.ModelSerializer):
    """Member information with the joined timestamp."""

    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = GroupMembership
        fields = ['id', 'user', 'joined_at']
        read_only_fields = fields


class MemberIdSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()


class MemberEmailSerializer(serializers.Serializer):
    email = serializers.EmailField()
