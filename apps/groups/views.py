from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from apps.accounts.serializers import UserMinimalSerializer

from .models import Group
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    GroupListSerializer,
    GroupMemberSerializer,
    MemberIdSerializer,
    MemberEmailSerializer,
)

from apps.groups.services import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    list_groups_created_by,
    add_member,
    invite_member,
    remove_member,
    get_group_members,
    mark_dependent,
    add_dependent,
    remove_dependent,
    list_dependents,
)


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Group CRUD operations.

    All business logic is handled by services; service errors are turned
    into responses by the project exception handler.

    list: Get all groups the user belongs to
    create: Create a new group
    retrieve: Get a specific group
    partial_update: Update a group (creator only)
    destroy: Delete a group (creator only)
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    lookup_value_regex = '[0-9a-f-]{36}'
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        """Return only groups where user is a member."""
        return Group.objects.filter(
            memberships__user=self.request.user
        ).select_related('created_by').prefetch_related('memberships').distinct()

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return GroupListSerializer
        elif self.action == 'create':
            return GroupCreateSerializer
        elif self.action == 'partial_update':
            return GroupUpdateSerializer
        return GroupSerializer

    def create(self, request, *args, **kwargs):
        """Create a new group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            created_by=request.user,
            description=serializer.validated_data.get('description', ''),
            photo_url=serializer.validated_data.get('photo_url') or None,
            has_unique_rewards=serializer.validated_data.get('has_unique_rewards', False)
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        # Membership check via queryset, then load with prefetches
        self.get_object()
        group = get_group_by_id(group_id=self.kwargs['pk'])
        serializer = GroupSerializer(group, context={'request': request})
        return Response(serializer.data)

    def partial_update(self, request, *args, **kwargs):
        """Update group details (creator only)."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = update_group(
            group_id=self.kwargs['pk'],
            user=request.user,
            **serializer.validated_data
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete a group (creator only)."""
        delete_group(group_id=self.kwargs['pk'], user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        self.get_object()
        memberships = get_group_members(group_id=pk)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post'])
    def add_member(self, request, pk=None):
        """Add an existing user to the group (creator only)."""
        serializer = MemberIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = add_member(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            added_by=request.user
        )

        output_serializer = GroupMemberSerializer(membership)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def invite(self, request, pk=None):
        """Add a user by email and send them a notification (creator only)."""
        serializer = MemberEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = invite_member(
            group_id=pk,
            email=serializer.validated_data['email'],
            invited_by=request.user
        )

        output_serializer = GroupMemberSerializer(membership)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def remove_member(self, request, pk=None):
        """Remove a member from the group (creator only)."""
        serializer = MemberIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remove_member(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            removed_by=request.user
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def dependents(self, request, pk=None):
        """List dependent members (creator only)."""
        users = list_dependents(group_id=pk, requested_by=request.user)
        serializer = UserMinimalSerializer(users, many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post'])
    def add_dependent(self, request, pk=None):
        """Add a user by email as a dependent of the creator."""
        serializer = MemberEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = add_dependent(
            group_id=pk,
            email=serializer.validated_data['email'],
            master=request.user
        )
        return Response(UserMinimalSerializer(user).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def mark_dependent(self, request, pk=None):
        """Mark an existing member as a dependent of the creator."""
        serializer = MemberIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = mark_dependent(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            master=request.user
        )
        return Response(UserMinimalSerializer(user).data)

    @action(detail=True, methods=['post'])
    def remove_dependent(self, request, pk=None):
        """Remove a dependent from the group and unlink them."""
        serializer = MemberIdSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remove_dependent(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            master=request.user
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    responses={200: GroupListSerializer(many=True)},
    description="Get all groups created by the current user.",
    tags=['groups'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def created_groups(request):
    """Get all groups the current user created."""
    groups = list_groups_created_by(user_id=request.user.id)
    serializer = GroupListSerializer(groups, many=True, context={'request': request})
    return Response(serializer.data)
