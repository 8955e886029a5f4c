from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    ChallengeSerializer,
    ChallengeListSerializer,
    ChallengeCreateSerializer,
    ChallengeUpdateSerializer,
    AssignUsersSerializer,
    CompleteChallengeSerializer,
    ValidateCompletionSerializer,
    CompletedChallengeSerializer,
    GroupQuerySerializer,
)

from apps.challenges.services import (
    create_challenge,
    update_challenge,
    delete_challenge,
    assign_users,
    get_challenge,
    list_challenges_created_by,
    list_challenges_assigned_to,
    list_group_challenges,
    mark_completed,
    validate_completion,
    list_completions,
)
from apps.groups.permissions import IsGroupMember
from apps.groups.services import get_group_by_id


class ChallengePagination(PageNumberPagination):
    """Custom pagination for challenges."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ChallengeViewSet(viewsets.ViewSet):
    """
    ViewSet for challenges and their completion claims.

    All business logic is handled by services.
    Views are thin HTTP handlers only.
    """

    permission_classes = [IsAuthenticated, IsGroupMember]
    lookup_value_regex = '[0-9a-f-]{36}'

    def _paginate(self, queryset, serializer_class):
        paginator = ChallengePagination()
        page = paginator.paginate_queryset(queryset, self.request, view=self)
        serializer = serializer_class(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @extend_schema(
        parameters=[OpenApiParameter('group_id', str, required=True)],
        responses={200: ChallengeListSerializer(many=True)},
    )
    def list(self, request):
        """Challenges of a group the user belongs to."""
        query = GroupQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        group = get_group_by_id(group_id=query.validated_data['group_id'])
        self.check_object_permissions(request, group)

        challenges = list_group_challenges(group_id=group.id)
        return self._paginate(challenges, ChallengeListSerializer)

    @extend_schema(request=ChallengeCreateSerializer, responses={201: ChallengeSerializer})
    def create(self, request):
        """Create a new challenge."""
        serializer = ChallengeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        challenge = create_challenge(
            group_id=data['group_id'],
            created_by=request.user,
            name=data['name'],
            coin_value=data['coin_value'],
            description=data.get('description', ''),
            start_date=data.get('start_date'),
            end_date=data.get('end_date'),
            is_daily=data.get('is_daily', False),
            assigned_user_ids=data.get('assigned_user_ids'),
        )

        output_serializer = ChallengeSerializer(get_challenge(challenge_id=challenge.id))
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ChallengeSerializer})
    def retrieve(self, request, pk=None):
        challenge = get_challenge(challenge_id=pk)
        self.check_object_permissions(request, challenge)
        return Response(ChallengeSerializer(challenge).data)

    @extend_schema(request=ChallengeUpdateSerializer, responses={200: ChallengeSerializer})
    def partial_update(self, request, pk=None):
        """Update a challenge (creator only)."""
        serializer = ChallengeUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        update_challenge(challenge_id=pk, user=request.user, **serializer.validated_data)

        return Response(ChallengeSerializer(get_challenge(challenge_id=pk)).data)

    def destroy(self, request, pk=None):
        """Delete a challenge (creator only)."""
        delete_challenge(challenge_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: ChallengeListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def created(self, request):
        """Challenges the current user created."""
        challenges = list_challenges_created_by(user_id=request.user.id)
        return self._paginate(challenges, ChallengeListSerializer)

    @extend_schema(responses={200: ChallengeListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def assigned(self, request):
        """Challenges assigned to the current user."""
        challenges = list_challenges_assigned_to(user_id=request.user.id)
        return self._paginate(challenges, ChallengeListSerializer)

    @extend_schema(request=AssignUsersSerializer, responses={200: ChallengeSerializer})
    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        """Assign group members to the challenge (creator only)."""
        serializer = AssignUsersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assign_users(
            challenge_id=pk,
            user_ids=serializer.validated_data['user_ids'],
            assigned_by=request.user
        )

        return Response(ChallengeSerializer(get_challenge(challenge_id=pk)).data)

    @extend_schema(request=CompleteChallengeSerializer, responses={201: CompletedChallengeSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Claim completion for yourself or for one of your dependents."""
        serializer = CompleteChallengeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        completion = mark_completed(
            challenge_id=pk,
            user_id=serializer.validated_data.get('user_id', request.user.id),
            acting_user=request.user
        )

        output_serializer = CompletedChallengeSerializer(completion)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ValidateCompletionSerializer, responses={200: CompletedChallengeSerializer})
    @action(detail=True, methods=['post'])
    def validate(self, request, pk=None):
        """Approve or reject a claim (challenge creator only)."""
        serializer = ValidateCompletionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        completion = validate_completion(
            challenge_id=pk,
            user_id=serializer.validated_data['user_id'],
            validated_by=request.user,
            is_completed=serializer.validated_data['is_completed']
        )

        return Response(CompletedChallengeSerializer(completion).data)

    @extend_schema(
        parameters=[OpenApiParameter('pending', bool)],
        responses={200: CompletedChallengeSerializer(many=True)},
    )
    @action(detail=True, methods=['get'])
    def completions(self, request, pk=None):
        """Claims on the challenge (creator only)."""
        pending_only = request.query_params.get('pending', '').lower() in ('1', 'true', 'yes')
        completions = list_completions(
            challenge_id=pk,
            requested_by=request.user,
            pending_only=pending_only
        )
        serializer = CompletedChallengeSerializer(completions, many=True)
        return Response(serializer.data)
