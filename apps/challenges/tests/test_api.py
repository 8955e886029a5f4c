import pytest
from django.urls import reverse
from rest_framework import status

from apps.challenges.models import Challenge, CompletedChallenge
from apps.coins.services import get_balance


@pytest.mark.django_db
class TestChallengeCRUD:
    """Tests for /api/challenges/"""

    def test_create_challenge(self, creator_client, group, member):
        url = reverse('challenges:challenge-list')
        data = {
            'group_id': str(group.id),
            'name': 'Vacuum',
            'description': 'Living room',
            'coin_value': 20,
            'assigned_user_ids': [str(member.id)],
        }
        response = creator_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Vacuum'
        assert response.data['assigned_users'][0]['id'] == str(member.id)

    def test_create_with_zero_coins(self, creator_client, group):
        url = reverse('challenges:challenge-list')
        response = creator_client.post(
            url,
            {'group_id': str(group.id), 'name': 'Free', 'coin_value': 0},
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_outsider_cannot_create(self, outsider_client, group):
        url = reverse('challenges:challenge-list')
        response = outsider_client.post(
            url,
            {'group_id': str(group.id), 'name': 'Sneaky', 'coin_value': 5},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'NotMemberError'

    def test_list_group_challenges(self, member_client, group, challenge):
        url = reverse('challenges:challenge-list')
        response = member_client.get(url, {'group_id': str(group.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Wash the dishes'

    def test_list_requires_group_id(self, member_client):
        response = member_client.get(reverse('challenges:challenge-list'))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_outsider_cannot_list(self, outsider_client, group, challenge):
        url = reverse('challenges:challenge-list')
        response = outsider_client.get(url, {'group_id': str(group.id)})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_retrieve(self, member_client, challenge):
        url = reverse('challenges:challenge-detail', kwargs={'pk': challenge.id})
        response = member_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['coin_value'] == 50

    def test_outsider_cannot_retrieve(self, outsider_client, challenge):
        url = reverse('challenges:challenge-detail', kwargs={'pk': challenge.id})
        response = outsider_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert 'coin_value' not in response.data

    def test_update_clears_end_date(self, creator_client, challenge):
        url = reverse('challenges:challenge-detail', kwargs={'pk': challenge.id})
        creator_client.patch(url, {'end_date': '2030-01-01T00:00:00Z'}, format='json')
        response = creator_client.patch(url, {'end_date': None}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['end_date'] is None
        challenge.refresh_from_db()
        assert challenge.end_date is None

    def test_update_by_non_creator(self, member_client, challenge):
        url = reverse('challenges:challenge-detail', kwargs={'pk': challenge.id})
        response = member_client.patch(url, {'name': 'Hijacked'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        challenge.refresh_from_db()
        assert challenge.name == 'Wash the dishes'

    def test_delete_by_creator(self, creator_client, challenge):
        url = reverse('challenges:challenge-detail', kwargs={'pk': challenge.id})
        response = creator_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Challenge.objects.filter(id=challenge.id).exists()

    def test_assigned_listing(self, member_client, challenge):
        response = member_client.get(reverse('challenges:challenge-assigned'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1


@pytest.mark.django_db
class TestCompletionFlow:
    """Claim, review and credit through the API."""

    def test_complete_then_validate(self, member_client, creator_client, member, group, challenge):
        complete_url = reverse('challenges:challenge-complete', kwargs={'pk': challenge.id})
        response = member_client.post(complete_url, {}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['is_validated'] is False
        assert get_balance(user_id=member.id, group_id=group.id) == 0

        validate_url = reverse('challenges:challenge-validate', kwargs={'pk': challenge.id})
        response = creator_client.post(
            validate_url,
            {'user_id': str(member.id), 'is_completed': True},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_validated'] is True
        assert get_balance(user_id=member.id, group_id=group.id) == 50

    def test_double_complete_is_conflict(self, member_client, challenge):
        url = reverse('challenges:challenge-complete', kwargs={'pk': challenge.id})
        member_client.post(url, {}, format='json')
        response = member_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'AlreadyCompletedError'

    def test_outsider_cannot_complete(self, outsider_client, challenge):
        url = reverse('challenges:challenge-complete', kwargs={'pk': challenge.id})
        response = outsider_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_master_completes_for_dependent(self, creator_client, dependent, challenge):
        url = reverse('challenges:challenge-complete', kwargs={'pk': challenge.id})
        response = creator_client.post(url, {'user_id': str(dependent.id)}, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert CompletedChallenge.objects.filter(challenge=challenge, user=dependent).exists()

    def test_member_cannot_validate(self, member_client, member, challenge):
        CompletedChallenge.objects.create(challenge=challenge, user=member)
        url = reverse('challenges:challenge-validate', kwargs={'pk': challenge.id})
        response = member_client.post(
            url,
            {'user_id': str(member.id), 'is_completed': True},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_validate_without_claim(self, creator_client, member, challenge):
        url = reverse('challenges:challenge-validate', kwargs={'pk': challenge.id})
        response = creator_client.post(
            url,
            {'user_id': str(member.id), 'is_completed': True},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_pending_completions(self, creator_client, member, challenge):
        CompletedChallenge.objects.create(challenge=challenge, user=member)
        url = reverse('challenges:challenge-completions', kwargs={'pk': challenge.id})
        response = creator_client.get(url, {'pending': 'true'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['user']['email'] == member.email
