"""
Tests for accounts app authentication.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="test@example.com", password="testpass123"):
        return user_model.objects.create_user(
            email=email,
            username=email,
            password=password
        )
    return _create_user


@pytest.mark.django_db
class TestAuthentication:

    def test_token_obtain(self, api_client, create_user):
        user = create_user()
        response = api_client.post('/api/v1/auth/token/', {
            'email': user.email,
            'password': 'testpass123'
        }, format='json')
        assert response.status_code == 200
        assert 'access' in response.data
        assert 'refresh' in response.data

    def test_token_invalid_credentials(self, api_client, create_user):
        create_user()
        response = api_client.post('/api/v1/auth/token/', {
            'email': 'test@example.com',
            'password': 'wrongpassword'
        }, format='json')
        assert response.status_code == 401

    def test_token_missing_fields(self, api_client):
        response = api_client.post('/api/v1/auth/token/', {}, format='json')
        assert response.status_code == 400

    def test_token_refresh(self, api_client, create_user):
        refresh = RefreshToken.for_user(create_user())
        response = api_client.post('/api/v1/auth/token/refresh/', {'refresh': str(refresh)}, format='json')
        assert response.status_code == 200
        assert 'access' in response.data


@pytest.mark.django_db
class TestUserModel:

    def test_str_is_email(self, create_user):
        assert str(create_user()) == 'test@example.com'

    def test_site_count(self, create_user):
        from sites.models import Site
        user = create_user()
        Site.objects.create(user=user, name='Kyoto', subdomain='kyoto')
        Site.objects.create(user=user, name='Nara', subdomain='nara')
        assert user.site_count == 2


class TestHealthCheck:

    def test_health(self, api_client):
        response = api_client.get('/api/v1/health/')
        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'ok'
        assert body['service'] == 'tourism-cms'
        assert body['queue'] == 'disabled'
        assert body['cache'] == 'enabled'
