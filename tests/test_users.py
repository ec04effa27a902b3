from uuid import uuid4
from fastapi.testclient import TestClient
from sqlmodel import Session, select
from chthon.db.session import engine
from chthon.main import app
from chthon.models.enums import UserTier
from chthon.models.user import User


def _auth_headers(client: TestClient) -> tuple[str, dict]:
    email = f"{uuid4()}@b.com"
    client.post('/api/v1/auth/signup', json={'email': email, 'password': 'secret123', 'name': 'Tester'})
    login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
    token = login.json()['access_token']
    return email, {'Authorization': f"Bearer {token}"}


def test_me_and_update():
    with TestClient(app) as client:
        email, headers = _auth_headers(client)
        me = client.get('/api/v1/users/me', headers=headers)
        assert me.status_code == 200
        assert me.json()['email'] == email
        assert me.json()['name'] == 'Tester'

        updated = client.patch('/api/v1/users/me', json={'name': 'Renamed'}, headers=headers)
        assert updated.status_code == 200
        assert updated.json()['name'] == 'Renamed'
        assert updated.json()['email'] == email


def test_update_rejects_taken_email():
    with TestClient(app) as client:
        taken, _ = _auth_headers(client)
        _, headers = _auth_headers(client)
        response = client.patch('/api/v1/users/me', json={'email': taken}, headers=headers)
        assert response.status_code == 400
        assert response.json()['detail'] == 'Email already registered'


def test_config_reports_tier_limits():
    with TestClient(app) as client:
        email, headers = _auth_headers(client)
        config = client.get('/api/v1/users/me/config', headers=headers)
        assert config.status_code == 200
        body = config.json()
        assert body['tier'] == 'registered'
        assert body['limits']['max_tokens'] == 1000
        assert body['limits']['available_providers'][0] == 'openai/gpt-4o-mini'

        with Session(engine) as session:
            user = session.exec(select(User).where(User.email == email)).one()
            user.tier = UserTier.CUSTOM
            user.tier_config = {'max_tokens': 3000, 'can_upload_images': False}
            session.add(user)
            session.commit()

        custom = client.get('/api/v1/users/me/config', headers=headers).json()
        assert custom['tier'] == 'custom'
        assert custom['limits']['max_tokens'] == 3000
        assert custom['limits']['can_upload_images'] is False
        assert custom['limits']['can_select_provider'] is True


def test_usage_is_empty_for_new_user():
    with TestClient(app) as client:
        _, headers = _auth_headers(client)
        usage = client.get('/api/v1/users/me/usage', params={'days': 7}, headers=headers)
        assert usage.status_code == 200
        body = usage.json()
        assert body['total_requests'] == 0
        assert body['total_cost'] == 0.0
        assert set(body['type_stats']) == {'text', 'image'}
