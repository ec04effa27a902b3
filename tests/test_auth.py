from uuid import uuid4
from fastapi.testclient import TestClient
from sqlmodel import Session, select
from chthon.db.session import engine
from chthon.main import app
from chthon.models.user import User


def _signup(client: TestClient, email: str, password: str = 'secret123'):
    return client.post('/api/v1/auth/signup', json={'email': email, 'password': password, 'name': 'Tester'})


def test_signup_login_refresh_logout():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        r = _signup(client, email)
        assert r.status_code == 201
        body = r.json()
        assert body['role'] == 'user'
        assert body['tier'] == 'registered'
        assert 'hashed_password' not in body

        login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
        assert login.status_code == 200
        assert login.json()['token_type'] == 'bearer'
        refresh_token = login.json()['refresh_token']

        refresh = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
        assert refresh.status_code == 200
        rotated = refresh.json()['refresh_token']
        assert rotated != refresh_token

        reused = client.post('/api/v1/auth/refresh', json={'refresh_token': refresh_token})
        assert reused.status_code == 401

        logout = client.post('/api/v1/auth/logout', json={'refresh_token': rotated})
        assert logout.status_code == 200
        after_logout = client.post('/api/v1/auth/refresh', json={'refresh_token': rotated})
        assert after_logout.status_code == 401
        assert after_logout.json()['detail'] == 'Refresh token revoked'


def test_signup_rejects_duplicate_email():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        assert _signup(client, email).status_code == 201
        duplicate = _signup(client, email)
        assert duplicate.status_code == 400
        assert duplicate.json()['detail'] == 'Email already registered'


def test_signup_validation_error_is_bad_request():
    with TestClient(app) as client:
        response = _signup(client, f"{uuid4()}@b.com", password='123')
        assert response.status_code == 400
        assert isinstance(response.json()['detail'], list)


def test_login_rejects_wrong_password_and_unknown_email():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        _signup(client, email)
        wrong = client.post('/api/v1/auth/login', json={'email': email, 'password': 'wrongpass'})
        assert wrong.status_code == 401
        assert wrong.json()['detail'] == 'Invalid email or password'

        missing = client.post('/api/v1/auth/login', json={'email': 'missing@b.com', 'password': 'secret123'})
        assert missing.status_code == 401
        assert missing.json()['detail'] == 'Invalid email or password'


def test_check_email():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        assert client.get('/api/v1/auth/check-email', params={'email': email}).json() == {
            'exists': False,
            'provider': None,
        }
        _signup(client, email)
        found = client.get('/api/v1/auth/check-email', params={'email': email})
        assert found.json() == {'exists': True, 'provider': 'email'}


def test_protected_route_requires_bearer_token():
    with TestClient(app) as client:
        missing = client.get('/api/v1/users/me')
        assert missing.status_code == 401
        assert missing.json()['detail'] == 'Unauthorized'

        invalid = client.get('/api/v1/users/me', headers={'Authorization': 'Bearer not-a-jwt'})
        assert invalid.status_code == 401
        assert invalid.json()['detail'] == 'Invalid token'


def test_refresh_token_is_not_an_access_token():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        _signup(client, email)
        login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
        headers = {'Authorization': f"Bearer {login.json()['refresh_token']}"}
        response = client.get('/api/v1/users/me', headers=headers)
        assert response.status_code == 401
        assert response.json()['detail'] == 'Invalid token type'


def test_inactive_user_is_rejected():
    with TestClient(app) as client:
        email = f"{uuid4()}@b.com"
        _signup(client, email)
        login = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
        headers = {'Authorization': f"Bearer {login.json()['access_token']}"}

        with Session(engine) as session:
            user = session.exec(select(User).where(User.email == email)).one()
            user.is_active = False
            session.add(user)
            session.commit()

        assert client.get('/api/v1/users/me', headers=headers).status_code == 401
        relogin = client.post('/api/v1/auth/login', json={'email': email, 'password': 'secret123'})
        assert relogin.status_code == 401
