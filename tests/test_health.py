from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from chthon.api.v1 import health as health_module
from chthon.main import app


def test_health_reports_database_ok():
    with TestClient(app) as client:
        response = client.get('/api/v1/health')
        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'healthy'
        assert 'timestamp' in body


def test_health_reports_database_failure(monkeypatch, tmp_path):
    broken = create_engine(f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
    monkeypatch.setattr(health_module, 'engine', broken)
    with TestClient(app) as client:
        response = client.get('/api/v1/health')
        assert response.status_code == 500
        assert response.json()['status'] == 'unhealthy'


def test_app_serves_only_api_and_uploads():
    with TestClient(app) as client:
        assert client.get('/').status_code == 404
        assert client.get('/chat').status_code == 404
