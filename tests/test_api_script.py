from types import SimpleNamespace

from scripts.api_smoke import SmokeRun, _result, _summarize


def test_result_keeps_error_text_for_failures():
    failed = _result('GET', '/api/v1/users/me', SimpleNamespace(status_code=401, text='Unauthorized'))
    assert failed == {
        'method': 'GET',
        'path': '/api/v1/users/me',
        'status': 401,
        'ok': False,
        'error': 'Unauthorized',
    }
    ok = _result('GET', '/api/v1/health', SimpleNamespace(status_code=200, text='{}'))
    assert ok['ok'] is True
    assert ok['error'] is None


def test_summarize_counts_failures():
    summary = _summarize([{'ok': True}, {'ok': False}, {'ok': True}])
    assert summary['total'] == 3
    assert summary['failed'] == 1


def test_smoke_run_builds_prefixed_urls():
    run = SmokeRun('http://localhost:8000/', admin_key='k')
    assert run.prefix == 'http://localhost:8000/api/v1'
