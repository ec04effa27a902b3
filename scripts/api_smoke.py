#!/usr/bin/env python3
"""Walk the main user journey against a running server and write a JSON report."""
import argparse
import json
import random
import string
from pathlib import Path
from typing import Any, Optional

import requests


def _rand_suffix(length: int = 8) -> str:
    return ''.join(random.choice(string.ascii_lowercase + string.digits) for _ in range(length))


def _safe_json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _result(method: str, path: str, response: requests.Response) -> dict:
    return {
        'method': method,
        'path': path,
        'status': response.status_code,
        'ok': response.status_code < 400,
        'error': (response.text or '')[:500] if response.status_code >= 400 else None,
    }


def _summarize(results: list[dict]) -> dict:
    failed = [item for item in results if not item['ok']]
    return {'total': len(results), 'failed': len(failed), 'results': results}


class SmokeRun:
    def __init__(self, base_url: str, admin_key: Optional[str] = None) -> None:
        self.base_url = base_url.rstrip('/')
        self.prefix = f"{self.base_url}/api/v1"
        self.admin_key = admin_key
        self.session = requests.Session()
        self.results: list[dict] = []

    def call(self, method: str, path: str, **kwargs) -> requests.Response:
        response = self.session.request(method, f"{self.prefix}{path}", **kwargs)
        self.results.append(_result(method, f"/api/v1{path}", response))
        return response

    def authenticate(self) -> None:
        email = f"tester+{_rand_suffix()}@example.com"
        password = 'secret123'
        self.call('POST', '/auth/signup', json={'email': email, 'password': password, 'name': 'Smoke Tester'})
        login = self.call('POST', '/auth/login', json={'email': email, 'password': password})
        payload = _safe_json(login) or {}
        token = payload.get('access_token')
        if token:
            self.session.headers['Authorization'] = f"Bearer {token}"
        refresh_token = payload.get('refresh_token')
        if refresh_token:
            self.call('POST', '/auth/refresh', json={'refresh_token': refresh_token})

    def run(self, with_chat: bool = False) -> dict:
        self.call('GET', '/health')
        self.authenticate()
        self.call('GET', '/users/me')
        self.call('GET', '/users/me/config')

        created = self.call('POST', '/chat-sessions', json={'name': f"smoke-{_rand_suffix(4)}"})
        session_id = (_safe_json(created) or {}).get('id')
        if session_id:
            self.call('PUT', f"/chat-sessions/{session_id}", json={'name': 'smoke renamed'})
            if with_chat:
                self.call('POST', '/chat', json={'session_id': session_id, 'content': 'Say hello in one word.'})
            self.call('GET', f"/chat-sessions/{session_id}/messages")
            self.call('DELETE', f"/chat-sessions/{session_id}")
        self.call('GET', '/users/me/usage', params={'days': 1})

        if self.admin_key:
            headers = {'Authorization': f"Bearer {self.admin_key}"}
            self.call('POST', '/admin/auth', json={'admin_key': self.admin_key})
            self.call('GET', '/admin/users', headers=headers)
            self.call('GET', '/admin/analytics', params={'days': 1, 'limit': 10}, headers=headers)
        return _summarize(self.results)


def main() -> int:
    parser = argparse.ArgumentParser(description='Smoke test the /api/v1 endpoints of a running server')
    parser.add_argument('--base-url', default='http://127.0.0.1:8000')
    parser.add_argument('--output', default='reports/api_smoke.json')
    parser.add_argument('--admin-key', default=None)
    parser.add_argument('--with-chat', action='store_true', help='also call /chat (uses the LLM gateway)')
    args = parser.parse_args()

    report = SmokeRun(args.base_url, admin_key=args.admin_key).run(with_chat=args.with_chat)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding='utf-8')
    print(f"{report['total'] - report['failed']}/{report['total']} calls ok, report: {output}")
    return 1 if report['failed'] else 0


if __name__ == '__main__':
    raise SystemExit(main())
