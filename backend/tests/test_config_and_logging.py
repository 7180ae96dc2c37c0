import json
import logging

import pytest

from campus.config import Settings


def test_default_secret_refused_outside_dev(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.delenv('JWT_SECRET', raising=False)
    monkeypatch.setenv('ALLOW_INSECURE_JWT', 'false')
    with pytest.raises(RuntimeError):
        Settings()


def test_default_secret_allowed_when_explicitly_insecure(monkeypatch):
    monkeypatch.setenv('ENV', 'prod')
    monkeypatch.delenv('JWT_SECRET', raising=False)
    monkeypatch.setenv('ALLOW_INSECURE_JWT', 'true')
    assert Settings().ENV == 'prod'


def test_custom_secret_accepted_outside_dev(monkeypatch):
    monkeypatch.setenv('ENV', 'PROD')
    monkeypatch.setenv('JWT_SECRET', 'a-real-secret-value-for-production-use')
    monkeypatch.delenv('ALLOW_INSECURE_JWT', raising=False)
    s = Settings()
    assert s.ENV == 'prod'
    assert s.JWT_SECRET == 'a-real-secret-value-for-production-use'


def test_api_requests_are_logged_as_json(client, caplog):
    caplog.set_level(logging.INFO, logger='campus.api')
    r = client.get('/api/admin/department', headers={'X-Request-ID': 'log-1'})
    assert r.status_code == 200
    done = [rec.getMessage() for rec in caplog.records
            if rec.name == 'campus.api' and rec.getMessage().startswith('request_done ')]
    assert len(done) == 1
    entry = json.loads(done[0].split(' ', 1)[1])
    assert entry['request_id'] == 'log-1'
    assert entry['path'] == '/api/admin/department'
    assert entry['method'] == 'GET'
    assert entry['status_code'] == 200
    assert entry['duration_ms'] >= 0


def test_non_api_requests_are_not_logged(client, caplog):
    caplog.set_level(logging.INFO, logger='campus.api')
    client.get('/health')
    assert not [rec for rec in caplog.records if rec.name == 'campus.api']
