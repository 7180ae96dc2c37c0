from types import SimpleNamespace

from campus.responses import error_response, failure_response, success_response
from campus.utils.audience import is_recipient, is_visible_to_staff, matches_filter
from campus.utils.rate_limit import InMemoryRateLimiter


def _ann(role='STAFF', issuer='other', filter=None, is_global=False):
    return SimpleNamespace(role=role, issuer=issuer, filter=filter, is_global=is_global)


def test_envelopes():
    assert success_response(201, {'id': 1}, 'Created') == {'status': 201, 'message': 'Created', 'data': {'id': 1}}
    assert error_response(404, 'Nope') == {'status': 404, 'message': 'Nope'}
    assert failure_response('boom') == {'status': 500, 'message': 'boom'}


def test_matches_filter_any_entry():
    profile = {'department': 'CSE', 'batch': '2024'}
    assert matches_filter({'department': ['ECE'], 'batch': ['2024']}, profile)
    assert not matches_filter({'department': ['ECE']}, profile)
    assert not matches_filter({'department': 'CSE'}, profile)
    assert not matches_filter({'semester': [1]}, profile)
    assert not matches_filter(None, profile)


def test_staff_visibility_rules():
    profile = {'department': 'CSE'}
    assert is_visible_to_staff(_ann(role='STUDENT', is_global=True), 'me', profile)
    assert is_visible_to_staff(_ann(role='STAFF'), 'me', profile)
    assert not is_visible_to_staff(_ann(role='FACULTY'), 'me', profile)
    assert is_visible_to_staff(_ann(role='FACULTY', issuer='me'), 'me', profile)
    assert is_visible_to_staff(_ann(filter={'department': ['CSE']}), 'me', profile)
    assert not is_visible_to_staff(_ann(filter={'department': ['ECE']}), 'me', profile)
    assert not is_visible_to_staff(_ann(role='STUDENT', filter={'department': ['CSE']}), 'me', profile)


def test_recipient_rules():
    cse = {'department': 'CSE'}
    assert is_recipient(_ann(role='STUDENT', is_global=True), 'STAFF', None)
    assert is_recipient(_ann(role='STUDENT'), 'STUDENT', None)
    assert not is_recipient(_ann(role='STUDENT'), 'FACULTY', cse)
    assert is_recipient(_ann(role='STUDENT', filter={'department': ['CSE']}), 'STUDENT', cse)
    assert not is_recipient(_ann(role='STUDENT', filter={'department': ['CSE']}), 'STUDENT', None)


def test_rate_limiter_window():
    now = [100.0]
    limiter = InMemoryRateLimiter(clock=lambda: now[0])
    assert limiter.allow('k', 2, 60) == (True, 0)
    assert limiter.allow('k', 2, 60) == (True, 0)
    allowed, retry_after = limiter.allow('k', 2, 60)
    assert not allowed and retry_after == 60
    assert limiter.allow('other', 2, 60)[0]
    now[0] += 61
    assert limiter.allow('k', 2, 60) == (True, 0)


def test_rate_limiter_forgets_idle_clients():
    now = [0.0]
    limiter = InMemoryRateLimiter(clock=lambda: now[0])
    for host in ('10.0.0.1', '10.0.0.2', '10.0.0.3'):
        limiter.allow(host, 5, 60)
    assert limiter.tracked_keys() == 3
    now[0] += 120
    limiter.allow('10.0.0.4', 5, 60)
    assert limiter.tracked_keys() == 1
