import pytest

from conftest import FakeStore, fresh, stored_user
from userqr.detail import DetailLoader, clean_id, run_detached, run_inline
from userqr.errors import RecordNotFound
from userqr.store import UserStore


def test_scanned_visit_increments_once_per_loader(app):
    user = stored_user(no_of_times_scanned=3)
    store = FakeStore([user])
    loader = DetailLoader(store, dispatch=run_inline)

    # repeated renders of the same view
    snapshots = [loader.fetch_and_maybe_increment(user.id, scanned=True) for _ in range(3)]

    assert store.calls_of('update') == [('update', user.id, {'no_of_times_scanned': 4})]
    # the view renders the record as it was before the increment
    assert snapshots[0]['no_of_times_scanned'] == 3
    assert user.no_of_times_scanned == 4


def test_unscanned_visit_never_increments(app):
    user = stored_user()
    store = FakeStore([user])
    loader = DetailLoader(store, dispatch=run_inline)
    loader.fetch_and_maybe_increment(user.id, scanned=False)
    loader.fetch_and_maybe_increment(user.id, scanned=False)
    assert store.calls_of('update') == []
    assert loader.pending is None


def test_each_loader_counts_its_own_visit(app):
    user = stored_user()
    store = FakeStore([user])
    for _ in range(2):
        DetailLoader(store, dispatch=run_inline).fetch_and_maybe_increment(user.id, scanned=True)
    assert user.no_of_times_scanned == 2


def test_unknown_id_raises_not_found(app):
    loader = DetailLoader(FakeStore(), dispatch=run_inline)
    with pytest.raises(RecordNotFound):
        loader.fetch_and_maybe_increment('missing', scanned=True)


def test_failed_increment_is_logged_not_raised(app):
    user = stored_user(name='Kept')
    store = FakeStore([user], fail_update=True)
    snapshot = DetailLoader(store, dispatch=run_inline).fetch_and_maybe_increment(user.id, scanned=True)
    assert snapshot['name'] == 'Kept'
    assert user.no_of_times_scanned == 0


def test_id_suffix_from_malformed_link_is_ignored(app):
    user = stored_user()
    store = FakeStore([user])
    snapshot = DetailLoader(store, dispatch=run_inline).fetch_and_maybe_increment(f'{user.id}&utm=x')
    assert snapshot['id'] == user.id


@pytest.mark.parametrize('raw, expected', [
    ('abc', 'abc'),
    ('abc&scanned=true', 'abc'),
    ('', ''),
    (None, ''),
])
def test_clean_id(raw, expected):
    assert clean_id(raw) == expected


def test_detached_increment_reaches_database(app, make_user):
    user = make_user(no_of_times_scanned=5)
    loader = DetailLoader(UserStore(), dispatch=run_detached)

    snapshot = loader.fetch_and_maybe_increment(user.id, scanned=True)
    loader.pending.result(timeout=10)

    assert snapshot['no_of_times_scanned'] == 5
    assert fresh(user.id).no_of_times_scanned == 6
