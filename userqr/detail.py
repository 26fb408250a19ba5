"""
Detail view loading and the scan counter.

Opening a detail link with ``?scanned=true`` (the link stored in every QR
code) bumps ``no_of_times_scanned``. The write is detached from rendering and
guarded by a one-shot latch on the loader, so one loader never increments
twice. There is no store-side deduplication: every request builds its own
loader, hence every reload counts.
"""

from concurrent.futures import Future, ThreadPoolExecutor

from flask import current_app

from .errors import UserQRError

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='detached-write')


def run_detached(fn, *args):
    """Run ``fn`` on the background executor inside a fresh app context."""
    app = current_app._get_current_object()

    def job():
        with app.app_context():
            fn(*args)

    return _executor.submit(job)


def run_inline(fn, *args):
    """Synchronous stand-in for ``run_detached`` (tests, CLI)."""
    future = Future()
    fn(*args)
    future.set_result(None)
    return future


def default_dispatch():
    if current_app.config.get('DETACHED_WRITES', True):
        return run_detached
    return run_inline


def clean_id(raw_id):
    """Strip anything a malformed scan link glued onto the id (``<id>&foo=bar``)."""
    return str(raw_id or '').split('&')[0]


class DetailLoader:

    def __init__(self, store, dispatch=None):
        self.store = store
        self.dispatch = dispatch or default_dispatch()
        self.pending = None
        self._incremented = False

    def fetch_and_maybe_increment(self, user_id, scanned=False):
        """
        Load one user and, for scanned visits, dispatch the counter update once.

        Returns a dict snapshot taken before the increment; raises
        ``RecordNotFound`` when the id is unknown.
        """
        user = self.store.fetch_one(clean_id(user_id))
        snapshot = user.to_dict()

        if scanned and not self._incremented:
            self._incremented = True
            self.pending = self.dispatch(
                self._increment, snapshot['id'], snapshot['no_of_times_scanned'] + 1
            )
        return snapshot

    def _increment(self, user_id, new_count):
        try:
            self.store.update(user_id, {'no_of_times_scanned': new_count})
        except UserQRError:
            current_app.logger.exception(f'Failed to record scan for user {user_id}')
            return
        current_app.logger.info(f'Scan recorded for user {user_id}: {new_count}')
