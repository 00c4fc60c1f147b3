# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: account-scoped unit of work.

Every roster operation runs as one locked cycle:
    lock(account) ─► load fresh snapshot ─► mutate ─► commit dirty documents ─► unlock

Concurrent requests for the same account are serialized, so each one sees the
previous one's committed state. An operation that raises never commits.
"""

import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from guild_roster.core.errors import RosterError
from guild_roster.core.logging import get_logger
from guild_roster.metrics.prometheus import COMMIT_LATENCY, OPERATION_FAILURES
from guild_roster.models.snapshot import GROUPS, MEMBERS, PARTIES, RosterSnapshot
from guild_roster.repositories.member_repository import MemberRepository
from guild_roster.repositories.roster_repository import RosterRepository

logger = get_logger(__name__)


class AccountLocks:
    """Lazily created mutex per account id."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def for_account(self, account_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[account_id] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)


class RosterUnitOfWork:
    """Loads, locks and commits account roster snapshots."""

    def __init__(
        self,
        store,
        roster_repo: RosterRepository,
        member_repo: MemberRepository,
        locks: Optional[AccountLocks] = None,
    ) -> None:
        self._store = store
        self._rosters = roster_repo
        self._members = member_repo
        self._locks = locks or AccountLocks()

    @property
    def store(self):
        return self._store

    def lock(self, account_id: str) -> threading.Lock:
        return self._locks.for_account(account_id)

    def load(self, account_id: str) -> RosterSnapshot:
        return RosterSnapshot(
            account_id=account_id,
            groups=self._rosters.load_groups(account_id),
            parties=self._rosters.load_parties(account_id),
            members=self._members.load_members(account_id),
        )

    def read(self, account_id: str) -> RosterSnapshot:
        """Consistent read-only snapshot, taken while no writer holds the account."""
        with self._locks.for_account(account_id):
            return self.load(account_id)

    @contextmanager
    def session(self, account_id: str, operation: str = "roster") -> Iterator[RosterSnapshot]:
        with self._locks.for_account(account_id):
            snapshot = self.load(account_id)
            try:
                yield snapshot
            except RosterError as exc:
                OPERATION_FAILURES.labels(operation=operation, reason=exc.reason).inc()
                logger.info(
                    "Operation rejected: reason=%s detail=%s", exc.reason, exc,
                    extra={"account_id": account_id, "operation": operation},
                )
                raise
            self.commit(snapshot)

    def commit(self, snapshot: RosterSnapshot) -> None:
        """Write every dirty document family in a single store call."""
        documents = {}
        if snapshot.is_dirty(GROUPS):
            documents.update(self._rosters.group_documents(snapshot.groups))
        if snapshot.is_dirty(PARTIES):
            documents.update(self._rosters.party_documents(snapshot.parties))
        if snapshot.is_dirty(MEMBERS):
            documents.update(self._members.member_documents(snapshot.members))
        if not documents:
            return

        start = time.time()
        self._store.put_many(snapshot.account_id, documents)
        COMMIT_LATENCY.observe(time.time() - start)
        snapshot.dirty.clear()
