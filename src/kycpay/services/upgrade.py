"""UpgradeService — ledger schema migration with Alembic.

Pipeline: IDENTIFY → BACKUP → MIGRATE → REPORT

- IDENTIFY: read the deployed ledger's name and address (if initialized).
- BACKUP: snapshot the ledger database and its token sandbox together,
  named after the ledger so several ledgers can share a backups folder.
- MIGRATE: upgrade to head, or stamp a database that predates version
  tracking at the revision its tables already match.
- REPORT: the revisions applied, oldest first, and the ledger identity.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from kycpay.domain.types import ErrorCode
from kycpay.infrastructure.database.engine import TOKEN_DB_FILENAME, db_path, state_dir
from kycpay.infrastructure.database.migrations import BASELINE_REVISION, build_config
from kycpay.services._helpers import now_compact
from kycpay.services.base import BaseService
from kycpay.services.result import ServiceResult

if TYPE_CHECKING:
    from kycpay.infrastructure.ledger import LedgerMeta

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def backup_stem(meta: LedgerMeta | None) -> str:
    """Backup file prefix: ``{name}-{address prefix}``, or ``kycpay`` before init."""
    if meta is None:
        return "kycpay"
    slug = _SLUG_RE.sub("-", meta.name.lower()).strip("-") or "ledger"
    return f"{slug}-{meta.address[2:10]}"


class UpgradeService(BaseService):
    """Handles ledger schema migrations via Alembic."""

    def _db_url(self) -> str:
        return f"sqlite:///{db_path(self._ledger.root)}"

    def _identity(self) -> LedgerMeta | None:
        with self._ledger.transaction() as txn:
            return txn.get_meta()

    def _unstamped_revision(self) -> str | None:
        """Revision an unversioned database's tables already match.

        ``None`` when there are no ledger tables yet.
        """
        insp = inspect(self._ledger.engine)
        tables = set(insp.get_table_names())
        if "ledger_meta" not in tables:
            return None
        wal_columns = {c["name"] for c in insp.get_columns("event_wal")}
        return "head" if "payer" in wal_columns else BASELINE_REVISION

    def _backup(self, meta: LedgerMeta | None) -> Path:
        """Copy the ledger and token databases into ``.kycpay/backups/``."""
        root = self._ledger.root
        backups = state_dir(root) / "backups"
        backups.mkdir(parents=True, exist_ok=True)
        target = backups / f"{backup_stem(meta)}-{now_compact()}.db"
        shutil.copy2(db_path(root), target)

        token_db = state_dir(root) / TOKEN_DB_FILENAME
        if token_db.exists():
            shutil.copy2(token_db, target.with_suffix(".token.db"))
        return target

    def check_pending(self) -> ServiceResult:
        """List pending migrations, oldest first, without applying."""
        op = "upgrade"

        try:
            cfg = build_config(self._db_url())
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._ledger.engine.connect() as conn:
                current = MigrationContext.configure(conn).get_current_revision()

            # Linear history: walk down from head until the current revision.
            pending: list[dict[str, Any]] = []
            for rev in script.walk_revisions():
                if rev.revision == current:
                    break
                pending.append({"revision": rev.revision, "description": rev.doc or ""})
            pending.reverse()
            meta = self._identity()
        except Exception as exc:
            return ServiceResult.failure(
                op, ErrorCode.CHECK_FAILED, f"Failed to check migrations: {exc}"
            )

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "ledger_name": meta.name if meta else None,
                "ledger_address": meta.address if meta else None,
                "pending_count": len(pending),
                "pending": pending,
                "current": current,
                "head": head,
            },
        )

    def apply(self, *, backup: bool = True) -> ServiceResult:
        """IDENTIFY → BACKUP → MIGRATE → REPORT pipeline.

        With *backup* False the snapshot step is skipped and the report's
        ``backup_path`` is None.
        """
        op = "upgrade"

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result
        checked = check_result.data
        identity = {key: checked[key] for key in ("ledger_name", "ledger_address")}

        if checked["pending_count"] == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    **identity,
                    "applied_count": 0,
                    "applied": [],
                    "current": checked["head"],
                    "message": "Ledger schema is already up to date",
                },
            )

        backup_path: Path | None = None
        if backup:
            try:
                backup_path = self._backup(self._identity())
            except OSError as exc:
                return ServiceResult.failure(op, ErrorCode.BACKUP_FAILED, f"Backup failed: {exc}")

        try:
            cfg = build_config(self._db_url())
            matched = self._unstamped_revision() if checked["current"] is None else None
            if matched is not None:
                command.stamp(cfg, matched)
            if matched != "head":
                command.upgrade(cfg, "head")
        except Exception as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.MIGRATION_FAILED,
                f"Migration failed: {exc}. Backup at: {backup_path or 'none'}",
                backup_path=str(backup_path) if backup_path else None,
            )

        applied = [p["revision"] for p in checked["pending"]]
        logger.debug(
            "Upgraded ledger %s through %s; backup at %s",
            identity["ledger_name"] or "(uninitialized)",
            ", ".join(applied),
            backup_path,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **identity,
                "applied_count": len(applied),
                "applied": applied,
                "current": checked["head"],
                "backup_path": str(backup_path) if backup_path else None,
            },
        )
