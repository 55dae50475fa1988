"""
Session manager: who is signed in on this process.

Keeps one cached account in memory and mirrors it to a small
JSON file so a restart can pick the session back up without a
database round trip. Only this class writes the cache.

Sign-in is a lookup by book id plus an active check. Book ids
are not secrets, so this is identification rather than real
authentication.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.orm import sessionmaker

from gold_savings.errors import (
    InvalidCredentialError,
    NotFoundError,
    UnavailableError,
)
from gold_savings.schemas.account import AccountResponse
from gold_savings.services.account_directory import AccountDirectory

log = logging.getLogger("gold_savings.session")

CACHE_KEY = "user"


class SessionState(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


class SessionCache:
    """A single-file key/value store for the signed-in account."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def _write(self, data: dict) -> None:
        # Each write gets its own temp file; the rename is atomic
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.path.parent,
            prefix=self.path.name + ".",
            suffix=".tmp",
            delete=False,
        ) as f:
            json.dump(data, f, ensure_ascii=False)
        try:
            os.replace(f.name, self.path)
        except OSError:
            os.unlink(f.name)
            raise

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except ValueError:
            # Unparseable cache; overwrite it
            data = {}
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        if not self.path.exists():
            return
        try:
            data = self._read()
        except ValueError:
            self.path.unlink()
            return
        if data.pop(key, None) is None:
            return
        if data:
            self._write(data)
        else:
            self.path.unlink()


class SessionManager:
    """
    Owns the process's single session.

    Each lookup opens its own short-lived database session
    from session_factory, so refresh() always sees committed
    data rather than a request's identity map.

    One manager serves every request thread. Changes to the
    in-memory session and the cache file happen together
    under one lock, and memory only changes once the file
    write has succeeded.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        cache: SessionCache,
        remote_sign_out: Callable[[], None] | None = None,
    ):
        self.session_factory = session_factory
        self.cache = cache
        self.remote_sign_out = remote_sign_out
        self._account: AccountResponse | None = None
        self._lock = threading.Lock()
        self.loaded = False

    @property
    def current(self) -> AccountResponse | None:
        return self._account

    def _store(self, account: AccountResponse) -> None:
        with self._lock:
            try:
                self.cache.set(CACHE_KEY, account.model_dump_json())
            except OSError as e:
                log.error("session_cache_write_failed path=%s error=%s", self.cache.path, e)
                raise UnavailableError("Session cache could not be written") from e
            self._account = account

    def restore(self) -> SessionState:
        """
        Load a persisted session, if any. Never touches the database.

        A cache that cannot be read or parsed is treated as no
        session at all.
        """
        with self._lock:
            try:
                raw = self.cache.get(CACHE_KEY)
                self._account = (
                    AccountResponse.model_validate_json(raw) if raw else None
                )
            except (OSError, ValueError, SchemaValidationError) as e:
                log.warning("session_restore_failed path=%s error=%s", self.cache.path, e)
                self._account = None
            finally:
                self.loaded = True

            return SessionState.PRESENT if self._account else SessionState.ABSENT

    def authenticate(self, bookid: str) -> AccountResponse:
        """
        Sign in with a book id.

        Unknown and inactive book ids get the same error. On
        failure the existing session, if any, is left alone.
        """
        with self.session_factory() as db:
            try:
                account = AccountDirectory(db).get_account_by_bookid(bookid)
            except NotFoundError:
                account = None
            if account is None or not account.is_active:
                log.info("sign_in_rejected bookid=%s", bookid)
                raise InvalidCredentialError("Invalid Book ID or inactive account")
            snapshot = AccountResponse.model_validate(account)

        self._store(snapshot)
        log.info("sign_in account=%s", snapshot.id)
        return snapshot

    def refresh(self, account_id: int) -> AccountResponse | None:
        """
        Re-read an account and overwrite the cached session.

        If the read or the cache write fails the previous
        session stays in place; a stale balance is better than
        none. Returns whatever session is current afterwards.
        """
        try:
            with self.session_factory() as db:
                account = AccountDirectory(db).get_account(account_id)
                snapshot = AccountResponse.model_validate(account)
            self._store(snapshot)
        except (NotFoundError, UnavailableError) as e:
            log.warning("session_refresh_failed account=%s error=%s", account_id, e)
            return self._account

        return snapshot

    def sign_out(self) -> None:
        """Drop the session locally, whatever the remote side says."""
        if self.remote_sign_out is not None:
            try:
                self.remote_sign_out()
            except Exception as e:
                log.error("remote_sign_out_failed error=%s", e)

        with self._lock:
            self._account = None
            try:
                self.cache.remove(CACHE_KEY)
            except OSError as e:
                log.error("session_cache_clear_failed path=%s error=%s", self.cache.path, e)
