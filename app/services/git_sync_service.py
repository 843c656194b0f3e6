"""Mirror of the upload directory in a remote git repository.

Two background tasks share one working copy:

* ``GitPullScheduler`` pulls the remote branch on a fixed interval.
* ``GitPushWorker`` drains the durable ``PendingSyncQueue`` and commits and
  pushes newly stored files.

Every git call goes through ``GitMirror``, which holds a lock so a pull and
a push never run against the working copy at the same time. Failures are
logged and left for the next cycle; they never reach request handlers.
"""

import asyncio
import base64
import logging
import threading
from datetime import datetime
from pathlib import Path

from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError
from sqlalchemy.orm import sessionmaker

from app.models.pending_sync import PendingSync

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Add new files"


class PendingSyncQueue:
    """Durable queue of upload paths waiting to be committed and pushed."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def enqueue(self, path: str) -> None:
        session = self.session_factory()
        try:
            if session.get(PendingSync, path) is None:
                session.add(PendingSync(path=path, queued_at=datetime.utcnow()))
                session.commit()
        finally:
            session.close()

    def pending(self, limit: int | None = None) -> list[str]:
        session = self.session_factory()
        try:
            query = session.query(PendingSync.path).order_by(PendingSync.queued_at.asc())
            if limit:
                query = query.limit(limit)
            return [path for (path,) in query.all()]
        finally:
            session.close()

    def remove(self, paths: list[str]) -> int:
        if not paths:
            return 0
        session = self.session_factory()
        try:
            removed = (
                session.query(PendingSync)
                .filter(PendingSync.path.in_(paths))
                .delete(synchronize_session=False)
            )
            session.commit()
            return removed
        finally:
            session.close()


class GitMirror:
    """Working copy of the media repository rooted at the upload directory."""

    def __init__(
        self,
        path: str | Path,
        repo_url: str,
        branch: str = "main",
        username: str | None = None,
        access_token: str | None = None,
        author_name: str | None = None,
        author_email: str | None = None,
    ):
        if not repo_url:
            raise ValueError("GIT_REPO_URL is required for git media storage")
        self.path = Path(path).resolve()
        self.repo_url = repo_url
        self.branch = branch
        self.username = username
        self.access_token = access_token
        self.author_name = author_name or username
        self.author_email = author_email
        self._repo: Repo | None = None
        self._lock = threading.Lock()

    def git_environment(self) -> dict[str, str]:
        """Environment that makes git send the access token as basic auth."""
        if not self.access_token:
            return {}
        credentials = f"{self.username or 'git'}:{self.access_token}"
        encoded = base64.b64encode(credentials.encode("utf-8")).decode("ascii")
        return {
            "GIT_CONFIG_COUNT": "1",
            "GIT_CONFIG_KEY_0": "http.extraheader",
            "GIT_CONFIG_VALUE_0": f"AUTHORIZATION: Basic {encoded}",
        }

    def prepare(self) -> Repo:
        with self._lock:
            return self._ensure_repo()

    def _ensure_repo(self) -> Repo:
        if self._repo is not None:
            return self._repo

        env = self.git_environment()
        try:
            repo = Repo(self.path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            if not self.path.exists() or not any(self.path.iterdir()):
                logger.info("Cloning media repository into %s", self.path)
                repo = Repo.clone_from(self.repo_url, self.path, env=env)
            else:
                logger.info("Initialising media repository in existing %s", self.path)
                repo = Repo.init(self.path)

        if "origin" in [remote.name for remote in repo.remotes]:
            if repo.remotes.origin.url != self.repo_url:
                repo.remotes.origin.set_url(self.repo_url)
        else:
            repo.create_remote("origin", self.repo_url)

        with repo.config_writer() as writer:
            if self.author_name:
                writer.set_value("user", "name", self.author_name)
            if self.author_email:
                writer.set_value("user", "email", self.author_email)

        if env:
            repo.git.update_environment(**env)
        self._repo = repo
        return repo

    def pull(self) -> bool:
        """Pull the remote branch. Returns True if HEAD moved."""
        with self._lock:
            repo = self._ensure_repo()
            before = repo.head.commit.hexsha if repo.head.is_valid() else None
            repo.remotes.origin.pull(self.branch, rebase=True)
            after = repo.head.commit.hexsha if repo.head.is_valid() else None
            return before != after

    def commit_and_push(self, paths: list[str]) -> None:
        """Stage the given paths, commit them if anything changed, and push."""
        with self._lock:
            repo = self._ensure_repo()
            existing = [path for path in paths if (self.path / path).exists()]
            # git CLI runs with cwd set per call; IndexFile.add chdirs the whole process
            if existing:
                repo.git.add("--", *existing)
            if repo.is_dirty(index=True, working_tree=False, untracked_files=False):
                repo.git.commit("-m", COMMIT_MESSAGE)
            if not repo.head.is_valid():
                return
            results = repo.remotes.origin.push(f"HEAD:refs/heads/{self.branch}")
            for info in results:
                if info.flags & info.ERROR:
                    raise RuntimeError(f"Push to {self.branch} rejected: {info.summary.strip()}")


class GitPullScheduler:
    """Background task that periodically pulls the media repository."""

    def __init__(self, mirror: GitMirror, interval_seconds: int, enabled: bool = True):
        self.mirror = mirror
        self.interval_seconds = max(interval_seconds, 1)
        self.enabled = enabled
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()

    async def start(self) -> None:
        if not self.enabled:
            logger.info("Media repository pulls disabled by configuration.")
            return
        if self._task and not self._task.done():
            return
        logger.info("Pulling media repository every %s seconds", self.interval_seconds)
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._stop_event.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            await self.pull_once()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def pull_once(self) -> None:
        try:
            changed = await asyncio.to_thread(self.mirror.pull)
        except Exception:
            logger.exception("Error pulling media repository updates")
            return
        if changed:
            logger.info("Media repository updated from remote")


class GitPushWorker:
    """Background task that commits and pushes queued uploads."""

    def __init__(
        self,
        mirror: GitMirror,
        queue: PendingSyncQueue,
        interval_seconds: int,
        enabled: bool = True,
    ):
        self.mirror = mirror
        self.queue = queue
        self.interval_seconds = max(interval_seconds, 1)
        self.enabled = enabled
        self._task: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event = asyncio.Event()
        self._wake_event = asyncio.Event()

    async def start(self) -> None:
        if not self.enabled:
            logger.info("Media repository pushes disabled by configuration.")
            return
        if self._task and not self._task.done():
            return
        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if not self._task:
            return
        self._stop_event.set()
        self._wake_event.set()
        await self._task
        self._task = None
        self._loop = None

    def notify(self) -> None:
        """Wake the worker; safe to call from any thread."""
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(self._wake_event.set)

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            self._wake_event.clear()
            await self.flush()
            try:
                await asyncio.wait_for(self._wake_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue

    async def flush(self) -> int:
        """Push everything currently queued. Returns the number of paths pushed."""
        try:
            paths = await asyncio.to_thread(self.queue.pending)
            if not paths:
                return 0
            await asyncio.to_thread(self.mirror.commit_and_push, paths)
            await asyncio.to_thread(self.queue.remove, paths)
        except Exception:
            logger.exception("Error committing and pushing media files")
            return 0
        logger.info("Committed and pushed %s media files", len(paths))
        return len(paths)
