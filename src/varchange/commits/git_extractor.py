"""Extract commits with their diffs from git via subprocess."""

import re
import subprocess
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, Optional

from ..exceptions import ExtractionError, InvalidPathError
from ..logging_config import get_logger
from .models import ChangedArtifact, Commit

logger = get_logger(__name__)


class GitExtractor:
    """Stream ``git log -p`` output as :class:`Commit` objects.

    Commits are yielded oldest first so that results read as an evolution
    of the product line. Merge commits carry no diff and therefore arrive
    without artifacts.
    """

    # Prefixed to every commit header; diff lines never start with it
    COMMIT_MARKER = "__varchange_commit__"

    # Matches: "diff --git a/<old path> b/<new path>", optionally quoted
    _DIFF_HEADER_RE = re.compile(r'^diff --git "?a/(?P<old>.*?)"? "?b/(?P<new>.*?)"?$')

    def __init__(self, repo_path: str, max_commits: int = 0):
        self.repo_path = str(Path(repo_path).resolve())
        self.max_commits = max_commits

    def iter_commits(self) -> Iterator[Commit]:
        """Yield commits of the repository.

        Raises:
            InvalidPathError: If the path is not a directory
            ExtractionError: If the path is not a git repository or git
                cannot be run
        """
        self.ensure_repository()
        yield from self.parse_log(self._stream_log())

    def ensure_repository(self) -> None:
        """Raise unless the path is an existing git repository.

        Raises:
            InvalidPathError: If the path is not a directory
            ExtractionError: If the directory is not a git repository
        """
        if not Path(self.repo_path).is_dir():
            raise InvalidPathError(Path(self.repo_path), "not a directory")
        if not self._is_git_repo():
            raise ExtractionError(Path(self.repo_path), "not a git repository")

    def _is_git_repo(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, "rev-parse", "--git-dir"],
                capture_output=True,
                text=True,
                timeout=5,
            )
            return result.returncode == 0
        except (FileNotFoundError, subprocess.TimeoutExpired):
            return False

    def _log_command(self) -> list[str]:
        cmd = [
            "git",
            "-C",
            self.repo_path,
            "log",
            "--reverse",
            "--patch",
            "--no-color",
            "--no-ext-diff",
            "--no-renames",
            f"--format={self.COMMIT_MARKER}%H|%ci",
        ]
        if self.max_commits > 0:
            cmd.append(f"-n{self.max_commits}")
        return cmd

    def _stream_log(self) -> Iterator[str]:
        """Yield git log output line by line without buffering it all.

        stderr goes to a temporary file so that a chatty git cannot block
        on a full pipe while stdout is being read.
        """
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
            try:
                proc = subprocess.Popen(
                    self._log_command(),
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except FileNotFoundError as e:
                raise ExtractionError(Path(self.repo_path), f"git not available: {e}")

            try:
                stdout = proc.stdout
                if stdout is None:
                    return
                for line in stdout:
                    yield line.rstrip("\n")

                try:
                    proc.wait(timeout=30)
                except subprocess.TimeoutExpired:
                    logger.warning("git log did not exit after its output ended")
                    return
                if proc.returncode != 0:
                    stderr_file.seek(0)
                    logger.warning("git log failed: %s", stderr_file.read().strip())
            finally:
                if proc.poll() is None:
                    proc.kill()
                    proc.wait()
                if proc.stdout:
                    proc.stdout.close()

    @classmethod
    def parse_log(cls, lines: Iterable[str]) -> Iterator[Commit]:
        """Parse marker-delimited ``git log -p`` lines into commits.

        Each ``diff --git`` header starts a new artifact whose diff lines run
        until the next header or commit marker. The header itself is kept as
        the first diff line.
        """
        current_id: Optional[str] = None
        current_date = ""
        artifacts: list[ChangedArtifact] = []
        artifact_path: Optional[str] = None
        artifact_lines: list[str] = []

        def flush_artifact() -> None:
            if artifact_path is not None:
                artifacts.append(ChangedArtifact(artifact_path, tuple(artifact_lines)))

        for line in lines:
            if line.startswith(cls.COMMIT_MARKER):
                flush_artifact()
                if current_id is not None:
                    yield Commit(current_id, current_date, tuple(artifacts))

                header = line[len(cls.COMMIT_MARKER):]
                current_id, _, current_date = header.partition("|")
                artifacts = []
                artifact_path = None
                artifact_lines = []
                continue

            if current_id is None:
                continue

            match = cls._DIFF_HEADER_RE.match(line)
            if match:
                flush_artifact()
                artifact_path = match.group("new")
                artifact_lines = [line]
            elif artifact_path is not None:
                artifact_lines.append(line)

        flush_artifact()
        if current_id is not None:
            yield Commit(current_id, current_date, tuple(artifacts))
