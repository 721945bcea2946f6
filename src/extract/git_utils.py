"""Git access layer built on the git command line.

Everything the extraction pipeline and the status engine need from a
repository goes through :class:`Repo`: resolving refs, diffing commits
against their parents, reading blobs, blame and history walks.
"""

import re
import subprocess
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from common.constants import DEV_NULL, EMPTY_TREE_ID
from common.lazy import RestartableSequence
from common.logger import get_logger

logger = get_logger(__name__)

# Field separator for --format strings
_SEP = "\x1f"
_COMMIT_FORMAT = _SEP.join(["%H", "%P", "%an", "%ae", "%cI", "%s"])

_BLAME_HEADER = re.compile(r"^([0-9a-f]{40,64}) (\d+) (\d+)(?: (\d+))?$")

_REGULAR_FILE_MODES = ("100644", "100755")


class GitError(RuntimeError):
    """Raised when a git command fails."""


class CommitNotFoundError(GitError):
    """Raised when a ref or commit id cannot be resolved to a commit."""


class RefNotFoundError(GitError):
    """Raised when the ref of a status query cannot be resolved."""


class ChangeType(Enum):
    """Kind of change recorded for a path in a diff."""

    ADD = "A"
    MODIFY = "M"
    DELETE = "D"
    TYPE_CHANGE = "T"


@dataclass(frozen=True)
class AuthorIdentity:
    """Author of a line, as reported by blame."""

    name: str
    email: str


@dataclass(frozen=True)
class Commit:
    """A resolved commit."""

    id: str
    parent_ids: tuple[str, ...] = ()
    author_name: str = ""
    author_email: str = ""
    timestamp: str = ""
    summary: str = ""

    @property
    def short_id(self) -> str:
        return self.id[:7]


@dataclass(frozen=True)
class DiffEntry:
    """One changed path between two trees.

    ``new_path`` is ``/dev/null`` for deletions and ``old_path`` is
    ``/dev/null`` for additions, mirroring git's own diff headers.
    """

    old_path: str
    new_path: str
    change_type: ChangeType
    old_id: str
    new_id: str
    new_mode: str = field(default="100644")

    @property
    def is_deletion(self) -> bool:
        return self.change_type == ChangeType.DELETE or self.new_path == DEV_NULL

    @property
    def is_regular_file(self) -> bool:
        """False for gitlinks (submodules) and symlinks, which carry no text blob."""
        return self.new_mode in _REGULAR_FILE_MODES


class Repo:
    """A git repository on disk.

    Example:
        >>> repo = Repo.from_path("/src/my_app")
        >>> commit = repo.get_commit("master")
        >>> for parent_id, entries in repo.diff_with_parents(commit).items():
        ...     print(parent_id, [e.new_path for e in entries])
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def from_path(cls, path: str | Path) -> "Repo":
        """Open a repository from its working directory or its .git directory."""
        path = Path(path).expanduser().resolve()
        if path.name == ".git":
            path = path.parent
        return cls(path)

    # ------------------------------------------------------------------
    # Commits and refs

    def get_commit(self, ref: str) -> Commit:
        """
        Resolve a symbolic ref or commit id to a commit.

        Branches that were never checked out locally are looked up on every
        configured remote (``<remote>/<ref>``).

        Args:
            ref: Branch name, tag, ``HEAD``-style expression or commit id

        Returns:
            The resolved commit

        Raises:
            CommitNotFoundError: If nothing resolves
        """
        commit_id = self._rev_parse(ref)

        if commit_id is None:
            for remote in self._remotes():
                commit_id = self._rev_parse(f"{remote}/{ref}")
                if commit_id is not None:
                    break

        if commit_id is None:
            raise CommitNotFoundError(f"Could not resolve '{ref}' to a commit in {self.path}")

        output = self._run_git(["show", "-s", f"--format={_COMMIT_FORMAT}", commit_id])
        return _parse_commit_line(output.rstrip("\n"))

    def parent_ids_of(self, commit: Commit) -> list[str]:
        return list(commit.parent_ids)

    def parents_of(self, commit: Commit) -> list[Commit]:
        """Return the parents of a commit, in order (merge commits have several)."""
        return [self.get_commit(parent_id) for parent_id in commit.parent_ids]

    def refs_containing(self, commit_id: str) -> list[str]:
        """
        Return the names of all refs whose history contains a commit.

        ``HEAD`` comes first when it contains the commit, followed by full ref
        names (``refs/heads/...``, ``refs/remotes/...``, ``refs/tags/...``)
        in sorted order.
        """
        output = self._run_git(["for-each-ref", "--contains", commit_id, "--format=%(refname)"])
        refs = [line.strip() for line in output.splitlines() if line.strip()]

        head = subprocess.run(
            ["git", "merge-base", "--is-ancestor", commit_id, "HEAD"],
            cwd=self.path,
            capture_output=True,
            text=True,
        )
        if head.returncode == 0:
            refs.insert(0, "HEAD")

        return refs

    def commit_count(self) -> int:
        """Return the total number of commits reachable from any ref."""
        return int(self._run_git(["rev-list", "--all", "--count"]).strip())

    def each_commit(self) -> RestartableSequence:
        """Lazily yield every commit in the repository, oldest first."""
        return RestartableSequence(
            self._stream_commits, ["log", "--all", "--reverse", f"--format={_COMMIT_FORMAT}"]
        )

    def each_commit_in_range(self, start_ref: str, end_ref: str) -> RestartableSequence:
        """
        Lazily yield the commits between two refs, newest first.

        Both ends are included: ``start_ref`` is the newest commit and
        ``end_ref`` the oldest one of the walk.
        """
        start = self.get_commit(start_ref)
        end = self.get_commit(end_ref)
        args = ["log", f"--format={_COMMIT_FORMAT}", start.id]
        if end.parent_ids:
            args += ["--not", *end.parent_ids]
        return RestartableSequence(self._stream_commits, args)

    # ------------------------------------------------------------------
    # Diffs and objects

    def diff(self, from_ref: str, to_ref: str) -> list[DiffEntry]:
        """
        Get the changed paths between two commits (or trees).

        Renames are reported as a deletion plus an addition.

        Args:
            from_ref: Older side of the diff
            to_ref: Newer side of the diff

        Returns:
            One DiffEntry per changed path
        """
        output = self._run_git(
            ["diff-tree", "-r", "-z", "--raw", "--no-renames", from_ref, to_ref]
        )
        return _parse_raw_diff(output)

    def diff_with_parents(self, commit: Commit) -> dict[str, list[DiffEntry]]:
        """
        Diff a commit against each of its parents.

        Root commits are diffed against the empty tree, keyed by its id.

        Returns:
            Mapping of parent id to the entries changed relative to that parent
        """
        parent_ids = commit.parent_ids or (EMPTY_TREE_ID,)
        return {parent_id: self.diff(parent_id, commit.id) for parent_id in parent_ids}

    def read_object_bytes(self, object_id: str) -> bytes:
        """Return the raw contents of a blob."""
        result = subprocess.run(
            ["git", "cat-file", "blob", object_id],
            cwd=self.path,
            capture_output=True,
        )
        if result.returncode != 0:
            message = result.stderr.decode("utf-8", errors="replace").strip()
            raise GitError(f"Could not read object {object_id}: {message}")
        return result.stdout

    def blame(self, path: str, commit_id: str) -> dict[int, AuthorIdentity]:
        """
        Attribute every line of a file at a commit to its author.

        Uses: git blame --porcelain commit_id -- path

        Args:
            path: Path of the file, relative to the repository root
            commit_id: Commit to blame at

        Returns:
            Mapping of 1-based line number to the author of that line
        """
        output = self._run_git(["blame", "--porcelain", commit_id, "--", path])
        return _parse_porcelain_blame(output)

    # ------------------------------------------------------------------
    # Internals

    def _rev_parse(self, ref: str) -> str | None:
        result = subprocess.run(
            ["git", "rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}"],
            cwd=self.path,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def _remotes(self) -> list[str]:
        output = self._run_git(["remote"])
        return [line.strip() for line in output.splitlines() if line.strip()]

    def _run_git(self, args: Sequence[str]) -> str:
        """Run a git sub-command and return its stdout."""
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=self.path,
                capture_output=True,
                text=True,
                errors="replace",
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"git {' '.join(args)} failed in {self.path}: {e.stderr.strip()}"
            ) from e
        except OSError as e:
            raise GitError(f"Could not run git in {self.path}: {e}") from e
        return result.stdout

    def _stream_commits(self, args: Sequence[str]) -> Iterator[Commit]:
        for line in self._stream_git_lines(args):
            if line:
                yield _parse_commit_line(line)

    def _stream_git_lines(self, args: Sequence[str]) -> Iterator[str]:
        """Yield stdout lines of a git command as they are produced."""
        process = subprocess.Popen(
            ["git", *args],
            cwd=self.path,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
        finished = False
        try:
            for line in process.stdout:
                yield line.rstrip("\n")
            finished = True
        finally:
            if not finished:
                process.kill()
            process.stdout.close()
            stderr = process.stderr.read()
            process.stderr.close()
            returncode = process.wait()

        if returncode != 0:
            raise GitError(f"git {' '.join(args)} failed in {self.path}: {stderr.strip()}")

    def __repr__(self) -> str:
        return f"Repo(path={self.path})"


def _parse_commit_line(line: str) -> Commit:
    commit_id, parents, author_name, author_email, timestamp, summary = line.split(_SEP, 5)
    return Commit(
        id=commit_id,
        parent_ids=tuple(parents.split()),
        author_name=author_name,
        author_email=author_email,
        timestamp=timestamp,
        summary=summary,
    )


def _parse_raw_diff(output: str) -> list[DiffEntry]:
    """
    Parse ``git diff-tree -r -z --raw --no-renames`` output.

    Format: ``:<old mode> <new mode> <old id> <new id> <status>\\0<path>\\0``
    """
    tokens = output.split("\0")
    entries: list[DiffEntry] = []

    index = 0
    while index + 1 < len(tokens):
        header = tokens[index]
        path = tokens[index + 1]
        index += 2

        if not header.startswith(":"):
            continue

        old_mode, new_mode, old_id, new_id, status = header[1:].split(" ")
        status = status[:1]

        if status == "A":
            change_type = ChangeType.ADD
        elif status == "D":
            change_type = ChangeType.DELETE
        elif status == "T":
            change_type = ChangeType.TYPE_CHANGE
        else:
            if status != "M":
                logger.warning(f"Unknown git status '{status}' for {path}, treating as modified")
            change_type = ChangeType.MODIFY

        entries.append(
            DiffEntry(
                old_path=DEV_NULL if change_type == ChangeType.ADD else path,
                new_path=DEV_NULL if change_type == ChangeType.DELETE else path,
                change_type=change_type,
                old_id=old_id,
                new_id=new_id,
                new_mode=new_mode,
            )
        )

    return entries


def _parse_porcelain_blame(output: str) -> dict[int, AuthorIdentity]:
    # Author headers only appear the first time a commit shows up in the output
    commit_info: dict[str, dict[str, str]] = {}
    authors: dict[int, AuthorIdentity] = {}
    current_commit: str | None = None
    current_line: int | None = None

    for line in output.split("\n"):
        if line.startswith("\t"):
            if current_commit is not None and current_line is not None:
                info = commit_info.get(current_commit, {})
                authors[current_line] = AuthorIdentity(
                    name=info.get("author", ""),
                    email=info.get("author-mail", "").strip("<>"),
                )
            continue

        match = _BLAME_HEADER.match(line)
        if match:
            current_commit = match.group(1)
            current_line = int(match.group(3))
            commit_info.setdefault(current_commit, {})
            continue

        key, _, value = line.partition(" ")
        if current_commit is not None and key in ("author", "author-mail"):
            commit_info[current_commit][key] = value

    return authors
