import functools
import os
import stat
from pathlib import Path
from typing import Callable, Generator, Iterator, NamedTuple


class FileContext:
    """Context object for a file or directory during traversal.

    The path a context was created with may be a symlink target rather than the entry's location
    in the tree, so callers should use relative_path to name entries and path only to read them.
    """
    def __init__(self, parent: 'FileContext | None', name: str | None, path: Path | None = None,
                 st: os.stat_result | None = None):
        self._parent = parent
        self._name = name
        self._path = path
        self._stat = st

    @property
    def parent(self) -> 'FileContext':
        if self._parent is None:
            raise LookupError("no parent")

        return self._parent

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def stat(self) -> os.stat_result:
        if self._stat is None:
            if self._path is None:
                raise LookupError("stat not available and path not provided")
            self._stat = self._path.stat(follow_symlinks=False)
        return self._stat

    @functools.cached_property
    def relative_path(self) -> Path | None:
        """Path from the walk root to this entry, or None for the root itself."""
        if self._name is None:
            return None

        parent_path = self._parent.relative_path if self._parent is not None else None
        if parent_path is None:
            return Path(self._name)

        return parent_path / self._name

    def is_file(self) -> bool:
        return stat.S_ISREG(self.stat.st_mode)

    def is_dir(self) -> bool:
        return stat.S_ISDIR(self.stat.st_mode)

    def is_symlink(self) -> bool:
        return stat.S_ISLNK(self.stat.st_mode)

    def substitute(self, target: Path) -> 'FileContext':
        """Create a context at the same tree position whose content comes from target."""
        return FileContext(self._parent, self._name, target, target.stat())


def walk(path: Path, parent: FileContext) -> Generator[tuple[Path, FileContext], None | bool | FileContext, None]:
    """Recursively traverse a directory in name order.

    The consumer may send False to skip an entry (and its subtree), or a substitute FileContext
    to replace the entry's context before it is descended into.
    """
    for child in sorted(path.iterdir(), key=lambda p: p.name):
        context = FileContext(parent, child.name, path=child)
        substitute_context = yield child, context

        if substitute_context is False:
            continue
        elif substitute_context is not True and substitute_context is not None:
            context = substitute_context

        if context.is_dir():
            yield from walk(child, context)


class WalkPolicy(NamedTuple):
    """Policy controlling filesystem traversal behavior.

    Attributes:
        excluded_paths: Set of relative paths to exclude from traversal
        should_follow_symlink: Function that takes (absolute_path, file_context) and returns
                              a substitute FileContext if symlink should be followed, or None
    """
    excluded_paths: set[Path]
    should_follow_symlink: Callable[[Path, FileContext], FileContext | None]


def walk_with_policy(path: Path, policy: WalkPolicy) -> Iterator[tuple[Path, FileContext]]:
    """Walk a tree, applying the policy's exclusions and symlink decisions.

    Args:
        path: Root directory to walk; the root itself is not yielded
        policy: WalkPolicy instance controlling walk behavior

    Yields:
        Tuples of (absolute_path, file_context) for each file/directory encountered
    """
    gen = walk(path, FileContext(None, None, path))
    pending = None

    try:
        while True:
            file_path, file_context = gen.send(pending)
            pending = None

            if file_context.relative_path in policy.excluded_paths:
                pending = False
                continue

            substitute = policy.should_follow_symlink(file_path, file_context)
            if substitute is not None:
                pending = file_context = substitute

            yield file_path, file_context
    except StopIteration:
        pass


def is_walk_ancestor(context: FileContext, target_stat: os.stat_result) -> bool:
    """Tell whether target_stat identifies a directory enclosing context in the current walk.

    Directories are compared by device and inode, so aliases through symlinked path components
    are recognized. Descending into such a directory would never terminate.
    """
    identity = (target_stat.st_dev, target_stat.st_ino)
    current = context
    while True:
        try:
            current = current.parent
        except LookupError:
            return False
        if current.path is None:
            continue
        ancestor_stat = current.path.stat()
        if (ancestor_stat.st_dev, ancestor_stat.st_ino) == identity:
            return True
