import logging
import pathlib
import typing

import click
import git

log = logging.getLogger(__name__)


class SopsCryptException(click.ClickException):
    pass


class PreconditionFailure(SopsCryptException):
    """A tool sops-crypt depends on is not installed."""


class NotFound(SopsCryptException):
    pass


class TransformFailure(SopsCryptException):
    """sops could not encrypt or decrypt a file."""


def find_git_repository(path: pathlib.Path) -> typing.Optional[git.Repo]:
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        return None


def in_directory(
        path: pathlib.Path,
        directory: pathlib.Path) -> bool:
    """Check if a path is a subpath of a directory."""
    try:
        path.relative_to(directory)
    except ValueError:
        return False
    else:
        return True


def not_ignored(paths: typing.Iterable[pathlib.Path]) -> typing.List[pathlib.Path]:
    """
    Return the paths that are inside a git working tree but not excluded by .gitignore.

    Paths outside of any git repository are never returned.
    """
    result: typing.List[pathlib.Path] = []
    for path in paths:
        path = path.resolve()
        repo = find_git_repository(path.parent)
        if repo is None or repo.working_dir is None:
            continue

        working_dir = pathlib.Path(repo.working_dir).resolve()
        if not in_directory(path, working_dir):
            continue

        log.debug(f"Checking {path} is ignored by {working_dir}")
        ignored = {(working_dir / line).resolve()
                   for line in repo.ignored(path.as_posix()) if line}
        if path not in ignored:
            result.append(path)
    return result
