"""
Find candidate files by name with fd or find.
"""

import enum
import logging
import os
import pathlib
import shutil
import subprocess
import typing

import attr

from .config import Config
from .utils import PreconditionFailure

log = logging.getLogger(__name__)

Which = typing.Callable[[str], typing.Optional[str]]


class Mode(enum.Enum):
    ENCRYPT = 'encrypt'
    DECRYPT = 'decrypt'


@attr.s(frozen=True)
class SearchBackend:
    params: typing.Tuple[str, ...] = attr.ib(converter=tuple)

    name: typing.ClassVar[str] = ''

    def command(
            self,
            root: pathlib.Path,
            name_filter: str,
            ignore_patterns: typing.Sequence[str]) -> typing.Tuple[str, ...]:
        raise NotImplementedError

    def search(
            self,
            root: pathlib.Path,
            name_filter: str,
            ignore_patterns: typing.Sequence[str]) -> typing.List[pathlib.Path]:
        command = self.command(root, name_filter, ignore_patterns)
        log.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL)
        except FileNotFoundError as error:
            raise PreconditionFailure(f"Could not run {self.name}: {error}")
        if result.returncode != 0:
            log.info(f"{self.name} exited with status {result.returncode}")
        return [pathlib.Path(os.fsdecode(line)) for line in result.stdout.splitlines() if line]


class FdBackend(SearchBackend):
    name = 'fd'

    def command(self, root, name_filter, ignore_patterns):
        excludes: typing.List[str] = []
        for pattern in ignore_patterns:
            excludes += ['-E', pattern]
        return ('fd', *self.params, *excludes, name_filter, str(root))


class FindBackend(SearchBackend):
    name = 'find'

    def command(self, root, name_filter, ignore_patterns):
        excludes: typing.List[str] = []
        for pattern in ignore_patterns:
            excludes += ['-not', '-path', f'*{pattern}*']
        return ('find', str(root), *self.params, *excludes, '-name', name_filter)


def select_backend(config: Config, which: Which = shutil.which) -> SearchBackend:
    """
    Use find when asked for, otherwise prefer fd when it is installed.
    """
    if config.search_tool != 'find' and which('fd') is not None:
        return FdBackend(config.fd_params)
    if config.search_tool == 'fd':
        log.info("fd is not installed, falling back to find")
    return FindBackend(config.find_params)


@attr.s(frozen=True)
class FileDiscovery:
    config: Config = attr.ib()
    which: Which = attr.ib(default=shutil.which)

    def candidates(
            self,
            root: pathlib.Path,
            mode: Mode) -> typing.List[pathlib.Path]:
        """
        List files below root that match a file pattern for the given mode.

        Overlapping file patterns may list a file more than once.
        """
        backend = select_backend(self.config, self.which)
        naming = self.config.naming
        log.info(f"Searching for {mode.value} candidates in {root} with {backend.name}")

        paths: typing.List[pathlib.Path] = []
        for pattern in self.config.file_patterns:
            name_filter = naming.name_filter(
                pattern, encrypted=(mode is Mode.DECRYPT))
            paths += backend.search(root, name_filter, self.config.ignore_patterns)

        log.info(f"Found {len(paths)} candidates in {root}")
        return paths
