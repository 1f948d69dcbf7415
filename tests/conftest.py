import os
import pathlib
import stat
import typing

import attr
import click.testing
import pytest

import sopscrypt.cli
from sopscrypt.config import PREFIX, Config
from sopscrypt.sops import CryptoTransform
from sopscrypt.utils import TransformFailure

FAKE_SOPS = """#!/bin/sh
for arg in "$@"; do file="$arg"; done
echo "$*" >> "$FAKE_SOPS_LOG"
if grep -q FAIL "$file"; then
  echo "fake sops refused $file" >&2
  exit 1
fi
case "$*" in
  *--encrypt*) sed 's/^/ENC[/' "$file" ;;
  *--decrypt*) sed 's/^ENC\\[//' "$file" ;;
  *) exit 2 ;;
esac
"""


@attr.s
class FakeCrypto(CryptoTransform):
    failing: typing.Set[str] = attr.ib(factory=set)
    calls: typing.List[typing.Tuple[str, pathlib.Path]] = attr.ib(factory=list)

    def available(self):
        return True

    def _run(self, operation: str, path: pathlib.Path) -> bytes:
        self.calls.append((operation, path))
        if path.name in self.failing:
            raise TransformFailure("sops exited with status 1")
        return f"{operation}ed:".encode() + path.read_bytes()

    def encrypt(self, path):
        return self._run('encrypt', path)

    def decrypt(self, path):
        return self._run('decrypt', path)


def touch(path: pathlib.Path, text: str = '', mtime: typing.Optional[int] = None) -> pathlib.Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in list(os.environ):
        if name.startswith(PREFIX):
            monkeypatch.delenv(name)
    monkeypatch.setenv(f'{PREFIX}SEARCH_TOOL', 'find')


@pytest.fixture()
def config() -> Config:
    return Config(search_tool='find')


@pytest.fixture()
def crypto() -> FakeCrypto:
    return FakeCrypto()


@pytest.fixture()
def sops_log(tmp_path, monkeypatch) -> pathlib.Path:
    """Put a fake sops first on $PATH and return the file it logs calls to."""
    bin_dir = tmp_path / 'bin'
    bin_dir.mkdir()
    script = bin_dir / 'sops'
    script.write_text(FAKE_SOPS)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    log = tmp_path / 'sops.log'
    log.touch()
    monkeypatch.setenv('FAKE_SOPS_LOG', log.as_posix())
    monkeypatch.setenv('PATH', f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return log


@pytest.fixture()
def workdir(tmp_path, monkeypatch) -> pathlib.Path:
    directory = tmp_path / 'work'
    directory.mkdir()
    monkeypatch.chdir(directory)
    return directory


@pytest.fixture()
def invoke(sops_log, workdir):
    def invoke_func(arguments: typing.Sequence[str], exit_code: int = 0):
        assert all(isinstance(arg, str) for arg in arguments)
        runner = click.testing.CliRunner()
        result = runner.invoke(sopscrypt.cli.main, arguments)
        if result.exit_code != exit_code:
            message = (f"Command sops-crypt {' '.join(arguments)} exited with "
                       f"{result.exit_code}:\n{result.output}")
            raise Exception(message) from result.exception
        return result.output.splitlines()

    return invoke_func
