import logging
import pathlib
import shutil
import subprocess
import typing

import attr

from .utils import TransformFailure

log = logging.getLogger(__name__)


class CryptoTransform:
    """Turns a file into encrypted or decrypted bytes without touching the file."""

    def available(self) -> bool:
        raise NotImplementedError

    def encrypt(self, path: pathlib.Path) -> bytes:
        raise NotImplementedError

    def decrypt(self, path: pathlib.Path) -> bytes:
        raise NotImplementedError


@attr.s(frozen=True)
class Sops(CryptoTransform):
    verbose: bool = attr.ib(default=False)
    binary: str = attr.ib(default='sops')

    def available(self) -> bool:
        return shutil.which(self.binary) is not None

    def command(self, arguments: typing.Sequence[str]) -> typing.Tuple[str, ...]:
        command: typing.Tuple[str, ...] = (self.binary,)
        if self.verbose:
            command = (*command, '--verbose')
        return (*command, *arguments)

    def run(self, arguments: typing.Sequence[str]) -> bytes:
        command = self.command(arguments)
        log.debug(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True)
        except FileNotFoundError as error:
            raise TransformFailure(f"Could not run {self.binary}: {error}")
        except subprocess.CalledProcessError as error:
            for line in error.stderr.decode('utf-8', 'replace').splitlines():
                log.error(line)
            raise TransformFailure(
                f"{self.binary} exited with status {error.returncode}")

        if self.verbose:
            for line in result.stderr.decode('utf-8', 'replace').splitlines():
                log.info(line)
        return result.stdout

    def encrypt(self, path: pathlib.Path) -> bytes:
        log.debug(f"Encrypting {path}")
        return self.run(['--encrypt', str(path)])

    def decrypt(self, path: pathlib.Path) -> bytes:
        log.debug(f"Decrypting {path}")
        return self.run(['--decrypt', str(path)])


def write_output(path: pathlib.Path, content: bytes) -> None:
    if not path.parent.exists():
        path.parent.mkdir(parents=True)
    path.write_bytes(content)
