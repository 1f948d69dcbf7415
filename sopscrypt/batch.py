import logging
import pathlib
import typing

import attr

from .config import Config
from .detection import SyncDecision, sync_decision
from .discovery import FileDiscovery, Mode
from .outcomes import FileResult, OperationOutcome, Outcome
from .sops import CryptoTransform, write_output
from .utils import TransformFailure

log = logging.getLogger(__name__)

Notify = typing.Callable[[FileResult], None]


def log_result(result: FileResult) -> None:
    log.info(f"{result.path}: {result.outcome.value} {result.reason}".rstrip())


@attr.s(frozen=True, kw_only=True)
class BatchOrchestrator:
    """
    Encrypt or decrypt every candidate file below a directory.

    A file that fails is recorded and the batch carries on with the next one.
    """

    config: Config = attr.ib()
    crypto: CryptoTransform = attr.ib()
    discovery: FileDiscovery = attr.ib()
    notify: Notify = attr.ib(default=log_result)

    @classmethod
    def create(cls, config: Config, crypto: CryptoTransform, **kwargs) -> 'BatchOrchestrator':
        return cls(config=config, crypto=crypto, discovery=FileDiscovery(config), **kwargs)

    def run(
            self,
            mode: Mode,
            directory: typing.Optional[pathlib.Path] = None,
            force: bool = False) -> OperationOutcome:
        root = directory if directory is not None else pathlib.Path('.')
        outcome = OperationOutcome(mode)

        for path in self.discovery.candidates(root, mode):
            if mode is Mode.ENCRYPT:
                result = self.encrypt(path, force=force)
            else:
                result = self.decrypt(path)
            outcome.record(result)
            self.notify(result)

        log.info(f"{mode.value}: {outcome.succeeded} succeeded, "
                 f"{outcome.skipped} skipped, {outcome.failed} failed")
        return outcome

    def encrypt_all(
            self,
            directory: typing.Optional[pathlib.Path] = None,
            force: bool = False) -> OperationOutcome:
        return self.run(Mode.ENCRYPT, directory, force=force)

    def decrypt_all(
            self,
            directory: typing.Optional[pathlib.Path] = None) -> OperationOutcome:
        return self.run(Mode.DECRYPT, directory)

    def encrypt(self, path: pathlib.Path, force: bool = False) -> FileResult:
        output = self.config.naming.encrypted_path(path)

        try:
            decision = sync_decision(path, output, force=force)
        except OSError as error:
            return failed(Mode.ENCRYPT, path, output, str(error))

        if decision is SyncDecision.UP_TO_DATE:
            return FileResult(
                mode=Mode.ENCRYPT, path=path, outcome=Outcome.SKIPPED, output=output,
                reason=f"{output} is up to date")

        return transform(self.crypto.encrypt, path, output, Mode.ENCRYPT)

    def decrypt(self, path: pathlib.Path) -> FileResult:
        output = self.config.naming.decrypted_path(path)
        return transform(self.crypto.decrypt, path, output, Mode.DECRYPT)


def failed(mode: Mode, path: pathlib.Path, output: pathlib.Path, reason: str) -> FileResult:
    log.error(f"Failed to {mode.value} {path}: {reason}")
    return FileResult(
        mode=mode, path=path, outcome=Outcome.FAILED, output=output, reason=reason)


def transform(
        operation: typing.Callable[[pathlib.Path], bytes],
        path: pathlib.Path,
        output: pathlib.Path,
        mode: Mode) -> FileResult:
    """Run a crypto operation on path and write the result to output."""
    if output.resolve() == path.resolve():
        return failed(mode, path, output, "output path is the input file")

    try:
        content = operation(path)
    except TransformFailure as error:
        return failed(mode, path, output, error.message)

    try:
        write_output(output, content)
    except OSError as error:
        return failed(mode, path, output, f"Could not write {output}: {error}")

    success = Outcome.ENCRYPTED if mode is Mode.ENCRYPT else Outcome.DECRYPTED
    return FileResult(mode=mode, path=path, outcome=success, output=output)
