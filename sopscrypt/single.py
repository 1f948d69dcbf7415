import logging
import pathlib
import typing

import attr

from .batch import transform
from .config import Config
from .detection import SyncDecision, is_encrypted, sync_decision
from .discovery import Mode
from .outcomes import FileResult, Outcome
from .sops import CryptoTransform
from .utils import NotFound

log = logging.getLogger(__name__)


@attr.s(frozen=True, kw_only=True)
class SingleFileOperation:
    """Encrypt or decrypt one explicitly named file."""

    config: Config = attr.ib()
    crypto: CryptoTransform = attr.ib()
    warn: typing.Callable[[str], None] = attr.ib(default=log.warning)

    @staticmethod
    def require(path: pathlib.Path) -> None:
        if not path.is_file():
            raise NotFound(f"File not found: {path}")

    def encrypt_one(self, path: pathlib.Path, force: bool = False) -> FileResult:
        self.require(path)
        naming = self.config.naming

        if is_encrypted(path):
            return FileResult(
                mode=Mode.ENCRYPT, path=path, outcome=Outcome.ALREADY_ENCRYPTED,
                reason=f"File is already encrypted: {path}")

        if not naming.is_secret(path):
            self.warn(
                f"File doesn't follow the *{naming.secret_suffix}.* naming convention. "
                f"Files intended for encryption should be named like: "
                f"config{naming.secret_suffix}.yaml")

        output = naming.encrypted_path(path)
        if sync_decision(path, output, force=force) is SyncDecision.UP_TO_DATE:
            return FileResult(
                mode=Mode.ENCRYPT, path=path, outcome=Outcome.SKIPPED, output=output,
                reason=f"{output} is up to date")

        return transform(self.crypto.encrypt, path, output, Mode.ENCRYPT)

    def decrypt_one(self, path: pathlib.Path) -> FileResult:
        self.require(path)
        naming = self.config.naming

        if not is_encrypted(path):
            return FileResult(
                mode=Mode.DECRYPT, path=path, outcome=Outcome.NOT_ENCRYPTED,
                reason=f"File is not encrypted: {path}")

        if not naming.is_encrypted(path):
            self.warn(
                f"File doesn't follow the *{naming.encrypted_infix}.* naming convention. "
                f"Encrypted files should be named like: "
                f"config{naming.encrypted_infix}.yaml")

        output = naming.decrypted_path(path)
        return transform(self.crypto.decrypt, path, output, Mode.DECRYPT)
