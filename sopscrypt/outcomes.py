import enum
import pathlib
import typing

import attr

from .discovery import Mode


class Outcome(enum.Enum):
    ENCRYPTED = 'encrypted'
    DECRYPTED = 'decrypted'
    SKIPPED = 'skipped'
    FAILED = 'failed'
    ALREADY_ENCRYPTED = 'already-encrypted'
    NOT_ENCRYPTED = 'not-encrypted'

    @property
    def succeeded(self) -> bool:
        return self in (Outcome.ENCRYPTED, Outcome.DECRYPTED)

    @property
    def skipped(self) -> bool:
        return self in (Outcome.SKIPPED, Outcome.ALREADY_ENCRYPTED, Outcome.NOT_ENCRYPTED)


@attr.s(frozen=True, kw_only=True)
class FileResult:
    mode: Mode = attr.ib()
    path: pathlib.Path = attr.ib()
    outcome: Outcome = attr.ib()
    output: typing.Optional[pathlib.Path] = attr.ib(default=None)
    reason: str = attr.ib(default='')


@attr.s
class OperationOutcome:
    mode: Mode = attr.ib()
    results: typing.List[FileResult] = attr.ib(factory=list)

    def record(self, result: FileResult) -> None:
        self.results.append(result)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.outcome.succeeded)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.outcome.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.outcome is Outcome.FAILED)

    @property
    def outputs(self) -> typing.List[pathlib.Path]:
        return [r.output for r in self.results if r.outcome.succeeded and r.output]

    def summary(self) -> str:
        past = f'{self.mode.value.capitalize()}ed'
        if self.succeeded == 0 and self.skipped == 0:
            if self.mode is Mode.ENCRYPT:
                return "No secret files found to encrypt."
            return "No encrypted files found to decrypt."
        if self.succeeded == 0:
            return f"No files {past.lower()}, {self.skipped} files already up-to-date."
        if self.skipped:
            return (f"{past} {self.succeeded} files successfully, "
                    f"{self.skipped} files already up-to-date.")
        return f"{past} {self.succeeded} files successfully."

    def failures(self) -> typing.Optional[str]:
        if not self.failed:
            return None
        return f"Failed to {self.mode.value} {self.failed} files."
