import enum
import logging
import pathlib

log = logging.getLogger(__name__)

# Top level metadata key written by sops, and the prefix of every encrypted value.
MARKERS = (b'sops:', b'ENC[')


class FileClassification(enum.Enum):
    PLAINTEXT = 'plaintext'
    ENCRYPTED = 'encrypted'


class SyncDecision(enum.Enum):
    NEEDS_ENCRYPT = 'needs-encrypt'
    UP_TO_DATE = 'up-to-date'
    NO_COUNTERPART = 'no-counterpart'


def classify(path: pathlib.Path) -> FileClassification:
    """
    Guess if a file has been encrypted by sops by looking for its markers.

    Unreadable files are classified as plaintext.
    """
    try:
        content = path.read_bytes()
    except OSError as error:
        log.warning(f"Could not read {path}, assuming it is plaintext: {error}")
        return FileClassification.PLAINTEXT

    if any(marker in content for marker in MARKERS):
        return FileClassification.ENCRYPTED
    return FileClassification.PLAINTEXT


def is_encrypted(path: pathlib.Path) -> bool:
    return classify(path) is FileClassification.ENCRYPTED


def sync_decision(
        plaintext: pathlib.Path,
        encrypted: pathlib.Path,
        force: bool = False) -> SyncDecision:
    if force:
        return SyncDecision.NEEDS_ENCRYPT

    if not encrypted.exists():
        return SyncDecision.NO_COUNTERPART

    if plaintext.stat().st_mtime_ns > encrypted.stat().st_mtime_ns:
        log.debug(f"{plaintext} is newer than {encrypted}")
        return SyncDecision.NEEDS_ENCRYPT

    return SyncDecision.UP_TO_DATE


def needs_encryption(plaintext: pathlib.Path, encrypted: pathlib.Path) -> bool:
    return sync_decision(plaintext, encrypted) is not SyncDecision.UP_TO_DATE
