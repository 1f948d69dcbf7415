"""
Map plaintext secret paths to encrypted paths and back.

With the default tokens 'config-secret.yaml' and 'config-secret.enc.yaml' form a pair.

The mapping back to plaintext always produces a name ending in the secret suffix, so
'config.yaml' encrypts to 'config.enc.yaml' but that decrypts to 'config-secret.yaml'.
"""

import pathlib
import typing

import attr

DECRYPTED_FALLBACK_SUFFIX = '.dec'


def split_extension(path: pathlib.Path) -> typing.Tuple[str, str]:
    """
    Split a file name into a base and its final extension, including the dot.

    A name without a dot has an empty extension. A name that starts with its
    only dot ('.env') is all extension.
    """
    base, dot, ext = path.name.rpartition('.')
    if not dot:
        return path.name, ''
    return base, f'.{ext}'


def is_conventionally_named(path: pathlib.Path, token: str) -> bool:
    return token in str(path)


@attr.s(frozen=True, kw_only=True)
class NamingPolicy:
    secret_suffix: str = attr.ib()
    encrypted_infix: str = attr.ib()

    def encrypted_path(self, path: pathlib.Path) -> pathlib.Path:
        """'dir/config-secret.yaml' -> 'dir/config-secret.enc.yaml'"""
        base, ext = split_extension(path)
        return path.with_name(f'{base}{self.encrypted_infix}{ext}')

    def decrypted_path(self, path: pathlib.Path) -> pathlib.Path:
        """
        'dir/config-secret.enc.yaml' -> 'dir/config-secret.yaml'

        The secret suffix is appended when the remaining base lacks it. Paths
        without the encrypted infix in front of their extension get '.dec'
        appended instead.
        """
        base, ext = split_extension(path)
        if not base.endswith(self.encrypted_infix):
            return path.with_name(f'{path.name}{DECRYPTED_FALLBACK_SUFFIX}')

        base = base[:-len(self.encrypted_infix)]
        if not base.endswith(self.secret_suffix):
            base = f'{base}{self.secret_suffix}'
        return path.with_name(f'{base}{ext}')

    def is_secret(self, path: pathlib.Path) -> bool:
        return is_conventionally_named(path, self.secret_suffix)

    def is_encrypted(self, path: pathlib.Path) -> bool:
        return is_conventionally_named(path, self.encrypted_infix)

    def name_filter(self, pattern: str, encrypted: bool) -> str:
        """
        Convert a file pattern like '*.yaml' to a name glob for discovery.

        Selects '*-secret.yaml' for plaintext and '*.enc.yaml' for encrypted files.
        """
        ext = pattern.split('.', 1)[-1]
        token = self.encrypted_infix if encrypted else self.secret_suffix
        return f'*{token}.{ext}'
