"""
Configuration is read once from the environment and never changes afterwards.

Every setting can be overridden with a SOPS_CRYPT_* environment variable. Unset and empty
variables fall back to the defaults below.
"""

import logging
import typing

import attr

from .naming import NamingPolicy

log = logging.getLogger(__name__)

PREFIX = 'SOPS_CRYPT_'

DEFAULT_FILE_PATTERNS = ('*.yaml', '*.yml', '*.json', '*.env', '*.txt')
DEFAULT_SECRET_SUFFIX = '-secret'
DEFAULT_ENCRYPTED_INFIX = '.enc'
DEFAULT_IGNORE_PATTERNS = ('node_modules', '.git', '.svn', '.hg')
DEFAULT_SEARCH_TOOL = 'auto'
DEFAULT_FD_PARAMS = ('--type', 'file', '--hidden', '-g', '--no-ignore')
DEFAULT_FIND_PARAMS = ('-type', 'f')

SEARCH_TOOLS = ('auto', 'fd', 'find')


def _words(value: typing.Union[str, typing.Iterable[str]]) -> typing.Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


def _not_empty(instance, attribute, value):
    if not value:
        raise ValueError(f"{attribute.name} must not be empty")


@attr.s(frozen=True, kw_only=True)
class Config:
    file_patterns: typing.Tuple[str, ...] = attr.ib(
        default=DEFAULT_FILE_PATTERNS, converter=_words)
    secret_suffix: str = attr.ib(
        default=DEFAULT_SECRET_SUFFIX, validator=_not_empty)
    encrypted_infix: str = attr.ib(
        default=DEFAULT_ENCRYPTED_INFIX, validator=_not_empty)
    ignore_patterns: typing.Tuple[str, ...] = attr.ib(
        default=DEFAULT_IGNORE_PATTERNS, converter=_words)
    search_tool: str = attr.ib(default=DEFAULT_SEARCH_TOOL)
    fd_params: typing.Tuple[str, ...] = attr.ib(
        default=DEFAULT_FD_PARAMS, converter=_words)
    find_params: typing.Tuple[str, ...] = attr.ib(
        default=DEFAULT_FIND_PARAMS, converter=_words)

    @classmethod
    def from_environ(cls, environ: typing.Mapping[str, str]) -> 'Config':
        overrides = {}
        for field in attr.fields(cls):
            value = environ.get(PREFIX + field.name.upper(), '')
            if value.strip():
                overrides[field.name] = value.strip()

        config = cls(**overrides)
        if config.search_tool not in SEARCH_TOOLS:
            log.warning(f"Unknown search tool {config.search_tool!r}, "
                        f"treating it as 'auto'")
        log.debug(f"Loaded {config}")
        return config

    @property
    def naming(self) -> NamingPolicy:
        return NamingPolicy(
            secret_suffix=self.secret_suffix,
            encrypted_infix=self.encrypted_infix)

    def describe(self) -> typing.List[typing.Tuple[str, str]]:
        return [
            ("File patterns", ' '.join(self.file_patterns)),
            ("Secret suffix", self.secret_suffix),
            ("Encrypted infix", self.encrypted_infix),
            ("Ignore patterns", ' '.join(self.ignore_patterns)),
            ("Search tool", self.search_tool),
            ("FD parameters", ' '.join(self.fd_params)),
            ("Find parameters", ' '.join(self.find_params)),
        ]
