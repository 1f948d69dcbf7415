import functools
import logging
import os
import pathlib
import typing

import attr
import click

from . import __doc__, __version__
from .batch import BatchOrchestrator
from .config import PREFIX, Config
from .outcomes import FileResult, OperationOutcome, Outcome
from .single import SingleFileOperation
from .sops import Sops
from .utils import PreconditionFailure, SopsCryptException, not_ignored

log = logging.getLogger(__name__)


@functools.lru_cache()
def rel(path: pathlib.Path) -> str:
    """
    Convert a path to a relative Path.

    Returns a string as these should only be used for presentation.
    """
    return os.path.relpath(path.as_posix(), pathlib.Path.cwd().as_posix())


def enc(path: pathlib.Path) -> str:
    """Style a path to a encrypted file."""
    return click.style(rel(path), fg='green')


def dec(path: pathlib.Path) -> str:
    """Style a path to a plaintext file."""
    return click.style(rel(path), fg='red')


def warn(message: str) -> None:
    click.secho(f"Warning: {message}", fg='yellow')


class PathType(click.Path):
    def convert(self, value, param, ctx):
        return pathlib.Path(super().convert(value, param, ctx))


@attr.s(frozen=True)
class Context:
    config: Config = attr.ib()
    sops: Sops = attr.ib()

    def batch(self) -> BatchOrchestrator:
        return BatchOrchestrator.create(self.config, self.sops, notify=echo_result)

    def single(self) -> SingleFileOperation:
        return SingleFileOperation(config=self.config, crypto=self.sops, warn=warn)


def echo_result(result: FileResult) -> None:
    if result.outcome is Outcome.ENCRYPTED:
        click.echo(f"Encrypted {dec(result.path)} to {enc(result.output)}")
    elif result.outcome is Outcome.DECRYPTED:
        click.echo(f"Decrypted {enc(result.path)} to {dec(result.output)}")
    elif result.outcome is Outcome.SKIPPED:
        click.echo(f"Skipping {dec(result.path)} as {enc(result.output)} is up to date")
    elif result.outcome is Outcome.FAILED:
        click.secho(
            f"Failed to {result.mode.value}: {rel(result.path)} ({result.reason})",
            fg='red')
    else:
        warn(result.reason)


def echo_summary(outcome: OperationOutcome) -> None:
    click.secho(outcome.summary(), fg='green')
    failures = outcome.failures()
    if failures:
        click.secho(failures, fg='red')


def check_gitignore(paths: typing.Iterable[pathlib.Path]) -> None:
    for path in not_ignored(paths):
        warn(f"Decrypted plaintext {rel(path)} is not excluded by .gitignore")


force_option = click.option(
    '-f', '--force',
    default=False,
    is_flag=True,
    help="Re-encrypt secrets even if the encrypted file is up to date.")


@click.group(help=__doc__)
@click.option(
    '-d', '--debug', 'debug',
    default=False,
    is_flag=True,
    help="Enable debug logging.")
@click.option(
    '-v', '--verbose', 'sops_verbose',
    default=False,
    is_flag=True,
    help="Run sops with --verbose.")
@click.pass_context
def main(ctx, debug: bool, sops_verbose: bool):
    logging.basicConfig(level=(logging.DEBUG if debug else logging.WARNING))
    sops = Sops(verbose=sops_verbose)
    if not sops.available():
        raise PreconditionFailure(
            "SOPS is not installed. Please install it first. "
            "Visit: https://github.com/getsops/sops")
    ctx.obj = Context(config=Config.from_environ(os.environ), sops=sops)


@main.command()
def version():
    """Show the application version."""
    click.echo(f"sops-crypt {__version__}")


@main.command(name='encrypt-all')
@force_option
@click.argument(
    'directory',
    type=PathType(file_okay=False),
    default='.',
    required=False)
@click.pass_obj
def encrypt_all(obj: Context, directory: pathlib.Path, force: bool):
    """
    Encrypt all secret files in a directory and its subdirectories.

    Secrets whose encrypted file is newer than the plaintext are skipped unless --force is given.
    """
    click.echo(f"Scanning for secret files to encrypt in {directory} and subdirectories...")
    outcome = obj.batch().encrypt_all(directory, force=force)
    echo_summary(outcome)


@main.command(name='decrypt-all')
@click.argument(
    'directory',
    type=PathType(file_okay=False),
    default='.',
    required=False)
@click.pass_obj
def decrypt_all(obj: Context, directory: pathlib.Path):
    """Decrypt all encrypted files in a directory and its subdirectories."""
    click.echo(f"Scanning for encrypted files to decrypt in {directory} and subdirectories...")
    outcome = obj.batch().decrypt_all(directory)
    echo_summary(outcome)
    check_gitignore(outcome.outputs)


@main.command()
@force_option
@click.argument('file', type=PathType(dir_okay=False), required=True)
@click.pass_obj
def encrypt(obj: Context, file: pathlib.Path, force: bool):
    """Encrypt a single secret file."""
    result = obj.single().encrypt_one(file, force=force)
    if result.outcome is Outcome.FAILED:
        raise SopsCryptException(f"Failed to encrypt: {rel(file)} ({result.reason})")
    echo_result(result)


@main.command()
@click.argument('file', type=PathType(dir_okay=False), required=True)
@click.pass_obj
def decrypt(obj: Context, file: pathlib.Path):
    """Decrypt a single encrypted file."""
    result = obj.single().decrypt_one(file)
    if result.outcome is Outcome.FAILED:
        raise SopsCryptException(f"Failed to decrypt: {rel(file)} ({result.reason})")
    echo_result(result)
    if result.outcome is Outcome.DECRYPTED:
        check_gitignore([result.output])


@main.command(name='show-config')
@click.pass_obj
def show_config(obj: Context):
    """Show the active configuration and how to override it."""
    config = obj.config
    click.echo("Current SOPS Crypt configuration:")
    for label, value in config.describe():
        click.echo(f"{label}: {value}")

    click.echo("\nFile naming examples:")
    click.echo(f"  Secret file:     config{config.secret_suffix}.yaml")
    click.echo(f"  Encrypted file:  "
               f"config{config.secret_suffix}{config.encrypted_infix}.yaml")

    click.echo("\nOverride configuration with environment variables:")
    for name, example in (
            ('FILE_PATTERNS', '*.yaml *.json *.env'),
            ('SECRET_SUFFIX', '-mysecret'),
            ('ENCRYPTED_INFIX', '.encrypted'),
            ('IGNORE_PATTERNS', 'node_modules .git dist'),
            ('SEARCH_TOOL', 'fd'),
            ('FD_PARAMS', '--type file --hidden --no-ignore'),
            ('FIND_PARAMS', '-type f')):
        click.echo(f'  export {PREFIX}{name}="{example}"')

    click.echo("\nSearch tool options: auto, fd, find")
    click.echo("")
    click.echo(click.get_current_context().find_root().get_help())
