import pytest

from conftest import touch
from sopscrypt.config import Config
from sopscrypt.outcomes import Outcome
from sopscrypt.single import SingleFileOperation
from sopscrypt.utils import NotFound


@pytest.fixture()
def warnings():
    return []


@pytest.fixture()
def single(config, crypto, warnings):
    return SingleFileOperation(config=config, crypto=crypto, warn=warnings.append)


def test_encrypt_one(tmp_path, single, crypto, warnings):
    path = touch(tmp_path / 'config-secret.yaml', 'a: 1\n')
    result = single.encrypt_one(path)
    assert result.outcome is Outcome.ENCRYPTED
    assert result.output == tmp_path / 'config-secret.enc.yaml'
    assert result.output.read_text() == 'encrypted:a: 1\n'
    assert crypto.calls == [('encrypt', path)]
    assert warnings == []


def test_encrypt_one_missing_file(tmp_path, single, crypto):
    with pytest.raises(NotFound, match="File not found"):
        single.encrypt_one(tmp_path / 'missing-secret.yaml')
    assert crypto.calls == []
    assert list(tmp_path.iterdir()) == []


def test_encrypt_one_already_encrypted(tmp_path, single, crypto):
    path = touch(tmp_path / 'config-secret.yaml', 'a: ENC[AES256_GCM,data:x]\n')
    result = single.encrypt_one(path)
    assert result.outcome is Outcome.ALREADY_ENCRYPTED
    assert result.outcome.skipped
    assert crypto.calls == []


def test_encrypt_one_warns_about_unconventional_name(tmp_path, single, warnings):
    path = touch(tmp_path / 'config.yaml')
    result = single.encrypt_one(path)
    assert result.outcome is Outcome.ENCRYPTED
    assert result.output == tmp_path / 'config.enc.yaml'
    assert len(warnings) == 1
    assert '*-secret.*' in warnings[0]


def test_encrypt_one_up_to_date(tmp_path, single, crypto):
    path = touch(tmp_path / 'a-secret.yaml', mtime=1000)
    touch(tmp_path / 'a-secret.enc.yaml', mtime=2000)
    assert single.encrypt_one(path).outcome is Outcome.SKIPPED
    assert single.encrypt_one(path, force=True).outcome is Outcome.ENCRYPTED
    assert crypto.calls == [('encrypt', path)]


def test_encrypt_one_failure(tmp_path, single, crypto):
    path = touch(tmp_path / 'a-secret.yaml')
    crypto.failing.add('a-secret.yaml')
    result = single.encrypt_one(path)
    assert result.outcome is Outcome.FAILED
    assert not (tmp_path / 'a-secret.enc.yaml').exists()


def test_decrypt_one(tmp_path, single, warnings):
    path = touch(tmp_path / 'a-secret.enc.yaml', 'sops:\n')
    result = single.decrypt_one(path)
    assert result.outcome is Outcome.DECRYPTED
    assert (tmp_path / 'a-secret.yaml').read_text() == 'decrypted:sops:\n'
    assert warnings == []


def test_decrypt_one_not_encrypted(tmp_path, single, crypto):
    path = touch(tmp_path / 'a-secret.enc.yaml', 'plain: text\n')
    assert single.decrypt_one(path).outcome is Outcome.NOT_ENCRYPTED
    assert crypto.calls == []


def test_decrypt_one_unconventional_name_writes_dec(tmp_path, single, warnings):
    path = touch(tmp_path / 'vault.yaml', 'token: ENC[x]\n')
    result = single.decrypt_one(path)
    assert result.output == tmp_path / 'vault.yaml.dec'
    assert result.output.exists()
    assert len(warnings) == 1
    assert '*.enc.*' in warnings[0]


def test_decrypt_one_missing_file(tmp_path, single):
    with pytest.raises(NotFound):
        single.decrypt_one(tmp_path / 'missing.enc.yaml')


def test_decrypt_one_never_overwrites_its_input(tmp_path, crypto):
    config = Config(search_tool='find', secret_suffix='.enc', encrypted_infix='.enc')
    single = SingleFileOperation(config=config, crypto=crypto)
    path = touch(tmp_path / 'a.enc.yaml', 'a: ENC[x]\n')

    result = single.decrypt_one(path)

    assert result.outcome is Outcome.FAILED
    assert result.reason == "output path is the input file"
    assert path.read_text() == 'a: ENC[x]\n'
    assert crypto.calls == []
