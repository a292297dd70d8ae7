import os
import subprocess
import sys

import pytest

from gitplumb.keys import (
    SigningKeyNotSpecifiedError,
    SigningMethod,
    UnableToSignError,
    UnknownSigningMethodError,
    get_signing_command,
    get_signing_info,
    get_signing_key_info,
    get_signing_method,
    get_signing_program,
    parse_git_config,
    read_git_config,
    sign_git_object,
)
from gitplumb.repository import init_repository

GIT_CONFIG_1 = "user.signingkey abcdef\n"
GIT_CONFIG_2 = "user.signingkey abcdef\ngpg.format ssh\n"
GIT_CONFIG_3 = "user.signingkey abcdef\ngpg.format x509\n"
GIT_CONFIG_4 = "user.signingkey abcdef\ngpg.format abcdef\n"


@pytest.mark.parametrize(
    "text, method, key_info, program",
    [
        (GIT_CONFIG_1, SigningMethod.GPG, "abcdef", "gpg"),
        (GIT_CONFIG_2, SigningMethod.SSH, "abcdef", "ssh-keygen"),
        (GIT_CONFIG_3, SigningMethod.X509, "abcdef", "gpgsm"),
    ],
)
def test_get_signing_info(text, method, key_info, program):
    assert get_signing_info(parse_git_config(text)) == (method, key_info, program)


def test_get_signing_info_unknown_method():
    with pytest.raises(UnknownSigningMethodError):
        get_signing_info(parse_git_config(GIT_CONFIG_4))


def test_parse_git_config_joins_values_and_skips_bare_keys():
    text = "user.name Jane Doe\nbare.key\nuser.email jane.doe@example.com\n"
    assert parse_git_config(text) == {
        "user.name": "Jane Doe",
        "user.email": "jane.doe@example.com",
    }


def test_get_signing_method_defaults_to_gpg():
    assert get_signing_method({}) is SigningMethod.GPG


def test_get_signing_key_info_missing_is_empty():
    assert get_signing_key_info({}) == ""
    assert get_signing_key_info({"user.signingkey": "abc"}) == "abc"


@pytest.mark.parametrize(
    "config, method, expected",
    [
        ({"gpg.program": "gpg2"}, SigningMethod.GPG, "gpg2"),
        ({"gpg.ssh.program": "my-ssh"}, SigningMethod.SSH, "my-ssh"),
        ({"gpg.x509.program": "smimesign"}, SigningMethod.X509, "smimesign"),
        ({}, SigningMethod.GPG, "gpg"),
        ({}, SigningMethod.SSH, "ssh-keygen"),
        ({}, SigningMethod.X509, "gpgsm"),
    ],
)
def test_get_signing_program(config, method, expected):
    assert get_signing_program(config, method) == expected


@pytest.mark.parametrize(
    "config, expected",
    [
        ({}, ("gpg", ["-bsa"])),
        ({"user.signingkey": "abcdef"}, ("gpg", ["-bsau", "abcdef"])),
        ({"gpg.format": "x509"}, ("gpgsm", ["-bsa"])),
        (
            {"gpg.format": "x509", "user.signingkey": "abcdef"},
            ("gpgsm", ["-bsau", "abcdef"]),
        ),
        (
            {"gpg.format": "ssh", "user.signingkey": "abcdef"},
            ("ssh-keygen", ["-Y", "sign", "-n", "git", "-f", "abcdef"]),
        ),
    ],
)
def test_get_signing_command(config, expected):
    assert get_signing_command(config) == expected


def test_get_signing_command_ssh_without_key():
    with pytest.raises(SigningKeyNotSpecifiedError):
        get_signing_command({"gpg.format": "ssh"})


def test_read_git_config_includes_local_settings(tmp_path, monkeypatch):
    repo = init_repository(tmp_path / "repo")
    repo.set_git_config("user.signingkey", "/tmp/key.pub")
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.chdir(tmp_path / "repo")
    assert read_git_config()["user.signingkey"] == "/tmp/key.pub"


def _signer(tmp_path, body):
    script = tmp_path / "signer"
    script.write_text(f"#!{sys.executable}\nimport sys\n{body}\n")
    os.chmod(script, 0o755)
    return str(script)


def _ssh_config(program):
    return {
        "gpg.format": "ssh",
        "user.signingkey": "keyfile",
        "gpg.ssh.program": program,
    }


def test_sign_git_object_passes_args_and_stdin(tmp_path):
    program = _signer(
        tmp_path,
        "data = sys.stdin.buffer.read().decode()\n"
        "sys.stdout.write('SIG:' + ' '.join(sys.argv[1:]) + ':' + data)",
    )
    assert sign_git_object(b"hello", _ssh_config(program)) == (
        "SIG:-Y sign -n git -f keyfile:hello"
    )


def test_sign_git_object_empty_output(tmp_path):
    program = _signer(tmp_path, "sys.stdin.buffer.read()")
    with pytest.raises(UnableToSignError):
        sign_git_object("payload", _ssh_config(program))


def test_sign_git_object_failure(tmp_path):
    program = _signer(tmp_path, "sys.stdin.buffer.read()\nsys.exit(3)")
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        sign_git_object(b"payload", _ssh_config(program))
    assert excinfo.value.returncode == 3


def test_sign_git_object_forwards_stderr(tmp_path, capsys):
    program = _signer(
        tmp_path,
        "sys.stdin.buffer.read()\nsys.stderr.write('warn')\nsys.stdout.write('sig')",
    )
    assert sign_git_object(b"x", _ssh_config(program)) == "sig"
    assert capsys.readouterr().err == "warn"