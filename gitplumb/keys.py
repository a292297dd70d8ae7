"""Signing configuration and signing of Git objects with the user's tools."""

from __future__ import annotations

import enum
import subprocess
import sys
from collections.abc import Mapping

GIT_BINARY = "git"

DEFAULT_SIGNING_PROGRAM_GPG = "gpg"
DEFAULT_SIGNING_PROGRAM_SSH = "ssh-keygen"
DEFAULT_SIGNING_PROGRAM_X509 = "gpgsm"

NAMESPACE_SSH_SIGNATURE = "git"


class SigningKeyNotSpecifiedError(ValueError):
    """The Git config names no signing key where one is required."""

    def __init__(self) -> None:
        super().__init__("signing key not specified in git config")


class UnknownSigningMethodError(ValueError):
    """The configured signing format is not one of gpg, ssh or x509."""

    def __init__(self, method: str = "") -> None:
        message = "unknown signing method (not one of gpg, ssh, x509)"
        if method:
            message = f"{message}: {method!r}"
        super().__init__(message)


class UnableToSignError(RuntimeError):
    """The signing program produced no signature."""

    def __init__(self) -> None:
        super().__init__("unable to sign Git object")


class SigningMethod(enum.IntEnum):
    """The signature formats Git can produce."""

    GPG = 0
    SSH = 1
    X509 = 2


def parse_git_config(text: str) -> dict[str, str]:
    """Parse the output of `git config --get-regexp .*` into a mapping."""
    config: dict[str, str] = {}
    for line in text.splitlines():
        key, sep, value = line.partition(" ")
        if not sep:
            continue
        config[key] = value
    return config


def read_git_config() -> dict[str, str]:
    """Read the combined local, global and system Git config."""
    result = subprocess.run(
        [GIT_BINARY, "config", "--get-regexp", ".*"],
        capture_output=True,
        stdin=subprocess.DEVNULL,
        check=False,
    )
    if result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode,
            result.args,
            output=result.stdout,
            stderr=result.stderr,
        )
    return parse_git_config(result.stdout.decode(errors="replace"))


def get_signing_method(config: Mapping[str, str]) -> SigningMethod:
    """Return the signing method selected by gpg.format, GPG by default."""
    fmt = config.get("gpg.format")
    if fmt is None:
        return SigningMethod.GPG
    try:
        return {
            "gpg": SigningMethod.GPG,
            "ssh": SigningMethod.SSH,
            "x509": SigningMethod.X509,
        }[fmt]
    except KeyError:
        raise UnknownSigningMethodError(fmt) from None


def get_signing_key_info(config: Mapping[str, str]) -> str:
    """Return user.signingkey, or an empty string when it is not set."""
    return config.get("user.signingkey", "")


def get_signing_program(config: Mapping[str, str], method: SigningMethod) -> str:
    """Return the program Git would use to sign with the given method."""
    if method is SigningMethod.SSH:
        return config.get("gpg.ssh.program", DEFAULT_SIGNING_PROGRAM_SSH)
    if method is SigningMethod.X509:
        return config.get("gpg.x509.program", DEFAULT_SIGNING_PROGRAM_X509)
    return config.get("gpg.program", DEFAULT_SIGNING_PROGRAM_GPG)


def get_signing_info(
    config: Mapping[str, str] | None = None,
) -> tuple[SigningMethod, str, str]:
    """Return the signing method, key info and program from the Git config."""
    if config is None:
        config = read_git_config()
    method = get_signing_method(config)
    key_info = get_signing_key_info(config)
    program = get_signing_program(config, method)
    return method, key_info, program


def get_signing_command(
    config: Mapping[str, str] | None = None,
) -> tuple[str, list[str]]:
    """Return the program and arguments that produce a detached signature."""
    method, key_info, program = get_signing_info(config)

    if method is SigningMethod.SSH:
        if not key_info:
            raise SigningKeyNotSpecifiedError()
        args = ["-Y", "sign", "-n", NAMESPACE_SSH_SIGNATURE, "-f", key_info]
    elif method in (SigningMethod.GPG, SigningMethod.X509):
        # b: detach-sign, s: sign, a: armor, u: local-user
        args = ["-bsau", key_info] if key_info else ["-bsa"]
    else:
        raise UnknownSigningMethodError(str(method))

    return program, args


def sign_git_object(
    contents: bytes | str,
    config: Mapping[str, str] | None = None,
) -> str:
    """Sign a commit or tag payload with the user's configured signer."""
    program, args = get_signing_command(config)
    data = contents.encode() if isinstance(contents, str) else contents

    result = subprocess.run(
        [program, *args],
        input=data,
        capture_output=True,
        check=False,
    )

    if result.stderr:
        sys.stderr.write(result.stderr.decode(errors="replace"))

    if result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode,
            result.args,
            output=result.stdout,
            stderr=result.stderr,
        )

    if not result.stdout:
        raise UnableToSignError()

    return result.stdout.decode(errors="replace")