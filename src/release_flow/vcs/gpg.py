"""GPG key import for signed release commits and tags."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

import structlog

from release_flow.exceptions import GpgError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class GpgKey:
    """An imported secret key and the identity attached to it."""

    fingerprint: str
    user_name: str
    user_email: str


def _gpg(args: list[str], input: str | None = None) -> str:
    command = ["gpg", "--batch", *args]
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=True,
            input=input,
        )
    except FileNotFoundError as e:
        raise GpgError("gpg executable not found") from e
    except subprocess.CalledProcessError as e:
        raise GpgError(f"gpg {args[0]} failed", stderr=e.stderr) from e
    return result.stdout


def import_gpg_key(private_key: str, passphrase: str, fingerprint: str) -> GpgKey:
    """Import an armored secret key and resolve its user identity.

    Raises:
        GpgError: If the import fails or no secret key matches the fingerprint
    """
    _gpg(
        ["--pinentry-mode", "loopback", "--passphrase", passphrase, "--import"],
        input=private_key,
    )

    listing = _gpg(["--list-secret-keys", "--with-colons", fingerprint])
    return _parse_key_listing(listing, fingerprint)


def _parse_key_listing(listing: str, fingerprint: str) -> GpgKey:
    wanted = fingerprint.replace(" ", "").upper()
    found = False
    for line in listing.splitlines():
        fields = line.split(":")
        if len(fields) < 10:
            continue
        if fields[0] == "fpr" and fields[9].upper().endswith(wanted):
            found = True
        elif fields[0] == "uid" and found:
            name, _, email = fields[9].partition(" <")
            return GpgKey(fingerprint=wanted, user_name=name.strip(), user_email=email.rstrip(">"))

    raise GpgError(f"no secret key found with fingerprint {fingerprint}")
