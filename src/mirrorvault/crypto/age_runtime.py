#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pyrage
from pyrage import ssh as pyrage_ssh
from pyrage import x25519 as pyrage_x25519

ENCRYPTED_SUFFIX = ".age"
_PARTIAL_SUFFIX = ".part"
_SSH_PREFIXES = ("ssh-ed25519 ", "ssh-rsa ")


@dataclass
class AgeError(RuntimeError):
    backend: str
    detail: str

    def __str__(self) -> str:
        message = self.detail.strip() or "unknown error"
        return f"age ({self.backend}) failed: {message}"


def _wrap_pyrage_error(exc: Exception) -> AgeError:
    detail = str(exc).strip() or exc.__class__.__name__
    return AgeError(backend="pyrage", detail=detail)


def parse_recipient(value: str):
    """Parse one age recipient (``age1...`` or an SSH public key)."""
    text = value.strip()
    if not text:
        raise ValueError("age recipient is empty")
    try:
        if text.startswith(_SSH_PREFIXES):
            return pyrage_ssh.Recipient.from_str(text)
        return pyrage_x25519.Recipient.from_str(text)
    except (ValueError, TypeError, pyrage.RecipientError) as exc:
        raise ValueError(f'invalid age recipient "{text}": {exc}') from exc


def encrypted_path_for(input_path: str | Path) -> Path:
    input_path = Path(input_path)
    return input_path.with_name(input_path.name + ENCRYPTED_SUFFIX)


def encrypt_file(input_path: str | Path, recipient: str) -> Path:
    """Encrypt ``input_path`` to ``recipient`` and remove the plaintext.

    The ciphertext is written to a ``.part`` sibling and renamed into place, so
    either the finished ``.age`` file exists and the input is gone, or an error
    is raised and the input is untouched.
    """
    input_path = Path(input_path)
    parsed = parse_recipient(recipient)
    if not input_path.is_file():
        raise FileNotFoundError(f"archive to encrypt not found: {input_path}")

    output_path = encrypted_path_for(input_path)
    partial_path = output_path.with_name(output_path.name + _PARTIAL_SUFFIX)
    try:
        _encrypt_with_pyrage(input_path, partial_path, parsed)
        os.replace(partial_path, output_path)
    except BaseException:
        partial_path.unlink(missing_ok=True)
        raise

    input_path.unlink()
    return output_path


def _encrypt_with_pyrage(input_path: Path, output_path: Path, recipient) -> None:
    try:
        pyrage.encrypt_file(str(input_path), str(output_path), [recipient])
    except (ValueError, TypeError, RuntimeError, OSError, pyrage.EncryptError) as exc:
        # pyrage surfaces I/O problems and encryption failures with several types
        raise _wrap_pyrage_error(exc) from exc
