import io
import os
import tempfile
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from pathlib import Path
from typing import Generator
from unittest import mock

from pyrage import x25519

REPO_ROOT = Path(__file__).resolve().parents[1]

# =============================================================================
# Test Constants
# =============================================================================

TEST_PAYLOAD = b"test payload data"
INVALID_RECIPIENT = "age1-not-a-valid-recipient"


# =============================================================================
# Environment Helpers
# =============================================================================


@contextmanager
def temp_env(overrides: dict[str, str], *, clear: bool = False):
    with mock.patch.dict(os.environ, overrides, clear=clear):
        yield


def build_cli_env(*, overrides: dict[str, str] | None = None) -> dict[str, str]:
    env = os.environ.copy()
    existing = env.get("PYTHONPATH")
    src_path = str(REPO_ROOT / "src")
    env["PYTHONPATH"] = f"{src_path}{os.pathsep}{existing}" if existing else src_path
    env.pop("MIRRORVAULT_CONFIG", None)
    if overrides:
        env.update(overrides)
    return env


@contextmanager
def suppress_output():
    stdout = io.StringIO()
    stderr = io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        yield


# =============================================================================
# Crypto Helpers
# =============================================================================


def make_test_identity() -> tuple[x25519.Identity, str]:
    """Generate an age identity and its recipient string."""
    identity = x25519.Identity.generate()
    return identity, str(identity.to_public())


# =============================================================================
# File System Helpers
# =============================================================================


@contextmanager
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory with cleanup.

    The path is resolved so tests can compare it with canonical paths on
    platforms where the temp dir sits behind a symlink.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


def write_tree(root: Path, files: dict[str, bytes | str]) -> None:
    """Write ``files`` (relative path -> content) under ``root``."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


def write_run_files(
    workdir: Path,
    *,
    sources: list[str],
    recipient: str,
) -> tuple[Path, Path]:
    """Write a paths file and a public key file for one backup run."""
    paths_file = workdir / "paths.txt"
    key_file = workdir / "public_key.txt"
    paths_file.write_text("\n".join(sources) + "\n", encoding="utf-8")
    key_file.write_text(recipient + "\n", encoding="utf-8")
    return paths_file, key_file


def staged(staging_root: Path, source: Path) -> Path:
    """Where ``source`` is expected to land under ``staging_root``."""
    return staging_root / source.relative_to(source.anchor)
