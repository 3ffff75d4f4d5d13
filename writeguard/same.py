"""Equality check between an existing file and a proposed file.

Missing files and directories are never considered equal, so the caller
always falls through to the decision path for them. Contents are compared
byte for byte; a hash match is not trusted as proof of equality.
"""

from __future__ import annotations

import logging

from writeguard.file import VirtualFile
from writeguard.schemas.conflict import ConflictOptions

logger = logging.getLogger(__name__)


def is_equal(
    existing: VirtualFile,
    proposed: VirtualFile,
    options: ConflictOptions | None = None,
) -> bool:
    """Return True only when both files hold identical bytes.

    Args:
        existing: The file currently at the destination.
        proposed: The file that would replace it.
        options: Unused, accepted for signature parity with ``render_diff``.

    Raises:
        OSError: If either file exists but cannot be read.
    """
    if existing.is_directory() or proposed.is_directory():
        return False

    if existing.is_null() and not existing.exists():
        return False
    if proposed.is_null() and not proposed.exists():
        return False

    # Cheap rejection from stat before reading anything
    if existing.size != proposed.size:
        logger.debug("Size mismatch: %s vs %s", existing.path, proposed.path)
        return False

    a = existing.ensure_contents()
    b = proposed.ensure_contents()
    if a is None or b is None:
        return False

    return len(a) == len(b) and a == b
