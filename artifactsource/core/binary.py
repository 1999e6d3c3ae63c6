"""Content-based binary detection.

Classification looks only at bytes, never at file names: a NUL byte in the
sample, or a high share of control characters, marks content as binary.
"""

from __future__ import annotations

DEFAULT_SAMPLE_SIZE = 8000

# Control bytes that legitimately occur in text: \b \t \n \f \r and ESC.
_TEXT_CONTROL_BYTES = frozenset({8, 9, 10, 12, 13, 27})
_BINARY_RATIO = 0.3


def is_binary_content(data: bytes, sample_size: int = DEFAULT_SAMPLE_SIZE) -> bool:
    """Return ``True`` if *data* looks like binary content.

    Parameters
    ----------
    data:
        The raw content to classify.
    sample_size:
        Number of leading bytes inspected.
    """
    sample = data[:sample_size]
    if not sample:
        return False
    if b"\x00" in sample:
        return True

    control = sum(1 for b in sample if (b < 32 or b == 127) and b not in _TEXT_CONTROL_BYTES)
    return control / len(sample) > _BINARY_RATIO
