"""
Utility functions for byte/state conversions and hex formatting.

A 16-byte block maps onto the 4x4 AES state in column-major order:
  byte[0]  -> state[0][0]
  byte[1]  -> state[1][0]
  byte[2]  -> state[2][0]
  byte[3]  -> state[3][0]
  byte[4]  -> state[0][1]
  ...
  byte[15] -> state[3][3]
"""


def block_to_grid(data: bytes) -> list[list[int]]:
    """
    Convert 16 bytes to a 4x4 row-indexed grid (column-major source).

    Args:
        data: 16 bytes of input

    Returns:
        4x4 list of integers, grid[row][col]
    """
    if len(data) != 16:
        raise ValueError(f"Expected 16 bytes, got {len(data)}")
    return [[data[col * 4 + row] for col in range(4)] for row in range(4)]


def format_block_grid(data: bytes, indent: str = "  ") -> str:
    """
    Format a block as a readable 4x4 grid.

    Returns multi-line string like:
      2b 28 ab 09
      7e ae f7 cf
      15 d2 15 4f
      16 a6 88 3c
    """
    grid = block_to_grid(data)
    return "\n".join(indent + " ".join(f"{v:02x}" for v in row) for row in grid)


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """
    XOR two byte sequences of equal length.
    """
    if len(a) != len(b):
        raise ValueError(f"Length mismatch: {len(a)} vs {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))
