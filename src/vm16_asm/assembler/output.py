"""
Output Formats
==============

Serializers for assembled programs:

- **Binary**: consecutive little-endian unsigned 16-bit words, no header,
  no length prefix, no padding.
- **Symbol table**: one symbol per line, constants first, then labels in
  address order.
- **Listing**: one instruction per line with its address, words and source.

Binary Layout
-------------
```
Offset  Size  Description
------  ----  -----------
0       2     Word 0 (little-endian)
2       2     Word 1
...
2n-4    2     0x0000 terminator
2n-2    2     0x0000 terminator
```
"""

import struct
from typing import Optional

from vm16_asm.assembler.codegen import ListingEntry
from vm16_asm.assembler.data import Constant
from vm16_asm.cpu.isa import MAX_WORD
from vm16_asm.errors import OutputRangeError


def words_to_bytes(words: list[int]) -> bytes:
    """
    Pack words as little-endian unsigned 16-bit values.

    Args:
        words: Words to pack

    Returns:
        Packed bytes (two per word)

    Raises:
        OutputRangeError: If a word is outside 0-65535
    """
    for index, word in enumerate(words):
        if not 0 <= word <= MAX_WORD:
            raise OutputRangeError(index, word)
    return struct.pack(f"<{len(words)}H", *words)


def format_symbols(constants: list[Constant], labels: dict[str, int]) -> str:
    """
    Format the symbol table as text.

    Format: NAME KIND $VALUE (one per line)
    """
    lines = ["# Symbol table", "# Generated by vm16asm"]
    for constant in constants:
        lines.append(f"{constant.name} const ${constant.value:04X}")
    for name, address in sorted(labels.items(), key=lambda item: (item[1], item[0])):
        lines.append(f"{name} label ${address:04X}")
    return "\n".join(lines) + "\n"


def format_listing(
    entries: list[ListingEntry],
    labels: dict[str, int],
    source_lines: Optional[list[str]] = None,
) -> str:
    """
    Format an assembly listing.

    Args:
        entries: Encoded instructions from the code generator
        labels: Label addresses
        source_lines: Source text split into lines, if available

    Returns:
        The listing showing addresses, generated words, and source lines
    """
    lines = []
    lines.append("VM16 Assembler Listing")
    lines.append("=" * 60)
    lines.append("")
    lines.append("Addr  Code                 Line  Source")
    lines.append("-" * 60)
    for entry in entries:
        code = " ".join(f"{word:04X}" for word in entry.words)
        source = entry.mnemonic
        if source_lines and 0 < entry.line <= len(source_lines):
            source = source_lines[entry.line - 1].strip()
        lines.append(f"{entry.address:04X}  {code:20s} {entry.line:4d}  {source}")
    lines.append("")
    lines.append("Labels")
    lines.append("-" * 30)
    for name, address in sorted(labels.items()):
        lines.append(f"{name:20s} = ${address:04X}")
    return "\n".join(lines) + "\n"
