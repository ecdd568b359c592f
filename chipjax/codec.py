"""CHIP-8 opcode field extraction.

An instruction word ``W`` is four nibbles ``N1 N2 N3 N4``, most significant
first. These helpers work on plain ints as well as JAX integer arrays, so the
same code serves the tracer inside ``jax.jit`` and host-side tooling.
"""


def nib1(word):
    """Opcode family (N1)."""
    return (word >> 12) & 0xF


def nib2(word):
    """Usually the X register index (N2)."""
    return (word >> 8) & 0xF


def nib3(word):
    """Usually the Y register index (N3)."""
    return (word >> 4) & 0xF


def nib4(word):
    """4-bit immediate (N4)."""
    return word & 0xF


def make_byte(high_nibble, low_nibble):
    """Recompose one byte from two nibbles."""
    return ((high_nibble & 0xF) << 4) | (low_nibble & 0xF)


def make_address(high_nibble, low_byte):
    """Recompose a 12-bit address from a nibble and a byte."""
    return ((high_nibble & 0xF) << 8) | (low_byte & 0xFF)


def pack_word(high_byte, low_byte):
    """Pack two bytes (big-endian) into one instruction word."""
    return ((high_byte & 0xFF) << 8) | (low_byte & 0xFF)
