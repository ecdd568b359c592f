"""CHIP-8 instruction decoding."""

from chex import dataclass

from chipjax.codec import nib1, nib2, nib3, nib4, make_byte, make_address


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    nn = make_byte(nib3(instruction), nib4(instruction))
    return DecodedInstruction(
        raw=instruction,
        opcode=nib1(instruction),
        x=nib2(instruction),
        y=nib3(instruction),
        n=nib4(instruction),
        nn=nn,
        nnn=make_address(nib2(instruction), nn)
    )
