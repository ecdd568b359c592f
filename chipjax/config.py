"""Quirk configuration for historically divergent CHIP-8 behaviours."""

from enum import IntEnum

from flax.struct import dataclass, field


class ShiftQuirk(IntEnum):
    """Source and width of the 8XY6/8XYE shifts."""
    COWGOD = 0  # VX >>= 1, VF = shifted-out bit of VX
    MATT = 1    # VX = VY >> 1, VF = shifted-out bit of VY
    OCTO = 2    # VX >>= VY, VF = last bit shifted out of VX


@dataclass(frozen=True)
class Quirks:
    """Behaviour switches fixed for the lifetime of a machine.

    Every field is static, so a ``Quirks`` instance is hashable and is baked
    into the compiled program instead of being traced.

    Attributes:
        shift: Shift semantics for 8XY6 and 8XYE
        load_index_increment: FX55/FX65 leave I at I + X + 1
        jump_uses_vx: BXNN jumps to XNN + VX instead of NNN + V0
        wrap_sprites: DXYN wraps pixels around screen edges instead of clipping
    """
    shift: ShiftQuirk = field(pytree_node=False, default=ShiftQuirk.COWGOD)
    load_index_increment: bool = field(pytree_node=False, default=False)
    jump_uses_vx: bool = field(pytree_node=False, default=False)
    wrap_sprites: bool = field(pytree_node=False, default=False)


QUIRK_PRESETS = {
    "cowgod": Quirks(),
    "matt": Quirks(shift=ShiftQuirk.MATT, load_index_increment=True),
    "octo": Quirks(shift=ShiftQuirk.OCTO),
    "schip": Quirks(jump_uses_vx=True),
}


def get_quirks(name: str) -> Quirks:
    """Look up a named quirk preset."""
    try:
        return QUIRK_PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown quirk preset '{name}'. Available: {list(QUIRK_PRESETS.keys())}"
        ) from None
