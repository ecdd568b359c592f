"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, MEMORY_SIZE, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    The origin wraps onto the screen; pixels that run past the right or bottom
    edge are clipped unless the ``wrap_sprites`` quirk is set. VF ends up 1
    when any lit pixel was switched off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) & (SCREEN_WIDTH - 1)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) & (SCREEN_HEIGHT - 1)

    col_offset = xx - sprite_x
    row_offset = yy - sprite_y
    if state.quirks.wrap_sprites:
        col_offset = col_offset % SCREEN_WIDTH
        row_offset = row_offset % SCREEN_HEIGHT

    in_sprite = (col_offset >= 0) & (col_offset < 8) & (row_offset >= 0) & (row_offset < instruction.n)

    addresses = (jnp.astype(state.I, jnp.int32) + jnp.clip(row_offset, 0, 15)) % MEMORY_SIZE
    sprite_bytes = jnp.astype(state.memory[addresses], jnp.int32)
    sprite = (((sprite_bytes >> (7 - jnp.clip(col_offset, 0, 7))) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8))
    )
