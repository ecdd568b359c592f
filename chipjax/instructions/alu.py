"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.config import ShiftQuirk
from chipjax.constants import FLAG_REGISTER

# N4 -> branch index: 0-7 map to themselves, E is the left shift, the rest are undefined.
ALU_TABLE = jnp.array([0, 1, 2, 3, 4, 5, 6, 7, 9, 9, 9, 9, 9, 9, 8, 9], dtype=jnp.int32)

# Operations that report through VF.
WRITES_FLAG = jnp.array([0, 0, 0, 0, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=jnp.bool_)


def _no_flag() -> jnp.ndarray:
    return jnp.zeros((), dtype=jnp.uint8)


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY0 - Set: VX = VY."""
    return vy, _no_flag()


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, _no_flag()


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, _no_flag()


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, _no_flag()


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when VX > VY."""
    no_borrow = jnp.astype(vx > vy, jnp.uint8)
    result = (jnp.astype(vx, jnp.int32) - jnp.astype(vy, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when VX < VY."""
    no_borrow = jnp.astype(vx < vy, jnp.uint8)
    result = (jnp.astype(vy, jnp.int32) - jnp.astype(vx, jnp.int32)) & 0xFF
    return jnp.astype(result, jnp.uint8), no_borrow


def shift_right_once(value: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    shifted_bit = jnp.astype(value & 1, jnp.uint8)
    return jnp.astype(value >> 1, jnp.uint8), shifted_bit


def shift_left_once(value: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    shifted_bit = jnp.astype((value >> 7) & 1, jnp.uint8)
    return jnp.astype((jnp.astype(value, jnp.int32) << 1) & 0xFF, jnp.uint8), shifted_bit


def shift_right_by(value: jnp.ndarray, count: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Shift right by ``count`` bits; the flag is the last bit shifted out."""
    value = jnp.astype(value, jnp.int32)
    count = jnp.astype(count, jnp.int32)
    last_out = (value >> jnp.maximum(count - 1, 0)) & 1
    flag = jnp.where(count > 0, last_out, 0)
    return jnp.astype((value >> count) & 0xFF, jnp.uint8), jnp.astype(flag, jnp.uint8)


def shift_left_by(value: jnp.ndarray, count: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Shift left by ``count`` bits; the flag is the last bit shifted out."""
    value = jnp.astype(value, jnp.int32)
    count = jnp.astype(count, jnp.int32)
    last_out = ((value << jnp.maximum(count - 1, 0)) >> 7) & 1
    flag = jnp.where(count > 0, last_out, 0)
    return jnp.astype((value << count) & 0xFF, jnp.uint8), jnp.astype(flag, jnp.uint8)


def make_shifts(mode: ShiftQuirk):
    """Build the 8XY6/8XYE pair for a shift quirk."""
    if mode == ShiftQuirk.MATT:
        return (lambda vx, vy: shift_right_once(vy)), (lambda vx, vy: shift_left_once(vy))
    if mode == ShiftQuirk.OCTO:
        return shift_right_by, shift_left_by
    return (lambda vx, vy: shift_right_once(vx)), (lambda vx, vy: shift_left_once(vx))


def alu_undefined(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Undefined ALU operation, leaves VX as is."""
    return vx, _no_flag()


def execute_alu_operation(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]
    alu_shift_right, alu_shift_left = make_shifts(state.quirks.shift)

    result, vf = jax.lax.switch(
        ALU_TABLE[instruction.n],
        [alu_set, alu_or, alu_and, alu_xor, alu_add,
         alu_sub_xy, alu_shift_right, alu_sub_yx, alu_shift_left, alu_undefined],
        vx, vy
    )

    # VF is written last so it wins when X is F
    new_V = state.V.at[instruction.x].set(result)
    new_V = jnp.where(WRITES_FLAG[instruction.n], new_V.at[FLAG_REGISTER].set(vf), new_V)
    return state.replace(V=new_V)
