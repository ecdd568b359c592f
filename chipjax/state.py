"""CHIP-8 machine state structures."""

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chipjax.config import Quirks
from chipjax.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, SCREEN_WIDTH, SCREEN_HEIGHT,
    NUM_REGISTERS, NUM_KEYS, STACK_SIZE, EMPTY_STACK, FAULT_NONE
)


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


def _scalar(value, dtype):
    return field(default_factory=lambda: jnp.asarray(value, dtype=dtype))


@dataclass(frozen=True)
class StackState:
    """Call stack: fixed-capacity storage plus a top-of-stack index (-1 when empty)."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _scalar(EMPTY_STACK, jnp.int32)


class MachineState(PyTreeNode):
    """Complete state of one CHIP-8 machine.

    ``fault`` holds the first stack fault since it was last cleared and
    ``fault_pc`` the PC at which it happened.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = _scalar(PROGRAM_START, jnp.uint16)
    display: jnp.ndarray = _zeros((SCREEN_WIDTH, SCREEN_HEIGHT), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    fault: jnp.ndarray = _scalar(FAULT_NONE, jnp.uint8)
    fault_pc: jnp.ndarray = _zeros((), jnp.uint16)
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_stack(size: int = STACK_SIZE) -> StackState:
    """Create an empty call stack holding up to ``size`` return addresses."""
    if size < 1:
        raise ValueError(f"Stack size must be at least 1, got {size}")
    return StackState(
        data=jnp.zeros(size, dtype=jnp.uint16),
        pointer=jnp.asarray(EMPTY_STACK, dtype=jnp.int32),
    )


def create_state(seed: int = 0, quirks: Quirks = Quirks(), stack_size: int = STACK_SIZE) -> MachineState:
    """Create initial machine state with font data loaded.

    Args:
        seed: Entropy used once to seed the machine's own random key
        quirks: Behaviour switches fixed for this machine
        stack_size: Call stack capacity
    """
    state = MachineState(rng=jax.random.PRNGKey(seed), stack=create_stack(stack_size), quirks=quirks)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def set_keypad(state: MachineState, keys) -> MachineState:
    """Replace the whole keypad with a 16-entry DOWN (True) / UP (False) snapshot."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Keypad snapshot must have {NUM_KEYS} entries, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def press_key(state: MachineState, key: int) -> MachineState:
    """Mark a single key as DOWN."""
    return state.replace(keypad=state.keypad.at[key & 0xF].set(True))


def release_key(state: MachineState, key: int) -> MachineState:
    """Mark a single key as UP."""
    return state.replace(keypad=state.keypad.at[key & 0xF].set(False))


def framebuffer(state: MachineState) -> np.ndarray:
    """Flat host-side copy of the display, pixel (x, y) at ``x + y * SCREEN_WIDTH``."""
    return np.asarray(state.display, dtype=np.bool_).T.reshape(-1)


def sound_active(state: MachineState) -> bool:
    """Whether the front end should be playing a tone."""
    return bool(state.sound_timer != 0)


def record_fault(state: MachineState, condition: jnp.ndarray, code: int) -> MachineState:
    """Record ``code`` when ``condition`` holds, unless a fault is already pending."""
    first = condition & (state.fault == FAULT_NONE)
    return state.replace(
        fault=jnp.where(first, jnp.uint8(code), state.fault),
        fault_pc=jnp.where(first, state.pc, state.fault_pc),
    )


def clear_fault(state: MachineState) -> MachineState:
    """Forget the pending fault."""
    return state.replace(fault=jnp.zeros_like(state.fault), fault_pc=jnp.zeros_like(state.fault_pc))
