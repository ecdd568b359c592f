"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import DecodedInstruction
from chipjax.constants import FONT_START, FONT_GLYPH_SIZE, MEMORY_SIZE, NUM_REGISTERS
from chipjax.instructions.system import no_op

# Secondary key byte(N3, N4) -> branch index; 9 is the no-op.
MISC_TABLE = (
    jnp.full(256, 9, dtype=jnp.int32)
    .at[0x07].set(0)
    .at[0x0A].set(1)
    .at[0x15].set(2)
    .at[0x18].set(3)
    .at[0x1E].set(4)
    .at[0x29].set(5)
    .at[0x33].set(6)
    .at[0x55].set(7)
    .at[0x65].set(8)
)


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register (16-bit wrap, VF untouched)."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press.

    Without a key down PC is rewound so the same instruction is fetched on the
    next cycle. With several keys down the lowest index wins.
    """
    def key_pressed_action(state):
        pressed_key = jnp.astype(jnp.argmax(state.keypad), jnp.uint8)
        return state.replace(V=state.V.at[instruction.x].set(pressed_key))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = state.V[instruction.x] & 0xF
    font_address = FONT_START + jnp.astype(digit, jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.astype(state.I, jnp.int32) + jnp.arange(3)) % MEMORY_SIZE
    new_memory = state.memory.at[indices].set(digits)
    return state.replace(memory=new_memory)


def _block_indices(state: MachineState) -> jnp.ndarray:
    return (jnp.astype(state.I, jnp.int32) + jnp.arange(NUM_REGISTERS)) % MEMORY_SIZE


def _advance_index(state: MachineState, instruction: DecodedInstruction) -> jnp.ndarray:
    if state.quirks.load_index_increment:
        return jnp.astype(state.I + instruction.x + 1, jnp.uint16)
    return state.I


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = _block_indices(state)
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    new_memory = state.memory.at[base_indices].set(new_memory_values)
    return state.replace(memory=new_memory, I=_advance_index(state, instruction))


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    memory_values = state.memory[_block_indices(state)]
    new_V = jnp.where(register_mask, memory_values, state.V)
    return state.replace(V=new_V, I=_advance_index(state, instruction))


def execute_misc_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Dispatch misc instructions on the low byte."""
    return jax.lax.switch(
        MISC_TABLE[instruction.nn],
        [
            execute_get_delay_timer,
            execute_wait_for_key,
            execute_set_delay_timer,
            execute_set_sound_timer,
            execute_add_to_index,
            execute_font_character,
            execute_bcd_conversion,
            execute_store_registers,
            execute_load_registers,
            no_op,
        ],
        state, instruction
    )
