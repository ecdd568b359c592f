"""Main CHIP-8 execution engine: fetch, decode/dispatch and ROM loading."""

import os

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState
from chipjax.decode import decode
from chipjax.codec import pack_word
from chipjax.constants import PROGRAM_START, MEMORY_SIZE, ROM_MAX_SIZE
from chipjax.errors import RomLoadError
from chipjax.logging import get_logger
from chipjax.instructions.system import execute_system_instruction
from chipjax.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipjax.instructions.alu import execute_alu_operation
from chipjax.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipjax.instructions.display import execute_display
from chipjax.instructions.misc import execute_misc_instruction

logger = get_logger("chipjax.emulator")

# One handler per opcode family, indexed by the first nibble.
INSTRUCTION_FAMILIES = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction.

    Exactly one family handler runs per call; PC is not advanced here, that
    happens in ``fetch``.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.opcode, INSTRUCTION_FAMILIES, state, decoded_instruction)


def fetch(state: MachineState) -> tuple[MachineState, jnp.ndarray]:
    """Fetch next instruction from memory."""
    pc = jnp.astype(state.pc, jnp.int32)
    high = jnp.astype(state.memory[pc % MEMORY_SIZE], jnp.uint16)
    low = jnp.astype(state.memory[(pc + 1) % MEMORY_SIZE], jnp.uint16)
    return state.replace(pc=state.pc + 2), pack_word(high, low)


def load_rom_bytes(state: MachineState, rom_data: bytes) -> MachineState:
    """Load raw ROM bytes into CHIP-8 memory starting at 0x200."""
    if len(rom_data) > ROM_MAX_SIZE:
        raise RomLoadError(
            f"ROM is {len(rom_data)} bytes, larger than the maximum of {ROM_MAX_SIZE} bytes"
        )
    if not rom_data:
        return state

    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def read_rom(filename: str) -> bytes:
    """Read a ROM file, checking it exists, is a regular file and fits in memory."""
    if not os.path.exists(filename):
        raise RomLoadError(f"ROM file '{filename}' does not exist")
    if not os.path.isfile(filename):
        raise RomLoadError(f"ROM file '{filename}' is not a regular file")

    size = os.path.getsize(filename)
    if size > ROM_MAX_SIZE:
        raise RomLoadError(
            f"ROM file '{filename}' is {size} bytes, larger than the maximum of {ROM_MAX_SIZE} bytes"
        )

    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as e:
        raise RomLoadError(f"Could not read ROM file '{filename}': {e}") from e

    logger.debug(f"Read {len(rom_data)} bytes from '{filename}'")
    return rom_data


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    state = load_rom_bytes(state, read_rom(filename))
    logger.info(f"Loaded ROM '{os.path.basename(filename)}'")
    return state
