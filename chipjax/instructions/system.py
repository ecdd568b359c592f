"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.numpy as jnp
from chipjax.state import MachineState, record_fault
from chipjax.decode import DecodedInstruction
from chipjax.constants import FAULT_STACK_UNDERFLOW
from chipjax.stack import pop

# Secondary key byte(N3, N4) -> branch index; anything else is a no-op.
SYSTEM_TABLE = jnp.full(256, 2, dtype=jnp.int32).at[0xE0].set(0).at[0xEE].set(1)


def no_op(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """No operation."""
    return state


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display))


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine."""
    stack, address, underflow = pop(state.stack)
    state = record_fault(state, underflow, FAULT_STACK_UNDERFLOW)
    return state.replace(stack=stack, pc=jnp.where(underflow, state.pc, address))


def execute_system_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """Dispatch system instructions.

    0NNN (call machine code routine) is a no-op.
    """
    return jax.lax.switch(
        SYSTEM_TABLE[instruction.nn],
        [execute_clear_screen, execute_return, no_op],
        state, instruction
    )
