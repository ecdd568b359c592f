"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chipjax.state import MachineState, record_fault
from chipjax.decode import DecodedInstruction
from chipjax.constants import ADDRESS_MASK, FAULT_STACK_OVERFLOW
from chipjax.instructions.system import no_op
from chipjax.stack import push

# Secondary key byte(N3, N4) for the EXxx family.
KEY_SKIP_TABLE = jnp.full(256, 2, dtype=jnp.int32).at[0x9E].set(0).at[0xA1].set(1)


def execute_jump(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """2NNN - Call subroutine at NNN.

    On a full stack nothing is pushed, PC is left alone and the overflow is
    recorded in ``state.fault``.
    """
    stack, overflow = push(state.stack, state.pc)
    state = record_fault(state, overflow, FAULT_STACK_OVERFLOW)
    return state.replace(
        stack=stack,
        pc=jnp.where(overflow, state.pc, jnp.astype(instruction.nnn, jnp.uint16)),
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=s.pc + 2),
            lambda s: s,
            state
        )
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

execute_skip_if_key_pressed = make_skip_instruction(
    lambda state, inst: state.keypad[state.V[inst.x] & 0xF]
)

execute_skip_if_key_not_pressed = make_skip_instruction(
    lambda state, inst: ~state.keypad[state.V[inst.x] & 0xF]
)


def execute_jump_with_offset(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """BNNN - Jump to address NNN + V0 (BXNN - XNN + VX with ``jump_uses_vx``)."""
    register = instruction.x if state.quirks.jump_uses_vx else 0
    jump_address = (jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[register], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def execute_skip_if_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""
    return jax.lax.switch(
        KEY_SKIP_TABLE[instruction.nn],
        [execute_skip_if_key_pressed, execute_skip_if_key_not_pressed, no_op],
        state, instruction
    )
