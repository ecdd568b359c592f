"""Tests for machine state construction."""

import dataclasses

import jax
from chipjax import MachineState, StackState, create_state


def _defaults(cls):
    return [f.default for f in dataclasses.fields(cls) if f.default is not dataclasses.MISSING]


def test_field_defaults_are_hashable():
    """Array fields are built per instance, never shared as class defaults."""
    for cls in (MachineState, StackState):
        for default in _defaults(cls):
            hash(default)


def test_default_instances_do_not_share_arrays():
    first = MachineState(rng=jax.random.PRNGKey(0))
    second = MachineState(rng=jax.random.PRNGKey(0))

    assert first.memory is not second.memory
    assert first.stack is not second.stack
    assert first.stack.pointer == -1
    assert first.pc == 0x200


def test_create_state_starts_without_fault():
    state = create_state()
    assert state.fault == 0
    assert state.fault_pc == 0
