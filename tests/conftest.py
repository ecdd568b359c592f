"""Test configuration and fixtures for CHIP-8 machine tests."""

import pytest
import jax.numpy as jnp
from chipjax import create_state, get_quirks, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state (default quirks) for each test."""
    return create_state()


@pytest.fixture
def matt_state():
    """Provide a fresh state with VY-sourced shifts and I auto-increment."""
    return create_state(quirks=get_quirks("matt"))


@pytest.fixture
def octo_state():
    """Provide a fresh state with variable-count shifts."""
    return create_state(quirks=get_quirks("octo"))


@pytest.fixture
def schip_state():
    """Provide a fresh state with BXNN jumps."""
    return create_state(quirks=get_quirks("schip"))


@pytest.fixture
def wrapping_state():
    """Provide a fresh state whose sprites wrap around the screen edges."""
    return create_state(quirks=Quirks(wrap_sprites=True))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=0x10, VF=1)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)
