"""CHIP-8 stack operations.

Pushing onto a full stack or popping an empty one leaves the stack as it was
and reports the condition to the caller, which records it as a machine fault.
"""

import jax.numpy as jnp
from chipjax.constants import ADDRESS_MASK
from chipjax.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack. Returns the new stack and an overflow flag."""
    capacity = stack.data.shape[0]
    overflow = stack.pointer + 1 >= capacity
    new_pointer = jnp.where(overflow, stack.pointer, stack.pointer + 1)
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    new_data = jnp.where(overflow, stack.data, stack.data.at[new_pointer].set(masked_address))
    return stack.replace(data=new_data, pointer=new_pointer), overflow


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray, jnp.ndarray]:
    """Pop address from stack. Returns the new stack, the address and an underflow flag."""
    underflow = stack.pointer < 0
    top = jnp.maximum(stack.pointer, 0)
    popped_address = stack.data[top]
    new_data = jnp.where(underflow, stack.data, stack.data.at[top].set(0))
    new_pointer = jnp.where(underflow, stack.pointer, stack.pointer - 1)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address, underflow


def depth(stack: StackState) -> jnp.ndarray:
    """Number of return addresses currently on the stack."""
    return stack.pointer + 1
