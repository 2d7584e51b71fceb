"""CHIP-8 call stack operations."""

import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8core.constants import STACK_SIZE
from chip8core.errors import StackOverflow, StackUnderflow


class StackState(PyTreeNode):
    """Return addresses for subroutine calls; ``pointer`` is the depth."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


def depth(stack: StackState) -> int:
    """Number of frames currently on the stack."""
    return int(stack.pointer)


def push(stack: StackState, address: int, pc: int) -> StackState:
    """Push a return address. ``pc`` identifies the calling instruction."""
    if depth(stack) >= STACK_SIZE:
        raise StackOverflow(int(pc), depth(stack))
    new_data = stack.data.at[stack.pointer].set(int(address) & 0xFFFF)
    return stack.replace(data=new_data, pointer=depth(stack) + 1)


def pop(stack: StackState, pc: int) -> tuple[StackState, int]:
    """Pop a return address. ``pc`` identifies the returning instruction."""
    if depth(stack) == 0:
        raise StackUnderflow(int(pc))
    new_pointer = depth(stack) - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
