"""Exceptions raised by the CHIP-8 machine."""

from chipjax.constants import FAULT_NONE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW


class Chip8Error(Exception):
    pass


class RomLoadError(Chip8Error):
    pass


class MachineFault(Chip8Error):
    pass


class StackOverflowError(MachineFault):
    pass


class StackUnderflowError(MachineFault):
    pass


_FAULTS = {
    FAULT_STACK_OVERFLOW: (StackOverflowError, "Stack overflow"),
    FAULT_STACK_UNDERFLOW: (StackUnderflowError, "Stack underflow"),
}


def raise_for_fault(state) -> None:
    """Raise the typed exception for a fault recorded in ``state``, if any."""
    code = int(state.fault)
    if code == FAULT_NONE:
        return

    error, message = _FAULTS.get(code, (MachineFault, f"Unknown fault code {code}"))
    raise error(f"{message} at PC 0x{int(state.fault_pc):03X}")
