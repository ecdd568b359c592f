"""CHIP-8 virtual machine package."""

from chipjax.state import (
    MachineState, StackState, create_state, create_stack, set_keypad, press_key, release_key,
    framebuffer, sound_active, record_fault, clear_fault
)
from chipjax.emulator import execute, load_rom, load_rom_bytes, read_rom, fetch
from chipjax.decode import DecodedInstruction, decode
from chipjax.config import Quirks, ShiftQuirk, QUIRK_PRESETS, get_quirks
from chipjax.cycle import CycleDriver, step, tick_timers, run_cycles, run_frame
from chipjax.errors import (
    Chip8Error, RomLoadError, MachineFault, StackOverflowError, StackUnderflowError, raise_for_fault
)
from chipjax.constants import *

__all__ = [
    "MachineState",
    "StackState",
    "create_state",
    "create_stack",
    "set_keypad",
    "press_key",
    "release_key",
    "framebuffer",
    "sound_active",
    "record_fault",
    "clear_fault",
    "fetch",
    "execute",
    "load_rom",
    "load_rom_bytes",
    "read_rom",
    "DecodedInstruction",
    "decode",
    "Quirks",
    "ShiftQuirk",
    "QUIRK_PRESETS",
    "get_quirks",
    "CycleDriver",
    "step",
    "tick_timers",
    "run_cycles",
    "run_frame",
    "Chip8Error",
    "RomLoadError",
    "MachineFault",
    "StackOverflowError",
    "StackUnderflowError",
    "raise_for_fault",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "ROM_MAX_SIZE",
    "FAULT_NONE",
    "FAULT_STACK_OVERFLOW",
    "FAULT_STACK_UNDERFLOW",
]
