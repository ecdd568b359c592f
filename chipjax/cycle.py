"""CHIP-8 cycle driver.

Two clocks share one machine: the instruction clock runs one
fetch-decode-execute per tick and the 60 Hz timer clock decrements the delay
and sound timers. They are interleaved as ``cycles_per_frame`` instruction
ticks followed by one timer tick.
"""

from functools import partial
from typing import Callable, Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from chipjax.config import Quirks
from chipjax.constants import (
    DEFAULT_INSTRUCTION_FREQUENCY, TIMER_FREQUENCY, STACK_SIZE, FAULT_NONE
)
from chipjax.emulator import fetch, execute, load_rom, load_rom_bytes
from chipjax.errors import MachineFault, raise_for_fault
from chipjax.logging import get_logger, progress_bar
from chipjax.state import (
    MachineState, create_state, set_keypad, framebuffer, sound_active, clear_fault
)

logger = get_logger("chipjax.cycle")


def run_instruction(state, _):
    state, instruction = fetch(state)
    state = execute(state, instruction)
    return state, None


@jax.jit
def step(state: MachineState) -> MachineState:
    """Run one fetch-decode-execute cycle."""
    state, _ = run_instruction(state, None)
    return state


@jax.jit
def tick_timers(state: MachineState) -> MachineState:
    """One 60 Hz timer tick: decrement both timers, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


@partial(jax.jit, static_argnums=1)
def run_cycles(state: MachineState, n: int) -> MachineState:
    """Run ``n`` instruction cycles without touching the timers."""
    state, _ = jax.lax.scan(run_instruction, state, length=n)
    return state


@partial(jax.jit, static_argnums=2)
def run_frame(state: MachineState, keypad: jnp.ndarray, cycles_per_frame: int) -> MachineState:
    """Apply a keypad snapshot, run one frame of instructions, then tick the timers."""
    state = state.replace(keypad=jnp.asarray(keypad, dtype=jnp.bool_))
    state = run_cycles(state, cycles_per_frame)
    return tick_timers(state)


class CycleDriver:
    """Runs one CHIP-8 session from a ROM.

    The driver owns the machine state and feeds it keypad snapshots one frame
    at a time. Stack faults recorded by the machine are raised as
    ``MachineFault`` subclasses after the frame in which they happened, or
    logged and cleared when ``raise_on_fault`` is off.
    """

    def __init__(
        self,
        rom_path: Optional[str] = None,
        rom_data: Optional[bytes] = None,
        seed: int = 0,
        quirks: Quirks = Quirks(),
        stack_size: int = STACK_SIZE,
        instruction_frequency: int = DEFAULT_INSTRUCTION_FREQUENCY,
        timer_frequency: int = TIMER_FREQUENCY,
        raise_on_fault: bool = True,
    ):
        """Initialize the driver and load the ROM.

        Args:
            rom_path: Path to the CHIP-8 ROM file to load
            rom_data: Raw ROM bytes, used when no path is given
            seed: Seed for the machine's random key
            quirks: Behaviour switches for this session
            stack_size: Call stack capacity
            instruction_frequency: Instruction clock in Hz (typically 700)
            timer_frequency: Timer clock in Hz (60 for CHIP-8)
            raise_on_fault: Raise stack faults instead of logging them
        """
        if (rom_path is None) == (rom_data is None):
            raise ValueError("Exactly one of rom_path and rom_data must be given")
        if instruction_frequency <= 0 or timer_frequency <= 0:
            raise ValueError(
                f"Frequencies must be positive, got instruction_frequency={instruction_frequency}, "
                f"timer_frequency={timer_frequency}"
            )

        self.rom_path = rom_path
        self.rom_data = rom_data
        self.seed = seed
        self.quirks = quirks
        self.stack_size = stack_size
        self.instruction_frequency = instruction_frequency
        self.timer_frequency = timer_frequency
        self.raise_on_fault = raise_on_fault

        self.state = self._boot()

    def _boot(self) -> MachineState:
        state = create_state(self.seed, quirks=self.quirks, stack_size=self.stack_size)
        if self.rom_path is not None:
            return load_rom(state, self.rom_path)
        return load_rom_bytes(state, self.rom_data)

    @property
    def cycles_per_frame(self) -> int:
        """Number of instruction cycles per timer tick (at least one)."""
        return max(1, self.instruction_frequency // self.timer_frequency)

    def reset(self) -> MachineState:
        """Restart the session from a freshly loaded ROM."""
        self.state = self._boot()
        return self.state

    def frame(self, keypad: Optional[Sequence[bool]] = None) -> MachineState:
        """Run one frame with the given keypad snapshot (previous keypad if None)."""
        if keypad is not None:
            self.state = set_keypad(self.state, keypad)
        self.state = run_frame(self.state, self.state.keypad, self.cycles_per_frame)
        self._check_fault()
        return self.state

    def run(
        self,
        frames: int,
        keypad_fn: Optional[Callable[[int], Sequence[bool]]] = None,
        progress: bool = False,
    ) -> MachineState:
        """Run several frames, polling ``keypad_fn(frame_index)`` before each one."""
        logger.info(
            f"Running {frames} frames at {self.instruction_frequency} Hz "
            f"({self.cycles_per_frame} cycles per frame)"
        )
        with progress_bar(frames, enabled=progress) as bar:
            for i in range(frames):
                self.frame(None if keypad_fn is None else keypad_fn(i))
                bar.update(1)
        return self.state

    def framebuffer(self) -> np.ndarray:
        """Flat copy of the display, pixel (x, y) at ``x + y * 64``."""
        return framebuffer(self.state)

    @property
    def sound_active(self) -> bool:
        return sound_active(self.state)

    def _check_fault(self):
        if int(self.state.fault) == FAULT_NONE:
            return

        try:
            raise_for_fault(self.state)
        except MachineFault as e:
            if self.raise_on_fault:
                raise
            logger.warning(f"{e}; continuing")
        self.state = clear_fault(self.state)
