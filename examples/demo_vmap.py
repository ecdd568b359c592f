import time
import timeit

import jax
import jax.numpy as jnp
import numpy as np

from chipjax import create_state, load_rom_bytes, run_cycles, framebuffer, SCREEN_WIDTH

# Scatter random glyphs across the screen forever:
#   200: C03F  V0 = rand & 0x3F
#   202: C11F  V1 = rand & 0x1F
#   204: C20F  V2 = rand & 0x0F
#   206: F229  I = glyph(V2)
#   208: D015  draw 5 rows at (V0, V1)
#   20A: 1200  loop
ROM = bytes([0xC0, 0x3F, 0xC1, 0x1F, 0xC2, 0x0F, 0xF2, 0x29, 0xD0, 0x15, 0x12, 0x00])
CYCLES = 6 * 100


def time_it_measure(bench, repeat=10, number=3) -> np.ndarray:
    times = timeit.repeat(bench, repeat=repeat, number=number)
    return np.array(times) / number


def boot(seed):
    return load_rom_bytes(create_state(seed), ROM)


def print_screen(state):
    pixels = framebuffer(state).reshape(-1, SCREEN_WIDTH)
    for row in pixels:
        print("".join("#" if p else "." for p in row))


if __name__ == "__main__":
    single = run_cycles(boot(0), CYCLES)
    print_screen(single)

    # Every machine owns its random key, so vmapping over seeds gives independent runs.
    seeds = jnp.arange(1000)
    states = jax.vmap(lambda key: boot(0).replace(rng=key))(jax.vmap(jax.random.PRNGKey)(seeds))
    batched = jax.jit(jax.vmap(lambda s: run_cycles(s, CYCLES)))

    start_compile = time.perf_counter()
    compiled = jax.block_until_ready(batched.lower(states).compile())
    end_compile = time.perf_counter()
    print("Compilation time (s):", end_compile - start_compile)

    def bench():
        jax.block_until_ready(compiled(states))

    times = time_it_measure(bench)
    print("Execution times (s):", times)
    print("Mean time (s):", times.mean())
    print("Q1 (s):", np.quantile(times, 0.25))
    print("Q3 (s):", np.quantile(times, 0.75))
