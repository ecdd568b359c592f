import sys
import time

from chipjax import CycleDriver, get_quirks, SCREEN_WIDTH

if __name__ == "__main__":
    if len(sys.argv) < 2:
        sys.exit(f"usage: {sys.argv[0]} ROM [FRAMES] [QUIRKS]")

    rom_path = sys.argv[1]
    frames = int(sys.argv[2]) if len(sys.argv) > 2 else 600
    quirks = get_quirks(sys.argv[3] if len(sys.argv) > 3 else "cowgod")

    driver = CycleDriver(rom_path=rom_path, quirks=quirks, raise_on_fault=False)

    # First frame includes compilation
    start_compile = time.time()
    driver.frame()
    end_compile = time.time()
    print("Compilation time (s):", end_compile - start_compile)

    start_exec = time.time()
    driver.run(frames, progress=True)
    end_exec = time.time()
    print("Execution time (s):", end_exec - start_exec)

    pixels = driver.framebuffer().reshape(-1, SCREEN_WIDTH)
    for row in pixels:
        print("".join("#" if p else " " for p in row))
    print("Sound:", "on" if driver.sound_active else "off")
