"""Tests for display operations (DXYN)."""

import jax.numpy as jnp
from chipjax import execute, framebuffer, SCREEN_WIDTH
from conftest import setup_sprite_in_memory


class TestBasicSprites:
    """Test basic sprite drawing."""

    def test_basic_sprite_draw(self, fresh_state):
        """Test basic sprite drawing without collision."""
        sprite = [0xC0, 0xC0]  # 11000000, 11000000
        state = setup_sprite_in_memory(fresh_state, 0x300, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6105)  # V1 = 5
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xD012)  # Draw at V0,V1 with height 2

        assert state.display[10, 5] == 1
        assert state.display[11, 5] == 1
        assert state.display[10, 6] == 1
        assert state.display[11, 6] == 1
        assert state.display[12, 5] == 0
        assert state.V[15] == 0

    def test_single_row_origin(self, fresh_state):
        """D011 with 0xF0 at the origin lights (0,0)-(3,0) only."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xF0])
        state = execute(state, 0xA300)

        state = execute(state, 0xD011)

        for x in range(4):
            assert state.display[x, 0] == 1
        for x in range(4, 8):
            assert state.display[x, 0] == 0
        assert jnp.sum(state.display) == 4
        assert state.V[15] == 0

    def test_collision_detection(self, fresh_state):
        """Test collision flag when sprite overlaps existing pixels."""
        state = setup_sprite_in_memory(fresh_state, 0x400, [0x80])

        state = execute(state, 0x6014)  # V0 = 20
        state = execute(state, 0x610A)  # V1 = 10
        state = execute(state, 0xA400)  # I = 0x400

        state = execute(state, 0xD011)
        assert state.display[20, 10] == 1
        assert state.V[15] == 0

        state = execute(state, 0xD011)
        assert state.display[20, 10] == 0  # Pixel erased by XOR
        assert state.V[15] == 1

    def test_partial_overlap_collision(self, fresh_state):
        """One overlapping pixel is enough to raise VF."""
        state = setup_sprite_in_memory(fresh_state, 0x400, [0x80, 0xC0])
        state = execute(state, 0xA400)
        state = execute(state, 0xD011)  # Lights (0, 0)

        state = execute(state, 0xA401)
        state = execute(state, 0xD011)  # 0xC0 at (0, 0): clears (0,0), lights (1,0)

        assert state.display[0, 0] == 0
        assert state.display[1, 0] == 1
        assert state.V[15] == 1

    def test_vf_cleared_without_collision(self, fresh_state):
        """VF is reset to 0 when nothing collides."""
        state = setup_sprite_in_memory(fresh_state, 0xB00, [0x80])

        state = execute(state, 0x6F01)  # VF = 1
        state = execute(state, 0x6005)
        state = execute(state, 0x6105)
        state = execute(state, 0xAB00)
        state = execute(state, 0xD011)

        assert state.V[15] == 0

    def test_zero_height_draws_nothing(self, fresh_state):
        """DXY0 draws no rows."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0xFF])
        state = execute(state, 0xA300)

        state = execute(state, 0xD010)

        assert jnp.sum(state.display) == 0


class TestScreenBoundaries:
    """Test sprite clipping and wrapping."""

    def test_right_edge_clipping(self, fresh_state):
        """Pixels past x = 63 are dropped."""
        state = setup_sprite_in_memory(fresh_state, 0x600, [0xFF])

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0xA600)
        state = execute(state, 0xD011)

        for x in range(60, 64):
            assert state.display[x, 0] == 1
        for x in range(4):
            assert state.display[x, 0] == 0

    def test_bottom_edge_clipping(self, fresh_state):
        """Rows past y = 31 are dropped."""
        state = setup_sprite_in_memory(fresh_state, 0x700, [0x80, 0x80, 0x80])

        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x611E)  # V1 = 30
        state = execute(state, 0xA700)
        state = execute(state, 0xD013)

        assert state.display[0, 30] == 1
        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 0

    def test_right_edge_wrapping(self, wrapping_state):
        """With wrap_sprites, pixels past x = 63 reappear on the left."""
        state = setup_sprite_in_memory(wrapping_state, 0x600, [0xFF])

        state = execute(state, 0x603C)  # V0 = 60
        state = execute(state, 0xA600)
        state = execute(state, 0xD011)

        for x in list(range(60, 64)) + list(range(4)):
            assert state.display[x, 0] == 1
        assert state.display[4, 0] == 0

    def test_bottom_edge_wrapping(self, wrapping_state):
        """With wrap_sprites, rows past y = 31 reappear at the top."""
        state = setup_sprite_in_memory(wrapping_state, 0x700, [0x80, 0x80, 0x80])

        state = execute(state, 0x611F)  # V1 = 31
        state = execute(state, 0xA700)
        state = execute(state, 0xD013)

        assert state.display[0, 31] == 1
        assert state.display[0, 0] == 1
        assert state.display[0, 1] == 1

    def test_coordinate_wrapping(self, fresh_state):
        """The origin itself always wraps onto the screen."""
        state = setup_sprite_in_memory(fresh_state, 0x800, [0x80])

        state = execute(state, 0x6046)  # V0 = 70 (70 & 63 = 6)
        state = execute(state, 0x6125)  # V1 = 37 (37 & 31 = 5)
        state = execute(state, 0xA800)
        state = execute(state, 0xD011)

        assert state.display[6, 5] == 1


class TestSpriteVariations:
    """Test different sprite configurations."""

    def test_different_sprite_heights(self, fresh_state):
        """Only N rows are drawn."""
        sprite = [0x80, 0x40, 0x20, 0x10, 0x08]  # Diagonal line
        state = setup_sprite_in_memory(fresh_state, 0x900, sprite)

        state = execute(state, 0x600A)  # V0 = 10
        state = execute(state, 0x6108)  # V1 = 8
        state = execute(state, 0xA900)
        state = execute(state, 0xD013)

        assert state.display[10, 8] == 1
        assert state.display[11, 9] == 1
        assert state.display[12, 10] == 1
        assert state.display[13, 11] == 0  # Row 3 not drawn (N=3)

    def test_font_glyph(self, fresh_state):
        """FX29 + DXY5 draws the built-in glyph for 0."""
        state = execute(fresh_state, 0xF029)  # I = glyph for V0 (0)
        state = execute(state, 0xD015)

        top_row = [int(state.display[x, 0]) for x in range(8)]
        middle_row = [int(state.display[x, 2]) for x in range(8)]
        assert top_row == [1, 1, 1, 1, 0, 0, 0, 0]    # 0xF0
        assert middle_row == [1, 0, 0, 1, 0, 0, 0, 0]  # 0x90

    def test_framebuffer_snapshot_layout(self, fresh_state):
        """framebuffer() lays pixel (x, y) out at x + y * 64."""
        state = setup_sprite_in_memory(fresh_state, 0x300, [0x80])
        state = execute(state, 0x6003)  # V0 = 3
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0xA300)
        state = execute(state, 0xD011)

        pixels = framebuffer(state)

        assert pixels.shape == (64 * 32,)
        assert pixels[3 + 2 * SCREEN_WIDTH]
        assert pixels.sum() == 1
