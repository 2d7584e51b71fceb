"""CHIP-8 monochrome framebuffer."""

import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8core.constants import SCREEN_WIDTH, SCREEN_HEIGHT
from chip8core.memory import as_byte_array

# Pre-computed coordinate grids for sprite blits
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


class Display(PyTreeNode):
    """64x32 one-bit pixel grid indexed as ``pixels[x, y]``."""
    pixels: jnp.ndarray = field(
        default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)
    )

    def clear(self) -> "Display":
        """Turn every pixel off."""
        return self.replace(pixels=jnp.zeros_like(self.pixels))

    def pixel(self, x: int, y: int) -> bool:
        """Read one pixel; coordinates wrap around the screen edges."""
        return bool(self.pixels[int(x) % SCREEN_WIDTH, int(y) % SCREEN_HEIGHT])

    def draw_sprite(self, x: int, y: int, sprite) -> tuple["Display", bool]:
        """XOR a sprite onto the grid.

        Each sprite byte is one 8-pixel row, most significant bit leftmost,
        rows stacked downward from ``y``. Both the start position and every
        drawn pixel wrap modulo the screen size.

        Args:
            x: Column of the sprite's left edge
            y: Row of the sprite's top edge
            sprite: Row bytes (bytes, sequence of ints or uint8 array); values
                outside 0-255 raise ValueError

        Returns:
            Tuple of the new display and whether any lit pixel was turned off
        """
        rows = as_byte_array(sprite).astype(jnp.int32)
        height = int(rows.size)
        if height == 0:
            return self, False
        if height > SCREEN_HEIGHT:
            raise ValueError(f"Sprite of {height} rows is taller than the screen")

        col_offset = (xx - int(x) % SCREEN_WIDTH) % SCREEN_WIDTH
        row_offset = (yy - int(y) % SCREEN_HEIGHT) % SCREEN_HEIGHT
        in_sprite = (col_offset < 8) & (row_offset < height)

        sprite_bytes = rows[jnp.minimum(row_offset, height - 1)]
        bits = (sprite_bytes >> jnp.clip(7 - col_offset, 0, 7)) & 1
        sprite_mask = (bits == 1) & in_sprite

        collision = bool(jnp.any(self.pixels & sprite_mask))
        return self.replace(pixels=self.pixels ^ sprite_mask), collision


def create_display() -> Display:
    """Create a blank display."""
    return Display()
