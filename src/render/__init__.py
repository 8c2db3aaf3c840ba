# Рендеры выходного тайла
from render.heightmap import height_ramp, render_height_ramp
from render.hillshade import (
    blend_colors,
    elevation_alpha,
    light_luminance,
    render_hillshade,
    shade,
)

__all__ = [
    'blend_colors',
    'elevation_alpha',
    'height_ramp',
    'light_luminance',
    'render_height_ramp',
    'render_hillshade',
    'shade',
]
