# visualization.py
"""
Handles the window, input polling and drawing using Pygame.
"""
import logging
import math
import pygame
from typing import Callable, Dict, Any, Optional, Tuple

from particle import ParticleSystem
from simulation import Controls
from constants import (
    WINDOW_WIDTH, WINDOW_HEIGHT, WINDOW_TITLE, FPS, BACKGROUND_COLOR,
    HINT_TEXT, HINT_FONT_SIZE, HINT_POSITION, HINT_FADE_DURATION, TEXT_COLOR,
    MAX_ALPHA
)

# --- Data Contracts ---
#
# draw_disc(target: pygame.Surface, position: Tuple[float, float], size: float,
#           rgba: Tuple[int, int, int, int]) -> None:
#   - Inputs:
#     - position: top-left corner of the disc's bounding box.
#     - size: disc radius in pixels.
#   - Side Effects: Alpha-blends the disc over whatever `target` already
#     holds, so overlapping translucent discs add up.
#
# class Visualizer:
#   - __init__(self, vis_params: Optional[Dict[str, Any]] = None,
#              on_audio_toggle: Optional[Callable[[], Any]] = None):
#     - Inputs:
#       - vis_params: The "visualization" config section ("width",
#         "height", "resizable", "fps", "font", "show_hint").
#       - on_audio_toggle: Called when the player presses M.
#     - Side Effects: Initializes Pygame and creates the display surface.
#
#   - handle_events(self) -> bool:
#     - Outputs: False once the player closes the window or presses ESC.
#
#   - read_controls(self) -> Controls:
#     - Outputs: The keys and mouse button held down right now.
#
#   - draw(self, particles: ParticleSystem, audio_on: bool = False) -> None:
#     - Side Effects: Renders the particles and the text overlay.


def draw_disc(target: pygame.Surface, position: Tuple[float, float], size: float,
              rgba: Tuple[int, int, int, int]) -> None:
    """Blits one translucent disc onto `target`."""
    if size <= 0 or rgba[3] == 0:
        return
    # pygame.draw writes alpha straight into the pixels, so the disc is drawn
    # on its own surface and blitted to get per-pixel blending.
    diameter = int(math.ceil(2 * size)) + 1
    disc = pygame.Surface((diameter, diameter), pygame.SRCALPHA)
    pygame.draw.circle(disc, rgba, (size, size), size)
    target.blit(disc, (int(position[0]), int(position[1])))


class Visualizer:
    """
    Owns the Pygame window and renders the particle system into it.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None,
                 on_audio_toggle: Optional[Callable[[], Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()
        pygame.font.init()

        width = vis_params.get('width', WINDOW_WIDTH)
        height = vis_params.get('height', WINDOW_HEIGHT)
        flags = pygame.RESIZABLE if vis_params.get('resizable', True) else 0
        self.screen = pygame.display.set_mode((width, height), flags)
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        self.fps = vis_params.get('fps', FPS)
        self.on_audio_toggle = on_audio_toggle

        font_name = vis_params.get('font')
        try:
            self.font = pygame.font.SysFont(font_name, HINT_FONT_SIZE)
        except pygame.error:
            logging.warning(f"Font '{font_name}' not available, falling back to the default font.")
            self.font = pygame.font.Font(None, HINT_FONT_SIZE)

        self.show_hint = vis_params.get('show_hint', True)
        self.start_ticks = pygame.time.get_ticks()

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    @property
    def size(self) -> Tuple[int, int]:
        return self.screen.get_size()

    def tick(self) -> float:
        """Waits for the next frame and returns the elapsed time in seconds."""
        return self.clock.tick(self.fps) / 1000.0

    def handle_events(self) -> bool:
        """
        Processes the Pygame event queue.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key == pygame.K_m and self.on_audio_toggle is not None:
                    self.on_audio_toggle()

            if event.type == pygame.VIDEORESIZE:
                logging.info(f"Window resized to {event.w}x{event.h}.")
        return True

    def read_controls(self) -> Controls:
        """Polls the keyboard and mouse for the held-down controls."""
        keys = pygame.key.get_pressed()
        spawn_at = None
        if pygame.mouse.get_pressed()[0]:
            mouse_x, mouse_y = pygame.mouse.get_pos()
            spawn_at = (float(mouse_x), float(mouse_y))
        return Controls(
            wind_left=bool(keys[pygame.K_LEFT]),
            wind_right=bool(keys[pygame.K_RIGHT]),
            wind_up=bool(keys[pygame.K_UP]),
            wind_down=bool(keys[pygame.K_DOWN]),
            spawn_at=spawn_at,
            scatter=bool(keys[pygame.K_p]),
            vortex=bool(keys[pygame.K_v]),
            radial=bool(keys[pygame.K_l]),
        )

    def _draw_particle(self, position: Tuple[float, float], size: float, rgba: Tuple[int, int, int, int]):
        draw_disc(self.screen, position, size, rgba)

    def _draw_overlay(self, particles: ParticleSystem, audio_on: bool):
        if self.show_hint:
            elapsed = (pygame.time.get_ticks() - self.start_ticks) / 1000.0
            if elapsed < HINT_FADE_DURATION:
                hint_surf = self.font.render(HINT_TEXT, True, TEXT_COLOR)
                hint_surf.set_alpha(int(MAX_ALPHA * (1.0 - elapsed / HINT_FADE_DURATION)))
                self.screen.blit(hint_surf, HINT_POSITION)

        status = f"Particles: {particles.particle_count}"
        if audio_on:
            status += "  |  Audio"
        status_surf = self.font.render(status, True, TEXT_COLOR)
        self.screen.blit(status_surf, (HINT_POSITION[0], self.size[1] - status_surf.get_height() - 5))

    def draw(self, particles: ParticleSystem, audio_on: bool = False) -> None:
        """
        Draws all particles and the text overlay.
        """
        self.screen.fill(BACKGROUND_COLOR)
        particles.render(self._draw_particle)

        self._draw_overlay(particles, audio_on)
        pygame.display.flip()

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
