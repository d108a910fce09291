"""
Driftwood RPG - Renderer
========================
Draws a :class:`GameSnapshot` into the low-resolution buffer.  Nothing here
mutates game state; the frame loop scales the buffer up to the window.

Images come from the asset library when they are ready and fall back to
flat shapes otherwise.
"""

from __future__ import annotations

import logging
import math

import pygame

from driftwood.core.assets import AssetLibrary
from driftwood.core.constants import (
    BUFFER_HEIGHT,
    BUFFER_WIDTH,
    COLOR_ERROR_TEXT,
    COLOR_PANEL_BG,
    COLOR_PETAL_BACK,
    COLOR_PETAL_FRONT,
    COLOR_SAND,
    COLOR_SKY_BOTTOM,
    COLOR_SKY_TOP,
    COLOR_TEXT,
    COLOR_TEXT_DIM,
    COLOR_WATER,
    COLOR_WOOD_DARK,
    COLOR_WOOD_DARKER,
    COLOR_WOOD_LIGHT,
    COLOR_WOOD_MID,
    PLAYER_SPRITE_HEIGHT,
    PLAYER_SPRITE_WIDTH,
    SUBTITLE,
    TITLE,
)
from driftwood.core.game_state import ActorView, GameSnapshot, PromptView
from driftwood.core.prng import pseudo_random
from driftwood.engine.actors import FACING_ROW, Facing
from driftwood.engine.cinematic import CinematicPhase
from driftwood.engine.petals import PetalLayer
from driftwood.engine.prompts import PromptPhase

logger = logging.getLogger(__name__)

Color = tuple[int, int, int]

_ITEM_COLORS: dict[str, Color] = {
    "driftwood": COLOR_WOOD_DARK,
    "shell": (250, 214, 200),
    "seaglass": (120, 214, 190),
}

_ACTOR_COLORS: dict[str, Color] = {
    "player": (70, 90, 160),
    "keeper": (150, 70, 60),
    "drifter": (80, 130, 80),
}

_WAKING_PHASES = (
    CinematicPhase.EYE_OPENING,
    CinematicPhase.EYE_CLOSING,
    CinematicPhase.EYE_FINAL_OPEN,
    CinematicPhase.DONE,
)


def lerp_color(a: Color, b: Color, t: float) -> Color:
    return (
        round(a[0] + (b[0] - a[0]) * t),
        round(a[1] + (b[1] - a[1]) * t),
        round(a[2] + (b[2] - a[2]) * t),
    )


class Renderer:
    """Owns fonts and the asset library; one instance per window."""

    def __init__(self, assets: AssetLibrary | None = None) -> None:
        if not pygame.font.get_init():
            pygame.font.init()
        self.assets = assets or AssetLibrary()
        self._font_title = pygame.font.Font(None, 20)
        self._font = pygame.font.Font(None, 14)
        self._font_small = pygame.font.Font(None, 11)

    # ── entry point ─────────────────────────────────────────────────
    def render_frame(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        """Draw *snap*; a failing draw pass leaves a diagnostic frame instead."""
        try:
            self.draw(surface, snap)
        except Exception as e:
            logger.exception("[Render] draw pass failed")
            self.draw_error(surface, e)

    def draw(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        if snap.scene == "adventure":
            self._draw_adventure(surface, snap)
        else:
            self._draw_title(surface, snap)
        if snap.dialogue is not None:
            self._draw_dialogue(surface, snap)
        self._draw_name_prompt(surface, snap.name_prompt)
        self._draw_quest_prompt(surface, snap.quest_prompt)
        self._fill_black(surface, snap.crossfade)

    def draw_error(self, surface: pygame.Surface, error: BaseException) -> None:
        surface.fill((0, 0, 0))
        surface.blit(self._font.render("Render error:", False, COLOR_ERROR_TEXT), (8, 14))
        surface.blit(self._font.render(str(error) or type(error).__name__, False, COLOR_ERROR_TEXT), (8, 30))

    # ── title ───────────────────────────────────────────────────────
    def _draw_title(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        if snap.cinematic_phase in _WAKING_PHASES:
            # Waking up on the beach, seen through the eyelids
            self._draw_beach(surface, 0.0, snap.water_y)
            self._draw_eyelids(surface, snap.eye_openness)
            return

        self._draw_sky(surface)
        self._draw_petals(surface, snap, PetalLayer.BACK)
        cx, cy = BUFFER_WIDTH // 2, BUFFER_HEIGHT // 2
        self._draw_plank(surface, cx, cy, round(BUFFER_WIDTH * 0.64), round(BUFFER_HEIGHT * 0.32))
        self._draw_title_text(surface, cx, cy)
        self._draw_petals(surface, snap, PetalLayer.FRONT)
        self._fill_black(surface, snap.black_fade)

    def _draw_sky(self, surface: pygame.Surface, steps: int = 32) -> None:
        for i in range(steps):
            t0, t1 = i / steps, (i + 1) / steps
            y = math.floor(t0 * BUFFER_HEIGHT)
            h = max(1, math.floor(t1 * BUFFER_HEIGHT) - y)
            surface.fill(lerp_color(COLOR_SKY_TOP, COLOR_SKY_BOTTOM, (t0 + t1) / 2), (0, y, BUFFER_WIDTH, h))

    def _draw_petals(self, surface: pygame.Surface, snap: GameSnapshot, layer: PetalLayer) -> None:
        color = COLOR_PETAL_FRONT if layer is PetalLayer.FRONT else COLOR_PETAL_BACK
        for p in snap.petals:
            if p.layer is layer:
                surface.fill(color, (round(p.x), round(p.y), p.size, p.size))

    def _draw_plank(self, surface: pygame.Surface, cx: int, cy: int, w: int, h: int) -> None:
        left, right = cx - w // 2, cx + w // 2
        top, bottom = cy - h // 2, cy + h // 2

        # Jagged, splintered short edges
        left_edge, right_edge = [], []
        for y in range(top, bottom + 1, 2):
            n1 = pseudo_random(y * 0.321 + 1.234)
            n2 = pseudo_random(y * 0.618 + 4.321)
            jl = max(-6, min(6, math.floor((math.sin(y * 0.18) + n1 * 2 - 1) * 4)))
            jr = max(-6, min(6, math.floor((math.cos(y * 0.14) + n2 * 2 - 1) * 4)))
            left_edge.append((left + jl, y))
            right_edge.append((right + jr, y))
        outline = left_edge + right_edge[::-1]

        pygame.draw.polygon(surface, COLOR_WOOD_MID, outline)
        bands = 8
        band_h = max(1, math.ceil((bottom - top + 1) / bands))
        previous_clip = surface.get_clip()
        for i in range(bands):
            surface.set_clip(pygame.Rect(left - 8, top + i * band_h, w + 16, band_h))
            pygame.draw.polygon(surface, lerp_color(COLOR_WOOD_LIGHT, COLOR_WOOD_DARK, i / (bands - 1)), outline)
        surface.set_clip(previous_clip)

        # Grain
        for i in range(max(60, math.floor((bottom - top) * 1.6))):
            gy = math.floor(top + pseudo_random(i * 12.3) * (bottom - top))
            gx = math.floor(left + 1 + pseudo_random(i * 7.1) * (w * 0.8))
            angle = (pseudo_random(i * 2.1) - 0.5) * 1.2
            shade = COLOR_WOOD_DARK if pseudo_random(i * 5.5) > 0.55 else COLOR_WOOD_LIGHT
            for k in range(2 + math.floor(pseudo_random(i * 3.3) * 8)):
                px = gx + round(math.cos(angle) * k)
                py = gy + round(math.sin(angle) * k)
                if left + 1 <= px <= right - 1 and top <= py <= bottom:
                    surface.set_at((px, py), shade)

        pygame.draw.polygon(surface, COLOR_WOOD_DARKER, outline, 1)

    def _draw_title_text(self, surface: pygame.Surface, cx: int, cy: int) -> None:
        title = self._font_title.render(TITLE, False, COLOR_WOOD_DARKER)
        shadow = self._font_title.render(TITLE, False, (60, 40, 26))
        surface.blit(shadow, shadow.get_rect(center=(cx + 1, cy + 1)))
        surface.blit(title, title.get_rect(center=(cx, cy)))
        sub = self._font_small.render(SUBTITLE, False, COLOR_WOOD_DARKER)
        surface.blit(sub, sub.get_rect(center=(cx, cy + 18)))

    def _draw_eyelids(self, surface: pygame.Surface, openness: float) -> None:
        lid = round((1.0 - max(0.0, min(1.0, openness))) * BUFFER_HEIGHT / 2)
        if lid > 0:
            surface.fill((0, 0, 0), (0, 0, BUFFER_WIDTH, lid))
            surface.fill((0, 0, 0), (0, BUFFER_HEIGHT - lid, BUFFER_WIDTH, lid))

    # ── adventure ───────────────────────────────────────────────────
    def _draw_adventure(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        cam = snap.camera_x
        self._draw_beach(surface, cam, snap.water_y)

        for kind, wx, wy in snap.collectibles:
            sx, sy = round(wx - cam), round(wy)
            if -4 <= sx <= BUFFER_WIDTH + 4:
                pygame.draw.rect(surface, _ITEM_COLORS.get(kind, COLOR_TEXT), (sx - 2, sy - 1, 5, 3))

        actors = [("player", snap.player), ("keeper", snap.keeper), ("drifter", snap.drifter)]
        for key, view in sorted(actors, key=lambda a: a[1].y):
            self._draw_actor(surface, key, view, cam)

        self._draw_hud(surface, snap)
        if snap.inventory_open:
            self._draw_inventory(surface, snap)
        self._fill_black(surface, snap.terminal_fade)

    def _draw_beach(self, surface: pygame.Surface, cam: float, water_y: float) -> None:
        surface.fill(COLOR_SAND)
        surface.fill(COLOR_WATER, (0, 0, BUFFER_WIDTH, round(water_y)))
        # Foam line drifts with the camera
        for x in range(0, BUFFER_WIDTH, 6):
            wobble = math.sin((x + cam) * 0.15) * 1.5
            surface.fill((230, 244, 250), (x, round(water_y + wobble) - 1, 4, 2))

    def _draw_actor(self, surface: pygame.Surface, key: str, view: ActorView, cam: float) -> None:
        sx = round(view.x - cam - PLAYER_SPRITE_WIDTH / 2)
        sy = round(view.y - PLAYER_SPRITE_HEIGHT)
        sheet = self.assets.image(key)
        if sheet.ready:
            area = pygame.Rect(
                view.anim_frame * PLAYER_SPRITE_WIDTH,
                FACING_ROW[view.facing] * PLAYER_SPRITE_HEIGHT,
                PLAYER_SPRITE_WIDTH,
                PLAYER_SPRITE_HEIGHT,
            )
            surface.blit(sheet.surface, (sx, sy), area)
            return

        bob = 1 if view.moving and view.anim_frame % 2 else 0
        body = pygame.Rect(sx, sy + bob, PLAYER_SPRITE_WIDTH, PLAYER_SPRITE_HEIGHT - bob)
        pygame.draw.rect(surface, _ACTOR_COLORS[key], body)
        pygame.draw.rect(surface, (240, 210, 180), (sx + 2, sy + bob, PLAYER_SPRITE_WIDTH - 4, 6))
        # Eyes show the facing
        if view.facing is not Facing.UP:
            ex = {Facing.LEFT: -2, Facing.RIGHT: 2}.get(view.facing, 0)
            cx = sx + PLAYER_SPRITE_WIDTH // 2 + ex
            surface.fill((20, 20, 20), (cx - 2, sy + bob + 3, 1, 1))
            surface.fill((20, 20, 20), (cx + 1, sy + bob + 3, 1, 1))

    def _draw_hud(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        coins = self._font_small.render(f"coins {snap.coins}", False, COLOR_TEXT)
        surface.blit(coins, (BUFFER_WIDTH - coins.get_width() - 4, 4))
        if snap.notice_alpha > 0 and snap.notice_text:
            notice = self._font_small.render(snap.notice_text, False, COLOR_TEXT)
            notice.set_alpha(round(255 * snap.notice_alpha))
            surface.blit(notice, (4, 4))

    def _draw_inventory(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        panel = pygame.Rect(BUFFER_WIDTH - 110, 18, 104, 12 + 11 * max(1, len(snap.inventory)))
        surface.fill(COLOR_PANEL_BG, panel)
        pygame.draw.rect(surface, COLOR_WOOD_MID, panel, 1)
        if not snap.inventory:
            surface.blit(self._font_small.render("(empty)", False, COLOR_TEXT_DIM), (panel.x + 6, panel.y + 6))
        for i, (kind, count) in enumerate(snap.inventory):
            y = panel.y + 6 + i * 11
            surface.fill(_ITEM_COLORS.get(kind, COLOR_TEXT), (panel.x + 6, y + 2, 5, 3))
            surface.blit(self._font_small.render(f"{kind} x{count}", False, COLOR_TEXT), (panel.x + 16, y))

    # ── overlays ────────────────────────────────────────────────────
    def _draw_dialogue(self, surface: pygame.Surface, snap: GameSnapshot) -> None:
        view = snap.dialogue
        if view is None:
            return
        full = pygame.Rect(6, BUFFER_HEIGHT - 58, BUFFER_WIDTH - 12, 52)
        box = full.copy()
        box.height = max(2, round(full.height * view.box_progress))
        box.bottom = full.bottom
        surface.fill(COLOR_PANEL_BG, box)
        pygame.draw.rect(surface, COLOR_WOOD_MID, box, 1)
        if view.box_progress < 1.0:
            return

        text_x = box.x + 6
        if view.portrait_key:
            portrait = self.assets.image(f"portrait_{view.portrait_key}")
            frame = pygame.Rect(box.x + 4, box.y + 4, 40, 40)
            if portrait.ready:
                surface.blit(pygame.transform.scale(portrait.surface, frame.size), frame)
            else:
                pygame.draw.rect(surface, COLOR_WOOD_DARK, frame, 1)
                label = self._font_small.render(view.portrait_key, False, COLOR_TEXT_DIM)
                surface.blit(label, label.get_rect(center=frame.center))
            text_x = frame.right + 6

        for i, line in enumerate(_wrap(view.text, self._font, box.right - text_x - 6)):
            surface.blit(self._font.render(line, False, COLOR_TEXT), (text_x, box.y + 6 + i * 12))
        if view.fully_revealed and math.sin(snap.time * 8) > 0:
            marker = ">" if view.has_more else "x"
            surface.blit(self._font_small.render(marker, False, COLOR_TEXT_DIM), (box.right - 10, box.bottom - 12))

    def _prompt_layer(self, view: PromptView, title: str) -> pygame.Surface | None:
        if view.phase is PromptPhase.HIDDEN:
            return None
        panel = view.rect("panel")
        if panel is None:
            return None
        layer = pygame.Surface((BUFFER_WIDTH, BUFFER_HEIGHT), pygame.SRCALPHA)
        layer.fill((0, 0, 0, 110))
        layer.fill((*COLOR_PANEL_BG, 240), panel)
        pygame.draw.rect(layer, COLOR_WOOD_MID, panel, 1)
        heading = self._font.render(title, False, COLOR_TEXT)
        layer.blit(heading, heading.get_rect(midtop=(panel.centerx, panel.y + 8)))
        return layer

    def _draw_button(self, layer: pygame.Surface, rect: pygame.Rect | None, label: str) -> None:
        if rect is None:
            return
        layer.fill((*COLOR_WOOD_DARK, 255), rect)
        pygame.draw.rect(layer, COLOR_WOOD_LIGHT, rect, 1)
        text = self._font_small.render(label, False, COLOR_TEXT)
        layer.blit(text, text.get_rect(center=rect.center))

    def _draw_name_prompt(self, surface: pygame.Surface, view: PromptView) -> None:
        layer = self._prompt_layer(view, "What is your name?")
        if layer is None:
            return
        field_rect = view.rect("field")
        if field_rect is not None:
            layer.fill((20, 16, 12, 255), field_rect)
            text = self._font.render(view.text, False, COLOR_TEXT)
            layer.blit(text, (field_rect.x + 3, field_rect.y + 3))
            if view.caret_visible:
                caret_x = min(field_rect.right - 3, field_rect.x + 4 + text.get_width())
                layer.fill((*COLOR_TEXT, 255), (caret_x, field_rect.y + 3, 1, field_rect.height - 6))
        self._draw_button(layer, view.rect("submit"), "OK")
        layer.set_alpha(round(255 * view.progress))
        surface.blit(layer, (0, 0))

    def _draw_quest_prompt(self, surface: pygame.Surface, view: PromptView) -> None:
        layer = self._prompt_layer(view, "Set sail with the Drifter?")
        if layer is None:
            return
        self._draw_button(layer, view.rect("confirm"), "Yes")
        self._draw_button(layer, view.rect("decline"), "Not yet")
        layer.set_alpha(round(255 * view.progress))
        surface.blit(layer, (0, 0))

    def _fill_black(self, surface: pygame.Surface, amount: float) -> None:
        if amount <= 0:
            return
        if amount >= 1:
            surface.fill((0, 0, 0))
            return
        veil = pygame.Surface(surface.get_size())
        veil.set_alpha(round(255 * amount))
        surface.blit(veil, (0, 0))


def _wrap(text: str, font: pygame.font.Font, width: int) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in text.split(" "):
        candidate = f"{current} {word}" if current else word
        if current and font.size(candidate)[0] > width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines
