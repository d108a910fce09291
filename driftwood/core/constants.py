"""
Driftwood RPG - Global Constants
================================
All magic numbers, colors, and timing values live here.
"""

from __future__ import annotations

# ── Window ──────────────────────────────────────────────────────────
BUFFER_WIDTH: int = 320  # low-res pixel buffer, upscaled to the window
BUFFER_HEIGHT: int = 200
WINDOW_SCALE: int = 3
FPS: int = 60
TITLE: str = "driftwood rpg"
SUBTITLE: str = "cooler than an AI girlfriend"

# ── Frame clock ─────────────────────────────────────────────────────
MAX_FRAME_DT: float = 0.25  # seconds; a resumed tab must not skip phases

# ── Palette ─────────────────────────────────────────────────────────
COLOR_SKY_TOP: tuple[int, int, int] = (143, 209, 255)
COLOR_SKY_BOTTOM: tuple[int, int, int] = (200, 238, 255)
COLOR_WOOD_LIGHT: tuple[int, int, int] = (243, 231, 207)
COLOR_WOOD_MID: tuple[int, int, int] = (208, 182, 143)
COLOR_WOOD_DARK: tuple[int, int, int] = (155, 122, 86)
COLOR_WOOD_DARKER: tuple[int, int, int] = (107, 74, 48)
COLOR_PETAL_BACK: tuple[int, int, int] = (247, 199, 214)
COLOR_PETAL_FRONT: tuple[int, int, int] = (251, 232, 239)
COLOR_SAND: tuple[int, int, int] = (236, 214, 164)
COLOR_WATER: tuple[int, int, int] = (64, 140, 196)
COLOR_TEXT: tuple[int, int, int] = (250, 246, 236)
COLOR_TEXT_DIM: tuple[int, int, int] = (170, 160, 150)
COLOR_PANEL_BG: tuple[int, int, int] = (40, 30, 24)
COLOR_ERROR_TEXT: tuple[int, int, int] = (255, 170, 170)

# ── Petals (title screen) ───────────────────────────────────────────
PETAL_COUNT: int = 34
PETAL_RECYCLE_MARGIN: int = 10

# ── Scenes ──────────────────────────────────────────────────────────
SCENE_FADE_OUT_DURATION: float = 0.6
SCENE_FADE_IN_DURATION: float = 0.8
TERMINAL_FADE_DURATION: float = 2.5

# ── Audio ───────────────────────────────────────────────────────────
AUDIO_DEFAULT_FADE: float = 1.5  # seconds for a full 0 -> 1 ramp
AUDIO_RETRY_DELAY: float = 0.75
AMBIENT_SOFTEN_FACTOR: float = 0.45
AMBIENT_FADE_OUT_DURATION: float = 2.0
BEACH_WAVES_VOLUME: float = 0.25  # waves keep murmuring under the beach theme
BEACH_WAVES_FADE: float = 3.0

# ── Dialogue ────────────────────────────────────────────────────────
DIALOGUE_CHAR_INTERVAL: float = 0.035  # seconds per revealed glyph
DIALOGUE_BOX_OPEN_DURATION: float = 0.2

# ── Prompts ─────────────────────────────────────────────────────────
PROMPT_FADE_IN_DURATION: float = 0.35
PROMPT_FADE_OUT_DURATION: float = 0.25
NAME_MAX_LENGTH: int = 16
NAME_ALLOWED_PATTERN: str = r"[A-Za-z0-9'\- ]"
CARET_BLINK_PERIOD: float = 1.0

# ── Cinematic ───────────────────────────────────────────────────────
TO_BLACK_DURATION: float = 2.0
BLACK_HOLD_DURATION: float = 1.25
EYE_OPENING_DURATION: float = 1.5
EYE_CLOSING_DURATION: float = 0.5
EYE_FINAL_OPEN_DURATION: float = 1.25
EYE_CRACK_OPENNESS: float = 0.35  # how far the first crack opens
REACTION_CUE_DURATION: float = 1.5
AMBIENT_FADE_DELAY: float = 1.0

# ── World ───────────────────────────────────────────────────────────
WORLD_WIDTH: int = 960
VIEWPORT_WIDTH: int = BUFFER_WIDTH
BOUNDS_PADDING: int = 2
SHORE_BASE_Y: float = 84.0  # water collision line at rest
TIDE_AMPLITUDE: float = 6.0
TIDE_PERIOD: float = 9.0

# ── Player ──────────────────────────────────────────────────────────
PLAYER_SPEED: float = 70.0  # px per second
PLAYER_SPRITE_WIDTH: int = 12
PLAYER_SPRITE_HEIGHT: int = 18
PLAYER_START: tuple[float, float] = (80.0, 150.0)
WALK_FRAME_INTERVAL: float = 0.14
WALK_FRAME_COUNT: int = 4  # frame 0 is the neutral idle pose
ARRIVAL_EPSILON: float = 0.5

# ── Camera ──────────────────────────────────────────────────────────
CAMERA_DEAD_ZONE: float = 96.0  # margin from each viewport edge
CAMERA_FOLLOW_RATE: float = 5.0

# ── NPCs ────────────────────────────────────────────────────────────
KEEPER_X: float = 300.0
KEEPER_Y_BOUNDS: tuple[float, float] = (112.0, 176.0)
KEEPER_SPEED: float = 28.0
KEEPER_PAUSE_RANGE: tuple[float, float] = (0.8, 2.4)
KEEPER_SEED: float = 17.0

DRIFTER_RECT: tuple[float, float, float, float] = (640.0, 110.0, 200.0, 70.0)  # x, y, w, h
DRIFTER_SPEED: float = 24.0
DRIFTER_MIN_HOP: float = 24.0
DRIFTER_PICK_ATTEMPTS: int = 8
DRIFTER_PAUSE_RANGE: tuple[float, float] = (1.0, 3.0)
DRIFTER_SEED: float = 41.0

NPC_TALK_RANGE: float = 26.0

# ── Collection ──────────────────────────────────────────────────────
# (type, count) in placement order
COLLECTIBLE_PLAN: tuple[tuple[str, int], ...] = (
    ("driftwood", 12),
    ("shell", 6),
    ("seaglass", 4),
)
SCATTER_BAND: tuple[float, float, float, float] = (40.0, 100.0, 880.0, 86.0)  # x, y, w, h
SCATTER_MIN_SPACING: float = 14.0
SCATTER_MAX_ATTEMPTS: int = 12
PICKUP_RADIUS: float = 16.0
CLICK_RADIUS: float = 8.0
INVENTORY_CAPACITY: int = 6
NOTICE_DURATION: float = 2.0
NOTICE_FADE_IN: float = 0.2
NOTICE_FADE_OUT: float = 0.4

# ── Quest ───────────────────────────────────────────────────────────
QUEST_ITEM_TYPE: str = "driftwood"
QUEST_GOAL: int = 10
QUEST_REWARD_COINS: int = 25

# ── Input codes ─────────────────────────────────────────────────────
# Browser-style key codes; main.py maps pygame keys onto these.
KEYS_UP: frozenset[str] = frozenset({"ArrowUp", "KeyW"})
KEYS_DOWN: frozenset[str] = frozenset({"ArrowDown", "KeyS"})
KEYS_LEFT: frozenset[str] = frozenset({"ArrowLeft", "KeyA"})
KEYS_RIGHT: frozenset[str] = frozenset({"ArrowRight", "KeyD"})
KEYS_CONFIRM: frozenset[str] = frozenset({"Enter", "Space"})
KEY_CANCEL: str = "Escape"
KEY_BACKSPACE: str = "Backspace"
KEY_INVENTORY: str = "KeyI"
KEY_TALK: str = "KeyE"
