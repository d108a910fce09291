"""
Driftwood RPG - Game State
==========================
The single aggregate every component hangs off.  Scenes receive it by
reference and advance its parts in a fixed order once per frame; the
renderer only ever sees the frozen :class:`GameSnapshot` built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pygame

from driftwood.core.constants import (
    DRIFTER_RECT,
    KEEPER_X,
    KEEPER_Y_BOUNDS,
    PLAYER_START,
)
from driftwood.core.profile import PlayerProfile
from driftwood.engine.actors import Actor, Facing, PatrolBehavior, PlayerController, WanderBehavior
from driftwood.engine.audio import AudioFadeManager
from driftwood.engine.camera import Camera
from driftwood.engine.cinematic import CinematicPhase, CinematicSequencer
from driftwood.engine.collection import CollectionSystem
from driftwood.engine.dialogue import DialogueEngine
from driftwood.engine.petals import Petal, PetalLayer, create_petals
from driftwood.engine.prompts import ModalPrompt, NameEntryPrompt, PromptPhase, QuestPrompt
from driftwood.engine.quest import QuestState
from driftwood.engine.tide import Tide


def _drifter_start() -> tuple[float, float]:
    x, y, w, h = DRIFTER_RECT
    return x + w / 2, y + h / 2


@dataclass
class GameState:
    audio: AudioFadeManager = field(default_factory=AudioFadeManager)
    dialogue: DialogueEngine = field(default_factory=DialogueEngine)
    name_prompt: NameEntryPrompt = field(default_factory=NameEntryPrompt)
    quest_prompt: QuestPrompt = field(default_factory=QuestPrompt)
    cinematic: CinematicSequencer = field(default_factory=CinematicSequencer)
    profile: PlayerProfile = field(default_factory=PlayerProfile)
    camera: Camera = field(default_factory=Camera)
    collection: CollectionSystem = field(default_factory=CollectionSystem)
    quest: QuestState = field(default_factory=QuestState)
    tide: Tide = field(default_factory=Tide)
    petals: list[Petal] = field(default_factory=create_petals)
    held_keys: set[str] = field(default_factory=set)
    inventory_open: bool = False
    terminal_fading: bool = False
    terminal_fade: float = 0.0
    time: float = 0.0

    def __post_init__(self) -> None:
        self.player = Actor(*PLAYER_START)
        self.player_controller = PlayerController(self.player)
        self.keeper = Actor(KEEPER_X, KEEPER_Y_BOUNDS[0])
        self.keeper_ai = PatrolBehavior(self.keeper)
        self.drifter = Actor(*_drifter_start())
        self.drifter_ai = WanderBehavior(self.drifter)

    # ── resets ──────────────────────────────────────────────────────
    def reset_title(self) -> None:
        """Back to a fresh title screen; nothing from a previous run survives."""
        self.audio.reset()
        self.dialogue.clear()
        self.name_prompt.reset()
        self.quest_prompt.reset()
        self.cinematic.reset()
        self.profile = PlayerProfile()
        self.quest = QuestState()
        self.collection.reset(items=[])
        self.petals = create_petals()
        self.held_keys.clear()
        self.inventory_open = False
        self.terminal_fading = False
        self.terminal_fade = 0.0

    def reset_adventure(self) -> None:
        self.dialogue.clear()
        self.quest_prompt.reset()
        self.player = Actor(*PLAYER_START)
        self.player_controller = PlayerController(self.player)
        self.keeper = Actor(KEEPER_X, KEEPER_Y_BOUNDS[0])
        self.keeper_ai = PatrolBehavior(self.keeper)
        self.drifter = Actor(*_drifter_start())
        self.drifter_ai = WanderBehavior(self.drifter)
        self.camera.snap_to(self.player.x)
        self.collection.reset()
        self.quest = QuestState()
        self.tide = Tide()
        self.held_keys.clear()
        self.inventory_open = False
        self.terminal_fading = False
        self.terminal_fade = 0.0

    @property
    def modal_open(self) -> bool:
        return self.dialogue.is_active or self.name_prompt.is_open or self.quest_prompt.is_open

    def snapshot(self, scene: str, crossfade: float) -> "GameSnapshot":
        session = self.dialogue.session
        dialogue_view = None
        if session is not None:
            dialogue_view = DialogueView(
                text=session.visible_text,
                portrait_key=session.portrait_key,
                box_progress=session.box_progress,
                fully_revealed=session.fully_revealed,
                has_more=not session.is_last_line,
            )
        return GameSnapshot(
            scene=scene,
            crossfade=crossfade,
            time=self.time,
            petals=tuple(PetalView(p.x, p.y, p.size, p.layer) for p in self.petals),
            cinematic_phase=self.cinematic.phase,
            black_fade=self.cinematic.black_fade,
            eye_openness=self.cinematic.eye_openness,
            dialogue=dialogue_view,
            name_prompt=_prompt_view(self.name_prompt, self.name_prompt.buffer, self.name_prompt.caret_visible),
            quest_prompt=_prompt_view(self.quest_prompt),
            player=_actor_view(self.player),
            keeper=_actor_view(self.keeper),
            drifter=_actor_view(self.drifter),
            camera_x=self.camera.x,
            water_y=self.tide.collision_y,
            collectibles=tuple(
                (c.type, c.world_x, c.world_y) for c in self.collection.items if not c.collected
            ),
            inventory=tuple((s.type, s.count) for s in self.collection.inventory.slots),
            inventory_open=self.inventory_open,
            notice_text=self.collection.notice.text,
            notice_alpha=self.collection.notice.alpha,
            player_name=self.profile.name,
            coins=self.profile.coins,
            terminal_fade=self.terminal_fade,
        )


# ── Read-only views for the renderer ────────────────────────────────
@dataclass(frozen=True)
class PetalView:
    x: float
    y: float
    size: int
    layer: PetalLayer


@dataclass(frozen=True)
class ActorView:
    x: float
    y: float
    facing: Facing
    anim_frame: int
    moving: bool


@dataclass(frozen=True)
class DialogueView:
    text: str
    portrait_key: str | None
    box_progress: float
    fully_revealed: bool
    has_more: bool


@dataclass(frozen=True)
class PromptView:
    phase: PromptPhase
    progress: float
    layout: tuple[tuple[str, tuple[int, int, int, int]], ...] | None
    text: str = ""
    caret_visible: bool = False

    def rect(self, name: str) -> pygame.Rect | None:
        for key, r in self.layout or ():
            if key == name:
                return pygame.Rect(r)
        return None


@dataclass(frozen=True)
class GameSnapshot:
    scene: str
    crossfade: float
    time: float
    petals: tuple[PetalView, ...]
    cinematic_phase: CinematicPhase
    black_fade: float
    eye_openness: float
    dialogue: DialogueView | None
    name_prompt: PromptView
    quest_prompt: PromptView
    player: ActorView
    keeper: ActorView
    drifter: ActorView
    camera_x: float
    water_y: float
    collectibles: tuple[tuple[str, float, float], ...]
    inventory: tuple[tuple[str, int], ...]
    inventory_open: bool
    notice_text: str
    notice_alpha: float
    player_name: str | None
    coins: int
    terminal_fade: float


def _actor_view(actor: Actor) -> ActorView:
    return ActorView(actor.x, actor.y, actor.facing, actor.anim_frame, actor.moving)


def _prompt_view(prompt: ModalPrompt, text: str = "", caret_visible: bool = False) -> PromptView:
    layout = None
    if prompt.layout is not None:
        layout = tuple((name, tuple(rect)) for name, rect in prompt.layout.items())
    return PromptView(prompt.phase, prompt.progress, layout, text, caret_visible)
