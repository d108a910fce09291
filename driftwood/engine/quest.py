"""
Driftwood RPG - Quest Gating
============================
The Keeper wants driftwood for a raft.  What the Keeper says depends on how
much the player carries; handing in the goal pays out once, and afterwards
the Keeper only thanks the player.  The Drifter offers the voyage once the
raft is paid for.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from driftwood.core.constants import QUEST_GOAL, QUEST_ITEM_TYPE, QUEST_REWARD_COINS
from driftwood.core.profile import PlayerProfile
from driftwood.engine.collection import Inventory


class KeeperBranch(Enum):
    NEED_MORE = auto()
    REWARD = auto()
    REPEAT_THANKS = auto()


class DrifterBranch(Enum):
    SMALL_TALK = auto()
    OFFER_VOYAGE = auto()


@dataclass
class QuestState:
    item_type: str = QUEST_ITEM_TYPE
    goal: int = QUEST_GOAL
    reward: int = QUEST_REWARD_COINS
    reward_given: bool = False

    def still_needed(self, inventory: Inventory) -> int:
        return max(0, self.goal - inventory.count(self.item_type))


def keeper_dialogue(
    quest: QuestState, inventory: Inventory, profile: PlayerProfile
) -> tuple[KeeperBranch, list[str]]:
    """Pick the Keeper's lines.  The REWARD branch pays out as a side effect."""
    name = profile.display_name
    if quest.reward_given:
        return KeeperBranch.REPEAT_THANKS, [
            f"Thanks again, {name}. The raft's coming along nicely.",
            "Have a word with the Drifter down the beach when you're ready.",
        ]

    needed = quest.still_needed(inventory)
    if needed == 0:
        quest.reward_given = True
        profile.grant_coins(quest.reward)
        return KeeperBranch.REWARD, [
            f"That's {quest.goal} pieces of {quest.item_type}! Just what I needed.",
            f"Here, {quest.reward} coins for your trouble.",
            "The Drifter's been itching to sail. Go see them.",
        ]

    return KeeperBranch.NEED_MORE, [
        f"Ahoy, {name}. I'm building a raft, but I'm short on {quest.item_type}.",
        f"Bring me {quest.goal} pieces. You still need {needed} more.",
    ]


def drifter_dialogue(quest: QuestState) -> tuple[DrifterBranch, list[str]]:
    if quest.reward_given:
        return DrifterBranch.OFFER_VOYAGE, [
            "So the Keeper's raft is paid for?",
            "The tide's turning. Shall we set sail?",
        ]
    return DrifterBranch.SMALL_TALK, [
        "The sea washes up all sorts along here.",
        "Shells, glass, wood... the Keeper's after the wood, I hear.",
    ]
