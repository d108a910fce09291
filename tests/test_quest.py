from driftwood.core.profile import PlayerProfile
from driftwood.engine.collection import Inventory
from driftwood.engine.quest import DrifterBranch, KeeperBranch, QuestState, drifter_dialogue, keeper_dialogue


def _inventory_with(count, kind="driftwood"):
    inv = Inventory()
    for _ in range(count):
        inv.add(kind)
    return inv


# ── Keeper ──────────────────────────────────────────────────


def test_empty_handed_needs_full_goal():
    branch, lines = keeper_dialogue(QuestState(), Inventory(), PlayerProfile(name="Mira"))
    assert branch is KeeperBranch.NEED_MORE
    assert any("You still need 10 more." in line for line in lines)
    assert any("Mira" in line for line in lines)


def test_quest_scenario_pays_out_once():
    quest, profile = QuestState(), PlayerProfile(name="Mira")
    inv = _inventory_with(9)

    branch, lines = keeper_dialogue(quest, inv, profile)
    assert branch is KeeperBranch.NEED_MORE
    assert any("You still need 1 more." in line for line in lines)
    assert profile.coins == 0

    inv.add("driftwood")
    branch, _ = keeper_dialogue(quest, inv, profile)
    assert branch is KeeperBranch.REWARD
    assert quest.reward_given
    assert profile.coins == 25

    branch, _ = keeper_dialogue(quest, inv, profile)
    assert branch is KeeperBranch.REPEAT_THANKS
    assert profile.coins == 25


def test_other_items_do_not_count():
    inv = _inventory_with(12, "shell")
    assert QuestState().still_needed(inv) == 10


def test_unnamed_player_is_a_stranger():
    _, lines = keeper_dialogue(QuestState(), Inventory(), PlayerProfile())
    assert "stranger" in lines[0]


# ── Drifter ─────────────────────────────────────────────────


def test_drifter_waits_for_the_reward():
    quest = QuestState()
    assert drifter_dialogue(quest)[0] is DrifterBranch.SMALL_TALK
    quest.reward_given = True
    branch, lines = drifter_dialogue(quest)
    assert branch is DrifterBranch.OFFER_VOYAGE
    assert lines
