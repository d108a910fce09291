from driftwood.engine.prompts import NameEntryPrompt, PromptPhase, QuestPrompt


def _visible(prompt):
    prompt.open()
    prompt.tick(0.1)
    prompt.tick(0.1)
    assert prompt.phase is PromptPhase.VISIBLE
    return prompt


def _check_invariants(prompt):
    assert 0.0 <= prompt.progress <= 1.0
    assert (prompt.layout is None) == (prompt.phase is PromptPhase.HIDDEN)


# ── lifecycle ───────────────────────────────────────────────


def test_hidden_prompt_has_no_layout_and_ignores_input():
    prompt = NameEntryPrompt(fade_in=0.2, fade_out=0.2)
    _check_invariants(prompt)
    assert not prompt.is_open
    assert prompt.handle_key("KeyA", "a") is False
    assert prompt.handle_pointer((160, 100)) is False


def test_fade_in_then_out():
    submitted = []
    prompt = NameEntryPrompt(on_submit=submitted.append, fade_in=0.2, fade_out=0.2)
    assert prompt.open()
    assert prompt.open() is False
    assert prompt.phase is PromptPhase.OPENING
    assert set(prompt.layout) == {"panel", "field", "submit"}

    for _ in range(4):
        prompt.tick(0.05)
        _check_invariants(prompt)
    assert prompt.phase is PromptPhase.VISIBLE

    prompt.type_text("Mira")
    assert prompt.submit()
    assert submitted == ["Mira"]
    assert prompt.phase is PromptPhase.CLOSING
    for _ in range(5):
        prompt.tick(0.05)
        _check_invariants(prompt)
    assert prompt.phase is PromptPhase.HIDDEN
    assert prompt.progress == 0.0


def test_layout_is_centered_panel():
    prompt = NameEntryPrompt()
    prompt.open()
    panel = prompt.layout["panel"]
    assert panel.center == (160, 100)
    assert panel.contains(prompt.layout["submit"])


# ── name entry ──────────────────────────────────────────────


def test_typing_accepted_while_opening_but_submit_waits():
    prompt = NameEntryPrompt(fade_in=0.2)
    prompt.open()
    assert prompt.accepts_input
    prompt.type_text("Jo")
    assert prompt.buffer == "Jo"
    assert prompt.submit() is False
    assert prompt.phase is PromptPhase.OPENING


def test_name_charset_is_filtered():
    prompt = _visible(NameEntryPrompt(fade_in=0.2))
    prompt.type_text("Ab1-' é!")
    assert prompt.buffer == "Ab1-' "


def test_name_length_is_capped():
    prompt = _visible(NameEntryPrompt(fade_in=0.2, max_length=16))
    prompt.type_text("x" * 20)
    assert prompt.buffer == "x" * 16
    assert prompt.type_text("y") is False


def test_blank_name_keeps_prompt_open():
    submitted = []
    prompt = _visible(NameEntryPrompt(on_submit=submitted.append, fade_in=0.2))
    prompt.type_text("   ")
    assert prompt.submit() is False
    assert prompt.phase is PromptPhase.VISIBLE
    assert submitted == []


def test_submitted_name_is_trimmed():
    submitted = []
    prompt = _visible(NameEntryPrompt(on_submit=submitted.append, fade_in=0.2))
    prompt.type_text("  Mira  ")
    prompt.submit()
    assert submitted == ["Mira"]


def test_key_handling():
    submitted = []
    prompt = _visible(NameEntryPrompt(on_submit=submitted.append, fade_in=0.2))
    assert prompt.handle_key("KeyA", "A")
    assert prompt.handle_key("Space", " ")
    assert prompt.handle_key("KeyB", "b")
    assert prompt.handle_key("Backspace")
    assert prompt.handle_key("ArrowUp")
    assert prompt.buffer == "A "
    assert prompt.handle_key("Enter")
    assert submitted == ["A"]


def test_submit_button_click():
    submitted = []
    prompt = _visible(NameEntryPrompt(on_submit=submitted.append, fade_in=0.2))
    prompt.type_text("Kai")
    assert prompt.hit_test(prompt.layout["panel"].topleft) == "panel"
    assert prompt.handle_pointer(prompt.layout["submit"].center)
    assert submitted == ["Kai"]


def test_reopen_clears_buffer():
    prompt = _visible(NameEntryPrompt(on_submit=lambda name: None, fade_in=0.2, fade_out=0.2))
    prompt.type_text("Old")
    prompt.submit()
    prompt.tick(0.2)
    prompt.open()
    assert prompt.buffer == ""


# ── quest prompt ────────────────────────────────────────────


def test_quest_confirm_latches():
    confirmed = []
    prompt = _visible(QuestPrompt(on_confirm=lambda: confirmed.append(True), fade_in=0.2, fade_out=0.2))
    assert prompt.confirm()
    assert prompt.quest_accepted
    assert prompt.phase is PromptPhase.CLOSING

    prompt.tick(0.2)
    _visible(prompt)
    assert prompt.confirm() is False
    assert confirmed == [True]


def test_quest_confirm_requires_visible():
    prompt = QuestPrompt(fade_in=0.2)
    prompt.open()
    assert prompt.confirm() is False
    assert not prompt.quest_accepted


def test_quest_decline_by_key():
    declined = []
    prompt = _visible(QuestPrompt(on_decline=lambda: declined.append(True), fade_in=0.2))
    assert prompt.handle_key("Escape")
    assert declined == [True]
    assert prompt.phase is PromptPhase.CLOSING
    assert not prompt.quest_accepted


def test_quest_buttons():
    confirmed = []
    prompt = _visible(QuestPrompt(on_confirm=lambda: confirmed.append(True), fade_in=0.2))
    assert set(prompt.layout) == {"panel", "confirm", "decline"}
    prompt.handle_pointer(prompt.layout["confirm"].center)
    assert confirmed == [True]


def test_reset_clears_latch():
    prompt = _visible(QuestPrompt(fade_in=0.2))
    prompt.confirm()
    prompt.reset()
    assert not prompt.quest_accepted
    assert prompt.layout is None
