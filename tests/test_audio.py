import pytest

from driftwood.engine.audio import AudioFadeManager


# ── targets ─────────────────────────────────────────────────


def test_set_target_clamps(audio, make_element):
    audio.add_track("sea", make_element())
    audio.set_target("sea", 1.5)
    assert audio.tracks["sea"].current_target_volume == 1.0
    audio.set_target("sea", -0.2)
    assert audio.tracks["sea"].current_target_volume == 0.0


def test_unknown_track_is_ignored(audio):
    audio.set_target("nope", 1.0)
    assert audio.tracks == {}


def test_soften_scales_target(audio, make_element):
    audio.add_track("wind", make_element())
    audio.set_target("wind", 0.8)
    audio.soften(["wind", "missing"], 0.5)
    assert audio.tracks["wind"].current_target_volume == pytest.approx(0.4)


# ── ramping ─────────────────────────────────────────────────


def test_ramp_up_is_linear_and_never_overshoots(audio, make_element):
    el = make_element()
    audio.add_track("theme", el, fade_duration=1.0)
    audio.set_target("theme", 0.6)
    assert not el.paused

    seen = []
    for _ in range(12):
        audio.tick(0.1)
        seen.append(el.volume)
    assert seen == sorted(seen)
    assert max(seen) == pytest.approx(0.6)
    assert all(v <= 0.6 + 1e-9 for v in seen)


def test_ramp_down_pauses_at_zero(audio, make_element):
    el = make_element()
    audio.add_track("theme", el, fade_duration=1.0)
    audio.set_target("theme", 1.0)
    for _ in range(4):
        audio.tick(0.25)
    assert el.volume == pytest.approx(1.0)

    audio.set_target("theme", 0.0)
    audio.tick(0.25)
    assert el.volume == pytest.approx(0.75)
    assert not el.paused
    for _ in range(3):
        audio.tick(0.25)
    assert el.volume == 0.0
    assert el.paused


def test_retrigger_rewinds_on_restart(audio, make_element):
    el = make_element()
    audio.add_track("title", el, retrigger=True)
    audio.set_target("title", 1.0)
    assert el.rewinds == 1


# ── rejected playback ───────────────────────────────────────


def test_rejected_play_retries_after_backoff(audio, make_element):
    el = make_element(rejections=1)
    audio.add_track("theme", el, fade_duration=1.0)
    audio.set_target("theme", 1.0)
    track = audio.tracks["theme"]
    assert el.play_calls == 1
    assert track.play_pending
    assert track.retry_delay == pytest.approx(0.75)

    audio.tick(0.5)
    assert el.play_calls == 1
    assert el.volume == 0.0

    audio.tick(0.25)
    assert el.play_calls == 2
    assert not track.play_pending
    assert track.started
    assert el.volume == pytest.approx(0.25)


def test_pending_play_dropped_when_target_returns_to_zero(audio, make_element):
    el = make_element(rejections=5)
    audio.add_track("theme", el)
    audio.set_target("theme", 1.0)
    audio.set_target("theme", 0.0)
    audio.tick(0.1)
    assert not audio.tracks["theme"].play_pending
    audio.tick(2.0)
    assert el.play_calls == 1


def test_unready_element_waits_without_backoff(audio, make_element):
    el = make_element(ready=False)
    audio.add_track("theme", el)
    audio.set_target("theme", 1.0)
    assert el.play_calls == 0
    assert audio.tracks["theme"].play_pending

    audio.tick(0.016)
    assert el.play_calls == 0
    el.ready = True
    audio.tick(0.016)
    assert el.play_calls == 1
    assert not el.paused


def test_only_one_play_attempt_in_flight(audio, make_element):
    class Reentrant(make_element):
        def play(self):
            # A callback inside play() asking for playback again
            audio.set_target("theme", 1.0)
            super().play()

    el = Reentrant()
    audio.add_track("theme", el)
    audio.set_target("theme", 1.0)
    assert el.play_calls == 1
    assert not el.paused


# ── contexts ────────────────────────────────────────────────


def test_idle_context_fades_track_out(audio, make_element):
    el = make_element()
    audio.add_track("title", el, fade_duration=1.0, context="title")
    audio.set_context("title")
    audio.set_target("title", 1.0)
    audio.tick(0.5)
    assert el.volume == pytest.approx(0.5)

    audio.set_context("adventure")
    audio.tick(0.25)
    assert el.volume == pytest.approx(0.25)


def test_idle_playback_allowed_keeps_track_up(audio, make_element):
    el = make_element()
    audio.add_track("waves", el, fade_duration=1.0, context="title", allow_idle_playback=True)
    audio.set_target("waves", 1.0)
    audio.set_context("adventure")
    audio.tick(0.5)
    assert el.volume == pytest.approx(0.5)


def test_set_context_starts_auto_tracks(audio, make_element):
    el = make_element()
    audio.add_track("beach", el, base_volume=0.4, context="adventure", auto_start=True)
    audio.set_context("title")
    assert el.paused
    audio.set_context("adventure")
    assert not el.paused
    assert audio.tracks["beach"].current_target_volume == pytest.approx(0.4)


# ── cues and reset ──────────────────────────────────────────


def test_one_shot_restarts_cue(audio, make_element):
    el = make_element()
    audio.add_cue("chime", el, 0.4)
    audio.play_one_shot("chime")
    audio.play_one_shot("chime")
    assert el.rewinds == 2
    assert el.play_calls == 2
    assert el.volume == pytest.approx(0.4)


def test_rejected_one_shot_is_dropped(audio, make_element):
    el = make_element(rejections=1)
    audio.add_cue("chime", el)
    audio.play_one_shot("chime")
    audio.tick(2.0)
    assert el.play_calls == 1
    assert el.paused


def test_reset_silences_everything(make_element):
    audio = AudioFadeManager()
    el = make_element()
    audio.add_track("theme", el, context="title")
    audio.set_context("title")
    audio.set_target("theme", 1.0)
    audio.tick(0.5)
    audio.reset()
    assert el.volume == 0.0
    assert el.paused
    assert audio.active_context is None
    assert audio.tracks["theme"].current_target_volume == 0.0
    assert not audio.tracks["theme"].started


def test_track_loop_flag_reaches_the_element(make_element):
    audio = AudioFadeManager()
    once, looped = make_element(), make_element()
    audio.add_track("sting", once, loop=False)
    audio.add_track("theme", looped)
    audio.set_target("sting", 1.0)
    audio.set_target("theme", 1.0)
    assert once.loop is False
    assert looped.loop is True
    assert not once.paused
