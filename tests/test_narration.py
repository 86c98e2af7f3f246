"""Tests for the scripted agent narration."""

from netguide.narration import (
    AGENT_SCRIPT,
    GUIDELINE_AGENT,
    USER,
    VISUALIZATION_AGENT,
    Cue,
    error_cue,
    format_cue,
    play,
    reply_script,
    upload_script,
)


class TestScript:
    def test_offsets_ascend_every_half_second(self):
        assert [c.delay_ms for c in AGENT_SCRIPT] == [0, 500, 1000, 1500, 2000, 2500, 3000, 3500]

    def test_speakers(self):
        assert {c.speaker for c in AGENT_SCRIPT[:4]} == {GUIDELINE_AGENT}
        assert {c.speaker for c in AGENT_SCRIPT[4:]} == {VISUALIZATION_AGENT}

    def test_upload_script_starts_with_user_line(self):
        script = upload_script("edges.csv")
        assert script[0].text == "Uploaded edges.csv"
        assert script[1:] == AGENT_SCRIPT

    def test_reply_echoes_then_replays_after_a_second(self):
        script = reply_script("  make it clearer ")
        assert script[0] == Cue(0, USER, "make it clearer")
        assert [c.delay_ms for c in script[1:]] == [c.delay_ms + 1000 for c in AGENT_SCRIPT]
        assert [c.text for c in script[1:]] == [c.text for c in AGENT_SCRIPT]

    def test_blank_message_gets_no_reply(self):
        assert reply_script("   ") == ()

    def test_error_cue(self):
        assert error_cue("bad").text == "Error parsing file: bad"


class TestPlay:
    def test_emits_in_order_with_waits(self):
        emitted: list[Cue] = []
        slept: list[float] = []
        play(AGENT_SCRIPT, emitted.append, sleep=slept.append)
        assert emitted == list(AGENT_SCRIPT)
        assert slept == [0.5] * 7

    def test_same_offset_does_not_wait(self):
        slept: list[float] = []
        script = [Cue(0, "a", "one"), Cue(0, "b", "two"), Cue(200, "a", "three")]
        play(script, lambda cue: None, sleep=slept.append)
        assert slept == [0.2]


class TestFormat:
    def test_message(self):
        assert format_cue(Cue(0, "Guideline Agent", "hi")) == "[Guideline Agent] hi"

    def test_status(self):
        assert format_cue(Cue(0, "Guideline Agent", "Rendering", status=True)) == "    · Rendering"
