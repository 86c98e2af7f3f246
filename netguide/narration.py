"""Scripted agent narration shown alongside an upload.

There is no decision logic here: the script is a fixed list of cues, each with
an offset in milliseconds from the start of playback.
"""

import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

GUIDELINE_AGENT = "Guideline Agent"
VISUALIZATION_AGENT = "Visualization Agent"
USER = "You"
SYSTEM = "System"

REPLY_DELAY_MS = 1000


@dataclass(frozen=True)
class Cue:
    delay_ms: int
    speaker: str
    text: str
    status: bool = False  # status lines attach to the speaker's last message


AGENT_SCRIPT: tuple[Cue, ...] = (
    Cue(0, GUIDELINE_AGENT, "Analyzing your request and searching for relevant guidelines..."),
    Cue(500, GUIDELINE_AGENT, "Checking your instruction", status=True),
    Cue(1000, GUIDELINE_AGENT, "Searching for relevant guidelines", status=True),
    Cue(1500, GUIDELINE_AGENT, "Passing the guidelines", status=True),
    Cue(2000, VISUALIZATION_AGENT,
        "I have visualized your network. The visualization shows the structure "
        "with applied guidelines for better clarity."),
    Cue(2500, VISUALIZATION_AGENT, "Checking the guidelines", status=True),
    Cue(3000, VISUALIZATION_AGENT, "Generating the code", status=True),
    Cue(3500, VISUALIZATION_AGENT, "Rendering", status=True),
)


def upload_script(filename: str) -> tuple[Cue, ...]:
    return (Cue(0, USER, f"Uploaded {filename}"),) + AGENT_SCRIPT


def reply_script(message: str) -> tuple[Cue, ...]:
    """Echo a chat message, then replay the agent script a second later.

    A blank message gets no reply at all.
    """
    message = message.strip()
    if not message:
        return ()
    replay = tuple(replace(cue, delay_ms=cue.delay_ms + REPLY_DELAY_MS) for cue in AGENT_SCRIPT)
    return (Cue(0, USER, message),) + replay


def error_cue(message: str) -> Cue:
    return Cue(0, SYSTEM, f"Error parsing file: {message}")


def format_cue(cue: Cue) -> str:
    if cue.status:
        return f"    · {cue.text}"
    return f"[{cue.speaker}] {cue.text}"


def play(
    script: Iterable[Cue],
    emit: Callable[[Cue], None],
    sleep: Callable[[float], None] | None = None,
) -> None:
    """Emit each cue once its offset has elapsed, in script order."""
    sleep = sleep or time.sleep
    elapsed_ms = 0
    for cue in script:
        wait_ms = cue.delay_ms - elapsed_ms
        if wait_ms > 0:
            sleep(wait_ms / 1000)
            elapsed_ms = cue.delay_ms
        emit(cue)
