"""
Integration test fixtures.

Real processes are launched, but the capture and refinement binaries are
replaced by small shell scripts so the tests need no microphone or assistant.
"""

import stat
from pathlib import Path

import pytest


def _write_script(path: Path, body: str) -> str:
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def source_wav(tmp_path, wav_factory) -> Path:
    """Two seconds of audio the fake capture command "records"."""
    path = tmp_path / "source.wav"
    wav_factory(path, duration_sec=2.0)
    return path


@pytest.fixture
def fake_arecord(tmp_path, source_wav) -> str:
    """Capture stand-in: copies a WAV to its last argument, then waits to be terminated."""
    return _write_script(
        tmp_path / "fake-arecord",
        f'for arg; do out="$arg"; done\n'
        f'cp "{source_wav}" "$out"\n'
        f'exec sleep 30\n',
    )


@pytest.fixture
def stubborn_arecord(tmp_path) -> str:
    """Capture stand-in that ignores SIGTERM."""
    return _write_script(
        tmp_path / "stubborn-arecord",
        "trap '' TERM\n"
        "sleep 5\n",
    )


@pytest.fixture
def failing_arecord(tmp_path) -> str:
    """Capture stand-in that exits immediately with an error."""
    return _write_script(
        tmp_path / "failing-arecord",
        'echo "arecord: main: audio open error: No such file or directory" >&2\n'
        "exit 1\n",
    )


@pytest.fixture
def ask_log(tmp_path) -> Path:
    """File the fake assistant appends one line per invocation to."""
    return tmp_path / "ask.log"


@pytest.fixture
def fake_ask(tmp_path, ask_log) -> str:
    """Assistant stand-in: logs its arguments and answers with a fixed refinement."""
    return _write_script(
        tmp_path / "fake-ask",
        f'echo "$@" >> "{ask_log}"\n'
        'if [ "$1" = "-c" ]; then exit 0; fi\n'
        'echo "Refined transcript."\n',
    )
