"""Shared test fixtures."""
import socket
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pytest

from nesbridge.content import HostedContent
from nesbridge.errors import BindError
from nesbridge.input.channel import CommandChannel
from nesbridge.workspace import BUNDLE_FILES, Workspace

INDEX_HTML = "<html><body><canvas id='nes'></canvas><script src='nes_rust_wasm.js'></script></body></html>"


class RecordingChannel(CommandChannel):
    """Command channel that keeps every delivered transition."""

    def __init__(self):
        self.sent: List[Tuple[int, str]] = []

    def send_key(self, key_code, phase):
        self.sent.append((key_code, phase.value))


class FakeContent(HostedContent):
    """Hosted content stand-in that records loads and scripts."""

    def __init__(self, rendered_size: int = 5000):
        self.loaded: List[str] = []
        self.scripts: List[str] = []
        self.size = rendered_size

    async def load(self, url: str) -> None:
        self.loaded.append(url)

    async def evaluate(self, script: str) -> Any:
        self.scripts.append(script)
        if "innerHTML.length" in script:
            return self.size
        return None


class FakeServer:
    """File server stand-in that records lifecycle calls."""

    def __init__(self, fail_bind: bool = False):
        self.fail_bind = fail_bind
        self.calls: List[Tuple[str, Optional[Path]]] = []
        self.running = False
        self.root_dir: Optional[Path] = None

    @property
    def is_running(self):
        return self.running

    async def start(self, root_dir, port):
        self.calls.append(("start", Path(root_dir)))
        if self.fail_bind:
            raise BindError("127.0.0.1", port, "Address already in use")
        self.running = True
        self.root_dir = Path(root_dir)

    async def stop(self):
        self.calls.append(("stop", None))
        self.running = False
        self.root_dir = None


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def content():
    return FakeContent()


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def bundle_dirs(tmp_path):
    """Bundle, library and work directories with a minimal emulator bundle."""
    bundle = tmp_path / "bundle"
    library = tmp_path / "roms"
    work = tmp_path / "work"
    bundle.mkdir()
    library.mkdir()

    (bundle / "index.html").write_text(INDEX_HTML)
    (bundle / "nes_rust_wasm.js").write_text("export default function init() {}")
    (bundle / "nes_rust_wasm_bg.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")
    assert sorted(p.name for p in bundle.iterdir()) == sorted(BUNDLE_FILES)

    (library / "mario.nes").write_bytes(b"NES\x1a" + b"\x01" * 60)
    (library / "zelda.nes").write_bytes(b"NES\x1a" + b"\x02" * 60)
    return bundle, library, work


@pytest.fixture
def workspace(bundle_dirs):
    bundle, library, work = bundle_dirs
    return Workspace(bundle_dir=bundle, library_dir=library, work_dir=work)


@pytest.fixture
def free_port():
    """A loopback port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def reset_global_config():
    """Restore the global config after the test."""
    import nesbridge.config as config_module
    from nesbridge.config import set_config

    original = config_module._config
    try:
        yield
    finally:
        set_config(original)
