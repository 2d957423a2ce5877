"""Server root directory provisioning."""
import logging
import shutil
from pathlib import Path
from typing import Iterable

from .errors import RomNotFound
from .utils import is_safe_rom_name

logger = logging.getLogger(__name__)

BUNDLE_FILES = (
    "index.html",
    "nes_rust_wasm.js",
    "nes_rust_wasm_bg.wasm",
)


class Workspace:
    """Builds the directory the file server is rooted at.

    The work directory holds a fresh copy of the emulator bundle plus the ROM
    for the current session. It is only written to while no server is
    running on it.
    """

    def __init__(self, bundle_dir: Path, library_dir: Path, work_dir: Path,
                 bundle_files: Iterable[str] = BUNDLE_FILES):
        """Initialize workspace.

        Args:
            bundle_dir: Directory holding the emulator bundle
            library_dir: Directory holding imported ROMs
            work_dir: Directory the server will serve
            bundle_files: Bundle file names to copy
        """
        self.bundle_dir = Path(bundle_dir).expanduser()
        self.library_dir = Path(library_dir).expanduser()
        self.work_dir = Path(work_dir).expanduser()
        self.bundle_files = tuple(bundle_files)

    def rom_path(self, rom: str) -> Path:
        """Locate a ROM in the library.

        Raises:
            RomNotFound: The name is not a plain file name or the file is missing
        """
        if not is_safe_rom_name(rom):
            raise RomNotFound(rom)
        path = self.library_dir / rom
        if not path.is_file():
            raise RomNotFound(rom)
        return path

    def clear(self) -> None:
        """Remove everything cached in the work directory."""
        if not self.work_dir.exists():
            return
        for entry in self.work_dir.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
        logger.debug(f"Cleared cached assets in {self.work_dir}")

    def populate(self, rom: str, clear: bool = False) -> Path:
        """Copy the bundle and the selected ROM into the work directory.

        Args:
            rom: ROM file name in the library
            clear: Wipe the work directory first

        Returns:
            The work directory
        """
        source = self.rom_path(rom)

        self.work_dir.mkdir(parents=True, exist_ok=True)
        if clear:
            self.clear()

        for file_name in self.bundle_files:
            bundle_file = self.bundle_dir / file_name
            if not bundle_file.is_file():
                logger.error(f"Failed to find {file_name} in bundle {self.bundle_dir}")
                continue
            # Replace rather than overwrite in place so a stale copy never lingers
            destination = self.work_dir / file_name
            destination.unlink(missing_ok=True)
            shutil.copy2(bundle_file, destination)

        destination = self.work_dir / rom
        destination.unlink(missing_ok=True)
        shutil.copy2(source, destination)

        logger.info(f"Emulator files copied to {self.work_dir} for {rom}")
        return self.work_dir
