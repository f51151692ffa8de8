"""Top-level package for the Storyboard Toolkit.

Provides subpackages:
- storyboard_toolkit.transform – Events-section parsing and vertical mirroring
- storyboard_toolkit.images – raster flipping for referenced storyboard images
- storyboard_toolkit.archive – in-memory .osz archive handle
- storyboard_toolkit.pipeline – archive-level orchestration and progress
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import PackageNotFoundError, version as pkg_version
        return pkg_version("storyboard-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
