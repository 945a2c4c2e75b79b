"""
Centralized Configuration for Drone Editor

Two layers live here:

- ``Settings``: process configuration (paths, connection retries, AI
  strategy, UI mode) read from environment variables once at startup.
- ``EditorOptions``: the user-facing options schema that is persisted in
  option files and snapshotted into every project file.

Usage:
    from drone_editor.config import get_settings, EditorOptions

    settings = get_settings()
    if settings.ai.use_bridge:
        ...

    options = EditorOptions()
    options.update_from_dict({"lut_selection": "Cinematic"})
"""

import json
import os
import platform
import tempfile
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError, ValidationError
from .logger import logger, default_log_file


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _home() -> Optional[str]:
    return os.environ.get("USERPROFILE") or os.environ.get("HOME")


def default_lut_dirs() -> List[Path]:
    """Standard DaVinci Resolve LUT folders for the current OS."""
    override = os.environ.get("LUT_DIRS")
    if override:
        return [Path(p) for p in override.split(os.pathsep) if p]

    home = _home()
    system = platform.system()
    dirs: List[Path] = []
    if system == "Windows":
        if home:
            dirs.append(Path(home) / "Documents" / "Blackmagic Design" / "DaVinci Resolve" / "LUT")
        dirs.append(Path("C:/ProgramData/Blackmagic Design/DaVinci Resolve/Support/LUT"))
    elif system == "Darwin":
        if home:
            dirs.append(Path(home) / "Library" / "Application Support" / "Blackmagic Design" / "DaVinci Resolve" / "LUT")
        dirs.append(Path("/Library/Application Support/Blackmagic Design/DaVinci Resolve/LUT"))
    else:
        if home:
            dirs.append(Path(home) / ".local" / "share" / "DaVinciResolve" / "LUT")
        dirs.append(Path("/opt/resolve/LUT"))
    return dirs


def default_documents_dir() -> Path:
    home = _home()
    if home:
        return Path(home) / "Documents" / "DroneEditor"
    return Path(tempfile.gettempdir()) / "DroneEditor"


# =============================================================================
# Path Configuration
# =============================================================================
@dataclass
class PathConfig:
    """Filesystem locations used by Drone Editor."""

    log_file: Path = field(default_factory=default_log_file)
    autosave_dir: Path = field(default_factory=lambda: Path(os.environ.get("DRONE_EDITOR_AUTOSAVE_DIR", tempfile.gettempdir())))
    project_dir: Path = field(default_factory=lambda: Path(os.environ.get("DRONE_EDITOR_PROJECT_DIR", str(default_documents_dir() / "projects"))))
    options_file: Path = field(default_factory=lambda: Path(os.environ.get("DRONE_EDITOR_OPTIONS", str(default_documents_dir() / "drone_editor_settings.json"))))
    lut_dirs: List[Path] = field(default_factory=default_lut_dirs)

    def ensure_directories(self) -> None:
        """Create the writable directories if they don't exist."""
        for path in [self.autosave_dir, self.project_dir, self.options_file.parent]:
            path.mkdir(parents=True, exist_ok=True)


# =============================================================================
# Host Connection
# =============================================================================
@dataclass
class ConnectionConfig:
    """Retry budget for acquiring the Resolve session."""

    max_attempts: int = field(default_factory=lambda: int(os.environ.get("RESOLVE_CONNECT_ATTEMPTS", "3")))
    retry_delay: float = field(default_factory=lambda: float(os.environ.get("RESOLVE_RETRY_DELAY", "2")))


# =============================================================================
# AI Strategy
# =============================================================================
@dataclass
class AIConfig:
    """Selects and configures the scene/colour/audio analysis strategy."""

    use_bridge: bool = field(default_factory=lambda: _env_bool("DRONE_EDITOR_AI_BRIDGE"))
    credentials_path: Path = field(default_factory=lambda: Path(os.environ.get("DRONE_EDITOR_AI_SETTINGS", "ai_settings.json")))

    # Scene detection executable
    scene_detect_executable: str = field(default_factory=lambda: os.environ.get("SCENE_DETECT_BIN", "./bin/scene_detect"))
    scene_sensitivity: float = field(default_factory=lambda: float(os.environ.get("SCENE_SENSITIVITY", "0.4")))
    min_scene_length: float = field(default_factory=lambda: float(os.environ.get("MIN_SCENE_LENGTH", "2.0")))
    max_scenes: int = field(default_factory=lambda: int(os.environ.get("MAX_SCENES", "20")))

    # Colour grading HTTP service
    color_grade_endpoint: str = field(default_factory=lambda: os.environ.get("COLOR_GRADE_ENDPOINT", "http://localhost:5000/api/color-grade"))
    color_grade_api_key: str = field(default_factory=lambda: os.environ.get("COLOR_GRADE_API_KEY", ""))
    color_grade_models: List[str] = field(default_factory=lambda: ["drone-aerial-v1", "cinematic-v2", "natural-v1"])

    # Audio enhancement executable
    audio_enhance_executable: str = field(default_factory=lambda: os.environ.get("AUDIO_ENHANCE_BIN", "./bin/audio_enhance"))
    wind_removal: bool = field(default_factory=lambda: _env_bool("AUDIO_WIND_REMOVAL", "true"))
    eq_preset: str = field(default_factory=lambda: os.environ.get("AUDIO_EQ_PRESET", "drone"))

    request_timeout: int = field(default_factory=lambda: int(os.environ.get("AI_REQUEST_TIMEOUT", "60")))
    command_timeout: int = field(default_factory=lambda: int(os.environ.get("AI_COMMAND_TIMEOUT", "600")))

    # Simulation sleeps per item to imitate processing time
    simulate_latency: bool = field(default_factory=lambda: _env_bool("AI_SIMULATE_LATENCY", "true"))


# =============================================================================
# UI
# =============================================================================
@dataclass
class UIConfig:
    """Front-end selection and autosave behaviour."""

    console_mode: bool = field(default_factory=lambda: _env_bool("DRONE_EDITOR_CONSOLE"))
    autosave_interval_minutes: int = field(default_factory=lambda: int(os.environ.get("AUTOSAVE_INTERVAL_MINUTES", "5")))


# =============================================================================
# Main Settings Class
# =============================================================================
@dataclass
class Settings:
    """
    Main configuration container.

    Usage:
        from drone_editor.config import get_settings

        settings = get_settings()
        attempts = settings.connection.max_attempts
        if settings.ui.console_mode:
            ...
    """

    paths: PathConfig = field(default_factory=PathConfig)
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    def reload(self) -> "Settings":
        """Reload settings from environment (useful after env changes)."""
        return Settings()


# =============================================================================
# Editor Options (persisted user settings)
# =============================================================================
OPTION_CHOICES: Dict[str, tuple] = {
    "ai_processing_level": ("Low", "Medium", "High"),
    "lut_selection": ("Default", "Cinematic", "Vintage", "Drone Aerial"),
    "export_resolution": ("1080p", "4K", "8K"),
    "export_format": ("MP4", "MOV", "AVI", "ProRes", "H.265"),
    "music_selection": ("None", "Track 1", "Track 2", "Track 3"),
    "log_level": ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
}


@dataclass
class EditorOptions:
    """
    User options schema.

    Values loaded from files are validated: unknown keys are ignored, and
    values of the wrong type or outside the allowed choices are rejected
    with a warning (the previous value is kept).
    """

    ai_processing_level: str = "Medium"
    lut_selection: str = "Default"
    export_resolution: Any = "1080p"  # choice name or {"width": W, "height": H}
    export_format: str = "MP4"
    auto_volume: bool = False
    noise_gate_eq: bool = False
    music_selection: str = "None"
    default_transition: str = "Cross Dissolve"
    default_transition_duration: int = 30  # frames
    show_tooltips: bool = True
    confirm_deletions: bool = True
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def option_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def validate_value(self, key: str, value: Any) -> bool:
        """Check a candidate value against the schema for ``key``."""
        current = getattr(self, key)

        if key == "export_resolution":
            if isinstance(value, dict):
                return all(isinstance(value.get(k), int) and value.get(k) > 0 for k in ("width", "height"))
            return value in OPTION_CHOICES[key]

        if isinstance(current, bool):
            return isinstance(value, bool)
        if isinstance(current, int):
            return isinstance(value, int) and not isinstance(value, bool) and value >= 0
        if key in OPTION_CHOICES:
            return isinstance(value, str) and value in OPTION_CHOICES[key]
        return isinstance(value, str) and value != ""

    def check_value(self, key: str, value: Any) -> None:
        """
        Raise ValidationError unless ``value`` is acceptable for ``key``.

        Raises:
            ValidationError: Unknown key, wrong type or outside the choices
        """
        if key not in self.option_names():
            raise ValidationError(f"Unknown option '{key}'")
        if not self.validate_value(key, value):
            choices = OPTION_CHOICES.get(key)
            raise ValidationError(
                f"Invalid value for option '{key}': {value!r}",
                suggestion=f"Choose one of: {', '.join(choices)}" if choices else None,
            )

    def set(self, key: str, value: Any) -> bool:
        """Set one option; returns False for unknown keys or invalid values."""
        if key not in self.option_names():
            logger.debug(f"Ignoring unknown option '{key}'")
            return False
        try:
            self.check_value(key, value)
        except ValidationError as e:
            logger.warning(e.user_message)
            return False
        setattr(self, key, value)
        return True

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)

    def update_from_dict(self, data: Dict[str, Any]) -> List[str]:
        """Apply known, valid keys from ``data``; returns the keys applied."""
        applied = []
        for key, value in (data or {}).items():
            if self.set(key, value):
                applied.append(key)
        return applied

    def save(self, path: Path) -> None:
        """Write the options as JSON."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Could not write options file {path}: {e}") from e

    @classmethod
    def load(cls, path: Path) -> "EditorOptions":
        """Read options from JSON, falling back to defaults for bad entries."""
        options = cls()
        if not path.exists():
            raise ConfigurationError(f"Options file not found: {path}")
        content = path.read_text(encoding="utf-8")
        if not content.strip():
            raise ConfigurationError(f"Empty options file: {path}")
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in options file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Options file {path} must contain a JSON object")
        options.update_from_dict(data)
        return options


def save_options(options: EditorOptions, path: Optional[Path] = None) -> Path:
    """Persist options to ``path`` (default: the configured options file)."""
    path = Path(path) if path else get_settings().paths.options_file
    options.save(path)
    logger.info(f"Settings saved to {path}")
    return path


def load_options(path: Optional[Path] = None) -> EditorOptions:
    """
    Options from ``path`` (default: the configured options file).

    A missing or unreadable file yields the defaults.
    """
    path = Path(path) if path else get_settings().paths.options_file
    if not path.exists():
        logger.info(f"No settings file at {path}, using defaults")
        return EditorOptions()
    try:
        options = EditorOptions.load(path)
    except ConfigurationError as e:
        logger.warning(f"{e}; using default settings")
        return EditorOptions()
    logger.info(f"Settings loaded from {path}")
    return options


# =============================================================================
# Global Settings Instance
# =============================================================================
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance (lazy initialization)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload of settings from environment."""
    global _settings
    _settings = Settings()
    return _settings
