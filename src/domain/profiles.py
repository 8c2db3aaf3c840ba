import logging
import os
from pathlib import Path

import tomlkit
from pydantic import ValidationError
from tomlkit.exceptions import ParseError

from domain.models import ShadeSettings
from shared.constants import PROFILES_DIR_ENV_VAR
from shared.errors import ProfileError

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) TERRASHADE_PROFILES_DIR environment variable, if set.
    2) <project_root>/configs/profiles if it exists (run-from-repo setups).
    3) Otherwise ~/.config/terrashade/profiles (or $XDG_CONFIG_HOME).
    """
    env_dir = os.getenv(PROFILES_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir)

    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / 'configs' / 'profiles'
    if local_profiles.exists():
        return local_profiles

    config_home = Path(os.getenv('XDG_CONFIG_HOME') or (Path.home() / '.config'))
    return config_home / 'terrashade' / 'profiles'


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Список имён профилей без расширения."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    """Путь к файлу профиля по имени."""
    return ensure_profiles_dir() / f'{name}.toml'


def load_profile(name_or_path: str) -> ShadeSettings:
    """
    Загрузка и валидация профиля TOML -> ShadeSettings.

    Поддерживает как имя профиля (без .toml) из каталога profiles,
    так и абсолютный/относительный путь до TOML файла.
    """
    p = Path(name_or_path)
    path = (
        p if p.suffix.lower() == '.toml' and p.exists() else profile_path(name_or_path)
    )
    if not path.exists():
        msg = f'Профиль не найден: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    try:
        data = tomlkit.parse(text).unwrap()
        settings = ShadeSettings.model_validate(data)
    except (ParseError, ValidationError) as e:
        msg = f'Некорректный профиль {path}: {e}'
        raise ProfileError(msg) from e

    logger.info(
        'Profile loaded: %s (mode=%s, blend=%s)',
        path,
        settings.render_mode.value,
        settings.blend_mode.value,
    )
    return settings


def save_profile(name: str, settings: ShadeSettings) -> Path:
    """Сохранение профиля в TOML (без атомарности и бэкапов)."""
    path = profile_path(name)
    data = settings.model_dump(mode='json')
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    return path
