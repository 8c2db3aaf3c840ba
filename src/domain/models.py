from pydantic import BaseModel, field_validator

from shared.constants import (
    BATCH_CONCURRENCY_DEFAULT,
    BATCH_CONCURRENCY_MAX,
    FILTER_FACTOR_DEFAULT,
    BlendMode,
    RenderMode,
    default_blend_mode,
    default_render_mode,
)


class ShadeSettings(BaseModel):
    """Параметры отрисовки тайлов, загружаемые из профиля TOML."""

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Активный рендер (один на вызов обработчика тайла)
    render_mode: RenderMode = default_render_mode()

    # Сложение каналов двух источников света
    blend_mode: BlendMode = default_blend_mode()

    # Дробное декодирование синего канала Terrarium (B/256 вместо B//256)
    blue_fraction: bool = False

    # Число тайлов, обрабатываемых одновременно
    concurrency: int = BATCH_CONCURRENCY_DEFAULT

    # Передаётся приёмнику растров без изменений
    filter_factor: float = FILTER_FACTOR_DEFAULT

    @field_validator('concurrency')
    @classmethod
    def validate_concurrency(cls, v: int | str) -> int:
        iv = int(v)
        if not (1 <= iv <= BATCH_CONCURRENCY_MAX):
            msg = f'Значение должно быть в диапазоне [1, {BATCH_CONCURRENCY_MAX}]'
            raise ValueError(msg)
        return iv

    @field_validator('filter_factor')
    @classmethod
    def validate_filter_factor(cls, v: float | str) -> float:
        fv = float(v)
        if fv <= 0.0:
            msg = 'Значение должно быть положительным'
            raise ValueError(msg)
        return fv
