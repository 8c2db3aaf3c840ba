from enum import Enum

# --- Геометрия тайлов
# Размер выходного тайла (px)
OUTPUT_TILE_SIZE = 512

# Припуск (overlap) исходного тайла с каждой стороны (px)
SOURCE_TILE_PADDING = 2

# Минимальный размер исходного тайла: 512 + 2 * 2
SOURCE_TILE_SIZE = OUTPUT_TILE_SIZE + 2 * SOURCE_TILE_PADDING

# Число каналов в упакованном пикселе (RGBA)
OUTPUT_CHANNELS = 4

# Допустимое число каналов во входном тайле
SOURCE_CHANNELS = (3, 4)

# --- Terrarium
# elevation = R*256 + G + B//256 - 32768
TERRARIUM_RED_SCALE = 256
TERRARIUM_BLUE_DIVISOR = 256
TERRARIUM_OFFSET_M = 32768

# --- Градиент
# Коэффициент преувеличения уклона, подобран под шаг пикселя тайла
SLOPE_EXAGGERATION = 0.2

# --- Hillshade
# Источники света: (азимут, угол над горизонтом), градусы
HILLSHADE_LIGHT_WARM: tuple[float, float] = (315.0, 45.0)  # Северо-запад
HILLSHADE_LIGHT_COOL: tuple[float, float] = (225.0, 45.0)  # Юго-запад

# Яркость: sqrt(l * HILLSHADE_DIRECT + HILLSHADE_AMBIENT) * 255
HILLSHADE_DIRECT = 0.8
HILLSHADE_AMBIENT = 0.2

# Максимум 8-битного канала
CHANNEL_MAX = 255

# Высота, ниже которой рельеф полностью прозрачен (м)
ALPHA_ELEVATION_MIN_M = 20.0
# Диапазон высот, на котором альфа нарастает до непрозрачности (м)
ALPHA_ELEVATION_RANGE_M = 100.0

# --- Heightmap
# Высота, соответствующая полной непрозрачности синего слоя (м)
HEIGHT_RAMP_CEILING_M = 1000.0
HEIGHT_RAMP_COLOR: tuple[int, int, int] = (0, 0, 255)

# --- Пакетная обработка
# Число тайлов, обрабатываемых одновременно
BATCH_CONCURRENCY_DEFAULT = 4
BATCH_CONCURRENCY_MAX = 64

# Фактор фильтрации для приёмника растров (не интерпретируется ядром)
FILTER_FACTOR_DEFAULT = 1.0

# Переменная окружения с каталогом профилей
PROFILES_DIR_ENV_VAR = 'TERRASHADE_PROFILES_DIR'


class RenderMode(str, Enum):
    HILLSHADE = 'hillshade'
    RAW_HEIGHT_RAMP = 'raw_height_ramp'


class BlendMode(str, Enum):
    """Сложение 8-битных каналов при смешивании двух источников света."""

    WRAP = 'wrap'  # По модулю 256, совместимо с ранее отрисованными тайлами
    SATURATE = 'saturate'  # С насыщением на 255


def default_render_mode() -> RenderMode:
    return RenderMode.HILLSHADE


def default_blend_mode() -> BlendMode:
    return BlendMode.WRAP
