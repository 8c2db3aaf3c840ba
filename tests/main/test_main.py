import logging

import numpy as np
import pytest
from PIL import Image

from domain.models import ShadeSettings
from domain.profiles import save_profile
from main import (
    EXIT_BAD_CONFIG,
    EXIT_NO_TILE,
    EXIT_OK,
    build_parser,
    main,
    resolve_settings,
    setup_logging,
)
from shared.constants import BlendMode, RenderMode


@pytest.fixture
def terrarium_input(tmp_path, make_tile):
    path = tmp_path / 'in.png'
    Image.fromarray(make_tile(500, channels=3)).save(path)
    return path


@pytest.fixture(autouse=True)
def _isolated_profiles(tmp_path, monkeypatch):
    monkeypatch.setenv('TERRASHADE_PROFILES_DIR', str(tmp_path / 'profiles'))
    yield
    logging.getLogger().handlers.clear()


class TestMain:
    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / 'log' / 'terrashade.log'
        setup_logging(log_file, verbose=True)
        logging.getLogger('test').debug('hello')
        assert log_file.exists()
        assert logging.getLogger().level == logging.DEBUG

    def test_hillshade_render(self, tmp_path, terrarium_input):
        out = tmp_path / 'out' / 'shade.png'
        assert main([str(terrarium_input), str(out)]) == EXIT_OK
        with Image.open(out) as img:
            arr = np.asarray(img)
        assert arr.shape == (512, 512, 4)
        assert np.all(arr[:, :, 3] == 255)

    def test_height_ramp_render(self, tmp_path, terrarium_input):
        out = tmp_path / 'ramp.png'
        code = main([str(terrarium_input), str(out), '--mode', 'raw_height_ramp'])
        assert code == EXIT_OK
        with Image.open(out) as img:
            assert np.all(np.asarray(img) == [0, 0, 255, 127])

    def test_missing_input_no_tile(self, tmp_path):
        out = tmp_path / 'never.png'
        assert main([str(tmp_path / 'missing.png'), str(out)]) == EXIT_NO_TILE
        assert not out.exists()

    def test_window_out_of_bounds(self, tmp_path, terrarium_input):
        code = main([str(terrarium_input), str(tmp_path / 'o.png'), '--x', '5'])
        assert code == EXIT_NO_TILE

    def test_missing_profile(self, tmp_path, terrarium_input):
        code = main([str(terrarium_input), str(tmp_path / 'o.png'), '--profile', 'nope'])
        assert code == EXIT_BAD_CONFIG


class TestResolveSettings:
    def test_defaults(self):
        args = build_parser().parse_args(['in.png', 'out.png'])
        assert resolve_settings(args) == ShadeSettings()

    def test_profile_then_overrides(self):
        save_profile(
            'p', ShadeSettings(render_mode=RenderMode.RAW_HEIGHT_RAMP, concurrency=3)
        )
        args = build_parser().parse_args(
            ['in.png', 'out.png', '--profile', 'p', '--blend', 'saturate', '--blue-fraction']
        )
        settings = resolve_settings(args)
        assert settings.render_mode == RenderMode.RAW_HEIGHT_RAMP
        assert settings.blend_mode == BlendMode.SATURATE
        assert settings.blue_fraction is True
        assert settings.concurrency == 3
