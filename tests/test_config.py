from pixeloffice.config import DEFAULT_CONFIG, EngineConfig, load_engine_config


def test_defaults() -> None:
    config = EngineConfig()

    assert config.tile_size == 16
    assert config.walk_speed == 48.0
    assert config.undo_limit == 50
    assert config.tile_center(1, 2) == (24.0, 40.0)


def test_environment_overrides() -> None:
    config = load_engine_config(
        {"PIXELOFFICE_TILE_SIZE": "32", "PIXELOFFICE_WALK_SPEED": "60.5"}
    )

    assert config.tile_size == 32
    assert config.walk_speed == 60.5
    assert config.undo_limit == DEFAULT_CONFIG.undo_limit


def test_invalid_override_keeps_default() -> None:
    config = load_engine_config({"PIXELOFFICE_TILE_SIZE": "big"})

    assert config.tile_size == 16
    assert load_engine_config({}) is DEFAULT_CONFIG
