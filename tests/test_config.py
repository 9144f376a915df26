import json
import logging
from pathlib import Path

from twitlinks.config import Config


def test_defaults():
    config = Config()
    assert config.encoding == 'UTF-8'
    assert config.max_redirects == 5
    assert config.output_format == 'xlsx'
    assert config.verify_tls is True
    assert config.output is None


def test_resolver_config_reflects_settings():
    config = Config()
    config.max_redirects = 2
    config.verify_tls = False
    config.read_timeout = 3.0

    resolver_config = config.resolver_config()

    assert resolver_config.max_redirects == 2
    assert resolver_config.verify_tls is False
    assert resolver_config.timeout == (5.0, 3.0)


def test_load_overrides_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'max_redirects': 8, 'output': 'combined.xlsx', 'workers': 2}))

    config = Config.load(path)

    assert config.max_redirects == 8
    assert config.output == Path('combined.xlsx')
    assert config.workers == 2


def test_load_missing_file_gives_defaults(tmp_path):
    assert Config.load(tmp_path / "missing.json").to_dict() == Config().to_dict()


def test_load_invalid_file_warns(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with caplog.at_level(logging.WARNING):
        config = Config.load(path)

    assert config.max_redirects == 5
    assert "Failed to load config" in caplog.text


def test_update_ignores_unknown_and_none(caplog):
    config = Config()
    with caplog.at_level(logging.WARNING):
        config.update({'bogus': 1, 'encoding': None, 'truncate': True})

    assert config.truncate is True
    assert config.encoding == 'UTF-8'
    assert "Ignoring unknown setting: bogus" in caplog.text


def test_dict_round_trip(tmp_path):
    config = Config()
    config.output_format = 'csv'
    config.cache_file = tmp_path / "cache.json"

    restored = Config.from_dict(config.to_dict())

    assert restored.to_dict() == config.to_dict()


def test_save(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.workers = 3
    config.save(path)

    assert Config.load(path).workers == 3
