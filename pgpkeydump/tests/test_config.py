import pytest

from pgpkeydump.config import DumpConfig


def test_dump_config_defaults() -> None:
    config = DumpConfig()

    assert config.include_signatures is False
    assert config.userid_errors == "replace"
    assert config.indent == 2
    assert config.max_input_size == 16 * 1024 * 1024
    assert config.log_level == "WARNING"
    assert config.json_logs is False


def test_dump_config_is_keyword_only() -> None:
    with pytest.raises(TypeError):
        DumpConfig(True)  # type: ignore[misc]


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"userid_errors": "ignore"}, "userid_errors"),
        ({"indent": -1}, "indent"),
        ({"max_input_size": 0}, "max_input_size"),
        ({"log_level": "verbose"}, "log_level"),
    ],
)
def test_dump_config_rejects_invalid_values(kwargs: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        DumpConfig(**kwargs)


def test_dump_config_accepts_lowercase_log_level() -> None:
    assert DumpConfig(log_level="debug").log_level == "debug"
