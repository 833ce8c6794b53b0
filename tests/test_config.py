from __future__ import annotations

import dataclasses

import pytest

from unfhash.config import UnfConfig, UnfConfigBuilder, UnfVersion, env_int, get_algorithm
from unfhash.errors import InvalidConfiguration


def test_builder_defaults() -> None:
    cfg = UnfConfigBuilder().build()
    assert cfg == UnfConfig(digits=7, characters=128, truncation=128, version=UnfVersion.SIX)
    assert cfg.truncation_bytes == 16
    assert cfg.algorithm.name == "sha256"
    assert cfg.algorithm.digest_bits == 256
    assert cfg.header() == ""


def test_builder_setters_chain() -> None:
    cfg = UnfConfigBuilder().digits(9).characters(64).truncation(256).version("6").build()
    assert (cfg.digits, cfg.characters, cfg.truncation) == (9, 64, 256)
    assert cfg.version is UnfVersion.SIX
    assert cfg.header() == "N9,X64,H256"


def test_config_is_immutable() -> None:
    cfg = UnfConfigBuilder().build()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.digits = 3  # type: ignore[misc]


@pytest.mark.parametrize(
    "builder",
    [
        UnfConfigBuilder().digits(0),
        UnfConfigBuilder().characters(0),
        UnfConfigBuilder().truncation(0),
        UnfConfigBuilder().truncation(12),
        UnfConfigBuilder().truncation(264),
        UnfConfigBuilder().version("5"),
    ],
)
def test_invalid_configuration_fails_at_build(builder: UnfConfigBuilder) -> None:
    with pytest.raises(InvalidConfiguration):
        builder.build()


def test_invalid_configuration_is_value_error() -> None:
    with pytest.raises(ValueError):
        UnfConfig(truncation=512)


def test_unknown_version_has_no_algorithm() -> None:
    with pytest.raises(InvalidConfiguration):
        get_algorithm("3")  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UNFHASH_DIGITS", "9")
    monkeypatch.setenv("UNFHASH_TRUNCATION", "256")
    cfg = UnfConfigBuilder.from_env().build()
    assert (cfg.digits, cfg.characters, cfg.truncation) == (9, 128, 256)


def test_env_int_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("UNFHASH_DIGITS", "seven")
    with pytest.raises(InvalidConfiguration):
        env_int("UNFHASH_DIGITS", 7)
    monkeypatch.setenv("UNFHASH_DIGITS", "")
    assert env_int("UNFHASH_DIGITS", 7) == 7
