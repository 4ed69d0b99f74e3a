"""Tests for settings and environment overrides."""
from __future__ import annotations

import pytest

from orbfrag.config import Settings
from orbfrag.core.errors import ValidationError


def test_defaults():
    settings = Settings()
    assert settings.time_step_seconds == 60.0
    assert settings.collision_threshold_m == 1000.0
    assert settings.default_model == "nasa"
    assert settings.max_workers is None


def test_from_empty_environment():
    assert Settings.from_env({}) == Settings()


def test_from_env_overrides():
    settings = Settings.from_env({
        "ORBFRAG_TIME_STEP": "30",
        "ORBFRAG_COLLISION_THRESHOLD_M": "250.5",
        "ORBFRAG_DEFAULT_MODEL": "custom",
        "ORBFRAG_MAX_WORKERS": "8",
        "UNRELATED": "ignored",
    })
    assert settings == Settings(
        time_step_seconds=30.0,
        collision_threshold_m=250.5,
        default_model="custom",
        max_workers=8,
    )


def test_blank_values_fall_back_to_defaults():
    assert Settings.from_env({"ORBFRAG_TIME_STEP": "  "}).time_step_seconds == 60.0


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("ORBFRAG_COLLISION_THRESHOLD_M", "5000")
    assert Settings.from_env().collision_threshold_m == 5000.0


@pytest.mark.parametrize("name, value", [
    ("ORBFRAG_TIME_STEP", "fast"),
    ("ORBFRAG_TIME_STEP", "0"),
    ("ORBFRAG_TIME_STEP", "nan"),
    ("ORBFRAG_TIME_STEP", "inf"),
    ("ORBFRAG_COLLISION_THRESHOLD_M", "-1"),
    ("ORBFRAG_COLLISION_THRESHOLD_M", "nan"),
    ("ORBFRAG_COLLISION_THRESHOLD_M", "inf"),
    ("ORBFRAG_MAX_WORKERS", "2.5"),
    ("ORBFRAG_MAX_WORKERS", "0"),
])
def test_invalid_values(name, value):
    with pytest.raises(ValidationError):
        Settings.from_env({name: value})


@pytest.mark.parametrize("field", ["time_step_seconds", "collision_threshold_m"])
@pytest.mark.parametrize("value", [float("nan"), float("inf")])
def test_non_finite_values_rejected(field, value):
    with pytest.raises(ValidationError, match="finite"):
        Settings(**{field: value})
