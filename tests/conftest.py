"""Shared pytest fixtures for the console.log generator tests."""

from __future__ import annotations

import pytest

from console_selectors import GenerationModel, build_model
from console_templates import render_all


@pytest.fixture(scope="session")
def model() -> GenerationModel:
    """The full 375-entry model at the default console address."""
    return build_model()


@pytest.fixture(scope="session")
def rendered(model: GenerationModel) -> dict:
    """Both generated files rendered from the default model."""
    return render_all(model)
