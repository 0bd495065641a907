"""Provider factory tests."""

from dataclasses import replace

import pytest

from goglobal.application import create_provider
from goglobal.domain import HeuristicProvider
from goglobal.infrastructure.llm import RemoteModelProvider


def test_remote_provider(make_settings):
    provider = create_provider(make_settings())

    assert isinstance(provider, RemoteModelProvider)
    assert provider.name == "remote"


def test_heuristic_provider(make_settings):
    provider = create_provider(make_settings(provider="heuristic", api_key=""))

    assert isinstance(provider, HeuristicProvider)
    assert provider.name == "heuristic"


def test_unknown_provider(make_settings):
    settings = make_settings()
    settings = replace(settings, analysis=replace(settings.analysis, provider="oracle"))

    with pytest.raises(ValueError, match="oracle"):
        create_provider(settings)
