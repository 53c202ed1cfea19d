"""
Shared pytest fixtures for genoview tests

Supports both development mode (python -m genoview) and installed mode (pip install -e .)
"""
import pytest
from pathlib import Path
import sys

# Repository root on sys.path before the genoview imports below
_REPO_ROOT = Path(__file__).parent.parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from genoview.composer import TrackComposer
from genoview.config import BrowserConfig
from genoview.viewport import GenomicRegion, ViewportController


TP53_REGION = GenomicRegion('chr17', 7668402, 7687550)
"""TP53 locus used by most fixtures"""


@pytest.fixture
def browser_config() -> BrowserConfig:
    return BrowserConfig()


@pytest.fixture
def viewport(browser_config) -> ViewportController:
    """Viewport on the TP53 locus at 1000 px"""
    return ViewportController(browser_config, TP53_REGION, pixel_width=1000)


@pytest.fixture
def composer(browser_config) -> TrackComposer:
    return TrackComposer(browser_config)


@pytest.fixture
def tp53_gene() -> dict:
    """TP53 gene model with a handful of exons (minus strand)"""
    return {
        'id': 'ENSG00000141510',
        'symbol': 'TP53',
        'chromosome': 'chr17',
        'start': 7668402,
        'end': 7687550,
        'strand': '-',
        'exons': [
            {'start': 7668402, 'end': 7669690, 'type': 'utr3'},
            {'start': 7670609, 'end': 7670715, 'type': 'cds'},
            {'start': 7673535, 'end': 7673608, 'type': 'cds'},
            {'start': 7674181, 'end': 7674290, 'type': 'cds'},
            {'start': 7687377, 'end': 7687550, 'type': 'utr5'},
        ],
    }


@pytest.fixture
def fixtures_dir(tmp_path) -> Path:
    """Directory of small input tables written per test"""
    directory = tmp_path / "inputs"
    directory.mkdir()
    return directory


# Pytest configuration
def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual functions"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests running full browser sessions"
    )
    config.addinivalue_line(
        "markers", "rendering: Tests that draw figures with matplotlib"
    )
