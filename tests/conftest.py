"""Pytest configuration and shared fixtures."""

from pathlib import Path

import httpx
import pytest

from dailymed_mcp.api.client import DailyMedClient
from dailymed_mcp.mappings.index import CrossReferenceIndex

TEST_BASE_URL = "https://dailymed.test/dailymed/services/v2"

PHARMACOLOGIC_CLASS_FILE = """\
SPL_SETID|SPL_VERSION|PHARMA_SETID|PHARMA_VERSION
abc-123|3|class-1|2
def-456|1|class-1|2
ghi-789|5|class-2|1

bad-version|x|class-3|1
missing|4||1
"""

RXNORM_FILE = """\
SETID|SPL_VERSION|RXCUI|RXSTR|RXTTY
abc-123|3|197361|aspirin 81 MG Oral Tablet|SCD
abc-123|3|211874|Bayer Low Dose 81 MG Oral Tablet|SBD
def-456|1|197361|aspirin 81 MG Oral Tablet|SCD
broken|line
xyz-000|notanumber|1|ibuprofen 200 MG|SCD
"""


@pytest.fixture
def mappings_dir(tmp_path: Path) -> Path:
    """Directory holding a small pair of mapping files."""
    (tmp_path / "pharmacologic_class_mappings.txt").write_text(PHARMACOLOGIC_CLASS_FILE)
    (tmp_path / "rxnorm_mappings.txt").write_text(RXNORM_FILE)
    return tmp_path


@pytest.fixture
def index(mappings_dir: Path) -> CrossReferenceIndex:
    """Cross-reference index loaded from the sample mapping files."""
    return CrossReferenceIndex.load(
        mappings_dir / "pharmacologic_class_mappings.txt",
        mappings_dir / "rxnorm_mappings.txt",
    )


@pytest.fixture
def sample_spl_path() -> Path:
    """Path to a sample SPL file for testing."""
    return Path(__file__).parent / "fixtures" / "sample_spl.xml"


@pytest.fixture
def sample_spl_xml(sample_spl_path: Path) -> bytes:
    return sample_spl_path.read_bytes()


@pytest.fixture
def make_client():
    """
    Factory for a DailyMedClient backed by an httpx.MockTransport.

    The handler receives every httpx.Request and returns an httpx.Response.
    """
    def factory(handler) -> DailyMedClient:
        return DailyMedClient(base_url=TEST_BASE_URL, transport=httpx.MockTransport(handler))

    return factory
