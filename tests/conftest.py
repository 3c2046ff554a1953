import pytest

from launchscope.config import SiteConfig

from tests.helpers import TEST_BASE_URL


@pytest.fixture
def site() -> SiteConfig:
    return SiteConfig(base_url=TEST_BASE_URL)
