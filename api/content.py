"""
Wspólne źródło treści dla routerów.

ContentLibrary jest budowana raz z data/*.yaml i wstrzykiwana
przez Depends(get_library); testy podmieniają ją przez
app.dependency_overrides.
"""

from functools import lru_cache
from pathlib import Path

from dpssim.core.config_loader import ConfigLoader
from dpssim.core.registry import ContentLibrary


DATA_PATH = Path(__file__).parent.parent / "data"


@lru_cache(maxsize=1)
def get_loader() -> ConfigLoader:
    return ConfigLoader(str(DATA_PATH))


@lru_cache(maxsize=1)
def get_library() -> ContentLibrary:
    return ContentLibrary.from_loader(get_loader())
