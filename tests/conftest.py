"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local tokenplane package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of tokenplane modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("tokenplane"):
        del sys.modules[module_name]

from tokenplane.files.ops import LocalFileStore  # noqa: E402
from tokenplane.registry.store import RegistryStore  # noqa: E402

THEME_CSS = """:root {
  --color-primary: #3b82f6;
  --color-text: #111827;
  --spacing-sm: 8px;
}

.button {
  background: var(--color-primary);
  color: #ffffff;
  padding: 8px 16px;
}

.card {
  border: 1px solid #e5e7eb;
  color: #111827;
}
"""

THEME_LIQUID = """<div class="header" style="color: {{ settings.color_text }}">
  {% if section.settings.show %}
    <h1 style="color: #3b82f6">{{ section.settings.title }}</h1>
  {% endif %}
</div>
{% schema %}
{"name": "Header", "settings": [{"type": "color", "id": "accent", "default": "#f59e0b"}]}
{% endschema %}
"""


@pytest.fixture
def store(tmp_path: Path) -> Generator[RegistryStore, None, None]:
    """Registry backed by a temporary SQLite file."""
    registry = RegistryStore.open(tmp_path / "registry" / "registry.db")
    yield registry
    registry.close()


@pytest.fixture
def theme_dir(tmp_path: Path) -> Path:
    """Small theme with a stylesheet and a template."""
    root = tmp_path / "theme"
    (root / "assets").mkdir(parents=True)
    (root / "sections").mkdir()
    (root / "assets" / "base.css").write_text(THEME_CSS)
    (root / "sections" / "header.liquid").write_text(THEME_LIQUID)
    return root


@pytest.fixture
def project_id(theme_dir: Path) -> str:
    return str(theme_dir.resolve())


@pytest.fixture
def files(theme_dir: Path, project_id: str) -> LocalFileStore:
    return LocalFileStore({project_id: theme_dir})
