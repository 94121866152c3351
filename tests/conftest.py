import pytest

from rsftool.core import config as config_module
from rsftool.core.paths import Paths


@pytest.fixture(autouse=True)
def isolated_user_data(tmp_path, monkeypatch):
    """Keep the CLI's config lookups inside the test's temp directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "user-config"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "user-config"))
    monkeypatch.setattr(Paths, "_user_data_dir", None)
    monkeypatch.setattr(config_module, "_global_config", None)
