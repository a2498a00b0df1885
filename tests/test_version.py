import tomllib
from pathlib import Path

import hunterevo


def test_version_comes_from_project_metadata() -> None:
    with (Path(__file__).resolve().parents[1] / "pyproject.toml").open("rb") as handle:
        project = tomllib.load(handle)["project"]
    assert project["name"] == hunterevo.DISTRIBUTION_NAME
    assert hunterevo.__version__ == project["version"]
    assert hunterevo.__version__ != "0+unknown"
