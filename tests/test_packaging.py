from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def test_readme_is_the_project_readme():
    with open(ROOT / "pyproject.toml", "rb") as f:
        project = tomllib.load(f)["project"]
    readme = ROOT / project["readme"]
    assert readme.name == "README.md"
    assert readme.read_text(encoding="utf-8").startswith("# Special AVL Visualizer")
