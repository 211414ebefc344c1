# Shared fixtures for the translations audit tests: a throwaway repository
# layout (repo/src + repo/data/translations/strings.json) under tmp_path.

import json
from pathlib import Path

import pytest

from config.manager_config import ManagerConfig


class RepoBuilder:
    def __init__(self, root: Path):
        self.root = root
        self.src = root / "src"
        self.src.mkdir(parents=True, exist_ok=True)
        self.strings = root / "data" / "translations" / "strings.json"

    def source(self, rel: str, text: str) -> Path:
        path = self.src / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def catalog(self, data) -> Path:
        self.strings.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data, ensure_ascii=False)
        self.strings.write_text(text, encoding="utf-8")
        return self.strings

    def config(self, **overrides) -> ManagerConfig:
        values = dict(
            repo_root=str(self.root),
            source_directory="src",
            translations_folder="data/translations",
            audit_output_path="data/translation_audit.json",
        )
        values.update(overrides)
        return ManagerConfig(**values)


@pytest.fixture
def repo(tmp_path) -> RepoBuilder:
    return RepoBuilder(tmp_path / "repo")
