import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def app_root(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "rule-resolver"


@pytest.fixture
def rules_dir(app_root: Path) -> Path:
    path = app_root / "rules"
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def write_rule(rules_dir: Path):
    def _write(
        name: str,
        body: str,
        description: str = "",
        globs: list[str] | None = None,
        always_apply: bool = False,
        topics: list[str] | None = None,
    ) -> Path:
        lines = ["---"]
        if description:
            lines.append(f"description: {description}")
        if globs:
            lines.append("globs:")
            lines.extend(f'  - "{pattern}"' for pattern in globs)
        if always_apply:
            lines.append("alwaysApply: true")
        if topics:
            lines.append("topics:")
            lines.extend(f'  - "{topic}"' for topic in topics)
        lines.append("---")
        lines.append("")
        text = "\n".join(lines) + body if len(lines) > 3 else body
        path = rules_dir / f"{name}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
