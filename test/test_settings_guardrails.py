import ast
import unittest
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
_PACKAGE_ROOT = _REPO_ROOT / "backend" / "watchpick"

# The two places allowed to touch the process environment.
_SETTINGS_MODULES = {
    _PACKAGE_ROOT / "config" / "settings.py",
    _PACKAGE_ROOT / "infrastructure" / "config" / "settings.py",
}


def _modules(*parts: str) -> dict[Path, ast.Module]:
    root = _PACKAGE_ROOT.joinpath(*parts)
    return {
        path: ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for path in sorted(root.rglob("*.py"))
        if "__pycache__" not in path.parts
    }


def _rel(path: Path) -> str:
    return str(path.relative_to(_REPO_ROOT))


def _calls(tree: ast.AST, name: str) -> list[ast.Call]:
    found = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue
        func = node.func
        called = func.id if isinstance(func, ast.Name) else getattr(func, "attr", None)
        if called == name:
            found.append(node)
    return found


def _imported(tree: ast.AST) -> set[str]:
    names: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module)
    return names


def _reads_environment(tree: ast.AST) -> bool:
    for node in ast.walk(tree):
        if (
            isinstance(node, ast.Attribute)
            and isinstance(node.value, ast.Name)
            and node.value.id == "os"
            and node.attr in {"getenv", "environ"}
        ):
            return True
    return False


class TestSettingsGuardrails(unittest.TestCase):
    def test_each_settings_module_loads_dotenv_once_with_override(self) -> None:
        trees = _modules()
        for path in _SETTINGS_MODULES:
            calls = _calls(trees[path], "load_dotenv")
            self.assertEqual(len(calls), 1, msg=_rel(path))
            override = {kw.arg: kw.value for kw in calls[0].keywords}.get("override")
            self.assertTrue(
                isinstance(override, ast.Constant) and override.value is True,
                msg=f"{_rel(path)}: load_dotenv() needs override=True so edits to .env take effect",
            )

    def test_no_other_module_loads_dotenv_or_reads_env(self) -> None:
        offenders = [
            _rel(path)
            for path, tree in _modules().items()
            if path not in _SETTINGS_MODULES and (_calls(tree, "load_dotenv") or _reads_environment(tree))
        ]
        self.assertFalse(
            offenders,
            msg="Environment access belongs in the settings modules; import constants from there.\n"
            + "\n".join(offenders),
        )

    def test_infrastructure_reads_only_its_own_settings(self) -> None:
        offenders = [
            _rel(path)
            for path, tree in _modules("infrastructure").items()
            if any(name == "watchpick.config" or name.startswith("watchpick.config.") for name in _imported(tree))
        ]
        self.assertFalse(offenders, msg="infrastructure must not import `watchpick.config`:\n" + "\n".join(offenders))

    def test_surfaces_and_application_do_not_read_infrastructure_settings(self) -> None:
        offenders = []
        for layer in ("server", "application", "cli"):
            for path, tree in _modules(layer).items():
                if any(name.startswith("watchpick.infrastructure.config") for name in _imported(tree)):
                    offenders.append(_rel(path))
        self.assertFalse(
            offenders,
            msg="Use `watchpick.config` or go through `infrastructure.bootstrap`:\n" + "\n".join(offenders),
        )


if __name__ == "__main__":
    unittest.main()
