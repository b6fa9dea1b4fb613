import ast
from pathlib import Path

_SRC = Path(__file__).resolve().parents[1] / "src"
_PACKAGES = ("attempt_runner", "atr")


def _python_files() -> list[Path]:
    files: list[Path] = []
    for package in _PACKAGES:
        root = _SRC / package
        files.extend(path for path in root.rglob("*.py") if "__pycache__" not in path.parts)
    return sorted(files)


def test_audit_covers_library_and_cli() -> None:
    scanned = {path.relative_to(_SRC).as_posix() for path in _python_files()}

    assert {
        "attempt_runner/executor.py",
        "attempt_runner/debugger.py",
        "attempt_runner/attempter.py",
        "attempt_runner/options.py",
        "attempt_runner/execution/subprocess_engine.py",
        "atr/cli.py",
    } <= scanned


def test_all_functions_have_docstring_with_example() -> None:
    missing: list[str] = []
    missing_example: list[str] = []

    for file_path in _python_files():
        module = ast.parse(file_path.read_text(encoding="utf-8"))
        for node in ast.walk(module):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            doc = ast.get_docstring(node)
            location = f"{file_path}:{node.lineno}:{node.name}"
            if not doc:
                missing.append(location)
                continue
            if "Example:" not in doc:
                missing_example.append(location)

    assert not missing, "Missing function docstrings:\n" + "\n".join(missing)
    assert not missing_example, "Docstrings without Example section:\n" + "\n".join(
        missing_example
    )


def test_public_entry_points_show_their_call_in_the_example() -> None:
    expected = {
        "attempt_runner/executor.py": "execute",
        "attempt_runner/debugger.py": "debug",
        "attempt_runner/attempter.py": "attempt",
        "atr/cli.py": "main",
    }
    for relative, name in expected.items():
        module = ast.parse((_SRC / relative).read_text(encoding="utf-8"))
        functions = {
            node.name: node for node in module.body if isinstance(node, ast.FunctionDef)
        }
        doc = ast.get_docstring(functions[name]) or ""
        example = doc.split("Example:", 1)[-1]
        assert f"{name}(" in example, f"{relative}:{name} example does not call {name}()"
