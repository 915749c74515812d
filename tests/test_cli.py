"""
Tests for the Filekit command-line interface.
"""

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from filekit import filekit


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Write a config that keeps the audit log inside tmp_path."""
    path = tmp_path / "filekit.yaml"
    log_path = tmp_path / "audit" / "log.jsonl"
    path.write_text(f"""filekit:
  io:
    buffer_size: 128
  audit:
    enabled: true
    log_path: {json.dumps(str(log_path))}
""")
    return path


@pytest.fixture
def invoke(runner, config_file):
    def run(*args):
        return runner.invoke(filekit, ["--config", str(config_file), *args])
    return run


class TestFileCommands:
    """Test commands that work on files."""

    def test_write_then_cat(self, invoke, tmp_path):
        """Text written from the CLI is printed back by cat."""
        path = tmp_path / "note.txt"

        assert invoke("write", str(path), "hello\n").exit_code == 0
        result = invoke("cat", str(path))

        assert result.exit_code == 0
        assert result.output == "hello\n"

    def test_cat_non_utf8_file(self, invoke, tmp_path):
        """cat prints undecodable bytes unchanged instead of crashing."""
        path = tmp_path / "blob.bin"
        path.write_bytes(b"\xff\xfe\x00abc")

        result = invoke("cat", str(path))

        assert result.exit_code == 0
        assert result.stdout_bytes == b"\xff\xfe\x00abc"

    def test_atomic_write(self, invoke, tmp_path):
        """--atomic writes the file through a temporary sibling."""
        path = tmp_path / "state.txt"

        result = invoke("write", "--atomic", str(path), "v2")

        assert result.exit_code == 0
        assert path.read_text() == "v2"

    def test_append(self, invoke, tmp_path):
        """Two appends concatenate."""
        path = tmp_path / "log.txt"

        invoke("append", str(path), "a")
        invoke("append", str(path), "b")

        assert path.read_text() == "ab"

    def test_count_lines(self, invoke, tmp_path):
        """count-lines prints the number of lines."""
        path = tmp_path / "lines.txt"
        path.write_text("a\nb\nc")

        result = invoke("count-lines", str(path))

        assert result.exit_code == 0
        assert result.output.strip() == "3"

    def test_copy(self, invoke, tmp_path):
        """copy duplicates the file content."""
        src = tmp_path / "src.txt"
        src.write_text("payload")
        dst = tmp_path / "dst.txt"

        result = invoke("copy", str(src), str(dst))

        assert result.exit_code == 0
        assert dst.read_text() == "payload"

    def test_missing_file_fails(self, invoke, tmp_path):
        """Failures print the error kind and exit with status 1."""
        result = invoke("cat", str(tmp_path / "missing.txt"))

        assert result.exit_code == 1
        assert "not_found" in result.output

    def test_rename_and_rm(self, invoke, tmp_path):
        """rename moves a file and rm deletes it."""
        old = tmp_path / "old.txt"
        new = tmp_path / "new.txt"
        old.write_text("data")

        assert invoke("rename", str(old), str(new)).exit_code == 0
        assert new.exists()
        assert invoke("rm", str(new)).exit_code == 0
        assert not new.exists()
        assert invoke("rm", str(new)).exit_code == 0


class TestQueryCommands:
    """Test exists and readable."""

    def test_exists(self, invoke, tmp_path):
        """exists exits 0 only when the path is present."""
        present = invoke("exists", str(tmp_path))
        absent = invoke("exists", str(tmp_path / "missing"))

        assert present.exit_code == 0
        assert "present" in present.output
        assert absent.exit_code == 1
        assert "absent" in absent.output

    def test_readable(self, invoke, tmp_path):
        """readable exits 1 for a missing path."""
        path = tmp_path / "file.txt"
        path.write_text("data")

        assert invoke("readable", str(path)).exit_code == 0
        assert invoke("readable", str(tmp_path / "missing")).exit_code == 1


class TestDirectoryCommands:
    """Test mkdir, clear and ls."""

    def test_mkdir_and_clear(self, invoke, tmp_path):
        """mkdir builds nested directories and clear empties them."""
        root = tmp_path / "work"
        nested = root / "a" / "b"

        assert invoke("mkdir", str(nested)).exit_code == 0
        assert nested.is_dir()
        (root / "file.txt").write_text("data")

        assert invoke("clear", str(root)).exit_code == 0
        assert root.is_dir()
        assert list(root.iterdir()) == []

    def test_ls_with_suffix(self, invoke, tmp_path):
        """ls prints one matching path per line."""
        root = tmp_path / "listing"
        root.mkdir()
        for name in ("a.txt", "b.go", "c.txt"):
            (root / name).write_text(name)

        result = invoke("ls", str(root), "--suffix", ".txt")

        assert result.exit_code == 0
        assert sorted(Path(line).name for line in result.output.splitlines()) == ["a.txt", "c.txt"]

    def test_ls_no_matches(self, invoke, tmp_path):
        """ls says so when nothing matches."""
        root = tmp_path / "empty"
        root.mkdir()

        result = invoke("ls", str(root))

        assert result.exit_code == 0
        assert "No matching entries" in result.output


class TestAuditCommand:
    """Test the audit command."""

    def test_operations_are_audited(self, invoke, tmp_path):
        """Executed and failed operations show up in the export."""
        path = tmp_path / "note.txt"
        invoke("write", str(path), "data")
        invoke("cat", str(tmp_path / "missing.txt"))

        result = invoke("audit", "--export", "json")

        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert {e["operation"] for e in entries} == {"write", "read"}
        assert {e["status"] for e in entries} == {"executed", "failed"}

    def test_failures_table(self, invoke, tmp_path):
        """--failures shows only failed operations."""
        invoke("cat", str(tmp_path / "missing.txt"))

        result = invoke("audit", "--failures")

        assert result.exit_code == 0
        assert "Recent Audit Log" in result.output

    def test_empty_log(self, invoke):
        """An empty log is reported as such."""
        result = invoke("audit")

        assert result.exit_code == 0
        assert "No audit entries found" in result.output

    def test_no_audit_flag(self, runner, config_file, tmp_path):
        """--no-audit leaves the audit log untouched."""
        path = tmp_path / "note.txt"

        runner.invoke(filekit, ["--config", str(config_file), "--no-audit", "write", str(path), "x"])

        assert not (tmp_path / "audit" / "log.jsonl").exists()

    def test_invalid_config(self, runner, tmp_path):
        """A config with bad values is rejected."""
        bad = tmp_path / "bad.yaml"
        bad.write_text("filekit:\n  io:\n    buffer_size: 0\n")

        result = runner.invoke(filekit, ["--config", str(bad), "exists", str(tmp_path)])

        assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
