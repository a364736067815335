# file: tests/test_module6_cli.py

"""
Tests for Module 6: the dendec command line.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from module0_common.config import CONFIG_ENV_VAR
from module6_cli import build_parser, main


PASSWORD = "cli password"


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    path = tmp_path / "fast.yaml"
    path.write_text("crypto:\n  kdf:\n    time_cost: 1\n    memory_cost: 1024\n")
    return str(path)


@pytest.fixture
def passwords(monkeypatch):
    """Queue answers for the password prompts."""
    answers = []

    def fake_getpass(prompt=""):
        return answers.pop(0)

    monkeypatch.setattr("module6_cli.cli.getpass.getpass", fake_getpass)
    return answers


class TestEncodeDecode:

    def test_text_roundtrip(self, config_file, passwords, capsys):
        passwords.extend([PASSWORD, PASSWORD])
        assert main(["--config", config_file, "encode", "Hello, world"]) == 0
        sequence = capsys.readouterr().out.strip()
        assert set(sequence) <= set("ATGC")

        passwords.append(PASSWORD)
        assert main(["--config", config_file, "decode", sequence]) == 0
        assert capsys.readouterr().out == "Hello, world"

    def test_grouped_output(self, config_file, passwords, capsys):
        passwords.extend([PASSWORD, PASSWORD])
        assert main(["--config", config_file, "encode", "abc", "--group", "6"]) == 0
        groups = capsys.readouterr().out.split()
        assert len(groups[0]) == 6

    def test_negative_group_rejected(self, config_file, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--config", config_file, "encode", "abc", "--group", "-4"])
        assert excinfo.value.code == 2
        assert "must be >= 0" in capsys.readouterr().err

    def test_file_roundtrip(self, config_file, passwords, tmp_path):
        source = tmp_path / "blob.bin"
        source.write_bytes(bytes(range(256)))
        encoded = tmp_path / "blob.bin.dna"
        restored = tmp_path / "restored.bin"

        passwords.extend([PASSWORD, PASSWORD])
        assert main(["--config", config_file, "encode", "--file", str(source), "--as", str(encoded)]) == 0

        passwords.append(PASSWORD)
        assert main(["--config", config_file, "decode", "--file", str(encoded), "--as", str(restored)]) == 0
        assert restored.read_bytes() == source.read_bytes()

    def test_password_mismatch(self, config_file, passwords, capsys):
        passwords.extend([PASSWORD, "something else"])
        assert main(["--config", config_file, "encode", "text"]) == 1
        assert "Error: Passwords do not match" in capsys.readouterr().err

    def test_empty_password(self, config_file, passwords, capsys):
        passwords.extend(["", ""])
        assert main(["--config", config_file, "encode", "text"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_input(self, config_file, passwords, capsys):
        assert main(["--config", config_file, "encode"]) == 1
        assert "--file" in capsys.readouterr().err

    def test_wrong_password(self, config_file, passwords, capsys):
        passwords.extend([PASSWORD, PASSWORD])
        main(["--config", config_file, "encode", "secret"])
        sequence = capsys.readouterr().out.strip()

        passwords.append("wrong")
        assert main(["--config", config_file, "decode", sequence]) == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: ")
        assert "Traceback" not in err

    def test_binary_output_needs_as(self, config_file, passwords, tmp_path, capsys):
        source = tmp_path / "raw.bin"
        source.write_bytes(b"\xff\xfe\x00")
        encoded = tmp_path / "raw.bin.dna"

        passwords.extend([PASSWORD, PASSWORD])
        main(["--config", config_file, "encode", "--file", str(source), "--as", str(encoded)])
        capsys.readouterr()

        passwords.append(PASSWORD)
        assert main(["--config", config_file, "decode", "--file", str(encoded)]) == 1
        assert "--as" in capsys.readouterr().err

    def test_invalid_sequence(self, config_file, passwords, capsys):
        passwords.append(PASSWORD)
        assert main(["--config", config_file, "decode", "ATGX"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_bad_config_file(self, tmp_path, passwords, capsys):
        assert main(["--config", str(tmp_path / "missing.yaml"), "encode", "x"]) == 1
        assert "Cannot read config file" in capsys.readouterr().err


class TestWrap:

    def test_directory_roundtrip(self, config_file, passwords, tmp_path, capsys):
        tree = tmp_path / "tree"
        tree.mkdir()
        (tree / "a.txt").write_text("alpha\n")
        (tree / "b.md").write_text("beta\n")

        passwords.extend([PASSWORD, PASSWORD])
        assert main(["--config", config_file, "wrap", "-e", str(tree)]) == 0
        assert "2 files encoded | 0 skipped | 0 failed" in capsys.readouterr().err
        assert sorted(p.name for p in tree.iterdir()) == ["a.txt.dna", "b.md.dna"]

        passwords.append(PASSWORD)
        assert main(["--config", config_file, "wrap", "-d", str(tree)]) == 0
        assert (tree / "a.txt").read_text() == "alpha\n"
        assert (tree / "b.md").read_text() == "beta\n"

    def test_decode_failures_set_exit_code(self, config_file, passwords, tmp_path, capsys):
        (tmp_path / "junk.txt.dna").write_text("GATTACA")
        passwords.append(PASSWORD)
        assert main(["--config", config_file, "wrap", "-d", str(tmp_path)]) == 1
        assert "1 failed" in capsys.readouterr().err

    def test_command_failure(self, config_file, passwords, tmp_path, capsys):
        passwords.extend([PASSWORD, PASSWORD])
        argv = ["--config", config_file, "wrap", "-e", sys.executable, "-c", "import sys; sys.exit(2)"]
        assert main(argv) == 1
        assert "exited with status 2" in capsys.readouterr().err

    def test_mode_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["wrap", "somedir"])

    def test_modes_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["wrap", "-e", "-d", "somedir"])

    def test_command_arguments_pass_through(self):
        args = build_parser().parse_args(["wrap", "-e", "git", "clone", "--depth", "1", "url"])
        assert args.encode
        assert args.target == ["git", "clone", "--depth", "1", "url"]
