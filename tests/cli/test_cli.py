"""
Tests for the wdkconfig command-line interface.
"""

import pytest
from pathlib import Path
from unittest.mock import patch

from wdkconfig.cli.parser import CLI, main
from wdkconfig.config.cache import CACHE_FILE_NAME


@pytest.fixture
def build_env(tmp_path, monkeypatch, kit_root):
    """Environment of a build step running against the fake kit."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("WDKContentRoot", str(kit_root))
    monkeypatch.setenv("WDK_TARGET_ARCH", "x64")
    for name in ("WDK_DRIVER_CLASS", "WDK_KMDF_VERSION", "WDK_UMDF_VERSION",
                 "WDK_PINNED_KIT_VERSION", "OUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestParser:
    """Test argument parsing."""

    def test_configure_args(self):
        """Test configure subcommand options."""
        args = CLI().parse_args(
            ["configure", "--out-dir", "out", "--config", "wdk.yaml", "--no-verify"]
        )
        assert args.command == "configure"
        assert args.out_dir == Path("out")
        assert args.config == Path("wdk.yaml")
        assert args.no_verify

    def test_bindgen_args(self):
        """Test bindgen subcommand options."""
        args = CLI().parse_args(
            ["bindgen", "--out-dir", "out", "--header", "wrapper.h", "--output", "b.rs"]
        )
        assert args.header == Path("wrapper.h")
        assert args.generator == "bindgen"

    def test_out_dir_from_environment(self, monkeypatch):
        """Test OUT_DIR supplies the default output directory."""
        monkeypatch.setenv("OUT_DIR", "/build/out")
        args = CLI().parse_args(["configure"])
        assert args.out_dir == Path("/build/out")

    def test_bindgen_requires_header(self):
        """Test missing required option exits."""
        with pytest.raises(SystemExit):
            CLI().parse_args(["bindgen", "--out-dir", "out", "--output", "b.rs"])


class TestRun:
    """Test command execution."""

    def test_no_command(self, capsys):
        """Test running without a command prints help and fails."""
        assert CLI().run([]) == 1
        assert "usage" in capsys.readouterr().err

    def test_no_out_dir(self, build_env):
        """Test a missing output directory is an error."""
        assert CLI().run(["configure"]) == 1

    def test_configure(self, build_env, capsys):
        """Test configure prints directives on stdout only."""
        out_dir = build_env / "out"

        assert CLI().run(["configure", "--out-dir", str(out_dir)]) == 0

        captured = capsys.readouterr()
        lines = captured.out.splitlines()
        assert lines
        assert all(line.startswith("cargo:") for line in lines)
        assert 'cargo:rustc-cfg=driver_type="KMDF"' in lines
        assert (out_dir / CACHE_FILE_NAME).is_file()

    def test_configure_with_options_file(self, build_env, capsys):
        """Test the options file is honored."""
        config = build_env / "opts.yaml"
        config.write_text("wdk:\n  driver_class: WDM\n")

        code = CLI().run(
            ["configure", "--out-dir", str(build_env / "out"), "--config", str(config)]
        )

        assert code == 0
        assert 'cargo:rustc-cfg=driver_type="WDM"' in capsys.readouterr().out

    def test_configure_error(self, build_env, monkeypatch, capsys):
        """Test configuration errors return 1 and write no directives."""
        monkeypatch.setenv("WDK_DRIVER_CLASS", "UMDF")
        monkeypatch.setenv("WDK_KMDF_VERSION", "1.33")

        code = CLI().run(["configure", "--out-dir", str(build_env / "out")])

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert "kmdf_version" in captured.err

    def test_bindgen_without_cache(self, build_env, capsys):
        """Test bindgen before configure fails cleanly."""
        code = CLI().run(
            [
                "bindgen",
                "--out-dir",
                str(build_env / "out"),
                "--header",
                "wrapper.h",
                "--output",
                "bindings.rs",
            ]
        )

        assert code == 1
        assert "configure" in capsys.readouterr().err

    @patch("wdkconfig.build.generate_bindings")
    def test_bindgen(self, mock_generate, build_env):
        """Test bindgen forwards paths and generator."""
        mock_generate.return_value = Path("bindings.rs")

        code = CLI().run(
            [
                "bindgen",
                "--out-dir",
                "out",
                "--header",
                "wrapper.h",
                "--output",
                "bindings.rs",
                "--generator",
                "/opt/bindgen",
            ]
        )

        assert code == 0
        args, kwargs = mock_generate.call_args
        assert args == (Path("out"), Path("wrapper.h"), Path("bindings.rs"))
        assert kwargs["generator"].executable == "/opt/bindgen"


class TestMain:
    """Test main entry point."""

    @patch("wdkconfig.cli.parser.CLI.run", return_value=0)
    def test_exit_code(self, mock_run):
        """Test main exits with the run result."""
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 0
