# =============================================================================
# test_cli.py - c8asm Command-Line Tests
# =============================================================================
# Tests for the c8asm command and the CLI error handler.
# =============================================================================

import pytest
from click.testing import CliRunner

from chip8_sdk import __version__
from chip8_sdk.cli.c8asm import default_output_path, main
from chip8_sdk.cli.errors import ExitCode, handle_cli_exception
from chip8_sdk.errors import BadArgumentError


SPRITE_SOURCE = """\
_spr:
    %00000000
    %01000010
    MOV I, _spr
    MOV V0, #0
    DRAW V0, V0, #2
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "sprite.c8a"
    path.write_text(SPRITE_SOURCE)
    return path


# =============================================================================
# c8asm Tests
# =============================================================================

class TestAssembleCommand:
    """Test c8asm invocations."""

    def test_default_output(self, runner, source_file):
        """Output defaults to the source name with .c8."""
        result = runner.invoke(main, [str(source_file)])
        output_file = source_file.with_suffix(".c8")

        assert result.exit_code == 0
        assert f"Successfully assembled {source_file} into {output_file}" in result.output
        assert output_file.read_bytes() == bytes(
            [0x00, 0x42, 0xA2, 0x00, 0x60, 0x00, 0xD0, 0x02]
        )

    def test_explicit_output(self, runner, source_file, tmp_path):
        """Output path from -o."""
        out = tmp_path / "out.bin"
        result = runner.invoke(main, [str(source_file), "-o", str(out)])
        assert result.exit_code == 0
        assert out.exists()
        assert not source_file.with_suffix(".c8").exists()

    def test_listing_and_symbols(self, runner, source_file, tmp_path):
        """Listing and symbol files on request."""
        listing = tmp_path / "sprite.lst"
        symbols = tmp_path / "sprite.sym"
        result = runner.invoke(
            main, [str(source_file), "-l", str(listing), "-s", str(symbols)]
        )
        assert result.exit_code == 0
        assert "MOV I, _spr" in listing.read_text()
        assert "_SPR $0200" in symbols.read_text()

    def test_verbose(self, runner, source_file):
        """Verbose mode prints a summary."""
        result = runner.invoke(main, ["-v", str(source_file)])
        assert result.exit_code == 0
        assert "Assembly complete: 8 bytes at $0200" in result.output

    def test_version(self, runner):
        """Version option."""
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_default_output_path(self, tmp_path):
        """Default output path helper."""
        assert default_output_path(tmp_path / "game.c8a") == tmp_path / "game.c8"


class TestAssembleErrors:
    """Test c8asm failure reporting."""

    def test_assembly_error(self, runner, tmp_path):
        """Assembly error exits with a build error."""
        src = tmp_path / "bad.c8a"
        src.write_text("CLS\nSKIP.BZ V0, #1\n")
        result = runner.invoke(main, [str(src)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Assembly error:" in result.output
        assert "bad skip type 'BZ'" in result.output
        assert ":2:6:" in result.output
        assert not src.with_suffix(".c8").exists()

    def test_undecodable_source(self, runner, tmp_path):
        """Source that is not valid text is a build error."""
        src = tmp_path / "bad.c8a"
        src.write_bytes(b"CLS\n\xfe\n")
        result = runner.invoke(main, [str(src)])

        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "unknown character" in result.output
        assert ":2:1:" in result.output

    def test_missing_input(self, runner, tmp_path):
        """Missing input file is an argument error."""
        result = runner.invoke(main, [str(tmp_path / "missing.c8a")])
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# Error Handler Tests
# =============================================================================

class TestHandleCliException:
    """Test exit code mapping."""

    def test_chip8_error(self):
        """SDK errors are build errors."""
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(BadArgumentError("RAND"))
        assert exc_info.value.code == ExitCode.BUILD_ERROR

    def test_file_not_found(self):
        """Missing files are argument errors."""
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FileNotFoundError("missing.c8a"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_permission_error(self):
        """Unreadable files are argument errors."""
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(PermissionError("denied"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_internal_error(self):
        """Anything else is an internal error."""
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(ValueError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR
