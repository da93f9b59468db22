"""
Tests for the command-line interface.
"""

from pathlib import Path

import pytest

from arrowlang.__main__ import main


EXAMPLES = Path(__file__).resolve().parent.parent / "examples"


FACT = """\
fn fact(n) ->
    if n <= 1 -> 1 .
    else -> n * fact(n - 1) .
.
println("fact(5) =", fact(5))
fact(5)
"""


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "fact.arrow"
    path.write_text(FACT)
    return path


class TestRun:
    """The run command."""

    def test_run_file(self, script, capsys):
        """Built-in output goes to stdout."""
        assert main(["run", str(script)]) == 0
        assert capsys.readouterr().out == "fact(5) = 120\n"

    def test_print_result(self, script, capsys):
        """--print-result echoes the final value."""
        assert main(["run", str(script), "--print-result"]) == 0
        assert capsys.readouterr().out.splitlines()[-1] == "120"

    def test_eval(self, capsys):
        """-e runs program text."""
        assert main(["run", "-e", "val x = 6 x * 7", "--print-result"]) == 0
        assert capsys.readouterr().out == "42\n"

    def test_runtime_error(self, capsys):
        """Errors are reported on stderr with exit status 1."""
        assert main(["run", "-e", "val x = 1\nx / 0"]) == 1
        err = capsys.readouterr().err
        assert "error[E402]: division by zero" in err
        assert "x / 0" in err
        assert "^" in err

    def test_max_depth(self, capsys):
        """--max-depth limits recursion."""
        code = main(["run", "-e", "fn f() -> f() .\nf()", "--max-depth", "5"])
        assert code == 1
        assert "maximum call depth of 5 exceeded" in capsys.readouterr().err

    def test_config_file(self, tmp_path, capsys):
        """--config loads YAML settings."""
        config = tmp_path / "arrow.yaml"
        config.write_text("echo_result: true\n")
        assert main(["run", "-e", "1 + 1", "--config", str(config)]) == 0
        assert capsys.readouterr().out == "2\n"

    def test_bad_config(self, tmp_path, capsys):
        """Invalid configuration fails cleanly."""
        config = tmp_path / "arrow.yaml"
        config.write_text("unknown: 1\n")
        assert main(["run", "-e", "1", "--config", str(config)]) == 1
        assert "unknown configuration key" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """A missing file is an error."""
        assert main(["run", str(tmp_path / "nope.arrow")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_example_program(self, capsys):
        """The bundled example runs."""
        assert main(["run", str(EXAMPLES / "fib.arrow"), "--print-result"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "fib(15) = 610",
            "first ten: [0, 1, 1, 2, 3, 5, 8, 13, 21, 34]",
            "55",
        ]

    def test_verbose_accepted(self, capsys):
        """-v turns on debug logging."""
        assert main(["-v", "run", "-e", "1"]) == 0


class TestInspection:
    """check / tokens / ast."""

    def test_check(self, script, capsys):
        """check reports the statement count."""
        assert main(["check", str(script)]) == 0
        assert capsys.readouterr().out.strip() == "OK: fact.arrow - 3 statement(s)"

    def test_check_syntax_error(self, tmp_path, capsys):
        """Syntax errors fail the check."""
        path = tmp_path / "bad.arrow"
        path.write_text("val = 1\n")
        assert main(["check", str(path)]) == 1
        assert "error[E101]" in capsys.readouterr().err

    def test_tokens(self, tmp_path, capsys):
        """tokens prints one token per line."""
        path = tmp_path / "t.arrow"
        path.write_text("val x = 1")
        assert main(["tokens", str(path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "1:1\tVAL"
        assert lines[1] == "1:5\tIDENTIFIER('x')"
        assert lines[-1] == "1:10\tEOF"

    def test_ast(self, script, capsys):
        """ast prints the tree."""
        assert main(["ast", str(script)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Program")
        assert "Function" in out

    def test_subcommand_required(self):
        """Running without a subcommand is a usage error."""
        with pytest.raises(SystemExit):
            main([])
