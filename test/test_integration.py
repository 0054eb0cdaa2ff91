"""
End-to-end tests: source text through reader, analyzer, evaluator and printer
"""

import pytest

import main
from values import BoolVal, NumVal


class TestEndToEnd:
  """Read, analyze, evaluate, print"""

  @pytest.mark.parametrize("source, expected", [
    ("{{lam {x} {if {<= x 5} true 1}} 4}", "true"),
    ("{{lam {x} {if {<= x 5} true 1}} 6}", "1"),
    ("{+ 11 {/ 20 4}}", "16"),
    ("{if {<= 200 10} 200 10}", "10"),
    ("{/ -7 2}", "-3"),
    ("{equal? {lam {x} x} 1}", "false"),
    ("{lam {x} x}", "#<procedure>"),
    ("{{{lam {x} {lam {y} {- x y}}} 10} 4}", "6"),
  ])
  def test_programs(self, read, interpreter, source, expected):
    assert interpreter.interpret(read(source)) == expected

  @pytest.mark.parametrize("source, expected", [
    ("x", "UIRE: undefined variable: x"),
    ("{+ 1 true}", "UIRE: operands must be numbers"),
    ("{if 0 1 2}", "UIRE: condition must be boolean"),
    ("{5 1}", "UIRE: application of a non-procedure (Num)"),
    ("{{lam {x y} x} 1}", "UIRE: arity mismatch: expected 2 argument(s), got 1"),
    ("{/ 1 0}", "UIRE: division by zero"),
  ])
  def test_errors(self, read, interpreter, source, expected):
    assert interpreter.interpret(read(source)) == expected

  def test_program_outcomes(self, parser, analyzer, interpreter):
    exprs = analyzer.analyze(parser.parse_string("{* 6 7}\n{<= 1 0}"))
    assert interpreter.interpret_program(exprs) == [NumVal(42), BoolVal(False)]


class TestCommandLine:
  """main() drives the whole pipeline"""

  def test_eval_option(self, capsys):
    assert main.main(["-e", "{+ 1 2} {<= 3 2}"]) == 0
    assert capsys.readouterr().out.splitlines() == ["3", "false"]

  def test_eval_error_sets_exit_status(self, capsys):
    assert main.main(["-e", "{+ 1 2} y"]) == 1
    assert capsys.readouterr().out.splitlines() == ["3", "UIRE: undefined variable: y"]

  def test_script_file(self, tmp_path, capsys):
    script = tmp_path / "prog.uire"
    script.write_text(
      "; the sample program\n"
      "{{lam {x} {if {<= x 5} true 1}} 4}\n"
      "{lam {f} f}\n",
      encoding="utf-8",
    )
    assert main.main([str(script)]) == 0
    assert capsys.readouterr().out.splitlines() == ["true", "#<procedure>"]

  def test_missing_script(self, tmp_path, capsys):
    assert main.main([str(tmp_path / "nope.uire")]) == 1
    assert "does not exist" in capsys.readouterr().out

  def test_undecodable_script(self, tmp_path, capsys):
    script = tmp_path / "latin.uire"
    script.write_bytes(b"{+ 1 \xff}")
    assert main.main([str(script)]) == 1
    out = capsys.readouterr().out
    assert out.startswith("Parse error: Cannot decode file")
    assert "Unexpected error" not in out

  def test_parse_error(self, capsys):
    assert main.main(["-e", "{+ 1"]) == 1
    assert capsys.readouterr().out.startswith("Parse error at line 1")

  def test_semantics_error(self, capsys):
    assert main.main(["-e", "{if true 1}"]) == 1
    assert "if expects 3 sub-expression(s), got 2" in capsys.readouterr().out

  def test_parse_dump(self, tmp_path, capsys):
    script = tmp_path / "prog.uire"
    script.write_text("{f 1}", encoding="utf-8")
    assert main.main(["--parse", str(script)]) == 0
    out = capsys.readouterr().out
    assert "Parsed 1 top-level form(s):" in out
    assert "SYMBOL('f')" in out

  def test_analyze_dump(self, tmp_path, capsys):
    script = tmp_path / "prog.uire"
    script.write_text("{lam {x} x}", encoding="utf-8")
    assert main.main(["--analyze", str(script)]) == 0
    out = capsys.readouterr().out
    assert "Form 1: {lam {x} x}" in out
    assert "FunDef(x)" in out

  def test_timeout_option(self, capsys):
    assert main.main(["--timeout", "5", "-e", "{* 2 21}"]) == 0
    assert capsys.readouterr().out.strip() == "42"

  def test_timeout_from_environment(self, monkeypatch):
    monkeypatch.setenv(main.TIMEOUT_ENV_VAR, "2.5")
    args = main.create_arg_parser().parse_args(["-e", "1"])
    assert args.timeout == 2.5

  def test_invalid_timeout_environment_is_ignored(self, monkeypatch, capsys):
    monkeypatch.setenv(main.TIMEOUT_ENV_VAR, "soon")
    assert main.default_timeout() is None
    assert "ignoring" in capsys.readouterr().err

  def test_deep_recursion_is_reported(self, capsys):
    omega = "{{lam {f} {f f}} {lam {f} {f f}}}"
    assert main.main(["-e", omega]) == 1
    assert "maximum recursion depth exceeded" in capsys.readouterr().out

  def test_forms_after_deep_recursion_still_run(self, tmp_path, capsys):
    script = tmp_path / "omega.uire"
    script.write_text("{{lam {f} {f f}} {lam {f} {f f}}}\n{+ 1 2}\n", encoding="utf-8")
    assert main.main([str(script)]) == 1
    assert capsys.readouterr().out.splitlines() == [main.RECURSION_LIMIT_MESSAGE, "3"]

  def test_repl_session(self, monkeypatch, capsys):
    lines = iter(["{+ 1 2}", "", ":parse {f 1}", ":analyze {f 1}", "oops", "{+", "exit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    monkeypatch.setattr(main, "READLINE_AVAILABLE", False)
    main.run_interactive_mode()
    out = capsys.readouterr().out
    assert "\n3\n" in out
    assert "SYMBOL('f')" in out
    assert "VarRef(f)" in out
    assert "UIRE: undefined variable: oops" in out
    assert "UIRE: Expected" in out

  def test_repl_exits_on_eof(self, monkeypatch, capsys):
    def raise_eof(prompt=""):
      raise EOFError
    monkeypatch.setattr("builtins.input", raise_eof)
    monkeypatch.setattr(main, "READLINE_AVAILABLE", False)
    main.run_interactive_mode()
    assert "Goodbye!" in capsys.readouterr().out
