from dataclasses import dataclass

import pytest

from shipflow.core.commands import Cd, Command, GenericCommand, parse_result, render_command


@dataclass(frozen=True)
class CountLines(Command[int]):
    path: str

    def render(self) -> str:
        return f"wc -l < {self.path}"

    @classmethod
    def parse(cls, output: str) -> int:
        try:
            return int(output.strip())
        except ValueError:
            return 0


def test_generic_command_trims_text():
    cmd = GenericCommand("  echo hi \t")
    assert cmd.text == "echo hi"
    assert render_command(cmd) == "echo hi"


def test_generic_command_rejects_empty_and_multiline():
    with pytest.raises(ValueError):
        GenericCommand("   ")
    with pytest.raises(ValueError):
        GenericCommand("echo a\necho b")
    assert GenericCommand.create("") is None
    assert GenericCommand.create("echo a\necho b") is None
    assert GenericCommand.create("ls") == GenericCommand("ls")


def test_render_is_deterministic():
    cmd = Cd("/srv/app", GenericCommand("ls -la"))
    assert render_command(cmd) == render_command(cmd)
    assert render_command(cmd) == render_command(Cd("/srv/app", GenericCommand("ls -la")))


def test_generic_parse_returns_stdout_unaltered():
    assert parse_result(GenericCommand, "hi\n") == "hi\n"
    assert parse_result(GenericCommand, "") == ""


def test_parse_is_total_for_custom_command():
    assert parse_result(CountLines, "12\n") == 12
    assert parse_result(CountLines, "") == 0
    assert parse_result(CountLines, "not a number") == 0


def test_cd_render_quotes_path():
    assert Cd("/srv/app", GenericCommand("make")).render() == "(cd /srv/app && make)"
    assert Cd("/srv/my app", GenericCommand("make")).render() == "(cd '/srv/my app' && make)"


def test_cd_parses_like_inner_command():
    cmd = Cd("/srv", CountLines("log.txt"))
    assert parse_result(cmd, "7\n") == 7
    assert cmd.parse_output("3\n") == 3
    assert parse_result(cmd, "garbage") == 0
    nested = Cd("/a", Cd("/b", CountLines("x")))
    assert parse_result(nested, "12\n") == 12
    assert nested.render() == "(cd /a && (cd /b && wc -l < x))"


def test_cd_type_has_no_parse_of_its_own():
    with pytest.raises(NotImplementedError):
        parse_result(Cd, "7\n")
    assert parse_result(Cd("/srv", GenericCommand("cat f")), "text\n") == "text\n"
