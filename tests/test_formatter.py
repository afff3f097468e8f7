import pytest

from liac import LIACall, LIAProgram, LIARepeat
from liac.formatter import formatProgram, formatValue
from liac.parser import parseSource

PROGRAMS = [
    "on start;\nrepeat(5) { move(10); turn right(15); }",
    'on key(space); on backdrop("backdrop 2"); on click;',
    'if (x > 0) { say("hi") for(2); } else { ; hide; }',
    "loop { await until (touching edge); if (a == b) { } }",
    'foo(1, 2.5, "three", four); send; costume next;',
    "if (score >= 0.50) { repeat(0.5) { wait(0.00001); } }",
    'if (answer == "hi!") { say("ok"); } else { await until (name == "a) b"); }',
    "",
]


def test_format_example():
    program = parseSource('on start;\nrepeat(5) { move(10); turn right(15); }\nif (a) { } else { say("x") for(1); }')

    assert formatProgram(program) == (
        "on start;\n"
        "repeat(5) {\n"
        "  move(10);\n"
        '  turn("right", 15);\n'
        "}\n"
        "if (a) {\n"
        "} else {\n"
        '  say("x") for(1);\n'
        "}\n"
    )


def test_format_indent():
    program = LIAProgram([LIARepeat(2, [LIACall("hide", [])])])
    assert formatProgram(program, indent="\t") == "repeat(2) {\n\thide;\n}\n"


@pytest.mark.parametrize("source", PROGRAMS)
def test_reparse_is_identity(source):
    program = parseSource(source)
    assert parseSource(formatProgram(program)) == program


def test_format_value():
    assert formatValue("hi") == '"hi"'
    assert formatValue(3) == "3"
    assert formatValue(0.5) == "0.5"
    assert formatValue(1e-05) == "0.00001"
    assert formatValue('a"b') == 'a"b'
