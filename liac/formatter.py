""" Print a LIA program tree back out as source text """

from decimal import Decimal
from . import LIAAwaitUntil, LIACall, LIAEmpty, LIAEvent, LIAIf, LIALoop, LIAProgram, LIARepeat

def formatValue(value):
    if isinstance(value, str):
        # string literals can't contain quotes, so a value with one came from a bare identifier
        if '"' in value:
            return value
        return f'"{value}"'
    if isinstance(value, float):
        # the lexer has no exponent syntax, 1e-05 has to come out as 0.00001
        return format(Decimal(repr(value)), "f")
    return str(value)

def _formatCall(stmt: LIACall):
    text = stmt.name
    if stmt.args:
        text += "(" + ", ".join(formatValue(arg) for arg in stmt.args) + ")"
    if stmt.forCount != None:
        text += f" for({formatValue(stmt.forCount)})"
    return text + ";"

def _formatEvent(stmt: LIAEvent):
    if stmt.kind == "key":
        return f"on key({formatValue(stmt.key)});"
    if stmt.kind == "backdrop":
        return f"on backdrop({formatValue(stmt.name)});"
    return f"on {stmt.kind};"

class LIAFormatter:
    def __init__(self, indent="  "):
        self.indent = indent
        self.lines = []

    def emit(self, depth, text):
        self.lines.append(self.indent*depth + text)

    def formatBlock(self, depth, header, body):
        self.emit(depth, header + " {")
        self.formatStatements(depth+1, body)
        self.emit(depth, "}")

    def formatStatements(self, depth, statements):
        for stmt in statements:
            self.formatStatement(depth, stmt)

    def formatStatement(self, depth, stmt):
        if type(stmt) == LIAEvent:
            self.emit(depth, _formatEvent(stmt))
        elif type(stmt) == LIARepeat:
            self.formatBlock(depth, f"repeat({formatValue(stmt.count)})", stmt.body)
        elif type(stmt) == LIALoop:
            self.formatBlock(depth, "loop", stmt.body)
        elif type(stmt) == LIAIf:
            self.formatBlock(depth, f"if ({stmt.condition})", stmt.consequent)
            if stmt.alternate != None:
                # reopen the closing line of the if block: "} else {"
                self.lines[-1] += " else {"
                self.formatStatements(depth+1, stmt.alternate)
                self.emit(depth, "}")
        elif type(stmt) == LIAAwaitUntil:
            self.emit(depth, f"await until ({stmt.condition});")
        elif type(stmt) == LIACall:
            self.emit(depth, _formatCall(stmt))
        elif type(stmt) == LIAEmpty:
            self.emit(depth, ";")
        else:
            raise TypeError(f"Cannot format {type(stmt).__name__}")

def formatProgram(program: LIAProgram, indent="  "):
    formatter = LIAFormatter(indent)
    formatter.formatStatements(0, program.body)
    return "\n".join(formatter.lines) + "\n"
