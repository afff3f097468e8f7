"""
LIA - A small text-based scripting language that compiles to Scratch

A LIA program is a flat list of statements:

on start;
repeat(5) {
  move(10);
  turn right(15);
}

Source text goes through three stages: the lexer (liac.lexer) turns it into tokens,
the parser (liac.parser) builds a tree out of the classes below, and the compiler
(liac.compiler) lowers that tree into linked Scratch blocks.
"""

class LexError(Exception):
    def __init__(self, offset, snippet):
        super().__init__(f"Unexpected token at {offset}: {snippet}")
        self.offset = offset
        self.snippet = snippet

class ParseError(Exception):
    def __init__(self, expected, token, line=None, column=None, index=None):
        """ [expected] describes the construct the parser was looking for, [token] is what it found instead """
        self.expected = expected
        self.token = token
        self.line = line
        self.column = column

        if line != None:
            where = f"line {line}, column {column}"
        else:
            where = f"token {index}"

        super().__init__(f"{where}: expected {expected}, got {token.describe()}")

""" LIA AST Objects """

class LIANode:
    # name used for this node in the exported .lia JSON
    typeName = None

    def __init__(self):
        self._publicProperties = []

    def getChildren(self):
        return []

    def toDict(self):
        data = {"type": self.typeName}
        for prop in self._publicProperties:
            data[prop] = _toPlain(self.__dict__[prop])
        return data

    def _dumpProperties(self):
        return " ".join([f'{prop}={repr(self.__dict__[prop])}' for prop in self._publicProperties])

    def __eq__(self, other):
        if type(self) != type(other):
            return False
        return all(self.__dict__[prop] == other.__dict__[prop] for prop in self._publicProperties)

    def __repr__(self):
        return f'<{type(self).__name__} {self._dumpProperties()}>'

def _toPlain(value):
    if isinstance(value, LIANode):
        return value.toDict()
    if isinstance(value, list):
        return [_toPlain(v) for v in value]
    return value

class LIAProgram(LIANode):
    typeName = "Program"

    def __init__(self, body):
        super().__init__()
        self.body = body
        self._publicProperties = ["body"]

    def getChildren(self):
        return self.body

class LIAEvent(LIANode):
    """ A trigger statement. [key] is only set for "key" events, [name] only for "backdrop" events """
    typeName = "Event"
    KINDS = ("start", "key", "click", "backdrop")

    def __init__(self, kind, key=None, name=None):
        super().__init__()
        self.kind = kind
        self.key = key
        self.name = name
        self._publicProperties = ["kind"]

        if kind == "key":
            self._publicProperties.append("key")
        if kind == "backdrop":
            self._publicProperties.append("name")

class LIARepeat(LIANode):
    typeName = "Repeat"

    def __init__(self, count, body):
        super().__init__()
        self.count = count
        self.body = body
        self._publicProperties = ["count", "body"]

    def getChildren(self):
        return self.body

class LIALoop(LIANode):
    """ Repeats its body forever """
    typeName = "LoopStatement"

    def __init__(self, body):
        super().__init__()
        self.body = body
        self._publicProperties = ["body"]

    def getChildren(self):
        return self.body

class LIAIf(LIANode):
    """
    [condition] is not an expression tree, it is the raw text of the tokens between
    the parentheses joined by single spaces. [alternate] is None when there is no else branch
    """
    typeName = "If"

    def __init__(self, condition, consequent, alternate=None):
        super().__init__()
        self.condition = condition
        self.consequent = consequent
        self.alternate = alternate
        self._publicProperties = ["condition", "consequent", "alternate"]

    def getChildren(self):
        return self.consequent + (self.alternate or [])

class LIAAwaitUntil(LIANode):
    typeName = "AwaitUntil"

    def __init__(self, condition):
        super().__init__()
        self.condition = condition
        self._publicProperties = ["condition"]

class LIACall(LIANode):
    """ A generic call such as say("hi") for(2); [forCount] holds the for(n) suffix if there was one """
    typeName = "Call"

    def __init__(self, name, args, forCount=None):
        super().__init__()
        self.name = name
        self.args = args
        self.forCount = forCount
        self._publicProperties = ["name", "args", "forCount"]

    def toDict(self):
        data = {"type": self.typeName, "name": self.name, "args": list(self.args)}
        if self.forCount != None:
            data["for"] = self.forCount
        return data

class LIAEmpty(LIANode):
    """ A lone ; """
    typeName = "Empty"

# every statement type the parser can produce
STATEMENT_TYPES = [LIAEvent, LIARepeat, LIALoop, LIAIf, LIAAwaitUntil, LIACall, LIAEmpty]

def _statementsFromDict(items):
    return [nodeFromDict(item) for item in items]

def nodeFromDict(data):
    """ Rebuild a node from the plain record produced by LIANode.toDict() """
    nodeType = data.get("type")

    if nodeType == "Program":
        return LIAProgram(_statementsFromDict(data["body"]))
    if nodeType == "Event":
        return LIAEvent(data["kind"], key=data.get("key"), name=data.get("name"))
    if nodeType == "Repeat":
        return LIARepeat(data["count"], _statementsFromDict(data["body"]))
    if nodeType == "LoopStatement":
        return LIALoop(_statementsFromDict(data["body"]))
    if nodeType == "If":
        alternate = data.get("alternate")
        if alternate != None:
            alternate = _statementsFromDict(alternate)
        return LIAIf(data["condition"], _statementsFromDict(data["consequent"]), alternate)
    if nodeType == "AwaitUntil":
        return LIAAwaitUntil(data["condition"])
    if nodeType == "Call":
        return LIACall(data["name"], list(data["args"]), data.get("for"))
    if nodeType == "Empty":
        return LIAEmpty()

    raise ValueError(f'Unknown node type "{nodeType}"')

def programFromDict(data) -> LIAProgram:
    program = nodeFromDict(data)
    if type(program) != LIAProgram:
        raise ValueError("Top-level record is not a Program")
    return program
