""" Recursive-descent parser for LIA """

import logging
from . import LIAAwaitUntil, LIACall, LIAEmpty, LIAEvent, LIAIf, LIALoop, LIAProgram, LIARepeat, ParseError
from .lexer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Verbs with a dedicated meaning in LIA. Any other identifier at the start of a
# statement is parsed the same way, as a generic call
KNOWN_VERBS = {
    "say", "think", "show", "hide", "move", "turn", "costume", "backdrop", "ease",
    "point", "change", "set", "sound", "wait", "clone", "delete", "send"
}

class LIAParser:
    def __init__(self, tokens: "list[Token]", source=None):
        """ [source] is only used to turn token offsets into line/column numbers for error messages """
        self.tokens = tokens
        self.source = source
        self.pos = 0

        self._statementParsers = {
            "on": self.parseEvent,
            "repeat": self.parseRepeat,
            "loop": self.parseLoop,
            "if": self.parseIf,
            "await": self.parseAwait
        }

    # Token cursor

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def next(self) -> Token:
        token = self.tokens[self.pos]
        # never move past the EOF token
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def atPunct(self, value):
        return self.peek().isPunct(value)

    def throwError(self, expected):
        """ Raise a ParseError for the token under the cursor """
        token = self.peek()

        line = column = None
        if self.source != None and token.pos != None:
            line = self.source.count("\n", 0, token.pos) + 1
            column = token.pos - (self.source.rfind("\n", 0, token.pos) + 1) + 1

        raise ParseError(expected, token, line=line, column=column, index=self.pos)

    def expect(self, kind, value=None, expected=None):
        token = self.peek()
        if token.kind != kind or (value != None and token.value != value):
            self.throwError(expected or repr(value if value != None else kind))
        return self.next()

    def expectPunct(self, value):
        return self.expect(TokenKind.PUNCT, value)

    def expectNumber(self, context):
        token = self.peek()
        if token.kind != TokenKind.NUMBER:
            self.throwError(f"number in {context}")
        return self.next().value

    # Grammar

    def parseProgram(self):
        body = []
        while self.peek().kind != TokenKind.EOF:
            body.append(self.parseStatement())

        logger.debug("parsed %d top-level statements", len(body))
        return LIAProgram(body)

    def parseStatement(self):
        token = self.peek()

        if token.kind == TokenKind.IDENT:
            statementParser = self._statementParsers.get(token.value)
            if statementParser:
                return statementParser()

            # KNOWN_VERBS and unknown names share the generic call syntax
            return self.parseSimple()

        if token.isPunct(";"):
            self.next()
            return LIAEmpty()

        self.throwError("statement")

    def parseBlock(self):
        """ Parse statements up to and including the closing } """
        statements = []
        while not self.atPunct("}"):
            if self.peek().kind == TokenKind.EOF:
                self.throwError("'}' (unclosed block)")
            statements.append(self.parseStatement())

        self.expectPunct("}")
        return statements

    def parseBracedBlock(self):
        self.expectPunct("{")
        return self.parseBlock()

    def _parseEventArgument(self, what):
        self.expectPunct("(")
        token = self.peek()
        if token.kind not in (TokenKind.IDENT, TokenKind.STRING):
            self.throwError(what)
        self.next()
        self.expectPunct(")")
        return token.value

    def parseEvent(self):
        self.expect(TokenKind.IDENT, "on")
        token = self.peek()

        if not token.isIdent() or token.value not in LIAEvent.KINDS:
            self.throwError("event kind (start, key, click or backdrop)")
        self.next()

        kind = token.value
        event = None

        if kind == "key":
            event = LIAEvent("key", key=self._parseEventArgument("key name"))
        elif kind == "backdrop":
            event = LIAEvent("backdrop", name=self._parseEventArgument("backdrop name"))
        else:
            event = LIAEvent(kind)

        self.expectPunct(";")
        return event

    def parseRepeat(self):
        self.expect(TokenKind.IDENT, "repeat")
        self.expectPunct("(")
        count = self.expectNumber("repeat")
        self.expectPunct(")")

        return LIARepeat(count, self.parseBracedBlock())

    def parseLoop(self):
        self.expect(TokenKind.IDENT, "loop")
        return LIALoop(self.parseBracedBlock())

    def parseCondition(self):
        """
        Collect the raw text between ( and ). Conditions are never parsed into expressions,
        the tokens are joined with single spaces using their source spelling, strings keep their quotes
        """
        self.expectPunct("(")
        values = []
        while not self.atPunct(")"):
            if self.peek().kind == TokenKind.EOF:
                self.throwError("')' to close condition")
            values.append(self.next().text)
        self.expectPunct(")")
        return " ".join(values)

    def parseIf(self):
        self.expect(TokenKind.IDENT, "if")
        condition = self.parseCondition()
        consequent = self.parseBracedBlock()

        alternate = None
        if self.peek().isIdent("else"):
            self.next()
            alternate = self.parseBracedBlock()

        return LIAIf(condition, consequent, alternate)

    def parseAwait(self):
        self.expect(TokenKind.IDENT, "await")
        if not self.peek().isIdent("until"):
            self.throwError("'until' (unknown await form)")
        self.next()

        condition = self.parseCondition()
        self.expectPunct(";")
        return LIAAwaitUntil(condition)

    def parseSimple(self):
        name = self.next().value
        args = []

        if name not in KNOWN_VERBS:
            logger.debug('"%s" is not a known verb, parsing it as a generic call', name)

        # bare words before the argument list, e.g. the "right" in turn right(15);
        while self.peek().isIdent() and not self.peek().isIdent("for"):
            args.append(self.next().value)

        if self.atPunct("("):
            self.next()
            while not self.atPunct(")"):
                token = self.peek()
                if token.kind not in (TokenKind.NUMBER, TokenKind.STRING, TokenKind.IDENT):
                    self.throwError(f"argument to {name}")
                args.append(self.next().value)

                if self.atPunct(","):
                    self.next()
            self.expectPunct(")")

        forCount = None
        if self.peek().isIdent("for"):
            self.next()
            self.expectPunct("(")
            forCount = self.expectNumber("for")
            self.expectPunct(")")

        if not self.atPunct(";"):
            self.throwError(f"';' after statement {name}")
        self.next()

        return LIACall(name, args, forCount)

def parse(tokens, source=None) -> LIAProgram:
    return LIAParser(tokens, source).parseProgram()

def parseSource(text) -> LIAProgram:
    return parse(tokenize(text), source=text)
