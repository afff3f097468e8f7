""" Tokenizer for LIA source text """

import logging
import re
from . import LexError

logger = logging.getLogger(__name__)

class TokenKind:
    PUNCT = "punct"
    IDENT = "ident"
    STRING = "string"
    NUMBER = "number"
    EOF = "eof"

class Token:
    def __init__(self, kind, value=None, pos=None, text=None):
        self.kind = kind
        self.value = value
        self.pos = pos # offset of the first character of this token in the source
        # source spelling of the value: numbers keep digits like 0.50, strings keep their quotes
        self.text = text if text != None else str(value)

    def isPunct(self, value):
        return self.kind == TokenKind.PUNCT and self.value == value

    def isIdent(self, value=None):
        return self.kind == TokenKind.IDENT and (value == None or self.value == value)

    def describe(self):
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"{self.kind} {self.value!r}"

    def __eq__(self, other):
        return isinstance(other, Token) and (self.kind, self.value) == (other.kind, other.value)

    def __repr__(self):
        return f"<Token {self.kind} {self.value!r}>"

# Multi-character punctuation has to come before the single characters it starts with.
# Only space, tab, newline and carriage return count as whitespace
_TOKEN_RE = re.compile(r"""
    [\ \t\n\r]*(=>|>=|<=|==|!=|[{}();,.+\-*/><=])[\ \t\n\r]*
    |[\ \t\n\r]*([A-Za-z_][A-Za-z0-9_."]*)[\ \t\n\r]*
    |[\ \t\n\r]*"([^"]*)"[\ \t\n\r]*
    |[\ \t\n\r]*([0-9]+(?:\.[0-9]+)?)[\ \t\n\r]*
""", re.VERBOSE)

_WHITESPACE = " \t\n\r"

def _numberValue(text):
    if "." in text:
        return float(text)
    return int(text)

def tokenize(source):
    """ Split [source] into a list of tokens, always terminated by an EOF token """
    tokens = []
    pos = 0

    while pos < len(source):
        m = _TOKEN_RE.match(source, pos)

        if not m:
            if source[pos] in _WHITESPACE:
                pos += 1
                continue
            raise LexError(pos, source[pos:pos+20])

        pos = m.end()
        punct, ident, string, number = m.groups()

        if punct != None:
            tokens.append(Token(TokenKind.PUNCT, punct, m.start(1)))
        elif ident != None:
            tokens.append(Token(TokenKind.IDENT, ident, m.start(2)))
        elif string != None:
            tokens.append(Token(TokenKind.STRING, string, m.start(3) - 1, text=source[m.start(3)-1:m.end(3)+1]))
        else:
            tokens.append(Token(TokenKind.NUMBER, _numberValue(number), m.start(4), text=number))

    tokens.append(Token(TokenKind.EOF, pos=len(source)))
    logger.debug("tokenized %d characters into %d tokens", len(source), len(tokens))
    return tokens
