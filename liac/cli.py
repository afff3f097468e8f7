""" Command line interface: python main.py <command> <file> [out] """

import argparse
import json
import logging
import sys
from . import LexError, ParseError
from .build import ProjectParameters, exportLia, exportSB3
from .compiler import lower
from .formatter import formatProgram
from .parser import parseSource

COMMANDS = ["compile", "ast", "export-lia", "format"]

def _buildArgParser():
    argParser = argparse.ArgumentParser(prog="liac", description="Compile LIA scripts to Scratch 3 projects")
    argParser.add_argument("command", choices=COMMANDS)
    argParser.add_argument("file", help="LIA source file")
    argParser.add_argument("out", nargs="?", help="output file (compile: out.sb3, export-lia: out.lia)")
    argParser.add_argument("--agent", default="liac", help="value written to meta.agent in project.json")
    argParser.add_argument("--pretty", action="store_true", help="indent project.json inside the archive")
    argParser.add_argument("--verbose", "-v", action="store_true", help="log compiler progress")
    return argParser

def _errorLine(source, offset):
    """ Return the 1-based line number containing [offset] and the text of that line """
    lineNumber = source.count("\n", 0, offset) + 1
    return lineNumber, source.split("\n")[lineNumber-1]

def reportError(filename, source, error):
    if isinstance(error, LexError):
        lineNumber, badLine = _errorLine(source, error.offset)
    elif error.line != None:
        lineNumber, badLine = error.line, source.split("\n")[error.line-1]
    else:
        lineNumber, badLine = "?", ""

    print(f"{filename}:{lineNumber}: error: {error}")
    print("    " + badLine.strip())

def run(args):
    with open(args.file, encoding="utf-8") as fl:
        source = fl.read()

    try:
        program = parseSource(source)
    except (LexError, ParseError) as e:
        reportError(args.file, source, e)
        return 1

    if args.command == "ast":
        print(json.dumps(program.toDict(), indent=2))
    elif args.command == "format":
        print(formatProgram(program), end="")
    elif args.command == "export-lia":
        out = args.out or "out.lia"
        exportLia(program, out)
        print("Exported .lia to", out)
    elif args.command == "compile":
        out = args.out or "out.sb3"
        params = ProjectParameters(agent=args.agent, prettyProjectJSON=args.pretty)
        exportSB3(lower(program, params), out, params)
        print("Compiled to", out)

    return 0

def main(argv=None):
    args = _buildArgParser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(name)s: %(message)s")
    sys.exit(run(args))
