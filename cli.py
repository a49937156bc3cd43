import json
import sys

from config import configure_logging
from errors import CompileError
from lexer import tokenize
from parser import dump_tree
from pipeline import parse, run


USAGE = "usage: python cli.py [--tokens | --ast] [FILE]"


def read_source(path):
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)
    mode = "run"
    if args and args[0] in ("--tokens", "--ast"):
        mode = args.pop(0)[2:]
    if args and args[0] in ("-h", "--help"):
        print(USAGE)
        return 0
    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        return 2

    configure_logging("WARNING")
    try:
        source = read_source(args[0] if args else None)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if mode == "tokens":
        for tok in tokenize(source):
            print(json.dumps(tok.model_dump()))
        return 0

    try:
        if mode == "ast":
            print(json.dumps(dump_tree(parse(source)), indent=2))
        else:
            print(run(source))
    except CompileError as e:
        print(f"{e.phase} error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
