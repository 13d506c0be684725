from rich.pretty import pprint

from argcell import *

parser = ArgumentParser(shell=True, fancy=True)
parser.declare("-n", "--name", optional=False, descr="who to greet")
parser.declare("-v", "--verbose", nargs=0, descr="print the parsed cells")
parser.declare("--inputs", nargs="*", descr="files to read before greeting")
parser.declare_final("output", optional=True, descr="where the greeting goes")


if __name__ == '__main__':
    parser.parse()
    if parser.retrieve("verbose", bool):
        pprint(parser)
    print("hello, %s" % parser.retrieve("name"))
