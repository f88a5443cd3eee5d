######################################################################
#
# lsystems.py
#
######################################################################
#
# Based on documentation in https://en.wikipedia.org/wiki/L-system and
# http://paulbourke.net/fractals/lsys/
#
# An L-System is a set of rewriting rules (symbol -> replacement) plus
# a table of operations (symbol -> drawing commands). The start string
# is rewritten max_depth times, then every symbol of the result that
# has an operation is executed against a turtle. Operations are written
# in the little language parsed by lsys_commands:
#
#    push      - save x, y and angle on the stack
#    pop       - restore x, y and angle from the stack
#    rotate N  - turn by N degrees (positive is counter-clockwise)
#    move N    - move N units without drawing
#    draw C W L - draw a line of color C (#rrggbbaa), width W, length L

import sys
import json
import argparse
from datetime import datetime
from collections import namedtuple
import numpy as np

from lsys_commands import (LSystemError, StackUnderflowError,
                           parse_operation)
from pen import Pen

LSystemDef = namedtuple('LSystemDef', 'start, rules, operations')

BLACK = '#000000ff'
GREEN = '#2e8b22ff'
BROWN = '#8b5a2bff'

def _turns(angle):
    return {'+': 'rotate {}'.format(angle), '-': 'rotate -{}'.format(angle)}

def _branches():
    return {'[': 'push', ']': 'pop'}

# dictionary mapping names to a few L-Systems found on the pages above
KNOWN_LSYSTEMS = {

    'algae': LSystemDef(
        start = 'A',
        rules = dict(A='AB', B='A'),
        operations = dict(A='draw {} 1 5 rotate 30'.format(BLACK),
                          B='rotate -60')
    ),

    'cantor': LSystemDef(
        start = 'A',
        rules = dict(A='ABA', B='BBB'),
        operations = dict(A='draw {} 2 1'.format(BLACK),
                          B='move 1')
    ),

    'koch_curve': LSystemDef(
        start = 'F',
        rules = dict(F='F+F-F-F+F'),
        operations = dict(F='draw {} 1 1'.format(BLACK), **_turns(90))
    ),

    'sierpinski_arrowhead': LSystemDef(
        start = 'A',
        rules = dict(A='B-A-B', B='A+B+A'),
        operations = dict(A='draw {} 1 1'.format(BLACK),
                          B='draw {} 1 1'.format(BLACK), **_turns(60))
    ),

    'dragon_curve': LSystemDef(
        start = 'FX',
        rules = dict(X='X+YF+', Y='-FX-Y'),
        operations = dict(F='draw {} 1 1'.format(BLACK), **_turns(90))
    ),

    'barnsley_fern': LSystemDef(
        start = 'X',
        rules = dict(X='F+[[X]-X]-F[-FX]+X', F='FF'),
        operations = dict(F='draw {} 1 1'.format(GREEN),
                          **_turns(25), **_branches())
    ),

    'sticks': LSystemDef(
        start = 'X',
        rules = dict(X='F[+X]F[-X]+X', F='FF'),
        operations = dict(F='draw {} 1 1'.format(BROWN),
                          **_turns(20), **_branches())
    ),

    'hilbert': LSystemDef(
        start = 'L',
        rules = dict(L='+RF-LFL-FR+', R='-LF+RFR+FL-'),
        operations = dict(F='draw {} 1 1'.format(BLACK), **_turns(90))
    ),

}

######################################################################
# make a big ol' string from a start string using repeated string
# replacement. Symbols with no rule are copied unchanged.
#
# If max_length is given, building stops as soon as the string grows
# past it and the (incomplete) string built so far is returned.

def lsys_build_string(rules, start, max_depth, max_length=None):

    if max_depth < 0:
        raise ValueError('max_depth must be >= 0, got {}'.format(max_depth))

    lstring = start

    for i in range(max_depth):

        output = ''

        for symbol in lstring:

            output += rules.get(symbol, symbol)

            # too long, stop here
            if max_length is not None and len(output) > max_length:
                return output

        lstring = output

    return lstring

######################################################################
# rewriting rules and operations bound to a turtle
#
# The pen and the stack of saved (x, y, angle) triples live as long as
# the LSystem does, so calling run() twice keeps drawing where the
# first run stopped.

class LSystem:

    def __init__(self, rules, operations, pen=None):

        self.rules = dict(rules)
        self.operations = dict(operations)

        self.pen = pen if pen is not None else Pen()

        # stack of x, y, angle triples
        self.stack = []

    ##################################################
    # pen state & stack

    def push(self):
        pen = self.pen
        self.stack.append((pen.x, pen.y, pen.angle_deg))

    def pop(self):
        if not self.stack:
            raise StackUnderflowError('pop with empty stack')
        self.pen.x, self.pen.y, self.pen.angle_deg = self.stack.pop()

    def rotate(self, angle_deg):
        self.pen.rotate(angle_deg)

    def move(self, distance):
        self.pen.pen_up()
        self.pen.move(distance)
        self.pen.pen_down()

    def draw(self, color, width, length):
        self.pen.set_color(color)
        self.pen.set_width(width)
        self.pen.move(length)

    # command ops are named after the methods above
    def execute(self, command):
        getattr(self, command.op)(*command.args)

    ##################################################
    # interpreter

    def interpret(self, lstring):
        """Execute the operations for every symbol of an expanded string.

        Symbols without an operation are skipped. Operations are parsed
        when their symbol is reached, so a malformed definition only
        raises once it is actually used.
        """

        for symbol in lstring:

            definition = self.operations.get(symbol)

            if definition is None:
                continue

            for command in parse_operation(definition, symbol):
                self.execute(command)

        return len(lstring)

    def run(self, start, max_depth):
        lstring = lsys_build_string(self.rules, start, max_depth)
        return self.interpret(lstring)

    def save(self, filename):
        self.pen.save(filename)

######################################################################
# load an L-System definition from a JSON file of the form
#
#  { "start": "F", "rules": {"F": "F+F"}, "operations": {"F": "draw ..."} }

def _symbol_table(obj, key):

    table = obj.get(key, {})

    if not isinstance(table, dict):
        raise LSystemError('{} must be an object'.format(key))

    for symbol, value in table.items():
        if len(symbol) != 1:
            raise LSystemError('{} keys must be single characters, got {!r}'.format(
                key, symbol))
        if not isinstance(value, str):
            raise LSystemError('{}[{!r}] must be a string'.format(key, symbol))

    return table

def load_lsystem_def(filename):

    with open(filename, encoding='utf-8') as istr:
        try:
            obj = json.load(istr)
        except json.JSONDecodeError as err:
            raise LSystemError('invalid JSON in {}: {}'.format(filename, err)) from err

    if not isinstance(obj, dict):
        raise LSystemError('{} must contain an object'.format(filename))

    start = obj.get('start')

    if not isinstance(start, str) or not start:
        raise LSystemError('start must be a non-empty string')

    return LSystemDef(start=start,
                      rules=_symbol_table(obj, 'rules'),
                      operations=_symbol_table(obj, 'operations'))

######################################################################
# parse command-line options for this program

def parse_options(argv=None):

    parser = argparse.ArgumentParser(
        description='simple Python L-system renderer')

    parser.add_argument('lname', metavar='LSYSTEM',
                        help='name of a known L-system ({}) or a .json '
                        'file defining one'.format(', '.join(KNOWN_LSYSTEMS)),
                        type=str)

    parser.add_argument('max_depth', metavar='MAXDEPTH',
                        help='maximum depth to evaluate', type=int)

    parser.add_argument('-o', dest='output', metavar='IMAGE',
                        default='lsystem.png',
                        help='PNG file to write (default %(default)s)')

    parser.add_argument('-x', dest='max_segments', metavar='MAXSEGMENTS',
                        type=int, default=100000,
                        help='maximum number of segments to plot')

    parser.add_argument('-l', dest='max_length', metavar='MAXLENGTH',
                        type=int, default=10000000,
                        help='maximum length of the expanded string')

    parser.add_argument('-t', dest='text_only', action='store_true',
                        help='use text output instead of PNG')

    opts = parser.parse_args(argv)

    if opts.max_depth < 0:
        parser.error('MAXDEPTH must be >= 0')

    if not opts.lname.endswith('.json') and opts.lname not in KNOWN_LSYSTEMS:
        parser.error('unknown L-system {!r}'.format(opts.lname))

    return opts

######################################################################
# main function

def main(argv=None):

    opts = parse_options(argv)

    try:

        if opts.lname.endswith('.json'):
            ldef = load_lsystem_def(opts.lname)
        else:
            ldef = KNOWN_LSYSTEMS[opts.lname]

        lsys = LSystem(ldef.rules, ldef.operations)

        # time string building and interpretation
        start = datetime.now()

        max_length = opts.max_length if opts.max_length >= 0 else None

        lstring = lsys_build_string(lsys.rules, ldef.start, opts.max_depth,
                                    max_length)

        if max_length is not None and len(lstring) > max_length:
            print('...maximum length of {} exceeded, skipping!'.format(
                max_length))
            return 1

        lsys.interpret(lstring)

        segments = lsys.pen.segments()

        # print elapsed time
        elapsed = (datetime.now() - start).total_seconds()

        print('generated {} segments from {} symbols in {:.6f} s'.format(
            len(segments), len(lstring), elapsed))

        if opts.max_segments >= 0 and len(segments) > opts.max_segments:
            print('...maximum of {} segments exceeded, skipping output!'.format(
                opts.max_segments))
            return 1

        if opts.text_only:
            np.savetxt('segments.txt', segments.reshape(-1, 4))
            print('wrote segments.txt')
        else:
            lsys.save(opts.output)
            print('wrote', opts.output)

    except (LSystemError, OSError) as err:
        print('error:', err, file=sys.stderr)
        return 2

    return 0

if __name__ == '__main__':
    sys.exit(main())
