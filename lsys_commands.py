######################################################################
#
# lsys_commands.py
#
# Parser for the little operation language attached to each symbol of
# an L-System, e.g.
#
#   'draw #000000ff 1 5 rotate 45'
#
# A definition is a list of whitespace-separated tokens: an opcode
# followed by a fixed number of operands.
#
######################################################################

from collections import namedtuple

Command = namedtuple('Command', 'op, args')

# number of operand tokens each opcode consumes
OPCODE_ARITY = {
    'push': 0,
    'pop': 0,
    'rotate': 1,
    'move': 1,
    'draw': 3,
}

HEX_DIGITS = '0123456789abcdefABCDEF'

######################################################################
# errors

class LSystemError(ValueError):
    pass

class CommandError(LSystemError):

    def __init__(self, msg, token=None, symbol=None):
        if symbol is not None:
            msg = 'symbol {!r}: {}'.format(symbol, msg)
        super().__init__(msg)
        self.token = token
        self.symbol = symbol

class StackUnderflowError(LSystemError):
    pass

class SaveError(OSError):
    pass

######################################################################
# operand tokens

def parse_number(token):

    try:
        return float(token)
    except ValueError:
        raise CommandError('malformed number: {!r}'.format(token),
                           token=token) from None

# '#rrggbbaa' -> (r, g, b, a), each 0-255
def parse_color(token):

    if (len(token) != 9 or token[0] != '#' or
            any(c not in HEX_DIGITS for c in token[1:])):
        raise CommandError('malformed color: {!r} (expected #rrggbbaa)'.format(token),
                           token=token)

    return tuple(int(token[i:i+2], 16) for i in range(1, 9, 2))

######################################################################
# parse a single command starting at tokens[index], returning the
# command along with the number of tokens consumed

def parse_command(tokens, index=0):

    op = tokens[index]

    if op not in OPCODE_ARITY:
        raise CommandError('unknown operation: {!r}'.format(op), token=op)

    arity = OPCODE_ARITY[op]
    operands = tokens[index+1:index+1+arity]

    if len(operands) != arity:
        raise CommandError('{} takes {} operand(s), got {}'.format(
            op, arity, len(operands)), token=op)

    if op == 'draw':
        color, width, length = operands
        args = (parse_color(color), parse_number(width), parse_number(length))
    else:
        args = tuple(parse_number(t) for t in operands)

    return Command(op, args), 1 + arity

######################################################################
# parse a whole operation definition into a list of commands

def parse_operation(definition, symbol=None):
    """Parse every command in an operation-definition string.

    Raises CommandError naming the offending token (and the symbol, if
    given) on the first malformed command.
    """

    tokens = definition.split()
    commands = []
    index = 0

    while index < len(tokens):
        try:
            cmd, consumed = parse_command(tokens, index)
        except CommandError as err:
            if symbol is None:
                raise
            raise CommandError(str(err), token=err.token,
                               symbol=symbol) from None
        commands.append(cmd)
        index += consumed

    return commands
