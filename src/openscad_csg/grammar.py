#######################################################################
# Arpeggio PEG Grammar for recovering literals from raw OpenSCAD text
#######################################################################

from arpeggio import ParserPython, ZeroOrMore, EOF, RegExMatch as _


# --- The parsers ---

def getNumberScanner(debug=False):
    """Create a parser that tokenizes a raw fragment into numbers and stray characters.

    Args:
        debug: If True, enable debug output (default: False)

    Returns:
        ParserPython instance whose parse tree contains TOK_NUMBER terminals
    """
    return ParserPython(number_scan, reduce_tree=False, memoization=False, debug=debug)


def getVectorScanner(debug=False):
    """Create a parser that tokenizes a raw fragment into 3-vectors and stray characters.

    Args:
        debug: If True, enable debug output (default: False)

    Returns:
        ParserPython instance whose parse tree contains vector_literal nodes
    """
    return ParserPython(vector_scan, reduce_tree=False, memoization=False, debug=debug)


# --- Lexical rules ---

def TOK_NUMBER():
    return _(r'\d+(\.\d+)?', str_repr='number')

def TOK_COMPONENT():
    return _(r'[\d.]+', str_repr='component')

def TOK_STRAY():
    return _(r'(?s).', str_repr='stray')

def TOK_COMMA():
    return ','


# --- Grammar rules ---

def vector_literal():
    return ( '[', TOK_COMPONENT, TOK_COMMA, TOK_COMPONENT, TOK_COMMA, TOK_COMPONENT, ']' )

def number_scan():
    return ( ZeroOrMore([ TOK_NUMBER, TOK_STRAY ]), EOF )

def vector_scan():
    return ( ZeroOrMore([ vector_literal, TOK_STRAY ]), EOF )


# vim: set ts=4 sw=4 expandtab:
