"""
Import line grammar.

This module contains the Lark grammar for a single Nushell `use` line.
Only the module reference is interpreted; whatever follows it (a `*`
wildcard, a `[name list]`, a trailing comment) is kept as raw qualifier
tokens so the line can be rewritten in place.
"""

import_grammar = r"""
    import_line: _USE module_ref qualifier*

    module_ref: PATH | STRING
    qualifier: QUALIFIER

    _USE: /use(?=\s)/
    STRING: /"[^"\n]*"/ | /'[^'\n]*'/
    PATH: /[^\s"'#][^\s]*/
    QUALIFIER: /\S+/

    %import common.WS_INLINE
    %ignore WS_INLINE
"""
