import re

# Replacement for a numeric disambiguation suffix (e.g. "foo.constprop.3").
SUFFIX_PLACEHOLDER = "######"

# Canonical decimal only: "0" or no leading zero, no sign, no whitespace.
_re_CANONICAL_NUMBER = re.compile(r'(?:0|[1-9][0-9]*)')


def normalize_symbol_name(raw_name: str) -> str:
    """Collapse a trailing ".<number>" segment into ".######".

    Compilers number local statics and clones per translation unit, so the
    same logical symbol shows up as `init.2` in one build and `init.7` in the
    next. Only the last segment is considered, and only when it is written
    exactly the way the number would print ("03" and "+3" are left alone).
    """
    head, dot, tail = raw_name.rpartition('.')
    if not dot:
        return raw_name
    if _re_CANONICAL_NUMBER.fullmatch(tail) is None:
        return raw_name
    return f"{head}.{SUFFIX_PLACEHOLDER}"
