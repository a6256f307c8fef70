"""
Identifier classification for <script setup> bodies

Decides which names need rewriting when a template expression moves into a
JSX render function:
- refs: bindings holding a Ref, which templates auto-unwrap and JSX does not
  (they need a trailing .value)
- props: declared component inputs that are not shadowed by a local binding
  (they need a props. prefix)

The ref detection is a heuristic. Bindings created by the known ref creators,
by any use[A-Z]... composable call, destructured from toRefs() or a ref
creator, and every defineModel variable count as refs. Oddly named helpers can
produce false positives or negatives.
"""

import re
from typing import Iterable, List, Optional, Set

from .proptypes import propTypes_parse
from .scanner import braces_strip, topLevel_split
from ..models.script import ExtractedMacros, IdentifierSets, ModelMacro


REF_CREATORS: Set[str] = {
    'ref',
    'computed',
    'shallowRef',
    'toRef',
    'customRef',
    'shallowComputed',
}

COMPOSABLE_RE = re.compile(r'^use[A-Z]')


def destructuredNames_get(pattern: str) -> List[str]:
    """
    Return the local names bound by an object destructuring pattern body.

    Example:
        >>> destructuredNames_get(" a, b: alias, c ")
        ['a', 'alias', 'c']
    """
    names = []
    for part in pattern.split(','):
        item = part.strip()
        alias = re.match(r'^\w+\s*:\s*(\w+)', item)
        if alias:
            names.append(alias.group(1))
        elif re.match(r'^\w+$', item):
            names.append(item)
    return names


def refIdentifiers_detect(body: str, models: Iterable[ModelMacro] = ()) -> Set[str]:
    """
    Detect bindings that hold a Ref.

    Args:
        body: Script body with macros removed
        models: defineModel bindings (converted to computed refs later)

    Returns:
        Set of local names needing .value in JSX

    Example:
        >>> sorted(refIdentifiers_detect("const a = ref(0)\\nconst b = useStore()\\nconst c = 1"))
        ['a', 'b']
    """
    refs: Set[str] = set()

    for m in re.finditer(r'(?:const|let|var)\s+(\w+)\s*=\s*(\w+)\s*[<(]', body):
        creator = m.group(2)
        if creator in REF_CREATORS or COMPOSABLE_RE.match(creator):
            refs.add(m.group(1))

    for m in re.finditer(r'(?:const|let|var)\s+\{([^}]+)\}\s*=\s*(\w+)\s*\(', body):
        creator = m.group(2)
        if creator == 'toRefs' or creator in REF_CREATORS:
            refs.update(destructuredNames_get(m.group(1)))

    for model in models:
        refs.add(model.variable_name)

    return refs


def localIdentifiers_detect(body: str) -> Set[str]:
    """
    Detect names declared locally in a script body.

    Finds const/let/var bindings, object destructuring and function
    declarations.

    Returns:
        Set of declared names
    """
    names: Set[str] = set()

    for m in re.finditer(r'(?:const|let|var)\s+(\w+)\s*=', body):
        names.add(m.group(1))

    for m in re.finditer(r'(?:const|let|var)\s+\{([^}]+)\}\s*=', body):
        names.update(destructuredNames_get(m.group(1)))

    for m in re.finditer(r'function\s+(\w+)\s*\(', body):
        names.add(m.group(1))

    return names


def runtimePropNames_get(runtime: str) -> List[str]:
    """
    Read prop names from a runtime defineProps argument.

    Both the array form (['title', 'size']) and the object form
    ({ title: String, size: { type: Number } }) are supported. Only top-level
    keys of the object form count.
    """
    text = runtime.strip()
    if text.startswith('['):
        return re.findall(r'''['"]([\w\-]+)['"]''', text)

    names = []
    for member in topLevel_split(braces_strip(text), ','):
        key = re.match(r'''^['"]?([\w\-]+)['"]?\s*[:(]''', member)
        if key:
            names.append(key.group(1))
        elif re.match(r'^\w+$', member):
            names.append(member)
    return names


def propNames_get(macros: ExtractedMacros) -> List[str]:
    """Declared prop names, from the type literal or the runtime argument"""
    names: List[str] = []
    if macros.props and macros.props.type:
        names = [p.name for p in propTypes_parse(macros.props.type)]
    elif macros.props and macros.props.runtime:
        names = runtimePropNames_get(macros.props.runtime)
    return names


def identifierSets_build(macros: Optional[ExtractedMacros]) -> IdentifierSets:
    """
    Compute the ref and prop identifier sets for one component.

    A declared prop that is also declared locally (e.g. through toRefs
    destructuring) or detected as a ref is not given the props. prefix.

    Args:
        macros: Extracted macros of the <script setup> block, or None when the
                component has no setup block

    Returns:
        IdentifierSets (both empty without a setup block)
    """
    if macros is None:
        return IdentifierSets()

    refs = refIdentifiers_detect(macros.body, macros.models)
    local = localIdentifiers_detect(macros.body)

    props = {
        name for name in propNames_get(macros)
        if name not in local and name not in refs
    }
    return IdentifierSets(refs=refs, props=props)
