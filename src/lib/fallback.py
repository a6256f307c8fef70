"""
Remote resolution of fallback items

Constructs the deterministic converter could not translate are left in the
output as placeholder comments. When remote resolution is enabled, all
fallback items of one component are sent to the model in a single request;
the reply is a JSON array of JSX replacements, one per item, which are then
substituted for the placeholders.

Failures never discard the deterministic output: a missing API key, an API
error or an unparsable reply all leave the placeholders in place.
"""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional

import anthropic

from ..config.settings import appsettings
from ..models.conversion import FallbackItem
from .log import LOG, WARN


JSON_ARRAY_RE = re.compile(r'\[.*\]', re.DOTALL)


def prompt_build(fallbacks: List[FallbackItem], component_name: str) -> str:
    """
    Build the batched prompt for all fallback items of one component.

    Args:
        fallbacks: Items in output order
        component_name: Name of the component being converted

    Returns:
        Prompt text; items are numbered [1], [2], ... in order
    """
    items = '\n\n'.join(
        f'[{index}] Reason: {item.reason}\n    Source: {item.source}'
        for index, item in enumerate(fallbacks, start=1)
    )

    return (
        'You are converting Vue Single File Components to Vue TSX (NOT React).\n'
        'Keep Vue\'s reactive model (ref, computed, etc.). '
        f'The component is "{component_name}".\n\n'
        'Convert each of these Vue template snippets to valid Vue JSX syntax.\n'
        'Return ONLY a JSON array where each element is the JSX string replacement '
        'for the corresponding item.\n\n'
        f'{items}\n\n'
        'Respond with a JSON array of strings, one per item. '
        'Example: ["<input ref={inputRef} />", "<span>{bar.value}</span>"]'
    )


def response_parse(text: str, fallbacks: List[FallbackItem]) -> Dict[str, str]:
    """
    Read replacements from the model reply.

    The first JSON array found in the text is used. Entries are matched to
    items by position; blank or non-string entries are skipped.

    Returns:
        Mapping of original snippet -> replacement (empty when unparsable)

    Example:
        >>> response_parse('Sure: ["<a />"]', [FallbackItem("v-x", "r")])
        {'v-x': '<a />'}
    """
    match = JSON_ARRAY_RE.search(text)
    if not match:
        return {}

    try:
        replacements = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        LOG(f"Fallback reply is not valid JSON: {exc}", level=2)
        return {}

    if not isinstance(replacements, list):
        return {}

    result: Dict[str, str] = {}
    for item, replacement in zip(fallbacks, replacements):
        if isinstance(replacement, str) and replacement.strip():
            result[item.source] = replacement
    return result


def replacements_apply(tsx: str, fallbacks: List[FallbackItem], replacements: Dict[str, str]) -> str:
    """
    Substitute resolved replacements for their placeholder comments.

    Each placeholder is replaced once, in order, so repeated snippets map
    to their own placeholders. Placeholder lines may carry the indentation
    of the render function.
    """
    for item in fallbacks:
        replacement = replacements.get(item.source)
        if replacement is None:
            continue
        pattern = appsettings.placeHolder_pattern(item.reason, item.source)
        tsx = pattern.sub(lambda _: replacement, tsx, count=1)
    return tsx


async def fallbacks_resolve(
    fallbacks: List[FallbackItem],
    component_name: str,
    model: Optional[str] = None,
    client: Optional[Any] = None,
) -> Dict[str, str]:
    """
    Resolve fallback items with one request to the model.

    Args:
        fallbacks: Items to resolve
        component_name: Name of the component being converted
        model: Model name (defaults to settings)
        client: Anthropic client to use (one is created from the configured
                API key when omitted)

    Returns:
        Mapping of original snippet -> replacement; empty when there is
        nothing to resolve, no API key, or the request fails
    """
    if not fallbacks:
        return {}

    if client is None:
        api_key = appsettings.apiKey_get()
        if not api_key:
            WARN("ANTHROPIC_API_KEY not set, skipping fallback resolution")
            return {}
        client = anthropic.Anthropic(api_key=api_key)

    model = model or appsettings.llm_model
    LOG(f"Resolving {len(fallbacks)} fallback item(s) for {component_name} with {model}", level=1)

    try:
        # Run synchronous API call in thread pool
        response = await asyncio.to_thread(
            client.messages.create,
            model=model,
            max_tokens=appsettings.llm_max_tokens,
            messages=[{'role': 'user', 'content': prompt_build(fallbacks, component_name)}],
        )
    except anthropic.APIError as exc:
        WARN(f"Fallback resolution failed: {exc}")
        return {}

    text = ''.join(block.text for block in response.content if getattr(block, 'type', '') == 'text')
    replacements = response_parse(text, fallbacks)
    LOG(f"Resolved {len(replacements)} of {len(fallbacks)} fallback item(s)", level=2)
    return replacements
