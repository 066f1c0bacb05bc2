import copy
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


def _short_repr(value: Any, limit: int = 80) -> str:
    text = str(value)
    return text[:limit] + ('...' if len(text) > limit else '')


class DocumentMerger:
    @staticmethod
    def merge(
        current: Dict[str, Any],
        incoming: Dict[str, Any],
        context_description: str = "DocumentMerge",
    ) -> Dict[str, Any]:
        """
        Merges an 'incoming' JSON object over a 'current' one.
        - Keys only in 'current' are kept untouched.
        - Objects present on both sides are merged recursively.
        - Any other value in 'incoming' (scalars, arrays) replaces 'current' wholesale.
        Neither argument is modified; the result shares no containers with them.
        """
        if not isinstance(current, dict) or not isinstance(incoming, dict):
            raise TypeError(
                f"[{context_description}] Both sides of a merge must be objects "
                f"(got {type(current).__name__} and {type(incoming).__name__})"
            )

        merged = copy.deepcopy(current)
        logger.debug(
            "[%s] Starting merge. Current keys: %s, Incoming keys: %s",
            context_description, list(current.keys()), list(incoming.keys()),
        )

        for key, incoming_value in incoming.items():
            if key not in merged:
                merged[key] = copy.deepcopy(incoming_value)
                logger.debug("[%s] Added new key '%s': %s", context_description, key, _short_repr(incoming_value))
            elif isinstance(merged[key], dict) and isinstance(incoming_value, dict):
                merged[key] = DocumentMerger.merge(
                    merged[key],
                    incoming_value,
                    context_description=f"{context_description} -> {key}",
                )
            else:
                # 1 == True in Python; compare types too so JSON true never stays 1.
                if type(merged[key]) is not type(incoming_value) or merged[key] != incoming_value:
                    logger.debug(
                        "[%s] Overridden key '%s'. Old: %s, New: %s",
                        context_description, key, _short_repr(merged[key]), _short_repr(incoming_value),
                    )
                merged[key] = copy.deepcopy(incoming_value)

        return merged


def merge_documents(base: Dict[str, Any], *overrides: Dict[str, Any], context: str = "DocumentChain") -> Dict[str, Any]:
    """Merges several override objects into 'base', left to right."""
    result = base
    for i, override in enumerate(overrides):
        result = DocumentMerger.merge(result, override, context_description=f"{context}_Step{i + 1}")
    return result
