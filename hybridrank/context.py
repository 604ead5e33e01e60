"""Prompt context assembly from ranked chunks"""

from typing import List

from .models import ScoredChunk

MAX_CHUNK_CHARS = 2000      # Per-chunk content cap
MIN_CONTEXT_CHARS = 500
MIN_TAIL_CHARS = 200        # Smaller truncated tails are not worth including
SEPARATOR = "\n\n"


def build_context(chunks: List[ScoredChunk], max_chunks: int, max_chars: int) -> str:
    """
    Render ranked chunks as a prompt context block.

    Each chunk becomes:

        [chunkId=<id> fused=<score>]
        <content, trimmed, at most 2000 chars>

    Blocks are joined by blank lines, in the given (ranked) order.

    Args:
        chunks: Ranked chunks (output of hybrid_search)
        max_chunks: Maximum number of blocks (floored at 1)
        max_chars: Character budget (floored at 500); a block that would
            overflow is cut to the remaining budget if more than 200 chars
            remain, and assembly stops there

    Returns:
        Context string ("" when there is nothing to include)
    """
    if not chunks:
        return ""

    max_chunks = max(1, max_chunks)
    max_chars = max(MIN_CONTEXT_CHARS, max_chars)

    parts: List[str] = []
    used = 0

    for chunk in chunks:
        if len(parts) >= max_chunks:
            break

        content = (chunk.content or "").strip()
        if not content:
            continue

        block = f"[chunkId={chunk.id} fused={chunk.fused_score:.4f}]\n{content[:MAX_CHUNK_CHARS]}"

        if used + len(block) + len(SEPARATOR) > max_chars:
            remaining = max_chars - used - len(SEPARATOR)
            if remaining > MIN_TAIL_CHARS:
                parts.append(block[:remaining])
            break

        parts.append(block)
        used += len(block) + len(SEPARATOR)

    return SEPARATOR.join(parts)
