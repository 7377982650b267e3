from __future__ import annotations

import html
from typing import List

from app.services.organizer import DrawResult, format_budget

MESSAGE_LIMIT = 4096


def _pack(lines: List[str], limit: int) -> List[str]:
    chunks: List[str] = []
    current: List[str] = []
    size = 0
    for line in lines:
        extra = len(line) + (1 if current else 0)
        if current and size + extra > limit:
            chunks.append("\n".join(current))
            current, size = [], 0
            extra = len(line)
        current.append(line)
        size += extra
    if current:
        chunks.append("\n".join(current))
    return chunks


def format_draw_messages(result: DrawResult, limit: int = MESSAGE_LIMIT) -> List[str]:
    """Render a draw as Telegram messages, each at most ``limit`` characters.

    The header goes first, link lines follow, and the footer closes the last
    message. Lines are never split across messages.
    """
    group = result.group
    lines = [f"🎄 <b>{html.escape(group.name)}</b> 🎄"]
    budget = format_budget(group.budget)
    if budget:
        lines.append(f"Budget: ${budget}")
    lines.append("")
    lines.append("Share these private links. Each one only reveals that person's match:")
    for link in result.links:
        lines.append(f"🎅 {html.escape(link.name)}: {html.escape(link.url)}")
    lines.append("")
    lines.append(f"Group id: <code>{group.record_id}</code>")
    if group.expires_at:
        lines.append(f"Links expire on {group.expires_at.date().isoformat()}.")
    lines.append(f"To draw again, resend the list with a <code>replace: {group.record_id}</code> line.")
    return _pack(lines, limit)
