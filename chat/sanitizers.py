# chat/sanitizers.py
"""
Chat bodies are plain text: every tag is stripped before storage.
"""
import re
from typing import Optional

import bleach

MAX_MESSAGE_LENGTH = 2000

# Control characters except newlines and tabs
_CONTROL_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')


def sanitize_message(text: Optional[str], max_length: int = MAX_MESSAGE_LENGTH) -> str:
    if text is None:
        return ""

    text = _CONTROL_CHARS.sub('', text.strip())
    clean = bleach.clean(text, tags=[], attributes={}, strip=True).strip()

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean
