from __future__ import annotations

import re
from pathlib import Path

from loguru import logger

from codeassist.core.config import REPO_ROOT

FALLBACK_SYSTEM_PROMPT = (
    "You are CodeAssist AI, a coding assistant. Help with writing, debugging, explaining "
    "and optimizing code across languages. Give complete, working examples with brief "
    "explanations, and say so when you are unsure."
)

_FRONTMATTER = re.compile(r'\A\s*---[^\n]*\n.*?^---[ \t]*$\n?', re.DOTALL | re.MULTILINE)


def strip_frontmatter(raw: str) -> str:
    return _FRONTMATTER.sub('', raw, count=1).strip()


def resolve_prompt_path(configured: str) -> Path:
    path = Path(configured).expanduser()
    return path if path.is_absolute() else REPO_ROOT / path


def load_system_prompt(configured: str) -> str:
    path = resolve_prompt_path(configured)
    try:
        content = strip_frontmatter(path.read_text(encoding='utf-8', errors='replace'))
    except OSError:
        logger.warning('ai.prompt.missing', path=str(path))
        return FALLBACK_SYSTEM_PROMPT
    return content or FALLBACK_SYSTEM_PROMPT
