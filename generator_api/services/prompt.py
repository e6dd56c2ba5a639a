from functools import lru_cache
from pathlib import Path
from typing import Tuple

from generator_api.schemas.generate import OutputMode

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"


@lru_cache(maxsize=None)
def load_template(name: str) -> str:
    return (PROMPTS_DIR / name).read_text(encoding="utf-8").strip()


def build_prompt(topic: str, mode: OutputMode) -> Tuple[str, str]:
    """
    Returns (system_instruction, user_prompt).
    html: the topic is expanded into the article template (h1 title, opening /
    analysis / closing, <p> paragraphs, no code fences).
    plain_text: the topic is sent as-is under a generic assistant persona.
    """
    if not topic or not topic.strip():
        raise ValueError("topic must not be empty")
    if mode == OutputMode.HTML:
        return load_template("article_system.txt"), load_template("article_user.txt").format(topic=topic.strip())
    return load_template("plain_system.txt"), topic
