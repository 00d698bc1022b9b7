"""
Reflection prompt catalog.

Reflections store the ``prompt_id`` of one of these prompts along with the
question text shown at the time.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ReflectionPrompt:
    """A fixed reflection question and its follow-up responses."""
    id: str
    question: str
    responses: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"id": self.id, "question": self.question, "responses": dict(self.responses)}


REFLECTION_PROMPTS: List[ReflectionPrompt] = [
    ReflectionPrompt(
        id="self-promise",
        question="Did you keep a promise to yourself today?",
        responses={
            "yes": "That's a powerful act of respect for yourself. How does it feel to notice that?",
            "no": "That happens. What got in the way, and how could you support yourself better tomorrow?",
        },
    ),
    ReflectionPrompt(
        id="resistance",
        question="What resistance did you notice in yourself today?",
        responses={
            "followUp": "Resistance often points to growth edges. What might this resistance be protecting or teaching you?",
        },
    ),
    ReflectionPrompt(
        id="authenticity",
        question="How did you honor your authentic self today?",
        responses={
            "followUp": "Authenticity is a practice. Each genuine moment builds your inner compass.",
        },
    ),
    ReflectionPrompt(
        id="release",
        question="What are you ready to release or forgive?",
        responses={
            "followUp": "Release creates space for new growth. What wants to emerge in this cleared space?",
        },
    ),
]

_PROMPTS_BY_ID = {prompt.id: prompt for prompt in REFLECTION_PROMPTS}


def get_prompt(prompt_id: str) -> Optional[ReflectionPrompt]:
    return _PROMPTS_BY_ID.get(prompt_id)


def follow_up_text(prompt_id: str, answer: Optional[str] = None) -> Optional[str]:
    """
    Follow-up line for a prompt.

    Yes/no prompts answer with the text for the chosen button; open prompts
    with their single follow-up. Unknown prompts have none.
    """
    prompt = get_prompt(prompt_id)
    if prompt is None:
        return None
    if answer and answer in prompt.responses:
        return prompt.responses[answer]
    return prompt.responses.get("followUp")
