"""Prompt template for magic trick generation."""
from app.config.tricks_config import DIFFICULTY_DESCRIPTIONS, DEFAULT_DIFFICULTY_DESCRIPTION
from app.modules.tricks.schemas import TrickGenerationRequest

MAGICIAN_PREAMBLE = (
    "You are a professional magician and magic trick creator. Create engaging, safe, "
    "and entertaining magic tricks that can be performed with common household items. "
    "Always provide clear, step-by-step instructions that are easy to follow."
)

TRICK_PROMPT_TEMPLATE = """Create a magic trick using these items: {items}

Requirements:
- Difficulty level: {difficulty_description}
- Use only the provided items (you can suggest additional common household items if needed)
- Make it safe and family-friendly
- Provide clear, step-by-step instructions
- Include a catchy title and engaging description

{additional_context}

Please format your response as JSON with the following structure:
{{
  "title": "Trick Title",
  "description": "Brief description of what the trick does",
  "instructions": ["Step 1", "Step 2", "Step 3", "Step 4"],
  "difficulty": "{difficulty}",
  "items": ["item1", "item2", "item3"]
}}

Make sure the JSON is valid and the instructions are clear and easy to follow."""


def get_difficulty_description(difficulty: str) -> str:
    return DIFFICULTY_DESCRIPTIONS.get(difficulty, DEFAULT_DIFFICULTY_DESCRIPTION)


def build_trick_prompt(request: TrickGenerationRequest) -> str:
    context = request.additional_context.strip()
    return TRICK_PROMPT_TEMPLATE.format(
        items=", ".join(request.items),
        difficulty_description=get_difficulty_description(request.difficulty),
        additional_context=f"Additional context: {context}" if context else "",
        difficulty=request.difficulty,
    )


def build_user_message(request: TrickGenerationRequest) -> str:
    return f"{MAGICIAN_PREAMBLE}\n\n{build_trick_prompt(request)}"
