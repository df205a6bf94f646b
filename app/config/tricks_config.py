"""
Magic trick configuration.
Difficulty levels, the household items offered for generation, and the sample
tricks shown when the trick list cannot be loaded (also used by the seed script).
"""

DIFFICULTIES = ["Easy", "Medium", "Hard"]

DIFFICULTY_DESCRIPTIONS = {
    "Easy": "Beginner-friendly, simple to learn and perform, requires minimal practice",
    "Medium": "Intermediate level, requires some practice and skill, more impressive effects",
    "Hard": "Advanced level, requires significant practice and skill, very impressive effects",
}
DEFAULT_DIFFICULTY_DESCRIPTION = "Beginner-friendly, simple to learn and perform"

COMMON_ITEMS = [
    "Playing cards",
    "Coins",
    "Rubber bands",
    "Paper clips",
    "String or rope",
    "Cups",
    "Napkins or tissues",
    "Pencils or pens",
    "Keys",
    "Bottles",
    "Matches or toothpicks",
    "Scissors",
    "Tape",
    "Magnets",
    "Mirrors",
]

DEFAULT_INSTRUCTIONS = ["Practice and amaze your audience!"]

CREATED_BY_ME_FILTER = "Created by me"

SAMPLE_MAGIC_TRICKS = [
    {
        "id": "1",
        "title": "The Vanishing Coin",
        "description": "Make a coin disappear right before your audience's eyes!",
        "instructions": [
            "Hold the coin between your thumb and index finger",
            "Pretend to place it in your other hand",
            "Actually keep it hidden in your original hand",
            "Open your \"empty\" hand to show the coin has vanished",
        ],
        "difficulty": "Easy",
        "overall_rating": 4.5,
    },
    {
        "id": "2",
        "title": "Mind Reading Numbers",
        "description": "Guess any number your audience is thinking of!",
        "instructions": [
            "Ask someone to think of a number between 1-10",
            "Have them multiply by 2",
            "Add 8 to the result",
            "Divide by 2",
            "Subtract their original number",
            "The answer will always be 4!",
        ],
        "difficulty": "Easy",
        "overall_rating": 4.2,
    },
    {
        "id": "3",
        "title": "The Floating Card",
        "description": "Make a playing card float in mid-air!",
        "instructions": [
            "Hold a card between your thumb and middle finger",
            "Use your index finger to gently push the card up",
            "Practice the motion to make it look like the card is floating",
            "Add a slight wrist movement for extra effect",
        ],
        "difficulty": "Medium",
        "overall_rating": 4.0,
    },
]
SAMPLE_TRICK_OWNER = "sample-user"
