"""Styling for questionary prompts used by the wizard."""

from questionary import Style

PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#ffd75f bold"),  # Amber question mark
        ("question", "bold"),
        ("answer", "fg:#5fd7ff bold"),  # Cyan submitted answer
        ("pointer", "fg:#ffd75f bold"),
        ("highlighted", "fg:#1c1c1c bg:#ffd75f bold"),
        ("instruction", "fg:#6c6c6c italic"),
        ("text", ""),
        ("disabled", "fg:#585858 italic"),
    ]
)

POINTER = "› "
QMARK = "? "
