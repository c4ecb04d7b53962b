from pathlib import Path

from qash.analysis.exceptions import PromptTemplateError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"

FINANCIAL_TEMPLATE = "financial_analysis.txt"
GENERAL_TEMPLATE = "general_analysis.txt"
CHAT_TEMPLATE = "chat.txt"
METRICS_TEMPLATE = "metrics_synthesis.txt"


def load_prompt_template(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template bundled with the package.

    Args:
        name: Template file name, e.g. ``financial_analysis.txt``.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Returns:
        The raw template string with ``str.format`` placeholders.

    Raises:
        PromptTemplateError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptTemplateError(f"Failed to load prompt template {name}: {exc}") from exc


def render_prompt(template: str, **values: object) -> str:
    """Fill a template's placeholders.

    Raises:
        PromptTemplateError: if a placeholder has no value.
    """
    try:
        return template.format(**values)
    except (KeyError, IndexError, ValueError) as exc:
        raise PromptTemplateError(f"Prompt template is missing a value: {exc}") from exc
