from pathlib import Path

from ingestion.ai.exceptions import AIClientError


def load_prompt_template(directory: Path, name: str) -> str:
    """Load a prompt template bundled next to the code that uses it.

    Args:
        directory: Directory holding the prompt files.
        name: File name of the template, e.g. ``acta_prompt.txt``.

    Returns:
        The raw template string with ``str.format`` placeholders.

    Raises:
        AIClientError: if the file cannot be read.
    """
    path = directory / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AIClientError(f"Failed to load prompt template: {exc}") from exc
