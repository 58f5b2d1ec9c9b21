"""Claude CLI wrapper for word lookups."""

import json
import subprocess
from pathlib import Path

from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

import config
from wordbook.errors import WordbookError
from wordbook.models import GeneratedWordData


class LookupFailure(WordbookError):
    """Raised when a word lookup fails. The user may retry."""

    pass


class LookupTimeoutError(LookupFailure):
    """Raised when the lookup times out."""

    pass


class LookupParseError(LookupFailure):
    """Raised when the lookup response cannot be parsed."""

    pass


def load_prompt_template(path: Path = config.LOOKUP_PROMPT) -> str:
    """Load the prompt template from file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@retry(
    stop=stop_after_attempt(config.LOOKUP_MAX_RETRIES),
    wait=wait_exponential(max=10),
    retry=retry_if_exception_type(LookupTimeoutError),
    reraise=True,
)
def run_claude(prompt: str, timeout: int = config.LOOKUP_TIMEOUT) -> str:
    """Send a prompt to the Claude CLI and return its plain-text reply."""
    command = ["claude", "-p", prompt, "--model", config.CLAUDE_MODEL]
    try:
        result = subprocess.run(command, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired:
        raise LookupTimeoutError(f"Word lookup timed out after {timeout}s")
    except FileNotFoundError:
        raise LookupFailure("Claude CLI not found. Please install the claude CLI.")

    if result.returncode != 0:
        raise LookupFailure(f"Claude CLI error: {result.stderr.strip()}")
    return result.stdout


def extract_word_json(reply: str) -> dict:
    """Pull the outermost JSON object out of a reply, ignoring any prose or fences around it."""
    start, end = reply.find("{"), reply.rfind("}")
    if start != -1 and end > start:
        try:
            data = json.loads(reply[start:end + 1])
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data
    raise LookupParseError(f"No JSON object in lookup reply: {reply[:200]!r}")


def parse_word_data(data: dict) -> GeneratedWordData:
    """Validate the lookup payload; every field is required."""
    try:
        return GeneratedWordData(**data)
    except ValidationError as e:
        raise LookupParseError(f"Incomplete word data: {e.error_count()} field error(s)") from e


def lookup_word(word: str, theme: str = config.DEFAULT_THEME) -> GeneratedWordData:
    """
    Look up pronunciation, meaning, explanation and an example for a word.

    Args:
        word: English word to look up
        theme: Theme used as context for meaning and example

    Returns:
        GeneratedWordData for the word
    """
    prompt = load_prompt_template().format(word=word, theme=theme)
    return parse_word_data(extract_word_json(run_claude(prompt)))
