import logging
from typing import List, Optional

from ...models.dialogue import DialogExchange

logger = logging.getLogger(__name__)

MAX_RESPONSE_LENGTH = 500
MAX_SPEAKER_NAME_LENGTH = 50

def _speaker_prefixes(speaker_name: str) -> List[str]:
    return [
        f"{speaker_name}:",
        f"{speaker_name} :",
        f"{speaker_name.upper()}:",
        f"{speaker_name.lower()}:",
    ]

def clean_response(response: str, speaker_name: str) -> str:
    """Reduce raw model output to one utterance for ``speaker_name``.

    Strips an accidental "Name:" prefix and wrapping quotes, keeps only the
    first paragraph and cuts anything over 500 characters back to a sentence
    end. Never raises; an empty result is returned as-is.
    """
    result = response.strip()

    for prefix in _speaker_prefixes(speaker_name):
        if result.startswith(prefix):
            result = result[len(prefix):].strip()
            break

    if len(result) >= 2 and result.startswith('"') and result.endswith('"'):
        result = result[1:-1].strip()

    paragraph_end = result.find("\n\n")
    if paragraph_end != -1:
        result = result[:paragraph_end].strip()

    if len(result) > MAX_RESPONSE_LENGTH:
        head = result[:MAX_RESPONSE_LENGTH]
        cut = head.rfind(". ")
        if cut == -1:
            cut = head.rfind(".")
        if cut != -1:
            logger.debug(f"Truncating {len(result)}-char response at position {cut + 1}")
            result = result[:cut + 1]

    return result

def _is_speaker_label(label: str, max_length: Optional[int]) -> bool:
    if not label or not label[0].isupper():
        return False
    if not all(char.isalpha() or char.isspace() for char in label):
        return False
    if max_length is not None and len(label.strip()) >= max_length:
        return False
    return True

def parse_dialog_lines(text: str, max_speaker_length: Optional[int] = None) -> List[DialogExchange]:
    """Extract "Speaker: content" lines from free-form text.

    Lines that do not look like dialog are silently dropped.
    """
    exchanges = []
    for line in text.splitlines():
        line = line.strip()
        if not line or ":" not in line:
            continue

        label, content = line.split(":", 1)
        content = content.strip()
        if not _is_speaker_label(label, max_speaker_length) or not content:
            continue

        exchanges.append(DialogExchange(speaker=label.strip(), content=content))

    return exchanges

def parse_script(script: str) -> List[DialogExchange]:
    """Re-parse an edited script, rejecting overly long speaker labels."""
    exchanges = parse_dialog_lines(script, max_speaker_length=MAX_SPEAKER_NAME_LENGTH)
    logger.debug(f"Parsed {len(exchanges)} exchanges from script")
    return exchanges
