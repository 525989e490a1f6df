"""
Game Configuration Constants Module

Game rules and the bundled word bank. All game parameters are centralized
here so the services never hard-code them.
"""

import json
import os
from typing import Dict, List, Final, Optional

WORD_LENGTH: Final[int] = 5
"""
Number of letters in every guess and secret word.
"""

TOTAL_GUESSES: Final[int] = 6
"""
Maximum number of guess attempts allowed per daily game.
"""

DEFAULT_WORD_BANK_PATH: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'word_bank.json'
)


def load_word_bank(path: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Load the word bank JSON file.

    The file holds an object with two arrays: ``valid`` (words that can be
    secret answers and guesses) and ``invalid`` (words that can be guessed
    but are never chosen as the answer).

    Args:
        path: Optional path to an alternative word bank file

    Returns:
        Dict with lowercase ``valid`` and ``invalid`` word lists

    Raises:
        FileNotFoundError: If the word bank file is not found
        ValueError: If the file is malformed or contains bad words
    """
    json_file_path = path or DEFAULT_WORD_BANK_PATH

    try:
        with open(json_file_path, 'r', encoding='utf-8') as f:
            word_bank = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word bank file not found: {json_file_path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in word bank {json_file_path}: {e}")

    if not isinstance(word_bank, dict):
        raise ValueError("Word bank must be an object with 'valid' and 'invalid' arrays")

    result = {}
    for key in ('valid', 'invalid'):
        words = word_bank.get(key, [])
        if not isinstance(words, list):
            raise ValueError(f"Word bank '{key}' entry must be an array")
        result[key] = [word.lower() for word in words]

    validate_word_bank(result)
    return result


def validate_word_bank(word_bank: Dict[str, List[str]]) -> bool:
    """
    Validates the integrity and consistency of a word bank.

    Checks that every word is exactly WORD_LENGTH alphabetic characters, that
    the answer list is not empty, and that the two lists are disjoint.

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    if not word_bank.get('valid'):
        raise ValueError("Word bank must contain at least one valid word")

    for key in ('valid', 'invalid'):
        for index, word in enumerate(word_bank.get(key, [])):
            if len(word) != WORD_LENGTH:
                raise ValueError(
                    f"Word at {key}[{index}] '{word}' is not {WORD_LENGTH} characters long"
                )
            if not word.isalpha():
                raise ValueError(f"Word at {key}[{index}] '{word}' contains non-alphabetic characters")

    overlap = set(word_bank['valid']) & set(word_bank.get('invalid', []))
    if overlap:
        raise ValueError(f"Words listed as both valid and invalid: {sorted(overlap)}")

    return True
