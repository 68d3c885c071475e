"""
Parser for dictionary API payloads.
"""

import logging
from typing import Optional

from bs4 import BeautifulSoup
from lxml import etree


# Pronunciation and syllable markers used by the dictionary source format
MARKER_CHARACTERS = ('^', '-')


def strip_markers(text: str) -> str:
    """Remove presentation markers from a headword."""
    for marker in MARKER_CHARACTERS:
        text = text.replace(marker, '')
    return text


class WordParser:
    """
    Extracts the headword from a dictionary view payload.
    """

    def __init__(self, field_name: str = 'word'):
        self.field_name = field_name
        self.logger = logging.getLogger(__name__)
        self._strict_parser = etree.XMLParser(recover=False, resolve_entities=False)

    def extract_word(self, payload: Optional[str]) -> Optional[str]:
        """
        Extract the first word field from the payload.

        Args:
            payload: Raw response body

        Returns:
            The headword without markers, or None when the payload is empty,
            unparsable or has no word field
        """
        if not payload or not payload.strip():
            return None

        try:
            # BeautifulSoup recovers from broken markup; reject it first
            etree.fromstring(payload.encode('utf-8'), self._strict_parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            self.logger.warning(f"Malformed payload: {e}")
            return None

        try:
            soup = BeautifulSoup(payload, 'xml')

            node = soup.find(self.field_name)
            if node is None:
                self.logger.debug(f"No <{self.field_name}> element in payload")
                return None

            return strip_markers(node.get_text())

        except Exception as e:
            self.logger.error(f"Error parsing payload: {e}")
            return None
