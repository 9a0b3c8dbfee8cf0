import logging
from typing import Optional

from bs4 import BeautifulSoup, Comment

from ..config.settings import ContentExtractionConfig
from ..utils.sanitizer import (
    LAYOUT_TAGS,
    SCRIPT_TAGS,
    sanitize,
    strip_blocks,
    strip_comments,
    structured_text,
    truncate,
)

logger = logging.getLogger(__name__)


class MainContentExtractor:
    """Extraction du contenu principal d'une page"""

    # Ordre de priorité: conventions sémantiques puis CMS courants
    CONTENT_SELECTORS = [
        'article',
        'div[class*="content"]',
        'div[class*="main"]',
        'div[id*="content"]',
        'div[class*="post"]',
        'div[class*="entry"]',
    ]

    EXCLUDE_TAGS = ['header', 'nav', 'footer', 'script', 'style', 'aside', 'form']
    EXCLUDE_DIV_CLASSES = ['comment', 'sidebar', 'menu', 'nav', 'ad']

    def __init__(self, config: Optional[ContentExtractionConfig] = None):
        self.config = config or ContentExtractionConfig()

    def extract_main(self, html: str) -> str:
        """
        Extract the readable main content of a page.

        Args:
            html: Raw page markup

        Returns:
            Plain text keeping headings, paragraphs and list items on their
            own lines, truncated to ``max_content_length`` characters
        """
        if not html:
            return ""

        soup = BeautifulSoup(html, 'lxml')

        fragment = self._find_main_fragment(soup)
        if fragment is None:
            logger.debug("Aucun conteneur principal trouvé, nettoyage soustractif")
            fragment = self._subtractive_fragment(soup)

        fragment = strip_blocks(fragment, SCRIPT_TAGS + LAYOUT_TAGS)
        fragment = strip_comments(fragment)
        return self._truncate(structured_text(fragment))

    def extract_text(self, html: str) -> str:
        """Flat extraction: the whole document as a single line of text"""
        return self._truncate(sanitize(html))

    def _find_main_fragment(self, soup: BeautifulSoup) -> Optional[str]:
        for selector in self.CONTENT_SELECTORS:
            node = soup.select_one(selector)
            if node is not None:
                logger.debug(f"Contenu principal trouvé via '{selector}'")
                return node.decode_contents()
        return None

    def _subtractive_fragment(self, soup: BeautifulSoup) -> str:
        for tag in soup.find_all(self.EXCLUDE_TAGS):
            if not tag.decomposed:
                tag.decompose()

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        div_selector = ', '.join(f'div[class*="{name}"]' for name in self.EXCLUDE_DIV_CLASSES)
        for div in soup.select(div_selector):
            if not div.decomposed:
                div.decompose()

        body = soup.find('body') or soup
        return body.decode_contents()

    def _truncate(self, text: str) -> str:
        return truncate(
            text,
            self.config.max_content_length,
            self.config.truncation_marker,
        )
