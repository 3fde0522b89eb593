"""HTML to Confluence storage format transformer.

This module converts the body of a generated documentation page into
Confluence storage format (XHTML with ac:/ri: elements):

1. The page title heading is removed (Confluence renders the title itself)
2. Local images become attachment references and are collected for upload
3. <pre><code> blocks become code macros with a CDATA body
4. Presentation attributes are stripped and the markup is serialized

The tree serializer cannot emit CDATA sections, so code bodies are wrapped
in a placeholder element while the tree is manipulated. After serialization
a single scoped pass turns each placeholder span into a CDATA section and
reverts the entity escaping the serializer applied inside it.
"""

import logging
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup, Tag

from src.models.page_tree import PageNode
from src.models.transform_result import Attachment, TransformResult
from src.site_parser.errors import TransformError

from .base import Transformer

logger = logging.getLogger(__name__)

CDATA_PLACEHOLDER = "cdata-placeholder"
CDATA_PLACEHOLDER_START = f"<{CDATA_PLACEHOLDER}>"
CDATA_PLACEHOLDER_END = f"</{CDATA_PLACEHOLDER}>"

_PLACEHOLDER_SPAN = re.compile(
    re.escape(CDATA_PLACEHOLDER_START) + r"(.*?)" + re.escape(CDATA_PLACEHOLDER_END),
    re.DOTALL
)
_ESCAPED_ENTITY = re.compile(r"&(lt|gt|amp);")
_ENTITY_VALUES = {"lt": "<", "gt": ">", "amp": "&"}

_LINE_BREAK = re.compile(r"<br\s*/?>|</br>", re.IGNORECASE)
_EMPTY_ANCHOR = re.compile(r"<a(\s[^>]*)?></a>")
_LANGUAGE_PARAMETER = re.compile(
    r'(ac:name="language">)[\n\r\t ]*([^<\s]+)[\n\r\t ]*(</ac:parameter>)'
)


def restore_cdata(markup: str) -> str:
    """Turn placeholder spans into literal CDATA sections.

    Spans are matched on the escaped serialization, where placeholder text
    inside code can only appear escaped. &lt; &gt; &amp; are reverted inside
    each span in a single pass, so "&amp;lt;" becomes "&lt;", never "<".
    Nothing outside the spans is touched.
    """
    def to_cdata(match: re.Match) -> str:
        inner = _ESCAPED_ENTITY.sub(lambda m: _ENTITY_VALUES[m.group(1)], match.group(1))
        return "<![CDATA[" + inner + "]]>"

    return _PLACEHOLDER_SPAN.sub(to_cdata, markup)


class StorageTransformer(Transformer):
    """Transforms HTML page bodies into Confluence storage format.

    Example:
        >>> transformer = StorageTransformer()
        >>> result = transformer.transform(node, article)
        >>> result.markup
        '<p>Hello</p>'
    """

    TITLE_SELECTOR = "h1.page"
    DEFAULT_ALIGN = "center"
    PRESENTATION_ATTRIBUTES = ("class", "style")

    def __init__(self):
        self.parser = "html.parser"

    def transform(self, node: PageNode, content: Tag) -> TransformResult:
        """Transform a page body into storage format.

        Args:
            node: The page being transformed (title and source directory)
            content: The body element; modified in place

        Returns:
            TransformResult with the markup and unique attachments

        Raises:
            TransformError: If the content cannot be transformed
        """
        logger.info(f"Transform page '{node.title}' from {node.source}")
        factory = BeautifulSoup("", self.parser)

        try:
            self.strip_title(node, content)
            images = self.transform_images(node, content, factory)
            self.transform_code_blocks(content, factory)
            result = images.merge(TransformResult(markup=self.sanitize_body(content)))
        except TransformError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise TransformError(node.title, str(e)) from e

        logger.debug(
            f"Transformed '{node.title}': {len(result.markup)} chars, "
            f"{len(result.attachments)} attachment(s)"
        )
        return result

    def strip_title(self, node: PageNode, content: Tag) -> bool:
        """Remove the heading that repeats the page title.

        Returns:
            True if a heading was removed
        """
        title = content.select_one(self.TITLE_SELECTOR)
        if title is None:
            title = next(
                (h1 for h1 in content.find_all("h1")
                 if " ".join(h1.get_text().split()) == node.title),
                None
            )
        if title is None:
            return False

        title.decompose()
        return True

    def transform_images(
        self,
        node: PageNode,
        content: Tag,
        factory: BeautifulSoup
    ) -> TransformResult:
        """Replace local images with attachment references.

        Images whose file cannot be found are left untouched.

        Returns:
            TransformResult with no markup and the unique attachments
        """
        result = TransformResult()
        for image in content.find_all("img"):
            self._transform_image(node, image, result, factory)
        return result

    def _transform_image(
        self,
        node: PageNode,
        image: Tag,
        result: TransformResult,
        factory: BeautifulSoup
    ) -> None:
        source = self._resolve_image(node, image.get("src"))
        if source is None:
            return

        if not source.is_file():
            logger.info(f"Image {source} does not exist")
            return

        attachment = Attachment(filename=source.name, source=source)
        if result.add(attachment):
            logger.info(f"Transform image {attachment.filename} from {attachment.source}")

        align = (image.get("align") or "").strip() or self.DEFAULT_ALIGN
        attrs = {"ac:align": align}
        width = (image.get("width") or "").strip()
        if width:
            attrs["ac:width"] = width

        ac_image = factory.new_tag("ac:image", attrs=attrs)
        ac_image.append(
            factory.new_tag("ri:attachment", attrs={"ri:filename": attachment.filename})
        )
        image.replace_with(ac_image)

    @staticmethod
    def _resolve_image(node: PageNode, src: Optional[str]) -> Optional[Path]:
        """Resolve an image src relative to the page's directory.

        Remote and inline (data:) images yield None.
        """
        if not src or not src.strip() or node.source is None:
            return None

        parsed = urlparse(src.strip())
        if parsed.scheme or parsed.netloc:
            return None

        path = unquote(parsed.path)
        if not path:
            return None

        return Path(os.path.normpath(node.source.parent / path))

    def transform_code_blocks(self, content: Tag, factory: BeautifulSoup) -> None:
        """Replace <pre><code> blocks with code macros."""
        for code in content.select("pre > code"):
            pre = code.parent
            if pre is None:
                continue

            language = self._code_language(code)
            text = code.get_text().replace("]]>", "]]]]><![CDATA[>")

            macro = factory.new_tag("ac:structured-macro", attrs={"ac:name": "code"})
            if language:
                parameter = factory.new_tag("ac:parameter", attrs={"ac:name": "language"})
                parameter.string = language
                macro.append(parameter)

            body = factory.new_tag("ac:plain-text-body")
            placeholder = factory.new_tag(CDATA_PLACEHOLDER)
            placeholder.string = text
            body.append(placeholder)
            macro.append(body)

            pre.replace_with(macro)

    @staticmethod
    def _code_language(code: Tag) -> str:
        """Read the language of a code element (data-lang or language-* class)."""
        language = (code.get("data-lang") or "").strip()
        if language:
            return language

        for css_class in code.get("class") or []:
            if css_class.startswith("language-") and len(css_class) > len("language-"):
                return css_class[len("language-"):]
        return ""

    def sanitize_body(self, body: Tag) -> str:
        """Strip presentation attributes and serialize to storage markup."""
        for element in body.find_all(True):
            for attribute in self.PRESENTATION_ATTRIBUTES:
                if attribute in element.attrs:
                    del element[attribute]

        markup = body.decode_contents(formatter="minimal").strip()

        # Text fixups run on the escaped form, so placeholder contents are untouched
        markup = _LINE_BREAK.sub("<br />", markup)
        markup = _EMPTY_ANCHOR.sub("", markup)
        markup = _LANGUAGE_PARAMETER.sub(r"\1\2\3", markup)
        return restore_cdata(markup)
