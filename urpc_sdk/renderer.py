"""
Whole-document rendering.

The renderer executes every call block of a document concurrently, waits for
all of them, then rewrites the document in one pass: call blocks become their
results, the endpoint and directory blocks disappear, and whitespace-only
lines are dropped.
"""
import asyncio
import logging
import urllib.parse
from typing import Dict, List, Optional

from ._rate_limited_log import rate_limited_log
from .client import URPCClient
from .config import URPCConfig
from .directory import SymbolDirectory
from .document import Block, BlockKind, directory_entries, tokenize
from .exceptions import CALL_SITE_ERRORS, MalformedDocumentError, MissingEndpointError
from .formatting import format_result
from .models import CallResult, RenderResult
from .parser import parse_call_string
from .views import PlainView, ResultView


def _single(blocks: List[Block], kind: BlockKind, tag: str) -> Optional[Block]:
    found = [b for b in blocks if b.kind is kind]
    if len(found) > 1:
        raise MalformedDocumentError(f"Document has {len(found)} <{tag}> blocks, expected one")
    return found[0] if found else None


def _drop_blank_lines(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if line.strip())


class DocumentRenderer:
    """
    Renders urpc documents.

    Call-site failures are isolated: a failing call renders the view's error
    marker and every other call proceeds. A missing or broken endpoint or
    directory block fails the whole render before any call is made.
    """

    def __init__(
        self,
        client: Optional[URPCClient] = None,
        *,
        view: Optional[ResultView] = None,
        config: Optional[URPCConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the renderer.

        Args:
            client: Client used to execute calls; its cache is shared by every
                render made with this renderer
            view: How results are rendered (plain display values by default)
            config: Settings (the client's config by default)
            logger: Optional logger instance
        """
        self.config = config or (client.config if client is not None else URPCConfig())
        self.client = client or URPCClient(config=self.config)
        self.view = view or PlainView(self.config.error_marker)
        self.logger = logger or logging.getLogger(__name__)

    def _endpoint(self, blocks: List[Block]) -> str:
        tag = self.config.endpoint_tag
        block = _single(blocks, BlockKind.ENDPOINT, tag)
        if block is None:
            raise MissingEndpointError(f"Document has no <{tag}> block")
        url = block.inner_text.strip()
        if not url:
            raise MissingEndpointError(f"<{tag}> block is empty")
        parsed = urllib.parse.urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise MalformedDocumentError(f"Invalid endpoint URL in <{tag}>: {url!r}")
        return url

    def _directory(self, blocks: List[Block]) -> SymbolDirectory:
        tag = self.config.directory_tag
        block = _single(blocks, BlockKind.DIRECTORY, tag)
        if block is None:
            raise MalformedDocumentError(f"Document has no <{tag}> block")
        return SymbolDirectory.load(directory_entries(block))

    async def _run_call_site(self, block: Block, directory: SymbolDirectory, endpoint_url: str) -> CallResult:
        call_string = block.inner_text.strip()
        key = block.attributes.get("key") or call_string
        result = CallResult(key=key, call_string=call_string)
        try:
            result.call = parse_call_string(call_string, key=block.attributes.get("key"))
            call_type = block.attributes.get("type", "").strip() or None
            result.resolved = self.client.resolve(result.call, directory, call_type)
            result.result = await self.client.aexecute(result.resolved, endpoint_url)
            result.display_value = format_result(result.result, result.resolved.decimals)
        except CALL_SITE_ERRORS as e:
            result.error = str(e) or type(e).__name__
            rate_limited_log(f"Call site {call_string!r} failed: {result.error}", logger_instance=self.logger)
        return result

    def _markup(self, result: CallResult) -> str:
        if result.ok:
            return self.view.render(result)
        return self.view.render_error(result)

    async def render(self, text: str) -> RenderResult:
        """
        Render a document.

        Args:
            text: Full document text

        Returns:
            RenderResult with the rewritten text and results keyed by call key.
            Keyless call sites with identical call strings share one key, the
            later one winning.

        Raises:
            MissingEndpointError: If there is no usable endpoint block
            MalformedDocumentError: If the structural blocks are broken
        """
        blocks = tokenize(text, self.config.tag_prefix)
        endpoint_url = self._endpoint(blocks)
        directory = self._directory(blocks)
        call_blocks = [b for b in blocks if b.kind is BlockKind.CALL]

        self.logger.debug(f"Rendering {len(call_blocks)} call sites against {endpoint_url}")
        results = await asyncio.gather(
            *(self._run_call_site(b, directory, endpoint_url) for b in call_blocks)
        )

        replacements: Dict[int, str] = {}
        results_by_key: Dict[str, CallResult] = {}
        for block, result in zip(call_blocks, results):
            replacements[block.span[0]] = self._markup(result)
            if result.key in results_by_key:
                self.logger.debug(f"Call key {result.key!r} used more than once")
            results_by_key[result.key] = result

        pieces = []
        pos = 0
        for block in blocks:
            start, end = block.span
            pieces.append(text[pos:start])
            # declaration blocks are removed outright
            pieces.append(replacements.get(start, ""))
            pos = end
        pieces.append(text[pos:])

        failed = sum(1 for r in results if not r.ok)
        if failed:
            self.logger.info(f"Rendered {len(results)} call sites, {failed} failed")
        return RenderResult(rendered_text=_drop_blank_lines("".join(pieces)), results_by_key=results_by_key)

    def render_sync(self, text: str) -> RenderResult:
        """Render a document from synchronous code (no running event loop)."""
        return asyncio.run(self.render(text))


def render_document(
    text: str,
    client: Optional[URPCClient] = None,
    view: Optional[ResultView] = None
) -> RenderResult:
    """
    Render a document with a one-off renderer.

    Pass a long-lived ``client`` to reuse its response cache across renders.
    """
    if client is not None:
        return DocumentRenderer(client, view=view).render_sync(text)
    with URPCClient() as owned:
        return DocumentRenderer(owned, view=view).render_sync(text)
