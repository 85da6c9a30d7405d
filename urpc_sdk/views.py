"""
Result views.

A view turns the outcome of one call site into the markup substituted into the
document. The core never depends on a particular view, so the same renderer
serves plain text output and inspection UIs.
"""
from abc import ABC, abstractmethod
from html import escape
from typing import Optional

from .config import DEFAULT_ERROR_MARKER
from .models import CallResult, strip_sigil


class ResultView(ABC):
    """Capability interface for rendering a call result."""

    def __init__(self, error_marker: str = DEFAULT_ERROR_MARKER):
        self.error_marker = error_marker

    @abstractmethod
    def render(self, result: CallResult) -> str:
        """Markup for a successful call."""
        pass

    def render_error(self, result: CallResult) -> str:
        """Markup for a failed call."""
        return escape(self.error_marker)


class PlainView(ResultView):
    """Substitutes the bare display value."""

    def render(self, result: CallResult) -> str:
        return escape(result.display_value or "")


class InspectorView(ResultView):
    """
    Substitutes the display value followed by a ``<details>`` block showing
    where it came from: contract, method, arguments and raw result.
    """

    def __init__(self, error_marker: str = DEFAULT_ERROR_MARKER, css_class: str = "urpc"):
        super().__init__(error_marker)
        self.css_class = css_class

    @staticmethod
    def _row(label: str, name: str, value: Optional[str]) -> str:
        shown = escape(name)
        if value is not None and value != name:
            shown += f" ({escape(value)})"
        return f"<p><b>{escape(label)}</b>: {shown}</p>"

    def _provenance(self, result: CallResult) -> str:
        call = result.call
        resolved = result.resolved
        if call is None:
            return self._row("call", result.call_string, None)
        rows = [
            self._row("contract", strip_sigil(call.to), resolved.to if resolved else None),
            self._row("method", call.method_signature, resolved.selector if resolved else None),
        ]
        for i, arg in enumerate(call.args):
            value = resolved.args[i] if resolved else None
            rows.append(self._row(f"arg{i}", strip_sigil(arg), value))
        return "".join(rows)

    def render(self, result: CallResult) -> str:
        value = escape(result.display_value or "")
        return (
            f'<span class="{self.css_class}-value">{value}</span>'
            f'<details class="{self.css_class}-inspect"><summary>ⓘ</summary>'
            f"{self._provenance(result)}"
            f"{self._row('result', result.display_value or '', result.result)}"
            f"</details>"
        )

    def render_error(self, result: CallResult) -> str:
        return (
            f'<span class="{self.css_class}-error">{escape(self.error_marker)}</span>'
            f'<details class="{self.css_class}-inspect"><summary>ⓘ</summary>'
            f"{self._provenance(result)}"
            f"{self._row('error', result.error or '', None)}"
            f"</details>"
        )
