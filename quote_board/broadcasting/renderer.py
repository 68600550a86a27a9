"""HTML rendering for quote list fragments and Turbo Stream envelopes."""

from jinja2 import Environment, Template, select_autoescape
from markupsafe import Markup

from quote_board.events import QuoteSnapshot

JINJA_ENV = Environment(autoescape=select_autoescape(default=True))

QUOTE_TEMPLATE = """<turbo-frame id="{{ quote.dom_id }}">
  <div class="quote">
    <a href="/quotes/{{ quote.id }}">{{ quote.name }}</a>
    <div class="quote__actions">
      <a class="btn btn--light" href="/quotes/{{ quote.id }}/edit">Edit</a>
    </div>
  </div>
</turbo-frame>"""

TURBO_STREAM_TEMPLATE = (
    '<turbo-stream action="{{ action }}" target="{{ target }}">'
    "{% if fragment is not none %}<template>{{ fragment }}</template>{% endif %}"
    "</turbo-stream>"
)


class QuoteRenderer:
    """Renders one quote as the fragment subscribers insert into their list."""

    def __init__(self, template: str = QUOTE_TEMPLATE) -> None:
        self._template: Template = JINJA_ENV.from_string(template)

    def render(self, quote: QuoteSnapshot) -> str:
        return self._template.render(quote=quote)


_turbo_stream = JINJA_ENV.from_string(TURBO_STREAM_TEMPLATE)


def render_turbo_stream(action: str, target: str, fragment: str | None) -> str:
    # fragment is already rendered (and escaped) HTML
    return _turbo_stream.render(
        action=action,
        target=target,
        fragment=Markup(fragment) if fragment is not None else None,
    )
