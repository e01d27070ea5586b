from typing import Callable

import pytest


def render_result_page(links: list[tuple[str, str]], *, snippets: bool = True) -> str:
    """Render a minimal result page in the current organic-result layout."""
    blocks = []
    for index, (href, title) in enumerate(links):
        snippet = f'<div class="VwiC3b"><span>Snippet {index}</span></div>' if snippets else ""
        blocks.append(
            f'<div class="MjjYud"><div class="g" data-hveid="C{index}">'
            f'<a href="{href}"><h3>{title}</h3></a>{snippet}</div></div>'
        )
    return (
        "<html><head><title>results</title></head><body>"
        '<div id="search"><div id="rso">' + "".join(blocks) + "</div></div>"
        "</body></html>"
    )


@pytest.fixture
def result_page() -> Callable[..., str]:
    return render_result_page
