"""
Pytest Configuration and Shared Fixtures

Provides fixtures for the renderer, inliner, assembler and render service tests.
"""

# Standard library
import io
import os
import sys
from typing import Callable, Dict

# Third-party
import httpx
import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# ============================================================================
# Sample Data
# ============================================================================

@pytest.fixture
def png_bytes() -> bytes:
    """A tiny valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (4, 3), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def sample_markdown() -> str:
    """Markdown exercising every block type the page model knows."""
    return """# Report

Intro with **bold**, *italic* and `code`.
Second line of the same paragraph.

## Items

- first
- second
  - nested

1. one
2. two

| Name | Value |
|------|-------|
| a    | 1     |

```python
print("hi")
```

> quoted text

---

Inline math $x^2$ here.
"""


# ============================================================================
# HTTP Helpers
# ============================================================================

def make_image_client(
    routes: Dict[str, Callable[[httpx.Request], httpx.Response]],
) -> httpx.AsyncClient:
    """
    Builds an AsyncClient whose transport answers from a route table.

    Unknown URLs fail with a connection error, like an unreachable host.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            raise httpx.ConnectError("connection refused", request=request)
        return route(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def image_client_factory():
    """Factory fixture for mocked image clients."""
    return make_image_client
