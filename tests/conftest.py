"""
Pytest configuration for docbuilder
"""

import logging
import sys
import tempfile
from pathlib import Path

import pytest

from docbuilder.models import (
    CheckboxBlock,
    DateTimeBlock,
    Document,
    DynamicTextBlock,
    Page,
    PageSettings,
    ParagraphBlock,
    SignatureBlock,
    TableBlock,
    TableColumn,
    TextBlock,
    TitleBlock,
)

# 1x1 transparent PNG
PNG_DATA_URL = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def png_data_url():
    return PNG_DATA_URL


@pytest.fixture
def sample_document():
    """Two-page template exercising bindings, expressions and a signature."""
    first = Page(id="page-1", blocks=[
        TitleBlock(id="title", x_mm=10, y_mm=10, w_mm=100, h_mm=15, text="Order {{data.order.number}}"),
        TextBlock(id="name", x_mm=10, y_mm=30, w_mm=80, h_mm=10, label="Customer",
                  bind="customer.name", required=True, placeholder="Full name", z=1),
        DateTimeBlock(id="due", x_mm=100, y_mm=30, w_mm=50, h_mm=10, label="Due", bind="order.due", z=2),
        CheckboxBlock(id="agree", x_mm=10, y_mm=45, w_mm=30, h_mm=8, label="I agree", bind="order.agree", z=3),
        ParagraphBlock(id="para", x_mm=10, y_mm=60, w_mm=120, h_mm=20,
                       html="<p>Dear {{data.customer.name}},</p><script>alert(1)</script>", z=4),
        DynamicTextBlock(id="vip", x_mm=10, y_mm=85, w_mm=80, h_mm=10,
                         expression="VIP: {{data.customer.name}}", visible_if="customer.tier === 'gold'", z=5),
    ])
    second = Page(id="page-2", blocks=[
        TableBlock(id="items", x_mm=10, y_mm=10, w_mm=160, h_mm=30, label="Items", rows=2, columns=[
            TableColumn(id="c1", header="Item", width_fr=1),
            TableColumn(id="c2", header="Qty", width_fr=1),
            TableColumn(id="c3", header="Notes", width_fr=2, required=True),
        ]),
        SignatureBlock(id="sig", x_mm=10, y_mm=50, w_mm=60, h_mm=20, label="Client", role="client", z=1),
    ])
    return Document(title="Order form", page_settings=PageSettings(), pages=[first, second])


@pytest.fixture
def data():
    return {
        "customer": {"name": "Ada <Lovelace>", "tier": "gold"},
        "order": {"number": 42, "due": "2024-03-05T14:30:00", "agree": True},
    }
