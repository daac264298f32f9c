"""Shared test fixtures."""

from pathlib import Path

import pytest
from contentnav.config import Config, ContentConfig, LiveReloadConfig, ServerConfig
from contentnav.core.loader import RecordLoader
from contentnav.core.records import RecordSnapshot
from contentnav.core.resolver import ContentResolver

CONTENT_FILES = {
    "docs/index.md": """---
title: Documentation
sidebarSortOrder: 0
---

Welcome to the docs.
""",
    "docs/intro.md": """---
title: Introduction
sidebarSortOrder: 1
altRoutes:
  - /docs/getting-started
---

Start here.
""",
    "docs/_draft.md": """---
title: Draft
---

Not published.
""",
    "docs/core/index.md": """---
title: Core Concepts
sidebarSortOrder: 2
---

Core overview.
""",
    "docs/core/accounts.md": """---
title: Accounts
sidebarSortOrder: 1
---

Accounts body.
""",
    "docs/core/transactions.md": """---
title: Transactions
sidebarLabel: Txs
sidebarSortOrder: 2
---

Transactions body.
""",
    "docs/core/fees/priority.md": """---
title: Priority Fees
---

Priority fee body.
""",
    "docs/rpc/index.md": """---
title: RPC Methods
---

RPC overview.
""",
    "docs/rpc/http/get-balance.md": """---
title: getBalance
---

Returns the balance.
""",
    "i18n/de/docs/index.md": """---
title: Dokumentation
sidebarSortOrder: 0
---

Willkommen.
""",
    "i18n/de/docs/intro.md": """---
title: Einführung
sidebarSortOrder: 1
---

Fang hier an.
""",
    "content/guides/getstarted/hello-world.md": """---
title: Hello World
featured: true
featuredPriority: 1
author: jdoe
---

Hello.
""",
    "content/guides/getstarted/intro-to-anchor.md": """---
title: Intro to Anchor
featured: true
featuredPriority: 2
---

Anchor.
""",
    "content/guides/advanced/zk-compression.md": """---
title: ZK Compression
---

Compression.
""",
    "content/resources/anchor.md": """---
title: Anchor Framework
featured: true
---

Resource.
""",
    "content/authors/jdoe.yml": "title: Jane Doe\n",
    "content/courses/intro-to-solana/metadata.yml": """title: Intro to Solana
lessons:
  - intro
  - setup
  - advanced
""",
    "content/courses/intro-to-solana/content/advanced.md": """---
title: Advanced Topics
---

Advanced.
""",
    "content/courses/intro-to-solana/content/intro.md": """---
title: Introduction
---

Intro.
""",
    "content/courses/intro-to-solana/content/setup.md": """---
title: Local Setup
---

Setup.
""",
    "README.md": "# Content repository\n",
}


def write_content(root: Path, files: dict[str, str]) -> Path:
    """Write a content tree below root."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a content tree with docs, rpc, guides, courses and translations."""
    return write_content(tmp_path / "content-root", CONTENT_FILES)


@pytest.fixture
def snapshot(content_dir: Path) -> RecordSnapshot:
    return RecordLoader(content_dir).load()


@pytest.fixture
def resolver(snapshot: RecordSnapshot) -> ContentResolver:
    return ContentResolver(snapshot)


@pytest.fixture
def test_config(content_dir: Path) -> Config:
    """Create a test configuration pointing at the sample content tree."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=content_dir, supported_locales=["en", "de"]),
        live_reload=LiveReloadConfig(enabled=False),
    )
