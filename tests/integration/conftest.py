"""Fixtures for integration tests that lint a project on disk."""

import json
from pathlib import Path

import pytest

FILES = {
    "app/about/page.tsx": "export default function Page() {\n  return null;\n}\n",
    "app/blog/[slug]/page.tsx": (
        "export default async function Page({ params }: { params: { slug: string } }) {\n  return null;\n}\n"
    ),
    "app/shop/[...parts]/route.ts": (
        "export async function GET(request: Request, context: { params: Promise<{ parts: string }> }) {\n"
        "  return new Response();\n"
        "}\n"
    ),
    "app/utils.ts": "export const answer = 42;\n",
    "components/page.tsx": "export default function Page(props: { params: { id: number } }) {\n  return null;\n}\n",
    "node_modules/pkg/app/[id]/page.tsx": (
        "export default function Page(props: { params: { id: number } }) {\n  return null;\n}\n"
    ),
}


@pytest.fixture
def next_project(tmp_path: Path) -> Path:
    """A Next.js 15 project with one clean and two mistyped route modules."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "package.json").write_text(json.dumps({"dependencies": {"next": "^15.1.0", "react": "^19.0.0"}}))
    for relative, content in FILES.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return root
