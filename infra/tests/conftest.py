"""
Shared fixtures for the Prisma stack tests.
"""

import os
import pytest

# Must be set before any imports that touch boto3
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")

PRISMA_FILES = {
    "node_modules/.prisma/client/index.js": "module.exports = {}",
    "node_modules/.prisma/client/schema.prisma": "datasource db {}",
    "node_modules/.prisma/client/libquery_engine-debian-openssl-1.1.x.so.node": "debian",
    "node_modules/.prisma/client/libquery_engine-rhel-openssl-1.0.x.so.node": "rhel",
    "node_modules/@prisma/client/package.json": "{}",
    "node_modules/@prisma/client/runtime/index.js": "runtime",
    "node_modules/prisma/build/index.js": "cli",
    "node_modules/prisma/build/libquery_engine-darwin.so.node": "darwin",
}


def write_tree(root, files):
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture
def prisma_project(tmp_path):
    """A project root holding a generated Prisma client."""
    root = tmp_path / "project"
    write_tree(root, PRISMA_FILES)
    return root


@pytest.fixture
def layer_settings(prisma_project):
    from config import LayerSettings
    return LayerSettings(
        source_root=prisma_project,
        destination=prisma_project / ".build" / "layers" / "prisma",
    )
