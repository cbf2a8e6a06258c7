import pytest

from pmcontext.config import Config
from pmcontext.health import HealthTracker
from pmcontext.indexer import SearchIndex
from pmcontext.models import Chunk


@pytest.fixture
def tmp_repo(tmp_path):
    """Create a small checkout with docs, code and noise directories."""
    repo = tmp_path / "repo"
    (repo / "docs").mkdir(parents=True)
    (repo / "src").mkdir()
    (repo / "node_modules" / "left-pad").mkdir(parents=True)
    (repo / "README.md").write_text(
        "Project overview for the payments service.\n"
        "# Setup\n"
        "Install dependencies and run the migrations.\n"
        "## Deployment\n"
        "Deployments run through the GitLab pipeline every night.\n"
    )
    (repo / "docs" / "architecture.md").write_text(
        "# Architecture\n"
        "The ledger service owns all balance mutations.\n"
    )
    (repo / "src" / "crawler.py").write_text(
        "\n".join(f"# crawler line {i}" for i in range(1, 61))
    )
    (repo / "notes.txt").write_text("Retrospective notes: rotate the webhook secret.\n")
    (repo / "node_modules" / "left-pad" / "index.js").write_text("module.exports = leftPad;\n")
    return repo


@pytest.fixture
def config(tmp_repo, tmp_path):
    """Create a Config pointing at the tmp repo and a tmp snapshot."""
    return Config(
        docs_path=str(tmp_repo),
        index_path=str(tmp_path / "index" / "snapshot.json"),
    )


@pytest.fixture
def index(config):
    return SearchIndex.from_config(config)


@pytest.fixture
def memory_index():
    return SearchIndex()


@pytest.fixture
def health():
    return HealthTracker()


def make_chunk(collection_id, path, content, title=None, start_line=1, kind="text"):
    end_line = start_line + content.count("\n")
    return Chunk.build(collection_id, path, content, kind, start_line, end_line, title=title)


@pytest.fixture(name="make_chunk")
def make_chunk_fixture():
    return make_chunk
