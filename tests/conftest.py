import pytest

from tondocs.config import Config
from tondocs.health import HealthTracker
from tondocs.models import DocumentChunk
from tondocs.service import DocsSearchService
from tondocs.sources import CorpusLoader, StaticSource


@pytest.fixture
def corpus():
    """Small fixture corpus, independent of the built-in documents."""
    return [
        DocumentChunk(
            id="tact-lang",
            title="Tact Programming Language",
            content=(
                "Official documentation for the Tact programming language - "
                "the recommended way to write TON smart contracts."
            ),
            category="languages",
            tags=["tact", "language"],
            url="https://docs.ton.org/develop/smart-contracts/tact/",
        ),
        DocumentChunk(
            id="jetton-standard",
            title="Jetton Standard",
            content=(
                "Jettons are fungible tokens on TON. "
                "Each jetton wallet holds the balance of one owner."
            ),
            category="tokens",
            tags=["jetton", "tokens"],
            url="https://docs.ton.org/develop/dapps/asset-processing/jettons",
        ),
        DocumentChunk(
            id="wallet-guide",
            title="Wallet Guide",
            content=(
                "Wallet contracts keep the seqno and the public key. "
                "Use the wallet to sign outgoing messages."
            ),
            category="wallets",
            tags=["wallet"],
            url="https://example.com/wallets",
        ),
        DocumentChunk(
            id="tma-intro",
            title="Telegram Mini Apps",
            content="Mini apps run inside Telegram and connect to TON wallets.",
            category="tma",
            tags=["telegram", "tma", "wallet"],
        ),
    ]


@pytest.fixture
def config(tmp_path):
    """Config that points every filesystem source at an empty tmp dir."""
    return Config(
        index_file=str(tmp_path / "missing-index.json"),
        resources_path=str(tmp_path / "resources"),
    )


@pytest.fixture
def make_service(config):
    def _make(documents, baseline=None, **overrides):
        cfg = config.model_copy(update=overrides) if overrides else config
        loader = CorpusLoader([StaticSource(documents)], baseline=baseline)
        return DocsSearchService(cfg, loader=loader)
    return _make


@pytest.fixture
def service(make_service, corpus):
    return make_service(corpus)


@pytest.fixture
def health():
    return HealthTracker()
