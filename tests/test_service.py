"""Tests for DocsSearchService: ranking, fallbacks, filters and runtime edits."""
import pytest

from tondocs.models import DocumentChunk
from tondocs.service import DocsSearchService
from tondocs.sources import BUILTIN_DOCUMENTS, CorpusLoader, CorpusSource, StaticSource


def _ids(results):
    return [r.document.id for r in results]


class TestLifecycle:
    def test_lazy_initialization_on_first_search(self, service):
        assert not service.is_initialized
        service.search("jetton")
        assert service.is_initialized

    def test_loader_called_once(self, config, corpus):
        class Counting(CorpusSource):
            name = "counting"
            calls = 0

            def try_load(self):
                Counting.calls += 1
                return corpus

        svc = DocsSearchService(config, loader=CorpusLoader([Counting()]))
        svc.search("jetton")
        svc.search("wallet")
        svc.get_stats()
        assert Counting.calls == 1

    def test_initialize_reports_source(self, service, corpus):
        result = service.initialize()
        assert result == {
            "status": "success", "source": "static",
            "documents": len(corpus), "chunks": len(corpus),
        }
        assert service.last_source == "static"

    def test_long_documents_are_chunked(self, make_service):
        doc = DocumentChunk(
            id="guide", title="Guide", category="how-to",
            content="Alpha beta gamma. Delta epsilon zeta. Eta theta iota.",
        )
        svc = make_service([doc], chunk_size=20)
        ids = [d.id for d in svc.documents]
        assert ids == ["guide-chunk-0", "guide-chunk-1", "guide-chunk-2"]
        assert svc.documents[1].title == "Guide (part 2)"

    def test_duplicate_ids_keep_first(self, make_service):
        a = DocumentChunk(id="dup", title="First", content="First content.")
        b = DocumentChunk(id="dup", title="Second", content="Second content.")
        svc = make_service([a, b])
        assert [d.title for d in svc.documents] == ["First"]

    def test_builtin_baseline_only(self, make_service):
        svc = make_service([], baseline=StaticSource(BUILTIN_DOCUMENTS, name="builtin"))
        assert svc.get_stats()["total_documents"] == len(BUILTIN_DOCUMENTS)


class TestSearch:
    def test_normalized_synonym_finds_tact(self, service):
        results = service.search("tolk")
        assert results
        assert results[0].document.id == "tact-lang"

    def test_normalized_synonym_on_builtin_corpus(self, make_service):
        svc = make_service([], baseline=StaticSource(BUILTIN_DOCUMENTS, name="builtin"))
        assert svc.search("tolk")[0].document.title == "Tact Programming Language"

    def test_tag_weighted_category_beats_accidental_substring(self, make_service):
        docs = [
            DocumentChunk(
                id="pizza", title="Office News", category="general", tags=["news"],
                content="The smart contracts team ordered pizza for everybody on friday.",
            ),
            DocumentChunk(
                id="sc-guide", title="Getting Started", category="smart-contracts",
                tags=["smart contracts", "tact"],
                content="Write your first contract with the Tact compiler and deploy it.",
            ),
        ]
        ids = _ids(make_service(docs).search("smart contracts"))
        assert "sc-guide" in ids
        assert ids.index("sc-guide") < ids.index("pizza")

    def test_results_sorted_by_boosted_score(self, service):
        results = service.search("ton")
        boosted = [r.boosted_score for r in results]
        assert results
        assert boosted == sorted(boosted)

    def test_limit(self, service):
        assert len(service.search("ton", limit=1)) == 1

    @pytest.mark.parametrize("query", ["", "   ", None, 42])
    def test_malformed_query_returns_empty(self, service, query):
        assert service.search(query) == []

    def test_no_match_is_empty_not_error(self, service):
        assert service.search("qwxyz") == []


class TestFallback:
    def test_term_fallback_for_split_multi_word_query(self, service):
        # "seqno" only in the wallet guide, "fungible" only in the jetton standard
        results = service.search("seqno fungible")
        assert set(_ids(results)) == {"wallet-guide", "jetton-standard"}

    def test_raw_query_retry_after_normalization_miss(self, make_service, corpus):
        talk = DocumentChunk(
            id="talk-show", title="Talk Show Notes", category="general",
            content="Notes from the weekly show.",
        )
        results = make_service([*corpus, talk]).search("Talk show")
        assert results
        assert results[0].document.id == "talk-show"

    def test_fallback_respects_category(self, service):
        results = service.search("seqno fungible", category="wallets")
        assert _ids(results) == ["wallet-guide"]


class TestRelevanceFilter:
    def test_ceiling_drops_weak_hits(self, make_service, corpus):
        svc = make_service(corpus, relevance_ceiling=0.01)
        assert svc.search("fungible") == []

    def test_min_score(self, service):
        assert service.search("fungible")
        assert service.search("fungible", min_score=0.0001) == []


class TestBoosts:
    def _twins(self, make_service):
        docs = [
            DocumentChunk(id="elsewhere", title="Gas Fees", content="How gas fees are computed.",
                          tags=["fees"], url="https://example.com/gas"),
            DocumentChunk(id="official", title="Gas Fees", content="How gas fees are computed.",
                          tags=["fees"], url="https://docs.ton.org/develop/gas"),
        ]
        return make_service(docs)

    def test_official_source_boost(self, make_service):
        results = self._twins(make_service).search("gas fees")
        by_id = {r.document.id: r for r in results}
        assert by_id["official"].score == by_id["elsewhere"].score
        assert by_id["official"].boosted_score < by_id["elsewhere"].boosted_score
        assert results[0].document.id == "official"

    def test_exact_tag_boost(self, make_service, config):
        svc = self._twins(make_service)
        result = next(r for r in svc.search("gas fees") if r.document.id == "elsewhere")
        assert result.boosted_score == pytest.approx(result.score - config.tag_boost)

    @pytest.mark.parametrize("url,expected", [
        ("https://docs.ton.org/develop", True),
        ("https://www.docs.ton.org/x", True),
        ("https://docs.ton.org.evil.com/x", False),
        ("https://notdocs.ton.org/x", False),
        ("not a url", False),
    ])
    def test_official_host_detection(self, service, url, expected):
        assert service._is_official(url) is expected


class TestFilters:
    def test_category_filter(self, service):
        results = service.search("ton", category="tokens")
        assert results
        assert all(r.document.category == "tokens" for r in results)

    def test_tag_filter(self, service):
        assert _ids(service.search("wallet", tags=["jetton"])) == ["jetton-standard"]

    def test_unknown_category_empty(self, service):
        assert service.search("ton", category="nope") == []


class TestBrowsing:
    def test_documents_by_category(self, service):
        assert [d.id for d in service.get_documents_by_category("tokens")] == ["jetton-standard"]
        assert service.get_documents_by_category("nope") == []

    def test_documents_by_category_limit(self, make_service):
        docs = [DocumentChunk(id=f"d{i}", title=f"D{i}", content="x.", category="tma") for i in range(5)]
        assert len(make_service(docs).get_documents_by_category("tma", limit=3)) == 3

    def test_related_documents_share_a_tag(self, service):
        assert [d.id for d in service.get_related_documents("wallet-guide")] == ["tma-intro"]

    def test_related_excludes_self_and_unknown(self, service):
        assert all(d.id != "tma-intro" for d in service.get_related_documents("tma-intro"))
        assert service.get_related_documents("missing") == []

    def test_stats(self, service):
        stats = service.get_stats()
        assert stats == {
            "total_documents": 4,
            "categories": {"languages": 1, "tokens": 1, "wallets": 1, "tma": 1},
            "total_tags": 7,
        }


class TestMutations:
    def test_add_then_remove_restores_state(self, service):
        before = service.get_stats()["total_documents"]
        doc_id = service.add_document(
            title="Custom Oracle Guide",
            content="Price oracles push data on chain.",
            category="integration",
            tags=["oracle"],
        )
        assert doc_id.startswith("custom-")
        assert service.get_stats()["total_documents"] == before + 1
        assert doc_id in _ids(service.search("oracle"))

        assert service.remove_document(doc_id) is True
        assert service.get_stats()["total_documents"] == before
        assert doc_id not in _ids(service.search("oracle"))

    def test_added_ids_unique(self, service):
        a = service.add_document(title="A", content="Alpha.")
        b = service.add_document(title="B", content="Beta.")
        assert a != b

    def test_added_document_gets_timestamp(self, service):
        doc_id = service.add_document(title="A", content="Alpha.")
        doc = next(d for d in service.documents if d.id == doc_id)
        assert doc.last_updated

    def test_long_added_document_is_chunked(self, make_service, corpus):
        svc = make_service(corpus, chunk_size=20)
        doc_id = svc.add_document(
            title="Oracle Notes",
            content="Alpha beta gamma. Delta epsilon zeta. Eta theta iota.",
        )
        added = [d for d in svc.documents if d.id.startswith(doc_id)]
        assert [d.id for d in added] == [f"{doc_id}-chunk-{i}" for i in range(3)]
        assert all(len(d.content) <= 20 for d in added)

        assert svc.remove_document(doc_id) is True
        assert not any(d.id.startswith(doc_id) for d in svc.documents)

    def test_remove_unknown_returns_false(self, service):
        assert service.remove_document("missing") is False

    def test_remove_non_string_raises(self, service):
        with pytest.raises(TypeError):
            service.remove_document(123)

    def test_add_empty_content_raises(self, service):
        with pytest.raises(ValueError):
            service.add_document(title="Empty", content="   ")

    def test_mutation_swaps_snapshot(self, service):
        service.initialize()
        old = service._snapshot
        service.add_document(title="A", content="Alpha.")
        assert service._snapshot is not old
        assert len(old.chunks) == 4
        assert len(service._snapshot.chunks) == 5
