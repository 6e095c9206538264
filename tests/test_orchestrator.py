"""Tests for the dedup gate and the pipeline orchestrator."""

import threading
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from conftest import article_json
from trendblog.config import Config, ConfigModel, DedupConfig
from trendblog.errors import (
    DuplicateArticleError,
    GenerationError,
    InvalidSourceURLError,
    SourceFetchError,
)
from trendblog.generation import ArticleGenerator, MockLLMProvider
from trendblog.ingestion import Topic
from trendblog.pipeline import DedupGate, PipelineOrchestrator, RunState
from trendblog.pipeline.orchestrator import ALREADY_RUNNING_MESSAGE

PNG_URI = "data:image/png;base64,iVBORw0KGgo="


def _topic(title="New breakthrough in battery tech announced today", post_id="abc", subreddit="technology"):
    return Topic(
        title=title,
        url=f"https://www.reddit.com/r/{subreddit}/comments/{post_id}/slug/",
        subreddit=subreddit,
        id=post_id,
    )


def _orchestrator(config, store, connection_factory, topics=None, replies=None, image=PNG_URI, **kwargs):
    topic_fetcher = MagicMock()
    topic_fetcher.fetch_topics.return_value = list(topics or [])
    comment_fetcher = MagicMock()
    comment_fetcher.fetch_comments.return_value = ["c1", "c2", "c3"]
    image_generator = MagicMock()
    image_generator.generate.return_value = image
    provider = MockLLMProvider(list(replies or []))

    orchestrator = PipelineOrchestrator(
        config,
        store=store,
        reddit_client=kwargs.pop("reddit_client", MagicMock()),
        topic_fetcher=topic_fetcher,
        comment_fetcher=comment_fetcher,
        generator=ArticleGenerator(provider),
        image_generator=image_generator,
        connection_factory=connection_factory,
        **kwargs,
    )
    orchestrator.provider = provider
    return orchestrator


class TestDedupGate:
    def test_topic_title_match_is_trimmed(self, store):
        store.add(title="Existing title")
        gate = DedupGate(store, DedupConfig())
        reason = gate.check_topic(None, _topic(title="  Existing title  "))
        assert reason.startswith("Duplicate:")

    def test_source_url_match(self, store):
        store.add(content='<a href="https://www.reddit.com/r/technology/comments/abc/slug/">src</a>')
        reason = DedupGate(store, DedupConfig()).check_topic(None, _topic())
        assert "source" in reason

    def test_predicates_toggle_independently(self, store):
        store.add(title="New breakthrough in battery tech announced today")
        gate = DedupGate(store, DedupConfig(topic_title=False))
        assert gate.check_topic(None, _topic()) is None
        assert gate.check_generated_title(None, "New breakthrough in battery tech announced today")

        gate = DedupGate(store, DedupConfig(generated_title=False))
        assert gate.check_generated_title(None, "New breakthrough in battery tech announced today") is None

    def test_no_match(self, store):
        assert DedupGate(store, DedupConfig()).check_topic(None, _topic()) is None


class TestRunScenarios:
    def test_scenario_a_success(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic()],
            replies=[article_json(title="Batteries, Reinvented")],
        )
        summary = orchestrator.run()

        assert summary.success
        assert summary.message == "Blog generation completed"
        assert [(r.success, r.title) for r in summary.results] == [(True, "Batteries, Reinvented")]
        article = store.articles[0]
        assert article.topic == "technology"
        assert article.image == PNG_URI
        assert not article.is_archived and not article.is_private
        assert "Comment 3: c3" in orchestrator.provider.calls[0]
        assert orchestrator.state is RunState.IDLE

    def test_scenario_b_duplicate_topic_skips_generation(self, config, store, connection_factory):
        store.add(title="New breakthrough in battery tech announced today")
        orchestrator = _orchestrator(config, store, connection_factory, topics=[_topic()])
        summary = orchestrator.run()

        assert summary.success
        assert summary.results[0].success is False
        assert summary.results[0].reason.startswith("Duplicate:")
        assert orchestrator.provider.calls == []
        assert len(store.articles) == 1

    def test_scenario_c_fenced_trailing_comma(self, config, store, connection_factory):
        reply = '```json\n{"title":"X","metaDescription":"M","content":"<p>C</p>",}\n```'
        orchestrator = _orchestrator(config, store, connection_factory, topics=[_topic()], replies=[reply])
        summary = orchestrator.run()

        assert summary.results[0].success
        assert store.articles[0].title == "X"

    def test_scenario_d_image_failure_still_persists(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic()],
            replies=[article_json()],
            image="",
        )
        summary = orchestrator.run()

        assert summary.results[0].success
        assert store.articles[0].image == ""

    def test_generated_title_duplicate_skips_persistence(self, config, store, connection_factory):
        store.add(title="Generated Title")
        orchestrator = _orchestrator(config, store, connection_factory, topics=[_topic()], replies=[article_json()])
        summary = orchestrator.run()

        assert summary.results[0].success is False
        assert summary.results[0].reason.startswith("Duplicate:")
        assert len(store.articles) == 1
        orchestrator.image_generator.generate.assert_not_called()

    def test_generation_failure_is_recorded(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic()],
            replies=['{"title": "X", "content": "C"}'],
        )
        summary = orchestrator.run()

        assert summary.success
        assert summary.results[0].success is False
        assert "metaDescription" in summary.results[0].reason
        assert store.articles == []

    def test_per_topic_exception_does_not_abort_batch(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic(post_id="one", title="First topic with a long title"),
                    _topic(post_id="two", title="Second topic with a long title")],
            replies=[article_json(title="A"), article_json(title="B")],
        )
        orchestrator.comment_fetcher.fetch_comments.side_effect = [RuntimeError("boom"), ["c"]]
        summary = orchestrator.run()

        assert [r.success for r in summary.results] == [False, True]
        assert summary.results[0].reason == "boom"
        assert [a.title for a in store.articles] == ["A"]
        connection_factory.conn.rollback.assert_not_called()

    def test_no_topics(self, config, store, connection_factory):
        summary = _orchestrator(config, store, connection_factory, topics=[]).run()
        assert summary.success
        assert summary.results == []

    def test_idempotent_double_run(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic()],
            replies=[article_json(), article_json()],
        )
        orchestrator.run()
        second = orchestrator.run()

        assert len(store.articles) == 1
        assert second.results[0].success is False

    def test_store_unreachable_is_top_level_failure(self, config, store):
        def broken_factory():
            raise ConnectionError("database is down")

        orchestrator = _orchestrator(config, store, broken_factory, topics=[_topic()])
        summary = orchestrator.run()

        assert summary.success is False
        assert summary.error == "database is down"
        assert orchestrator.state is RunState.IDLE

    def test_authenticates_once_per_run(self, config, store, connection_factory):
        reddit_client = MagicMock()
        orchestrator = _orchestrator(config, store, connection_factory, reddit_client=reddit_client)
        orchestrator.run()
        reddit_client.authenticate.assert_called_once()

    def test_missing_api_key_stores_nothing(self, store, connection_factory, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        config = Config(model=ConfigModel(
            reddit={"subreddits": ["technology"], "request_delay": 0},
            llm={"provider": "gemini"},
            image={"enabled": False},
        ))
        topic_fetcher = MagicMock()
        topic_fetcher.fetch_topics.return_value = [_topic()]
        comment_fetcher = MagicMock()
        comment_fetcher.fetch_comments.return_value = ["c1"]

        orchestrator = PipelineOrchestrator(
            config,
            store=store,
            reddit_client=MagicMock(),
            topic_fetcher=topic_fetcher,
            comment_fetcher=comment_fetcher,
            image_generator=MagicMock(),
            connection_factory=connection_factory,
        )
        summary = orchestrator.run()

        assert summary.success
        assert summary.results[0].success is False
        assert "API key" in summary.results[0].reason
        assert store.articles == []

    def test_database_error_rolls_back_before_next_topic(self, config, store, connection_factory):
        orchestrator = _orchestrator(
            config, store, connection_factory,
            topics=[_topic(post_id="one", title="First topic with a long title"),
                    _topic(post_id="two", title="Second topic with a long title")],
            replies=[article_json(title="A"), article_json(title="B")],
        )
        orchestrator.comment_fetcher.fetch_comments.side_effect = [
            psycopg.OperationalError("server closed the connection"),
            ["c"],
        ]
        summary = orchestrator.run()

        assert [r.success for r in summary.results] == [False, True]
        connection_factory.conn.rollback.assert_called_once()


class TestClose:
    def test_closes_client_it_created(self, config, store, connection_factory):
        with patch("trendblog.pipeline.orchestrator.RedditClient") as client_cls:
            orchestrator = PipelineOrchestrator(config, store=store, connection_factory=connection_factory)
        orchestrator.close()
        client_cls.return_value.close.assert_called_once()

    def test_leaves_injected_client_open(self, config, store, connection_factory):
        reddit_client = MagicMock()
        orchestrator = _orchestrator(config, store, connection_factory, reddit_client=reddit_client)
        orchestrator.close()
        reddit_client.close.assert_not_called()


class TestRunGuard:
    def test_concurrent_run_is_rejected(self, config, store, connection_factory):
        entered = threading.Event()
        release = threading.Event()
        orchestrator = _orchestrator(config, store, connection_factory)

        def slow_fetch():
            entered.set()
            release.wait(timeout=5)
            return []

        orchestrator.topic_fetcher.fetch_topics.side_effect = slow_fetch
        results = {}
        worker = threading.Thread(target=lambda: results.setdefault("first", orchestrator.run()))
        worker.start()
        assert entered.wait(timeout=5)

        assert orchestrator.state is RunState.RUNNING
        second = orchestrator.run()
        release.set()
        worker.join(timeout=5)

        assert second.success is False
        assert second.message == ALREADY_RUNNING_MESSAGE
        assert results["first"].success
        assert orchestrator.state is RunState.IDLE


class TestSingleShotFlows:
    def test_generate_from_topic(self, config, store, connection_factory):
        orchestrator = _orchestrator(config, store, connection_factory, replies=[article_json(title="Custom")])
        article = orchestrator.generate_from_topic("quantum networking")

        assert article.title == "Custom"
        assert article.topic == "custom"
        assert '"quantum networking"' in orchestrator.provider.calls[0]

    def test_generate_from_topic_failure(self, config, store, connection_factory):
        orchestrator = _orchestrator(config, store, connection_factory, replies=["nothing useful"])
        with pytest.raises(GenerationError):
            orchestrator.generate_from_topic("quantum networking")

    def test_generate_from_topic_duplicate_title(self, config, store, connection_factory):
        store.add(title="Generated Title")
        orchestrator = _orchestrator(config, store, connection_factory, replies=[article_json()])
        with pytest.raises(DuplicateArticleError):
            orchestrator.generate_from_topic("anything")

    def test_generate_from_url(self, config, store, connection_factory):
        orchestrator = _orchestrator(config, store, connection_factory, replies=[article_json()])
        orchestrator.topic_fetcher.fetch_post.return_value = _topic(subreddit="saas")

        article = orchestrator.generate_from_url("https://www.reddit.com/r/saas/comments/abc/slug/")

        orchestrator.topic_fetcher.fetch_post.assert_called_once_with("saas", "abc")
        assert article.topic == "saas"

    def test_generate_from_url_invalid(self, config, store, connection_factory):
        orchestrator = _orchestrator(config, store, connection_factory)
        with pytest.raises(InvalidSourceURLError):
            orchestrator.generate_from_url("https://example.com/not-reddit")

    def test_generate_from_url_fetch_failure(self, config, store, connection_factory):
        orchestrator = _orchestrator(config, store, connection_factory)
        orchestrator.topic_fetcher.fetch_post.side_effect = SourceFetchError("404")
        with pytest.raises(SourceFetchError):
            orchestrator.generate_from_url("https://www.reddit.com/r/saas/comments/abc/slug/")

    def test_generate_from_url_duplicate_source(self, config, store, connection_factory):
        topic = _topic(subreddit="saas")
        store.add(content=f'<a href="{topic.url}">source</a>')
        orchestrator = _orchestrator(config, store, connection_factory, replies=[article_json()])
        orchestrator.topic_fetcher.fetch_post.return_value = topic

        with pytest.raises(DuplicateArticleError):
            orchestrator.generate_from_url(topic.url)
        assert orchestrator.provider.calls == []
