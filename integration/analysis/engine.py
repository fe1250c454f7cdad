"""Cross-dataset statistics over processed records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from integration.common.component import ComponentFactory
from integration.common.config import BaseConfig
from integration.records.models import Post, User

AnalysisResult = dict[str, Any]


class AnalysisConfig(BaseConfig):
    """Analysis configuration."""

    top_n: int = Field(
        default=3,
        description="Number of users in the post ranking",
        ge=1,
    )
    long_post_threshold: int = Field(
        default=100,
        description="Posts whose body has more characters than this count as long",
        ge=0,
    )


class AnalysisEngine(ComponentFactory[AnalysisConfig]):
    """Computes metrics whose prerequisite datasets are present. No I/O."""

    _config_type = AnalysisConfig

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        super().__init__(config or AnalysisConfig())

    @property
    def ranking_key(self) -> str:
        return f"top_{self.config.top_n}_users_by_posts"

    def analyze(self, dataset: Mapping[str, list[Any]]) -> AnalysisResult:
        results: AnalysisResult = {}

        if "users" in dataset and "posts" in dataset:
            results["user_post_counts"] = self.user_post_counts(dataset["posts"])

        if "posts" in dataset:
            results["long_posts_count"] = self.long_posts_count(dataset["posts"])

        if "users" in dataset and "user_post_counts" in results:
            results[self.ranking_key] = self.top_users_by_posts(
                dataset["users"], results["user_post_counts"]
            )

        return results

    @staticmethod
    def user_post_counts(posts: list[Any]) -> dict[int, int]:
        """Number of posts per user id; users without posts are absent."""
        counts: dict[int, int] = {}
        for post in posts:
            if isinstance(post, Post):
                counts[post.user_id] = counts.get(post.user_id, 0) + 1
        return counts

    def long_posts_count(self, posts: list[Any]) -> int:
        threshold = self.config.long_post_threshold
        return sum(1 for post in posts if isinstance(post, Post) and len(post.body) > threshold)

    def top_users_by_posts(
        self, users: list[Any], post_counts: Mapping[int, int]
    ) -> list[dict[str, Any]]:
        """Rank users by post count, keeping input order between ties."""
        ranked = [
            {
                "user_id": user.id,
                "username": user.username,
                "post_count": post_counts.get(user.id, 0),
            }
            for user in users
            if isinstance(user, User)
        ]
        # sorted() is stable, reverse=True included
        ranked = sorted(ranked, key=lambda entry: entry["post_count"], reverse=True)
        return ranked[: self.config.top_n]
