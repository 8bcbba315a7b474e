"""Blog articles."""

from techlife.blog.articles import Article, ArticleIndex

__all__ = ["Article", "ArticleIndex"]
