"""Pick a generation-capable model from the provider catalog."""

from collections.abc import Callable, Iterable, Sequence

from .exceptions import WebArticleSummarizerError
from .logger import get_logger
from .models import ModelDescriptor

logger = get_logger()

CatalogFetch = Callable[[], Iterable[ModelDescriptor]]


class ModelResolver:
    """Resolve which model to call for a run.

    Candidates are the catalog entries that support generation. They are
    ranked by ``preferred_tags``: the first tag found in a model name wins,
    earlier tags beating later ones, ties keeping catalog order. With no
    tagged model the first candidate is used. A failing or empty catalog
    degrades to ``default_model``.
    """

    def __init__(self, default_model: str, preferred_tags: Sequence[str] = ("flash", "pro")):
        self.default_model = default_model
        self.preferred_tags = tuple(tag.lower() for tag in preferred_tags)

    def default_descriptor(self) -> ModelDescriptor:
        return ModelDescriptor(name=self.default_model, supports_generation=True)

    def rank(self, candidates: Sequence[ModelDescriptor]) -> ModelDescriptor | None:
        """Return the best candidate by tag preference, or None if there are none."""
        for tag in self.preferred_tags:
            for descriptor in candidates:
                if tag in descriptor.name.lower():
                    return descriptor
        return candidates[0] if candidates else None

    def resolve(self, catalog_fetch: CatalogFetch) -> ModelDescriptor:
        """
        Resolve the model to use.

        Args:
            catalog_fetch: Callable returning the provider's model descriptors

        Returns:
            Chosen descriptor, or the default one when the catalog is unusable
        """
        try:
            catalog = list(catalog_fetch())
        except WebArticleSummarizerError as e:
            logger.warning(
                "Model catalog unavailable, using default model",
                extra={"model": self.default_model, "error": str(e)},
            )
            return self.default_descriptor()

        candidates = [d for d in catalog if d.supports_generation and d.name]
        chosen = self.rank(candidates)
        if chosen is None:
            logger.warning(
                "No generation-capable model in catalog, using default model",
                extra={"model": self.default_model, "catalog_size": len(catalog)},
            )
            return self.default_descriptor()

        logger.info(
            "Model resolved", extra={"model": chosen.name, "candidates": len(candidates)}
        )
        return chosen
